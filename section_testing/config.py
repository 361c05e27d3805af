"""Load ``.sections.yaml`` settings."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from section_testing.logger import setup_logging

CONFIG_FILE = ".sections.yaml"
CONFIG_ENV = "SECTION_TESTING_CONFIG"
LOG_LEVEL_ENV = "SECTION_TESTING_LOG_LEVEL"


@dataclass
class SectionConfig:
    report: bool = True  # write the section stack to stderr on failure
    notes: bool = True  # attach the section stack to the exception
    max_runs: int | None = None
    log_level: str | None = None


_BOOL_KEYS = ("report", "notes")
_KNOWN_KEYS = frozenset({*_BOOL_KEYS, "max_runs", "log_level"})

_cached: SectionConfig | None = None


def parse_config(content: str) -> SectionConfig:
    raw = yaml.safe_load(content)
    if raw is None:
        return SectionConfig()
    if not isinstance(raw, dict):
        raise ValueError("Invalid config: expected a mapping")

    unknown = sorted(str(k) for k in raw if k not in _KNOWN_KEYS)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    config = SectionConfig()
    for key in _BOOL_KEYS:
        if key in raw:
            if not isinstance(raw[key], bool):
                raise ValueError(f'Invalid config: "{key}" must be true or false')
            setattr(config, key, raw[key])

    max_runs = raw.get("max_runs")
    if max_runs is not None:
        if isinstance(max_runs, bool) or not isinstance(max_runs, int) or max_runs < 1:
            raise ValueError('Invalid config: "max_runs" must be a positive integer or null')
        config.max_runs = max_runs

    log_level = raw.get("log_level")
    if log_level is not None:
        if not isinstance(log_level, str):
            raise ValueError('Invalid config: "log_level" must be a string')
        config.log_level = log_level
    return config


def _find_config() -> Path | None:
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    default = Path.cwd() / CONFIG_FILE
    return default if default.exists() else None


def load_config(path: str | Path | None = None) -> SectionConfig:
    """Read settings from ``path``, ``$SECTION_TESTING_CONFIG`` or ``./.sections.yaml``."""
    config_path = Path(path) if path is not None else _find_config()
    if config_path is None:
        config = SectionConfig()
    elif not config_path.exists():
        raise ValueError(f"Config file not found: {config_path}")
    else:
        config = parse_config(config_path.read_text(encoding="utf-8"))

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        config.log_level = env_level
    return config


def get_config() -> SectionConfig:
    global _cached
    if _cached is None:
        _cached = load_config()
        setup_logging(_cached.log_level)
    return _cached


def reset_config() -> None:
    global _cached
    _cached = None
