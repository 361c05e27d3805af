"""Package logging on top of loguru.

Disabled until ``setup_logging`` is called so a host test run stays quiet.
"""
from __future__ import annotations

import sys
from typing import Any

from loguru import logger

PACKAGE = "section_testing"
FMT = "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> | {message}"

logger.disable(PACKAGE)

_sink_id: int | None = None


def setup_logging(level: str | None) -> None:
    """Enable package logging at ``level``; ``None`` turns it off again."""
    global _sink_id
    if _sink_id is not None:
        logger.remove(_sink_id)
        _sink_id = None
    if not level:
        logger.disable(PACKAGE)
        return
    logger.enable(PACKAGE)
    _sink_id = logger.add(
        sys.stderr, format=FMT, level=level.upper(), filter=PACKAGE, diagnose=False
    )


def debug(msg: str, *a: Any, **k: Any) -> None:
    logger.opt(depth=1).debug(msg, *a, **k)


def info(msg: str, *a: Any, **k: Any) -> None:
    logger.opt(depth=1).info(msg, *a, **k)


def warning(msg: str, *a: Any, **k: Any) -> None:
    logger.opt(depth=1).warning(msg, *a, **k)
