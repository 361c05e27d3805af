"""Shared fixtures for section-testing tests."""
from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from section_testing.config import CONFIG_ENV, LOG_LEVEL_ENV, SectionConfig, reset_config
from section_testing.engine import current_sections, run_sections

if TYPE_CHECKING:
    from collections.abc import Callable

    from section_testing.types import TraversalResult

pytest_plugins = ["pytester"]


class TraversalHarness:
    """Drive a test body through ``run_sections`` and record what ran.

    ``mark()`` stores the names of the sections active at the call point, so
    a body can log every leaf it reaches.  ``calls`` counts invocations of
    the body across all runs.
    """

    def __init__(self, config: SectionConfig | None = None):
        self.config = config or SectionConfig()
        self.marks: list[tuple[str, ...]] = []
        self.calls = 0

    def mark(self) -> None:
        self.marks.append(tuple(s.name for s in current_sections()))

    def run(self, body: Callable[[], object], name: str = "harness") -> TraversalResult:
        def counted():
            self.calls += 1
            body()

        result = run_sections(counted, name=name, config=self.config)
        assert result is not None
        return result


@pytest.fixture
def harness() -> TraversalHarness:
    return TraversalHarness()


@pytest.fixture(autouse=True)
def _clean_config(monkeypatch, tmp_path):
    """Keep a developer's .sections.yaml or env settings out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def harness_factory():
    """Factory fixture for harnesses with a custom config."""
    def _make(config: SectionConfig | None = None) -> TraversalHarness:
        return TraversalHarness(config)

    return _make
