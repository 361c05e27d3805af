"""Per-run state: target, entered ancestor stack, discovery sink."""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

from section_testing.types import SectionId, SectionPath, SectionUsageError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from section_testing.engine.reporter import FailureReport
    from section_testing.engine.scheduler import Scheduler

_CURRENT_RUN: ContextVar[RunContext | None] = ContextVar(
    "section_testing_current_run",
    default=None,
)


class RunContext:
    def __init__(self, scheduler: Scheduler, target: SectionPath | None):
        self.scheduler = scheduler
        self.target = target  # None until the exploratory run enters a section
        self.stack: list[SectionId] = []
        self.entered: SectionPath = ()
        self.discovered: list[SectionPath] = []
        self.failures: list[FailureReport] = []

    @property
    def path(self) -> SectionPath:
        return tuple(self.stack)

    @property
    def reached_target(self) -> bool:
        return self.target is not None and self.entered == self.target

    def push(self, section: SectionId) -> None:
        self.stack.append(section)
        if len(self.stack) > len(self.entered):
            self.entered = tuple(self.stack)

    def pop(self, section: SectionId) -> None:
        if not self.stack or self.stack[-1] != section:
            raise SectionUsageError(f"Section {section} closed out of order")
        self.stack.pop()

    def report_for(self, error: BaseException) -> FailureReport | None:
        """Find the report captured for ``error`` or for an exception it chains from."""
        seen: set[int] = set()
        current: BaseException | None = error
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            for report in self.failures:
                if report.error is current:
                    return report
            current = current.__cause__ or current.__context__
        return None


def active_run() -> RunContext | None:
    return _CURRENT_RUN.get()


def current_run() -> RunContext:
    run = _CURRENT_RUN.get()
    if run is None:
        raise SectionUsageError(
            '"section(...)" must be called from inside a test run by "run_sections" or "@sections"'
        )
    return run


@contextmanager
def activate(run: RunContext) -> Iterator[RunContext]:
    token = _CURRENT_RUN.set(run)
    try:
        yield run
    finally:
        _CURRENT_RUN.reset(token)
