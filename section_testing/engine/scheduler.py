"""Traversal scheduler: breadth-first over discovered section paths.

Owns the discovered set and the pending queue for one top-level test.
A path is enqueued exactly once, when it is first reached, and each run
targets the oldest path that has not been targeted yet.

State machine::

    not_started --first run--> exploring --run ok--> targeting --queue empty--> completed
         any state --failure escapes a run--> aborted
"""
from __future__ import annotations

from collections import deque

from section_testing.logger import debug
from section_testing.types import (
    ABORTED,
    COMPLETED,
    EXPLORING,
    NOT_STARTED,
    TARGETING,
    Directive,
    SectionPath,
    SectionUsageError,
)


def format_path(path: SectionPath) -> str:
    return " > ".join(s.name for s in path) or "<root>"


class Scheduler:
    def __init__(self, name: str = ""):
        self.name = name
        self.status = NOT_STARTED
        self.runs = 0
        self._discovered: set[SectionPath] = set()
        self._order: list[SectionPath] = []
        self._pending: deque[SectionPath] = deque()

    @property
    def discovered(self) -> list[SectionPath]:
        """Every path seen so far, in discovery order."""
        return list(self._order)

    @property
    def pending(self) -> list[SectionPath]:
        return list(self._pending)

    @property
    def finished(self) -> bool:
        return self.status in (COMPLETED, ABORTED)

    def next_target(self) -> SectionPath | Directive | None:
        """Return the target for the upcoming run, or None once traversal is over."""
        if self.finished:
            return None
        if self.runs == 0:
            self.status = EXPLORING
            return Directive.EXPLORE
        if not self._pending:
            self.status = COMPLETED
            debug("{}: traversal completed after {} run(s)", self.name, self.runs)
            return None
        self.status = TARGETING
        target = self._pending.popleft()
        debug("{}: run {} targets {}", self.name, self.runs + 1, format_path(target))
        return target

    def discover(self, path: SectionPath) -> bool:
        """Register a reached section path. Returns True the first time it is seen."""
        if not path:
            raise SectionUsageError("Cannot discover an empty section path")
        if self.finished:
            raise SectionUsageError(f"Traversal of {self.name!r} is already {self.status}")
        if path in self._discovered:
            return False
        self._discovered.add(path)
        self._order.append(path)
        self._pending.append(path)
        debug("{}: discovered {}", self.name, format_path(path))
        return True

    def claim(self, path: SectionPath) -> None:
        """Resolve the exploratory run's implicit target so it is not targeted again."""
        if self.status != EXPLORING:
            raise SectionUsageError("Only the exploratory run can claim a target")
        try:
            self._pending.remove(path)
        except ValueError:
            raise SectionUsageError(
                f"Cannot claim undiscovered path {format_path(path)}"
            ) from None

    def on_run_complete(self) -> None:
        self.runs += 1

    def on_run_failed(self) -> None:
        self.status = ABORTED
        debug("{}: aborted during run {}, {} target(s) left", self.name, self.runs + 1, len(self._pending))
