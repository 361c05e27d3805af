from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum

# ─── Section identity ───

@dataclass(frozen=True)
class SectionId:
    name: str
    file: str
    line: int

    @property
    def site(self) -> str:
        try:
            shown = os.path.relpath(self.file)
        except ValueError:
            # different drive on Windows
            shown = self.file
        return f"{shown}:{self.line}"

    def __str__(self) -> str:
        return f'"{self.name}" at {self.site}'


# Root-to-node sequence of sections; node identity.
SectionPath = tuple[SectionId, ...]

# ─── Traversal state machine ───

NOT_STARTED = "not_started"
EXPLORING = "exploring"
TARGETING = "targeting"
COMPLETED = "completed"
ABORTED = "aborted"


class Directive(Enum):
    EXPLORE = "explore"  # first run: enter the first section reached


class SectionUsageError(RuntimeError):
    """A section API was used outside its contract."""


# ─── Traversal results ───

@dataclass
class RunRecord:
    index: int
    target: SectionPath | None  # None = exploratory run
    entered: SectionPath = ()
    discovered: list[SectionPath] = field(default_factory=list)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.entered)


@dataclass
class TraversalResult:
    name: str
    status: str = NOT_STARTED
    runs: list[RunRecord] = field(default_factory=list)
    discovered: list[SectionPath] = field(default_factory=list)

    def combinations(self) -> list[tuple[str, ...]]:
        return [r.names for r in self.runs]
