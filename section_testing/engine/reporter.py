"""Format the sections a failure happened in."""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from collections.abc import Sequence

    from section_testing.types import SectionId, SectionPath

HEADER = "---- the failure was inside these sections ----"


@dataclass(frozen=True)
class FailureReport:
    sections: SectionPath
    error: BaseException | None = field(default=None, compare=False)

    def __bool__(self) -> bool:
        return bool(self.sections)

    def format(self) -> str:
        return format_sections(self.sections)


def capture(stack: Sequence[SectionId], error: BaseException | None = None) -> FailureReport:
    """Snapshot the ancestor stack before unwinding pops it."""
    return FailureReport(tuple(stack), error)


def format_sections(sections: Sequence[SectionId]) -> str:
    if not sections:
        return ""
    lines = [HEADER]
    for i, section in enumerate(sections):
        name = json.dumps(section.name, ensure_ascii=False)
        lines.append(f"{i:>3}) {name} at {section.site}")
    return "\n".join(lines) + "\n"


def emit(report: FailureReport, stream: TextIO | None = None) -> None:
    # One write so the report is not interleaved with other output
    text = report.format()
    if not text:
        return
    out = stream if stream is not None else sys.stderr
    out.write(text)
    out.flush()


def annotate(error: BaseException, report: FailureReport) -> None:
    text = report.format()
    if text:
        error.add_note(text.rstrip("\n"))
