"""Section gate: decides, at each section call site, whether to enter."""
from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from section_testing.engine import reporter
from section_testing.engine.context import active_run, current_run
from section_testing.types import SectionId, SectionPath

if TYPE_CHECKING:
    from types import TracebackType

    from section_testing.engine.context import RunContext


def enter(run: RunContext, section: SectionId) -> bool:
    path = run.path + (section,)
    if run.scheduler.discover(path):
        run.discovered.append(path)

    # Exploratory run: the first section reached becomes the target
    if run.target is None:
        run.scheduler.claim(path)
        run.target = path
        run.push(section)
        return True

    if run.target[:len(path)] == path:
        run.push(section)
        return True
    return False


class SectionScope:
    """Result of ``section(name)``; truthy when the section runs this time.

    Use it as a context manager so the ancestor stack is popped however the
    block exits::

        with section("push") as active:
            if active:
                v.append(1)
    """

    def __init__(self, run: RunContext, section: SectionId, entered: bool):
        self.run = run
        self.section = section
        self.entered = entered

    def __bool__(self) -> bool:
        return self.entered

    def __enter__(self) -> SectionScope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if not self.entered:
            return False
        # Innermost scope captures first, while the full stack is still pushed
        if exc is not None and not any(r.error is exc for r in self.run.failures):
            self.run.failures.append(reporter.capture(self.run.stack, exc))
        self.run.pop(self.section)
        return False

    def __repr__(self) -> str:
        state = "entered" if self.entered else "skipped"
        return f"<SectionScope {self.section} {state}>"


def _call_site(depth: int) -> tuple[str, int]:
    frame = sys._getframe(depth + 1)
    return frame.f_code.co_filename, frame.f_lineno


def section(name: str) -> SectionScope:
    run = current_run()
    file, line = _call_site(1)
    identity = SectionId(name, file, line)
    return SectionScope(run, identity, enter(run, identity))


def current_sections() -> SectionPath:
    run = active_run()
    return run.path if run is not None else ()


def is_running() -> bool:
    return active_run() is not None
