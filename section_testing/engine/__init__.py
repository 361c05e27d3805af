from section_testing.engine.context import RunContext
from section_testing.engine.gate import SectionScope, current_sections, enter, is_running, section
from section_testing.engine.reporter import FailureReport
from section_testing.engine.runner import run_sections, sections
from section_testing.engine.scheduler import Scheduler

__all__ = [
    "FailureReport",
    "RunContext",
    "Scheduler",
    "SectionScope",
    "current_sections",
    "enter",
    "is_running",
    "run_sections",
    "section",
    "sections",
]
