"""Section-style testing.

A test body is run once for every section it contains, so nested setup is
written once and every branch is exercised in isolation::

    from section_testing import section, sections

    @sections
    def test_stack():
        v = []
        with section("push") as active:
            if active:
                v.append(1)
                assert v == [1]
        with section("extend") as active:
            if active:
                v.extend([1, 2])
                assert len(v) == 2
"""
from section_testing.config import SectionConfig, get_config, load_config
from section_testing.engine import (
    FailureReport,
    RunContext,
    Scheduler,
    SectionScope,
    current_sections,
    enter,
    is_running,
    run_sections,
    section,
    sections,
)
from section_testing.render import format_combinations, generate_mermaid
from section_testing.types import SectionId, SectionUsageError, TraversalResult

__all__ = [
    "FailureReport",
    "RunContext",
    "Scheduler",
    "SectionConfig",
    "SectionId",
    "SectionScope",
    "SectionUsageError",
    "TraversalResult",
    "current_sections",
    "enter",
    "format_combinations",
    "generate_mermaid",
    "get_config",
    "is_running",
    "load_config",
    "run_sections",
    "section",
    "sections",
]
