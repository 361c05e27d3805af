"""Scheduler and gate driven by scripted discover/enter calls, no test body."""
from __future__ import annotations

import pytest

from section_testing.engine.context import RunContext, activate, active_run, current_run
from section_testing.engine.gate import enter
from section_testing.engine.scheduler import Scheduler, format_path
from section_testing.types import (
    ABORTED,
    COMPLETED,
    EXPLORING,
    NOT_STARTED,
    TARGETING,
    Directive,
    SectionId,
    SectionUsageError,
)

A = SectionId("a", "t.py", 1)
B = SectionId("b", "t.py", 2)
C = SectionId("c", "t.py", 3)
D = SectionId("d", "t.py", 4)


# ═══════════════════════════════════════════════════════
# Scheduler
# ═══════════════════════════════════════════════════════

def test_first_target_is_explore_directive():
    s = Scheduler("t")
    assert s.status == NOT_STARTED
    assert s.next_target() is Directive.EXPLORE
    assert s.status == EXPLORING


def test_scripted_traversal_order():
    s = Scheduler("t")
    s.next_target()
    assert s.discover((A,))
    s.claim((A,))
    assert s.discover((A, B))
    assert s.discover((C,))
    s.on_run_complete()

    assert s.next_target() == (A, B)
    assert s.status == TARGETING
    s.on_run_complete()
    assert s.next_target() == (C,)
    s.on_run_complete()

    assert s.next_target() is None
    assert s.status == COMPLETED
    assert s.finished
    # Stays finished
    assert s.next_target() is None


def test_discover_is_deduplicated_and_monotonic():
    s = Scheduler("t")
    s.next_target()
    assert s.discover((A,)) is True
    assert s.discover((A,)) is False
    s.claim((A,))
    assert s.discover((A,)) is False
    assert s.discovered == [(A,)]
    assert s.pending == []

    s.discover((B,))
    s.on_run_complete()
    assert s.next_target() == (B,)
    # Targeted paths stay discovered and are never re-enqueued
    assert s.discover((B,)) is False
    assert s.discovered == [(A,), (B,)]
    assert s.pending == []


def test_no_sections_completes_after_one_run():
    s = Scheduler("t")
    assert s.next_target() is Directive.EXPLORE
    s.on_run_complete()
    assert s.next_target() is None
    assert s.status == COMPLETED
    assert s.runs == 1


def test_empty_path_is_rejected():
    s = Scheduler("t")
    s.next_target()
    with pytest.raises(SectionUsageError, match="empty"):
        s.discover(())


def test_claim_only_during_exploration():
    s = Scheduler("t")
    s.next_target()
    s.discover((A,))
    s.discover((B,))
    s.claim((A,))
    s.on_run_complete()
    s.next_target()
    with pytest.raises(SectionUsageError, match="exploratory"):
        s.claim((B,))


def test_claim_requires_discovered_path():
    s = Scheduler("t")
    s.next_target()
    with pytest.raises(SectionUsageError, match="undiscovered"):
        s.claim((A,))


def test_failed_run_aborts():
    s = Scheduler("t")
    s.next_target()
    s.discover((A,))
    s.discover((B,))
    s.on_run_failed()
    assert s.status == ABORTED
    assert s.next_target() is None
    with pytest.raises(SectionUsageError, match="aborted"):
        s.discover((C,))


def test_format_path():
    assert format_path((A, B)) == "a > b"
    assert format_path(()) == "<root>"


# ═══════════════════════════════════════════════════════
# Gate
# ═══════════════════════════════════════════════════════

def test_exploratory_run_enters_first_section_only():
    s = Scheduler("t")
    s.next_target()
    run = RunContext(s, None)

    assert enter(run, A)
    assert run.target == (A,)
    assert run.stack == [A]
    assert not enter(run, B)  # child of a, not the target
    run.pop(A)
    assert not enter(run, C)

    assert s.pending == [(A, B), (C,)]
    assert run.discovered == [(A,), (A, B), (C,)]
    assert run.reached_target


def test_targeted_run_enters_prefixes_of_target():
    s = Scheduler("t")
    s.next_target()
    for path in [(A,), (A, C), (A, D), (B,)]:
        s.discover(path)
    s.claim((A,))
    s.on_run_complete()

    target = s.next_target()
    assert target == (A, C)
    run = RunContext(s, target)

    assert enter(run, A)
    assert not enter(run, D)
    assert enter(run, C)
    assert not enter(run, B)  # deeper than the target
    run.pop(C)
    run.pop(A)
    assert not enter(run, B)
    assert run.entered == (A, C)
    assert run.reached_target


def test_pop_out_of_order_raises():
    s = Scheduler("t")
    s.next_target()
    run = RunContext(s, (A, B))
    run.push(A)
    run.push(B)
    with pytest.raises(SectionUsageError, match="out of order"):
        run.pop(A)


def test_activate_restores_previous_run():
    s = Scheduler("t")
    run = RunContext(s, None)
    assert active_run() is None
    with activate(run):
        assert current_run() is run
    assert active_run() is None
    with pytest.raises(SectionUsageError):
        current_run()
