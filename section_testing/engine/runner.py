"""Repeated-invocation loop: runs a test body once per section target.

Each call builds its own Scheduler, so traversals never leak between
tests. A test that is already inside a run (a section-enabled test called
from another one) executes once as part of the caller's traversal.
"""
from __future__ import annotations

import functools
import inspect
from typing import TYPE_CHECKING, Any, TypeVar

from section_testing.config import SectionConfig, get_config
from section_testing.engine import reporter
from section_testing.engine.context import RunContext, activate, active_run
from section_testing.engine.scheduler import Scheduler, format_path
from section_testing.logger import debug, info, warning
from section_testing.types import (
    Directive,
    RunRecord,
    SectionUsageError,
    TraversalResult,
)

if TYPE_CHECKING:
    from collections.abc import Callable

F = TypeVar("F", bound="Callable[..., Any]")


def run_sections(
    body: Callable[..., Any],
    *args: Any,
    name: str | None = None,
    config: SectionConfig | None = None,
    **kwargs: Any,
) -> TraversalResult | None:
    """Invoke ``body`` until every reachable section has been entered once.

    Returns the traversal summary, or None when called from inside a run.
    A failure in any run is reported and re-raised unchanged; later targets
    are not run.
    """
    _reject_async(body, name)
    if active_run() is not None:
        _check_result(body(*args, **kwargs), name or repr(body))
        return None

    cfg = config or get_config()
    test_name = name or getattr(body, "__qualname__", repr(body))
    scheduler = Scheduler(test_name)
    result = TraversalResult(name=test_name)

    while True:
        target = scheduler.next_target()
        if target is None:
            break
        if cfg.max_runs is not None and scheduler.runs >= cfg.max_runs:
            scheduler.on_run_failed()
            warning(
                "{}: stopped after {} runs, {} target(s) left",
                test_name, scheduler.runs, len(scheduler.pending) + 1,
            )
            raise SectionUsageError(
                f"{test_name}: more than {cfg.max_runs} runs needed to visit every section"
            )

        run = RunContext(scheduler, None if target is Directive.EXPLORE else target)
        with activate(run):
            try:
                _check_result(body(*args, **kwargs), test_name)
            except BaseException as error:
                scheduler.on_run_failed()
                info("{}: run {} failed, traversal aborted", test_name, scheduler.runs + 1)
                _report_failure(run, error, cfg)
                raise

        if run.stack:
            scheduler.on_run_failed()
            raise SectionUsageError(
                f"{test_name}: section {run.stack[-1]} was entered but never closed; "
                'use "with section(...) as active:"'
            )
        if run.target is not None and not run.reached_target:
            debug("{}: target {} was not reached", test_name, format_path(run.target))

        scheduler.on_run_complete()
        result.runs.append(RunRecord(
            index=scheduler.runs,
            target=None if target is Directive.EXPLORE else target,
            entered=run.entered,
            discovered=list(run.discovered),
        ))

    result.status = scheduler.status
    result.discovered = scheduler.discovered
    return result


def _reject_async(body: Callable[..., Any], name: str | None) -> None:
    if inspect.iscoroutinefunction(body):
        raise SectionUsageError(f"{name or repr(body)}: async test bodies cannot use sections")


def _check_result(value: Any, test_name: str) -> None:
    if inspect.isawaitable(value):
        if inspect.iscoroutine(value):
            value.close()
        raise SectionUsageError(
            f"{test_name}: the test body returned an awaitable; async tests cannot use sections"
        )


def _report_failure(run: RunContext, error: BaseException, cfg: SectionConfig) -> None:
    # Skips, xfails and interrupts still abort but are not failures to report
    if not isinstance(error, Exception):
        return
    report = run.report_for(error)
    if not report:
        return
    if cfg.report:
        reporter.emit(report)
    if cfg.notes:
        reporter.annotate(error, report)


def sections(func: F) -> F:
    """Decorator: run ``func`` once per section combination."""
    _reject_async(func, func.__qualname__)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        run_sections(functools.partial(func, *args, **kwargs), name=func.__qualname__)

    return wrapper  # type: ignore[return-value]
