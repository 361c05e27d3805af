"""pytest plugin: run tests marked ``@pytest.mark.sections`` once per section combination.

Enable with ``-p section_testing.integrations.pytest_plugin`` or::

    pytest_plugins = ["section_testing.integrations.pytest_plugin"]

Fixtures are created once per test item, not once per run, so a body
should build any state it mutates itself.
"""
from __future__ import annotations

import functools
import inspect

import pytest

from section_testing.engine.runner import run_sections
from section_testing.types import SectionUsageError


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "sections: run the test body repeatedly until every section has been entered",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    if pyfuncitem.get_closest_marker("sections") is None:
        return None

    testfunction = pyfuncitem.obj
    if inspect.iscoroutinefunction(testfunction):
        raise SectionUsageError(f"{pyfuncitem.nodeid}: async tests cannot use sections")

    funcargs = pyfuncitem.funcargs
    testargs = {arg: funcargs[arg] for arg in pyfuncitem._fixtureinfo.argnames}
    run_sections(functools.partial(testfunction, **testargs), name=pyfuncitem.nodeid)
    return True
