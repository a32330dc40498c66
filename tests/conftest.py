"""Shared pytest fixtures for libcompare tests.

Provides factory fixtures for comparison models and event streams, so tests
describe a run as nested dicts instead of spelling out every event.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from libcompare.domain.models import (
    ComparisonEntry,
    ComparisonSuite,
    ComparisonTest,
    Event,
    RunEnd,
    SuiteEnd,
    SuiteStart,
    TestEnvironment,
    TestFail,
    TestFailed,
    TestPass,
    TestPassed,
)
from libcompare.environment import capture_environment

# A test outcome in shorthand: a bare description passes, a
# (description, message) pair fails.
Outcome = str | tuple[str, str]
LibSpec = dict[str, dict[str, list[Outcome]]]


def _test(outcome: Outcome) -> ComparisonTest:
    if isinstance(outcome, tuple):
        return TestFailed(description=outcome[0], message=outcome[1])
    return TestPassed(description=outcome)


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_suite() -> _SuiteFactory:
    """Factory for ComparisonSuite from shorthand outcomes."""

    def _factory(description: str = "Array", outcomes: list[Outcome] | None = None) -> ComparisonSuite:
        return ComparisonSuite(
            description=description,
            tests=tuple(_test(o) for o in (outcomes or [])),
        )

    return _factory


_SuiteFactory = Any


@pytest.fixture()
def make_entry(make_suite: _SuiteFactory) -> _EntryFactory:
    """Factory for ComparisonEntry with totals computed from its suites."""

    def _factory(lib_name: str = "libfoo", suites: dict[str, list[Outcome]] | None = None) -> ComparisonEntry:
        built = tuple(make_suite(desc, outcomes) for desc, outcomes in (suites or {}).items())
        tests = [t for s in built for t in s.tests]
        return ComparisonEntry(
            lib_name=lib_name,
            suites=built,
            total_attempted=len(tests),
            total_passing=sum(1 for t in tests if t.passed),
            suites_passing=sum(1 for s in built if not s.is_empty and s.all_passing),
        )

    return _factory


_EntryFactory = Any


@pytest.fixture()
def make_events() -> _EventsFactory:
    """Factory for a complete event stream.

    Libraries sit at depth 2 under a ``wrapper`` suite, matching the default
    library depth. ``run_end=False`` leaves the trailing RunEnd off.
    """

    def _factory(libs: LibSpec, *, wrapper: str = "wrapper", run_end: bool = True) -> list[Event]:
        events: list[Event] = [SuiteStart(name=wrapper)]
        for lib_name, suites in libs.items():
            events.append(SuiteStart(name=lib_name))
            for desc, outcomes in suites.items():
                events.append(SuiteStart(name=desc))
                for outcome in outcomes:
                    if isinstance(outcome, tuple):
                        events.append(TestFail(description=outcome[0], message=outcome[1]))
                    else:
                        events.append(TestPass(description=outcome))
                events.append(SuiteEnd(name=desc))
            events.append(SuiteEnd(name=lib_name))
        events.append(SuiteEnd(name=wrapper))
        if run_end:
            events.append(RunEnd())
        return events

    return _factory


_EventsFactory = Any


@pytest.fixture()
def fixed_environment() -> TestEnvironment:
    """A reproducible environment descriptor."""
    return capture_environment(datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))


@pytest.fixture()
def tmp_project(tmp_path: Path) -> Path:
    """An empty project directory."""
    project = tmp_path / "project"
    project.mkdir()
    return project
