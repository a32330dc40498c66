"""Core data types for libcompare.

Finalized comparison values are frozen dataclasses holding tuples.
This module has ZERO imports from outside the Python standard library.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

# Exit codes are truncated to 8 bits by the OS; 256 failures must not read as success.
MAX_EXIT_CODE = 255


class EventKind(Enum):
    """Lifecycle event kinds delivered by a test runner."""

    SUITE_START = "suite"
    SUITE_END = "suite end"
    TEST_PASS = "pass"
    TEST_FAIL = "fail"
    RUN_END = "end"


# ---------------------------------------------------------------------------
# Runner events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SuiteStart:
    """A suite was entered."""

    kind: ClassVar[EventKind] = EventKind.SUITE_START

    name: str


@dataclass(frozen=True)
class SuiteEnd:
    """A suite was left, after all of its children were reported."""

    kind: ClassVar[EventKind] = EventKind.SUITE_END

    name: str


@dataclass(frozen=True)
class TestPass:
    """A test passed."""

    __test__ = False
    kind: ClassVar[EventKind] = EventKind.TEST_PASS

    description: str


@dataclass(frozen=True)
class TestFail:
    """A test failed with a diagnostic message."""

    __test__ = False
    kind: ClassVar[EventKind] = EventKind.TEST_FAIL

    description: str
    message: str


@dataclass(frozen=True)
class RunEnd:
    """The run is over; no further events follow."""

    kind: ClassVar[EventKind] = EventKind.RUN_END


Event = SuiteStart | SuiteEnd | TestPass | TestFail | RunEnd


# ---------------------------------------------------------------------------
# Comparison model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TestPassed:
    """A passing test result."""

    __test__ = False
    passed: ClassVar[bool] = True

    description: str


@dataclass(frozen=True)
class TestFailed:
    """A failing test result; only failures carry a message."""

    __test__ = False
    passed: ClassVar[bool] = False

    description: str
    message: str


ComparisonTest = TestPassed | TestFailed


@dataclass(frozen=True)
class ComparisonSuite:
    """One named group of tests inside a library."""

    description: str
    tests: tuple[ComparisonTest, ...] = ()

    @property
    def all_passing(self) -> bool:
        """True if every test passed (vacuously true for an empty suite)."""
        return all(t.passed for t in self.tests)

    @property
    def is_empty(self) -> bool:
        return not self.tests


@dataclass(frozen=True)
class ComparisonEntry:
    """Aggregated results for one library under test."""

    lib_name: str
    suites: tuple[ComparisonSuite, ...] = ()
    total_attempted: int = 0
    total_passing: int = 0
    suites_passing: int = 0

    @property
    def total_failing(self) -> int:
        return self.total_attempted - self.total_passing

    @property
    def non_empty_suites(self) -> tuple[ComparisonSuite, ...]:
        """Suites that hold at least one test, in discovery order."""
        return tuple(s for s in self.suites if not s.is_empty)


@dataclass(frozen=True)
class RunStatus:
    """Pass/fail tally of a whole run, mapped to a process exit code."""

    passes: int = 0
    failures: int = 0

    @property
    def exit_code(self) -> int:
        """0 without failures, otherwise the failure count capped at 255."""
        return min(self.failures, MAX_EXIT_CODE)


@dataclass(frozen=True)
class ComparisonRun:
    """The finalized model handed off at the end of a run."""

    entries: tuple[ComparisonEntry, ...]
    status: RunStatus


# ---------------------------------------------------------------------------
# Feature matrix
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FeatureGroup:
    """A suite description used as a column group, with its test descriptions."""

    name: str
    features: tuple[str, ...] = ()


@dataclass(frozen=True)
class FeatureLib:
    """Per-library support vectors over the global feature and group indexes."""

    name: str
    features_supported: tuple[bool, ...] = ()
    groups_passing: tuple[bool, ...] = ()


@dataclass(frozen=True)
class FeatureComparison:
    """Library x feature support matrix derived from a set of entries."""

    groups: tuple[FeatureGroup, ...] = ()
    features: tuple[str, ...] = ()
    libs: tuple[FeatureLib, ...] = ()
    feature_index: dict[tuple[str, str], int] = field(
        default_factory=lambda: dict[tuple[str, str], int](), hash=False
    )

    @property
    def non_empty_groups(self) -> tuple[FeatureGroup, ...]:
        """Groups with at least one feature; the axis of ``groups_passing``."""
        return tuple(g for g in self.groups if g.features)

    def index_of(self, group: str, feature: str) -> int:
        """Return the global index of a (suite, test) pair."""
        return self.feature_index[(group, feature)]


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TestEnvironment:
    """Descriptive facts about where a run happened."""

    __test__ = False

    timestamp: str
    python_version: str
    implementation: str
    os_arch: str
    os_platform: str
    os_release: str
    os_type: str
