"""Aggregator: folds runner lifecycle events into the comparison model.

The listener subscribes to an emitter, tracks the open suites on an explicit
stack and groups every test result by (library, suite). Depth
``library_depth`` on the stack marks a library boundary; everything deeper is
a suite of the current library, flattened: a test belongs to the suite most
recently appended to the current library, even after a nested suite closed.

Structural violations are governed by an ``OrphanPolicy``:

- ``ERROR`` (default): any inconsistent event raises ``NestingError``.
- ``DROP``: orphan tests are logged and left out of the model; they still
  count toward the run status.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from libcompare.domain.errors import NestingError
from libcompare.domain.models import (
    ComparisonEntry,
    ComparisonRun,
    ComparisonSuite,
    ComparisonTest,
    EventKind,
    RunEnd,
    RunStatus,
    SuiteEnd,
    SuiteStart,
    TestFail,
    TestFailed,
    TestPass,
    TestPassed,
)

if TYPE_CHECKING:
    from libcompare.domain.models import Event
    from libcompare.domain.protocols import CompletionCallback, EventEmitter

logger = logging.getLogger("libcompare.aggregator")

DEFAULT_LIBRARY_DEPTH = 2


class OrphanPolicy(Enum):
    """What to do with events that do not fit the open nesting."""

    ERROR = "error"
    DROP = "drop"


# ---------------------------------------------------------------------------
# Fold state
# ---------------------------------------------------------------------------


@dataclass
class _SuiteBuilder:
    description: str
    tests: list[ComparisonTest] = field(default_factory=lambda: list[ComparisonTest]())

    def build(self) -> ComparisonSuite:
        return ComparisonSuite(description=self.description, tests=tuple(self.tests))


@dataclass
class _EntryBuilder:
    lib_name: str
    suites: list[_SuiteBuilder] = field(default_factory=lambda: list[_SuiteBuilder]())
    passes: int = 0
    failures: int = 0

    def build(self) -> ComparisonEntry:
        suites = tuple(s.build() for s in self.suites)
        return ComparisonEntry(
            lib_name=self.lib_name,
            suites=suites,
            total_attempted=self.passes + self.failures,
            total_passing=self.passes,
            suites_passing=sum(1 for s in suites if not s.is_empty and s.all_passing),
        )


@dataclass
class _AggregationContext:
    """Everything the handlers mutate during one run."""

    stack: list[str] = field(default_factory=lambda: list[str]())
    entry: _EntryBuilder | None = None
    entries: list[ComparisonEntry] = field(default_factory=lambda: list[ComparisonEntry]())
    passes: int = 0
    failures: int = 0
    ended: bool = False


# ---------------------------------------------------------------------------
# Listener
# ---------------------------------------------------------------------------


class ComparisonListener:
    """Builds ``ComparisonEntry`` values from a linear stream of runner events.

    One instance serves exactly one run.
    """

    def __init__(
        self,
        *,
        library_depth: int = DEFAULT_LIBRARY_DEPTH,
        orphan_tests: OrphanPolicy = OrphanPolicy.ERROR,
    ) -> None:
        if library_depth < 1:
            msg = f"library_depth must be at least 1, got {library_depth}"
            raise ValueError(msg)
        self._library_depth = library_depth
        self._policy = orphan_tests
        self._ctx = _AggregationContext()
        self._callbacks: list[CompletionCallback] = []
        self._run: ComparisonRun | None = None

    # -- Subscription -------------------------------------------------------

    def register(self, emitter: EventEmitter) -> None:
        """Subscribe one handler per event kind on *emitter*."""
        emitter.on(EventKind.SUITE_START, self.on_suite_start)
        emitter.on(EventKind.SUITE_END, self.on_suite_end)
        emitter.on(EventKind.TEST_PASS, self.on_test_pass)
        emitter.on(EventKind.TEST_FAIL, self.on_test_fail)
        emitter.on(EventKind.RUN_END, self.on_run_end)

    def on_complete(self, callback: CompletionCallback) -> None:
        """Call *callback* with the finalized run once ``RunEnd`` arrives."""
        self._callbacks.append(callback)

    # -- Results ------------------------------------------------------------

    @property
    def entries(self) -> tuple[ComparisonEntry, ...]:
        """Entries finalized so far, in arrival order."""
        return tuple(self._ctx.entries)

    @property
    def status(self) -> RunStatus:
        return RunStatus(passes=self._ctx.passes, failures=self._ctx.failures)

    @property
    def run(self) -> ComparisonRun | None:
        """The finalized run, or None until ``RunEnd`` has been handled."""
        return self._run

    # -- Handlers -----------------------------------------------------------

    def on_suite_start(self, event: SuiteStart) -> None:
        ctx = self._ctx
        self._check_running(event)
        ctx.stack.append(event.name)
        depth = len(ctx.stack)

        if depth == self._library_depth:
            ctx.entry = _EntryBuilder(lib_name=event.name)
            logger.debug("Library opened: %s", event.name)
        elif depth > self._library_depth and ctx.entry is not None:
            ctx.entry.suites.append(_SuiteBuilder(description=event.name))

    def on_suite_end(self, event: SuiteEnd) -> None:
        ctx = self._ctx
        self._check_running(event)
        if not ctx.stack:
            msg = f"Suite {event.name!r} ended but no suite is open"
            raise NestingError(msg)

        innermost = ctx.stack[-1]
        if innermost != event.name:
            msg = f"Suite {event.name!r} ended while {innermost!r} is the innermost open suite"
            self._violation(msg)

        depth = len(ctx.stack)
        if depth == self._library_depth and ctx.entry is not None:
            self._finalize_entry(ctx.entry)
            ctx.entry = None
        ctx.stack.pop()

    def on_test_pass(self, event: TestPass) -> None:
        self._check_running(event)
        self._ctx.passes += 1
        suite = self._current_suite(event.description)
        if suite is None:
            return
        suite.tests.append(TestPassed(description=event.description))
        assert self._ctx.entry is not None
        self._ctx.entry.passes += 1

    def on_test_fail(self, event: TestFail) -> None:
        self._check_running(event)
        self._ctx.failures += 1
        suite = self._current_suite(event.description)
        if suite is None:
            return
        suite.tests.append(TestFailed(description=event.description, message=event.message))
        assert self._ctx.entry is not None
        self._ctx.entry.failures += 1

    def on_run_end(self, event: RunEnd) -> None:
        ctx = self._ctx
        self._check_running(event)
        if ctx.stack:
            msg = f"Run ended with open suites: {' > '.join(ctx.stack)}"
            self._violation(msg)
            if ctx.entry is not None:
                logger.warning("Discarding unfinished library %r", ctx.entry.lib_name)
            ctx.stack.clear()
            ctx.entry = None

        ctx.ended = True
        self._run = ComparisonRun(entries=tuple(ctx.entries), status=self.status)
        logger.info(
            "Run ended: %d libraries, %d passing, %d failing",
            len(ctx.entries),
            ctx.passes,
            ctx.failures,
        )
        for callback in self._callbacks:
            callback(self._run)

    def handle(self, event: Event) -> None:
        """Dispatch a single event without going through an emitter."""
        if isinstance(event, SuiteStart):
            self.on_suite_start(event)
        elif isinstance(event, SuiteEnd):
            self.on_suite_end(event)
        elif isinstance(event, TestPass):
            self.on_test_pass(event)
        elif isinstance(event, TestFail):
            self.on_test_fail(event)
        else:
            self.on_run_end(event)

    # -- Internals ----------------------------------------------------------

    def _check_running(self, event: Event) -> None:
        if self._ctx.ended:
            msg = f"Received {event.kind.value!r} event after the run ended"
            raise NestingError(msg)

    def _violation(self, message: str) -> None:
        if self._policy is OrphanPolicy.ERROR:
            raise NestingError(message)
        logger.warning(message)

    def _current_suite(self, description: str) -> _SuiteBuilder | None:
        ctx = self._ctx
        if ctx.entry is not None and ctx.entry.suites:
            return ctx.entry.suites[-1]
        where = " > ".join(ctx.stack) or "<top level>"
        self._violation(f"Test {description!r} reported outside any suite of a library ({where})")
        return None

    def _finalize_entry(self, entry: _EntryBuilder) -> None:
        built = entry.build()
        self._ctx.entries.append(built)
        logger.info("%s results: %d/%d", built.lib_name, built.total_passing, built.total_attempted)


def aggregate(
    events: Iterable[Event],
    *,
    library_depth: int = DEFAULT_LIBRARY_DEPTH,
    orphan_tests: OrphanPolicy = OrphanPolicy.ERROR,
) -> ComparisonRun:
    """Fold a complete event stream and return the finalized run.

    Raises:
        NestingError: If the stream never reaches ``RunEnd`` or is malformed.
    """
    listener = ComparisonListener(library_depth=library_depth, orphan_tests=orphan_tests)
    for event in events:
        listener.handle(event)
    if listener.run is None:
        msg = "Event stream ended without a RunEnd event"
        raise NestingError(msg)
    return listener.run
