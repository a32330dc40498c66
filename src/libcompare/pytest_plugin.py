"""pytest plugin: runs a conformance suite and reports it as a comparison.

Enable with ``pytest -p libcompare.pytest_plugin --compare-report``, or let
``libcompare run`` register it.

Suites are the Module and Class nodes of each test's collection chain, so a
conformance module laid out as::

    clone_libraries.py          depth 1, wrapper
      class TestDeepcopy        depth 2, one library
        class TestList          depth 3, one suite
          def test_...          one test

produces one entry per library class. Titles come from the first docstring
line, falling back to the node name with ``Test`` / ``test_`` stripped.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from libcompare.aggregator.listener import ComparisonListener, OrphanPolicy
from libcompare.config import HarnessConfig, load_config
from libcompare.domain.errors import ConfigError, HarnessError
from libcompare.domain.models import (
    ComparisonRun,
    Event,
    RunEnd,
    SuiteEnd,
    SuiteStart,
    TestFail,
    TestPass,
)
from libcompare.environment import capture_environment
from libcompare.events.emitter import Emitter
from libcompare.events.recording import EventRecorder
from libcompare.report.publisher import ReportPublisher
from libcompare.storage.local_fs import LocalFileSystem

if TYPE_CHECKING:
    from _pytest.terminal import TerminalReporter

logger = logging.getLogger("libcompare.pytest")

PLUGIN_NAME = "libcompare-comparison"

_Suite = tuple[str, str]  # (nodeid, title)


# ---------------------------------------------------------------------------
# Node titles
# ---------------------------------------------------------------------------


def _first_doc_line(obj: object) -> str:
    doc = getattr(obj, "__doc__", None)
    if not isinstance(doc, str):
        return ""
    for line in doc.strip().splitlines():
        if line.strip():
            return line.strip()
    return ""


def _humanize(name: str, prefix: str) -> str:
    stripped = name[len(prefix) :] if name.startswith(prefix) else name
    stripped = stripped.lstrip("_")
    return stripped.replace("_", " ") if stripped else name


def node_title(node: pytest.Item | pytest.Collector) -> str:
    """Human-readable title of a module, class or test node."""
    obj = getattr(node, "obj", None)
    title = _first_doc_line(obj) if obj is not None else ""

    if isinstance(node, pytest.Function):
        if not title:
            title = _humanize(node.originalname, "test")
        callspec = getattr(node, "callspec", None)
        if callspec is not None:
            title = f"{title} [{callspec.id}]"
        return title
    if title:
        return title
    if isinstance(node, pytest.Class):
        return _humanize(node.name, "Test")
    return Path(node.name).stem


def suite_chain(item: pytest.Item) -> list[_Suite]:
    """The Module and Class ancestors of *item*, outermost first."""
    return [
        (node.nodeid, node_title(node))
        for node in item.listchain()
        if isinstance(node, (pytest.Module, pytest.Class)) and not isinstance(node, pytest.Package)
    ]


def _failure_message(report: pytest.TestReport) -> str:
    crash = getattr(report.longrepr, "reprcrash", None)
    message = crash.message if crash is not None else report.longreprtext
    if report.when != "call":
        message = f"{report.when} failed: {message}"
    return message


# ---------------------------------------------------------------------------
# Plugin
# ---------------------------------------------------------------------------


class ComparisonPlugin:
    """Translates one pytest session into comparison lifecycle events."""

    def __init__(
        self,
        config: HarnessConfig,
        *,
        root: Path,
        events_path: str | None = None,
    ) -> None:
        self._config = config
        self._fs = LocalFileSystem(root)
        self._events_path = events_path
        self._emitter = Emitter()
        self._recorder = EventRecorder()
        self._recorder.register(self._emitter)
        self._listener = ComparisonListener(
            library_depth=config.library_depth,
            orphan_tests=config.orphan_tests,
        )
        self._listener.register(self._emitter)
        self._listener.on_complete(self._publish)

        self._open: list[_Suite] = []
        self._failure: str | None = None
        self._passed = False

        self.run: ComparisonRun | None = None
        self.report_path: str | None = None
        self.error: HarnessError | None = None

    # -- Event plumbing -----------------------------------------------------

    def _emit(self, event: Event, session: pytest.Session | None = None) -> None:
        if self.error is not None:
            return
        try:
            self._emitter.emit(event)
        except HarnessError as exc:
            self.error = exc
            logger.error("Comparison aborted: %s", exc)
            if session is not None:
                session.shouldstop = f"libcompare: {exc}"

    def _sync_suites(self, chain: list[_Suite], session: pytest.Session | None) -> None:
        """Close the open suites *chain* does not share, then open the rest."""
        common = 0
        for opened, wanted in zip(self._open, chain):
            if opened[0] != wanted[0]:
                break
            common += 1
        while len(self._open) > common:
            _, title = self._open.pop()
            self._emit(SuiteEnd(name=title), session)
        for suite in chain[common:]:
            self._open.append(suite)
            self._emit(SuiteStart(name=suite[1]), session)

    # -- Hooks --------------------------------------------------------------

    @pytest.hookimpl(wrapper=True)
    def pytest_runtest_protocol(
        self, item: pytest.Item, nextitem: pytest.Item | None
    ) -> Generator[None, object, object]:
        self._sync_suites(suite_chain(item), item.session)
        self._failure = None
        self._passed = False
        result = yield
        description = node_title(item)
        if self._failure is not None:
            self._emit(TestFail(description=description, message=self._failure), item.session)
        elif self._passed:
            self._emit(TestPass(description=description), item.session)
        if nextitem is not None:
            self._sync_suites(suite_chain(nextitem), item.session)
        return result

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        if report.failed:
            if self._failure is None:
                self._failure = _failure_message(report)
        elif report.when == "call" and report.passed:
            self._passed = True

    @pytest.hookimpl(trylast=True)
    def pytest_sessionfinish(self, session: pytest.Session) -> None:
        self._sync_suites([], session)
        self._emit(RunEnd(), session)
        if self._events_path:
            self._fs.write_file(self._events_path, self._recorder.dumps())
            logger.info("Wrote event recording: %s", self._events_path)

    def pytest_terminal_summary(self, terminalreporter: TerminalReporter) -> None:
        if self.error is not None:
            terminalreporter.write_sep("=", "libcompare", red=True)
            terminalreporter.write_line(f"comparison report not written: {self.error}")
        elif self.report_path is not None:
            terminalreporter.write_sep("=", "libcompare")
            terminalreporter.write_line(f"comparison report: {self.report_path}")

    # -- Hand-off -----------------------------------------------------------

    def _publish(self, run: ComparisonRun) -> None:
        self.run = run
        environment = capture_environment() if self._config.include_environment else None
        publisher = ReportPublisher(
            self._fs,
            output_dir=self._config.output_dir,
            report_file=self._config.report_file,
            title=self._config.title,
            expand_first=self._config.expand_first,
        )
        self.report_path = publisher.publish(run, environment)


# ---------------------------------------------------------------------------
# Standalone registration (``-p libcompare.pytest_plugin``)
# ---------------------------------------------------------------------------


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("libcompare", "library comparison report")
    group.addoption(
        "--compare-report",
        action="store_true",
        dest="compare_report",
        help="aggregate results per library and write an HTML comparison report.",
    )
    group.addoption(
        "--compare-output",
        dest="compare_output",
        metavar="PATH",
        help="report location relative to the root dir (default: docs/report.html).",
    )
    group.addoption(
        "--compare-events",
        dest="compare_events",
        metavar="PATH",
        help="also write the lifecycle events as JSON lines to PATH.",
    )
    group.addoption(
        "--compare-no-env",
        action="store_true",
        dest="compare_no_env",
        help="leave the test environment footer out of the report.",
    )
    group.addoption(
        "--compare-orphans",
        dest="compare_orphans",
        choices=[p.value for p in OrphanPolicy],
        help="how to treat tests outside any library suite (default: error).",
    )


def pytest_configure(config: pytest.Config) -> None:
    if not config.getoption("compare_report", default=False):
        return
    if config.pluginmanager.has_plugin(PLUGIN_NAME):
        return
    try:
        harness = load_config(config.rootpath)
    except ConfigError as exc:
        raise pytest.UsageError(str(exc)) from exc

    output = config.getoption("compare_output")
    if output:
        harness = harness.with_output(output)
    if config.getoption("compare_no_env"):
        harness = replace(harness, include_environment=False)
    orphans = config.getoption("compare_orphans")
    if orphans:
        harness = replace(harness, orphan_tests=OrphanPolicy(orphans))

    plugin = ComparisonPlugin(
        harness,
        root=config.rootpath,
        events_path=config.getoption("compare_events"),
    )
    config.pluginmanager.register(plugin, PLUGIN_NAME)
