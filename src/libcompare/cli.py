"""
libcompare CLI -- run a conformance suite against several libraries and
publish the comparison report.

Usage:
  libcompare run [TARGET ...] [--output PATH] [--events PATH] [--config PATH]
                 [--no-env] [--plain] [-- PYTEST_ARGS ...]
  libcompare render EVENTS [--output PATH] [--config PATH] [--no-env] [--plain]

Exit codes: 0 when every test passed, otherwise the failure count (capped at
255); 2 when the harness itself fails (bad config, malformed events, nothing
to report).
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import pytest

from libcompare.aggregator.listener import aggregate
from libcompare.config import HarnessConfig, load_config, logs_dir
from libcompare.console import configure, console
from libcompare.domain.errors import HarnessError
from libcompare.domain.models import ComparisonRun
from libcompare.environment import capture_environment
from libcompare.events.recording import loads_events
from libcompare.pytest_plugin import ComparisonPlugin
from libcompare.report.publisher import ReportPublisher
from libcompare.storage.local_fs import LocalFileSystem

logger = logging.getLogger("libcompare")

HARNESS_ERROR_EXIT = 2


def _setup_logging(project_dir: Path) -> None:
    """Configure file logging to .libcompare/logs/libcompare.log."""
    log_dir = logs_dir(project_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "libcompare.log"

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)


def _resolve_config(project_dir: Path, args: argparse.Namespace) -> HarnessConfig:
    config = load_config(project_dir, Path(args.config) if args.config else None)
    if args.output:
        config = config.with_output(args.output)
    if args.no_env:
        config = replace(config, include_environment=False)
    return config


def _show_run(run: ComparisonRun, report_path: str | None) -> None:
    for entry in run.entries:
        console.library_result(entry.lib_name, entry.total_passing, entry.total_attempted)
    rows = [
        [
            entry.lib_name,
            f"{entry.suites_passing}/{len(entry.non_empty_suites)}",
            f"{entry.total_passing}/{entry.total_attempted}",
        ]
        for entry in run.entries
    ]
    console.table(["Library", "Suites", "Tests"], rows, title="Comparison")
    status = run.status
    console.run_result(status.failures, status.passes + status.failures, report_path)


# ---------------------------------------------------------------------------
# CLI commands
# ---------------------------------------------------------------------------


def cmd_run(args: argparse.Namespace, project_dir: Path) -> int:
    """Run the conformance targets under pytest and publish the report."""
    config = _resolve_config(project_dir, args)
    targets = args.targets or list(config.targets)
    plugin = ComparisonPlugin(config, root=project_dir, events_path=args.events)

    pytest_args = [*targets, *config.pytest_args, *args.pytest_args]
    logger.info("Running pytest %s", " ".join(pytest_args))
    console.info(f"Running {', '.join(targets)}")
    pytest.main(pytest_args, plugins=[plugin])

    if plugin.error is not None:
        raise plugin.error
    if plugin.run is None:
        console.warning("The test run did not finish; no report was written.")
        return HARNESS_ERROR_EXIT

    _show_run(plugin.run, plugin.report_path)
    return plugin.run.status.exit_code


def cmd_render(args: argparse.Namespace, project_dir: Path) -> int:
    """Replay an event recording into a report."""
    config = _resolve_config(project_dir, args)
    fs = LocalFileSystem(project_dir)
    events = loads_events(fs.read_file(args.events))
    run = aggregate(events, library_depth=config.library_depth, orphan_tests=config.orphan_tests)

    environment = capture_environment() if config.include_environment else None
    publisher = ReportPublisher(
        fs,
        output_dir=config.output_dir,
        report_file=config.report_file,
        title=config.title,
        expand_first=config.expand_first,
    )
    report_path = publisher.publish(run, environment)
    _show_run(run, report_path)
    return run.status.exit_code


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--output", help="Report path (default: docs/report.html)")
    parser.add_argument("--config", help="Config file (default: ./libcompare.yaml)")
    parser.add_argument("--no-env", action="store_true", help="Omit the environment footer")
    parser.add_argument("--plain", action="store_true", help="Plain text output")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="libcompare",
        description="Compare interchangeable libraries with one conformance suite",
    )
    sub = parser.add_subparsers(dest="command")

    p_run = sub.add_parser("run", help="Run the conformance suite and write the report")
    p_run.add_argument("targets", nargs="*", help="Test files or directories to run")
    p_run.add_argument("--events", help="Also record lifecycle events to this JSON-lines file")
    _add_common_options(p_run)

    p_render = sub.add_parser("render", help="Render a report from an event recording")
    p_render.add_argument("events", help="JSON-lines event recording")
    _add_common_options(p_render)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``libcompare`` command."""
    raw = list(sys.argv[1:] if argv is None else argv)
    pytest_args: list[str] = []
    if "--" in raw:
        split = raw.index("--")
        raw, pytest_args = raw[:split], raw[split + 1 :]

    parser = build_parser()
    args = parser.parse_args(raw)
    args.pytest_args = pytest_args
    if args.command is None:
        parser.print_help()
        return 0

    project_dir = Path.cwd()
    configure(backend="plain" if args.plain else "auto")
    _setup_logging(project_dir)

    try:
        if args.command == "run":
            return cmd_run(args, project_dir)
        return cmd_render(args, project_dir)
    except HarnessError as exc:
        logger.error("%s", exc)
        console.error(str(exc))
        return HARNESS_ERROR_EXIT


if __name__ == "__main__":
    sys.exit(main())
