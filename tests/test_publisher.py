"""Tests for ReportPublisher."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from libcompare.domain.errors import NothingToReportError
from libcompare.domain.models import ComparisonRun, RunStatus
from libcompare.report.publisher import ReportPublisher
from libcompare.storage.local_fs import LocalFileSystem


def _run(*entries) -> ComparisonRun:
    return ComparisonRun(entries=tuple(entries), status=RunStatus())


class TestReportPublisher:
    def test_writes_report(self, make_entry, tmp_project: Path) -> None:
        publisher = ReportPublisher(LocalFileSystem(tmp_project))
        path = publisher.publish(_run(make_entry("libfoo", {"Array": ["copy"]})))

        assert path == "docs/report.html"
        html = (tmp_project / "docs" / "report.html").read_text(encoding="utf-8")
        assert "libfoo" in html

    def test_custom_location_and_title(self, make_entry, tmp_project: Path) -> None:
        publisher = ReportPublisher(
            LocalFileSystem(tmp_project),
            output_dir="out/reports",
            report_file="clone.html",
            title="Cloners",
        )
        path = publisher.publish(_run(make_entry()))
        assert path == "out/reports/clone.html"
        assert "<title>Cloners</title>" in (tmp_project / path).read_text(encoding="utf-8")

    def test_environment_passed_through(self, make_entry, fixed_environment, tmp_project: Path) -> None:
        publisher = ReportPublisher(LocalFileSystem(tmp_project))
        path = publisher.publish(_run(make_entry()), fixed_environment)
        assert fixed_environment.timestamp in (tmp_project / path).read_text(encoding="utf-8")

    def test_nothing_to_report_writes_nothing(self) -> None:
        fs = MagicMock()
        publisher = ReportPublisher(fs)
        with pytest.raises(NothingToReportError):
            publisher.publish(_run())
        fs.make_directory.assert_not_called()
        fs.write_file.assert_not_called()

    def test_uses_port(self, make_entry) -> None:
        fs = MagicMock()
        ReportPublisher(fs).publish(_run(make_entry()))
        fs.make_directory.assert_called_once_with("docs")
        path, content = fs.write_file.call_args.args
        assert path == "docs/report.html"
        assert content.startswith("<!DOCTYPE html>")
