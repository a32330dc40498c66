"""Tests for the pytest plugin, run against throwaway projects via pytester."""

from __future__ import annotations

import pytest

from libcompare.aggregator.listener import OrphanPolicy, aggregate
from libcompare.domain.models import SuiteStart, TestFail, TestPass
from libcompare.events.recording import loads_events

PLUGIN = ("-p", "libcompare.pytest_plugin")

TWO_LIBRARIES = '''
"""All libraries"""

import pytest


def make_library(label, broken):
    class Library:
        class TestNumbers:
            """Numbers"""

            def test_adds(self):
                """adds"""
                assert 1 + 1 == 2

            def test_subtracts(self):
                assert not broken, "off by one"

        class TestStrings:
            @pytest.mark.parametrize("value", ["a", "b"])
            def test_upper(self, value):
                assert value.upper().isupper()

    Library.__doc__ = label
    return Library


TestFoo = make_library("libfoo", broken=False)
TestBar = make_library("libbar", broken=True)
'''


def _events(pytester: pytest.Pytester):
    return list(loads_events((pytester.path / "events.jsonl").read_text(encoding="utf-8")))


class TestReport:
    def test_writes_report_and_events(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(test_libs=TWO_LIBRARIES)
        result = pytester.runpytest(*PLUGIN, "--compare-report", "--compare-events", "events.jsonl")

        result.assert_outcomes(passed=7, failed=1)
        result.stdout.fnmatch_lines(["*comparison report: docs/report.html*"])
        html = (pytester.path / "docs" / "report.html").read_text(encoding="utf-8")
        assert "libfoo" in html
        assert "libbar" in html
        assert "off by one" in html

    def test_aggregated_model(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(test_libs=TWO_LIBRARIES)
        pytester.runpytest(*PLUGIN, "--compare-report", "--compare-events", "events.jsonl")

        run = aggregate(_events(pytester))
        assert [e.lib_name for e in run.entries] == ["libfoo", "libbar"]
        foo, bar = run.entries
        assert [s.description for s in foo.suites] == ["Numbers", "Strings"]
        assert (foo.total_passing, foo.total_attempted) == (4, 4)
        assert (bar.total_passing, bar.total_attempted) == (3, 4)
        assert bar.suites_passing == 1
        assert run.status.failures == 1

    def test_titles(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(test_libs=TWO_LIBRARIES)
        pytester.runpytest(*PLUGIN, "--compare-report", "--compare-events", "events.jsonl")

        events = _events(pytester)
        assert events[0] == SuiteStart("All libraries")
        descriptions = [e.description for e in events if isinstance(e, (TestPass, TestFail))]
        assert descriptions[:4] == ["adds", "subtracts", "upper [a]", "upper [b]"]
        failure = next(e for e in events if isinstance(e, TestFail))
        assert "off by one" in failure.message

    def test_custom_output_without_environment(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(test_libs=TWO_LIBRARIES)
        pytester.runpytest(*PLUGIN, "--compare-report", "--compare-output", "site/cmp.html", "--compare-no-env")

        html = (pytester.path / "site" / "cmp.html").read_text(encoding="utf-8")
        assert 'class="environment"' not in html

    def test_config_file(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(test_libs=TWO_LIBRARIES)
        (pytester.path / "libcompare.yaml").write_text(
            "title: Arithmetic\noutput_dir: out\n", encoding="utf-8"
        )
        pytester.runpytest(*PLUGIN, "--compare-report")
        html = (pytester.path / "out" / "report.html").read_text(encoding="utf-8")
        assert "<title>Arithmetic</title>" in html

    def test_bad_config_is_usage_error(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(test_libs=TWO_LIBRARIES)
        (pytester.path / "libcompare.yaml").write_text("library_depth: 0\n", encoding="utf-8")
        result = pytester.runpytest(*PLUGIN, "--compare-report")
        assert result.ret == pytest.ExitCode.USAGE_ERROR
        result.stderr.fnmatch_lines(["*library_depth*"])

    def test_disabled_without_flag(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(test_libs=TWO_LIBRARIES)
        result = pytester.runpytest(*PLUGIN)
        result.assert_outcomes(passed=7, failed=1)
        assert not (pytester.path / "docs").exists()


class TestFailures:
    def test_setup_failure(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(
            test_libs='''
            import pytest

            @pytest.fixture()
            def broken():
                raise RuntimeError("no fixture today")

            class TestLib:
                class TestSuite:
                    def test_uses_fixture(self, broken):
                        pass
            '''
        )
        pytester.runpytest(*PLUGIN, "--compare-report", "--compare-events", "events.jsonl")

        failure = next(e for e in _events(pytester) if isinstance(e, TestFail))
        assert failure.message.startswith("setup failed: ")
        assert "no fixture today" in failure.message

    def test_skipped_tests_not_reported(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(
            test_libs='''
            import pytest

            class TestLib:
                class TestSuite:
                    def test_ok(self):
                        pass

                    @pytest.mark.skip(reason="later")
                    def test_skipped(self):
                        pass
            '''
        )
        pytester.runpytest(*PLUGIN, "--compare-report", "--compare-events", "events.jsonl")

        entry = aggregate(_events(pytester)).entries[0]
        assert entry.total_attempted == 1


class TestOrphans:
    SOURCE = '''
    def test_stray():
        pass

    class TestLib:
        class TestSuite:
            def test_ok(self):
                pass
    '''

    def test_orphan_aborts_by_default(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(test_libs=self.SOURCE)
        result = pytester.runpytest(*PLUGIN, "--compare-report")

        result.stdout.fnmatch_lines(["*comparison report not written*stray*"])
        assert not (pytester.path / "docs" / "report.html").exists()

    def test_orphan_dropped(self, pytester: pytest.Pytester) -> None:
        pytester.makepyfile(test_libs=self.SOURCE)
        result = pytester.runpytest(
            *PLUGIN, "--compare-report", "--compare-orphans", "drop", "--compare-events", "events.jsonl"
        )

        result.assert_outcomes(passed=2)
        run = aggregate(_events(pytester), orphan_tests=OrphanPolicy.DROP)
        assert [e.lib_name for e in run.entries] == ["Lib"]
        assert run.entries[0].total_attempted == 1
        assert (pytester.path / "docs" / "report.html").exists()
