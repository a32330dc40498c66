"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from libcompare.aggregator.listener import OrphanPolicy
from libcompare.config import (
    DEFAULT_TARGETS,
    HarnessConfig,
    config_file,
    load_config,
    logs_dir,
)
from libcompare.domain.errors import ConfigError


class TestPaths:
    def test_config_file(self, tmp_project: Path) -> None:
        assert config_file(tmp_project) == tmp_project / "libcompare.yaml"

    def test_logs_dir(self, tmp_project: Path) -> None:
        assert logs_dir(tmp_project) == tmp_project / ".libcompare" / "logs"


class TestHarnessConfig:
    def test_defaults(self) -> None:
        config = HarnessConfig()
        assert config.targets == DEFAULT_TARGETS
        assert config.report_path == "docs/report.html"
        assert config.library_depth == 2
        assert config.orphan_tests is OrphanPolicy.ERROR
        assert config.include_environment

    def test_with_output(self) -> None:
        config = HarnessConfig().with_output("site/compare.html")
        assert config.output_dir == "site"
        assert config.report_file == "compare.html"
        assert config.report_path == "site/compare.html"


class TestLoadConfig:
    def test_missing_default_file(self, tmp_project: Path) -> None:
        assert load_config(tmp_project) == HarnessConfig()

    def test_missing_explicit_file(self, tmp_project: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_project, tmp_project / "nope.yaml")

    def test_empty_file(self, tmp_project: Path) -> None:
        config_file(tmp_project).write_text("", encoding="utf-8")
        assert load_config(tmp_project) == HarnessConfig()

    def test_values(self, tmp_project: Path) -> None:
        config_file(tmp_project).write_text(
            "targets: conformance/\n"
            "output_dir: site\n"
            "report_file: compare.html\n"
            "library_depth: 3\n"
            "orphan_tests: drop\n"
            "include_environment: false\n"
            "expand_first: true\n"
            "title: Cloners\n"
            "pytest_args: [-q, -x]\n",
            encoding="utf-8",
        )
        config = load_config(tmp_project)
        assert config.targets == ("conformance/",)
        assert config.report_path == "site/compare.html"
        assert config.library_depth == 3
        assert config.orphan_tests is OrphanPolicy.DROP
        assert not config.include_environment
        assert config.expand_first
        assert config.title == "Cloners"
        assert config.pytest_args == ("-q", "-x")

    def test_unknown_key(self, tmp_project: Path) -> None:
        config_file(tmp_project).write_text("colour: blue\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="colour"):
            load_config(tmp_project)

    def test_bad_policy(self, tmp_project: Path) -> None:
        config_file(tmp_project).write_text("orphan_tests: ignore\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="orphan_tests"):
            load_config(tmp_project)

    @pytest.mark.parametrize("depth", ["0", "two", "true"])
    def test_bad_depth(self, tmp_project: Path, depth: str) -> None:
        config_file(tmp_project).write_text(f"library_depth: {depth}\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="library_depth"):
            load_config(tmp_project)

    def test_not_a_mapping(self, tmp_project: Path) -> None:
        config_file(tmp_project).write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(tmp_project)
