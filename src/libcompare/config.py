"""Path constants and configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from libcompare.aggregator.listener import DEFAULT_LIBRARY_DEPTH, OrphanPolicy
from libcompare.domain.errors import ConfigError
from libcompare.report.renderer import DEFAULT_TITLE

# Project-relative layout
CONFIG_FILE = "libcompare.yaml"
STATE_DIR = ".libcompare"
LOGS_DIR = "logs"
LOG_FILE = "libcompare.log"
OUTPUT_DIR = "docs"
REPORT_FILE = "report.html"
DEFAULT_TARGETS = ("conformance/clone_libraries.py",)


def config_file(project_root: Path) -> Path:
    """Return the libcompare.yaml path."""
    return project_root / CONFIG_FILE


def logs_dir(project_root: Path) -> Path:
    """Return the logs directory path."""
    return project_root / STATE_DIR / LOGS_DIR


@dataclass(frozen=True)
class HarnessConfig:
    """Settings of the surrounding harness; the core never reads files itself."""

    targets: tuple[str, ...] = DEFAULT_TARGETS
    output_dir: str = OUTPUT_DIR
    report_file: str = REPORT_FILE
    library_depth: int = DEFAULT_LIBRARY_DEPTH
    orphan_tests: OrphanPolicy = OrphanPolicy.ERROR
    include_environment: bool = True
    expand_first: bool = False
    title: str = DEFAULT_TITLE
    pytest_args: tuple[str, ...] = field(default=())

    @property
    def report_path(self) -> str:
        """Report location relative to the project root."""
        return f"{self.output_dir}/{self.report_file}"

    def with_output(self, path: str) -> HarnessConfig:
        """Return a copy writing the report to *path* instead."""
        p = Path(path)
        return replace(self, output_dir=str(p.parent), report_file=p.name)


def _config_from_dict(data: dict[str, Any]) -> HarnessConfig:
    defaults = HarnessConfig()
    unknown = set(data) - set(HarnessConfig.__dataclass_fields__)
    if unknown:
        msg = f"Unknown config keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)

    policy_raw = str(data.get("orphan_tests", defaults.orphan_tests.value))
    try:
        policy = OrphanPolicy(policy_raw)
    except ValueError:
        choices = ", ".join(p.value for p in OrphanPolicy)
        msg = f"orphan_tests must be one of {choices}, got {policy_raw!r}"
        raise ConfigError(msg) from None

    depth = data.get("library_depth", defaults.library_depth)
    if not isinstance(depth, int) or isinstance(depth, bool) or depth < 1:
        msg = f"library_depth must be a positive integer, got {depth!r}"
        raise ConfigError(msg)

    targets = data.get("targets", list(defaults.targets))
    if isinstance(targets, str):
        targets = [targets]

    return HarnessConfig(
        targets=tuple(str(t) for t in targets),
        output_dir=str(data.get("output_dir", defaults.output_dir)),
        report_file=str(data.get("report_file", defaults.report_file)),
        library_depth=depth,
        orphan_tests=policy,
        include_environment=bool(data.get("include_environment", defaults.include_environment)),
        expand_first=bool(data.get("expand_first", defaults.expand_first)),
        title=str(data.get("title", defaults.title)),
        pytest_args=tuple(str(a) for a in data.get("pytest_args", [])),
    )


def load_config(project_root: Path, path: Path | None = None) -> HarnessConfig:
    """Load libcompare.yaml, falling back to defaults when it does not exist.

    Raises:
        ConfigError: If the file is not a mapping or holds invalid values.
    """
    cf = path if path is not None else config_file(project_root)
    if not cf.exists():
        if path is not None:
            msg = f"Config file not found: {cf}"
            raise ConfigError(msg)
        return HarnessConfig()
    data = yaml.safe_load(cf.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        msg = f"{cf.name} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _config_from_dict(data)
