"""Report renderer: comparison model -> one self-contained HTML document.

The document embeds its own CSS and JavaScript and references no external
resources. Every piece of free text (library names, suite and test
descriptions, failure messages, environment values) goes through Jinja2
autoescaping; nothing from a test run is ever trusted as markup.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from functools import cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from libcompare.domain.errors import NothingToReportError
from libcompare.domain.models import ComparisonEntry, FeatureComparison, TestEnvironment
from libcompare.features.matrix import derive_feature_comparison
from libcompare.report.summary import summary_rows

logger = logging.getLogger("libcompare.report")

TEMPLATES_DIR = Path(__file__).parent / "templates"
REPORT_TEMPLATE = "report.html.j2"
DEFAULT_TITLE = "Library comparison"

PASS_GLYPH = "✔"
FAIL_GLYPH = "✘"


@dataclass(frozen=True)
class FeatureColumn:
    """One column of the fine-grained matrix, grouped under its suite name."""

    group: str
    feature: str
    index: int


@cache
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def feature_columns(features: FeatureComparison) -> list[FeatureColumn]:
    """Columns of the feature matrix in group order, each mapped to its global index."""
    return [
        FeatureColumn(group=group.name, feature=name, index=features.index_of(group.name, name))
        for group in features.non_empty_groups
        for name in group.features
    ]


def render_report(
    entries: Iterable[ComparisonEntry],
    environment: TestEnvironment | None = None,
    *,
    title: str = DEFAULT_TITLE,
    expand_first: bool = False,
) -> str:
    """Render the comparison report for *entries*.

    Args:
        entries: Finalized entries in rendering order.
        environment: Optional run descriptor shown in the footer.
        title: Document title and heading.
        expand_first: Show the first library's details initially.

    Returns:
        The complete HTML document.

    Raises:
        NothingToReportError: If *entries* is empty.
    """
    entries = tuple(entries)
    if not entries:
        raise NothingToReportError

    features = derive_feature_comparison(entries)
    template = _environment().get_template(REPORT_TEMPLATE)
    document = template.render(
        title=title,
        rows=summary_rows(entries),
        entries=entries,
        features=features,
        groups=features.non_empty_groups,
        columns=feature_columns(features),
        environment=environment,
        expand_first=expand_first,
        pass_glyph=PASS_GLYPH,
        fail_glyph=FAIL_GLYPH,
    )
    logger.debug("Rendered report for %d libraries (%d features)", len(entries), len(features.features))
    return document
