"""Summary statistics across compared libraries."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from libcompare.domain.models import ComparisonEntry

RankKey = Literal["total_passing", "suites_passing"]


@dataclass(frozen=True)
class SummaryRow:
    """One line of the summary table."""

    index: int
    lib_name: str
    tests_passing: int
    tests_attempted: int
    suites_passing: int
    suites_total: int
    best_by_tests: bool
    best_by_suites: bool

    @property
    def best(self) -> bool:
        return self.best_by_tests or self.best_by_suites


def best_indices(entries: Sequence[ComparisonEntry], key: RankKey = "total_passing") -> frozenset[int]:
    """Indices of every entry tied for the maximum value of *key*."""
    if not entries:
        return frozenset()
    values = [getattr(e, key) for e in entries]
    top = max(values)
    return frozenset(i for i, v in enumerate(values) if v == top)


def summary_rows(entries: Sequence[ComparisonEntry]) -> list[SummaryRow]:
    best_tests = best_indices(entries, "total_passing")
    best_suites = best_indices(entries, "suites_passing")
    return [
        SummaryRow(
            index=i,
            lib_name=e.lib_name,
            tests_passing=e.total_passing,
            tests_attempted=e.total_attempted,
            suites_passing=e.suites_passing,
            suites_total=len(e.non_empty_suites),
            best_by_tests=i in best_tests,
            best_by_suites=i in best_suites,
        )
        for i, e in enumerate(entries)
    ]
