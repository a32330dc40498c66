"""Feature-matrix deriver.

Turns the ordered comparison entries into a library x feature support matrix.
A feature is one (suite description, test description) pair; the global
feature index is assigned on first occurrence while walking entries, suites
and tests in order. A library that never ran a feature is indistinguishable
from one that failed it: both read as unsupported.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, MutableMapping
from typing import TypeVar

from libcompare.domain.models import (
    ComparisonEntry,
    FeatureComparison,
    FeatureGroup,
    FeatureLib,
)

K = TypeVar("K")
V = TypeVar("V")

FEATURE_SEPARATOR = " - "


def get_or_insert(mapping: MutableMapping[K, V], key: K, factory: Callable[[], V]) -> V:
    """Return ``mapping[key]``, inserting ``factory()`` first if it is missing."""
    if key not in mapping:
        mapping[key] = factory()
    return mapping[key]


def feature_name(group: str, feature: str) -> str:
    """Display name of a feature, e.g. ``"Array - copy"``."""
    return f"{group}{FEATURE_SEPARATOR}{feature}"


def derive_feature_comparison(entries: Iterable[ComparisonEntry]) -> FeatureComparison:
    """Build the support matrix for *entries*.

    Groups keep every suite description ever seen, even those without tests;
    display code filters them through ``FeatureComparison.non_empty_groups``.
    """
    entries = tuple(entries)
    feature_index: dict[tuple[str, str], int] = {}
    group_features: dict[str, dict[str, None]] = {}

    for entry in entries:
        for suite in entry.suites:
            features = get_or_insert(group_features, suite.description, dict[str, None])
            for test in suite.tests:
                features[test.description] = None
                get_or_insert(feature_index, (suite.description, test.description), lambda: len(feature_index))

    groups = tuple(FeatureGroup(name=name, features=tuple(features)) for name, features in group_features.items())
    non_empty = [g.name for g in groups if g.features]

    libs = tuple(
        FeatureLib(
            name=entry.lib_name,
            features_supported=_supported_vector(entry, feature_index),
            groups_passing=_groups_passing_vector(entry, non_empty),
        )
        for entry in entries
    )

    ordered = sorted(feature_index.items(), key=lambda item: item[1])
    return FeatureComparison(
        groups=groups,
        features=tuple(feature_name(group, feature) for (group, feature), _ in ordered),
        libs=libs,
        feature_index=feature_index,
    )


def _supported_vector(entry: ComparisonEntry, feature_index: dict[tuple[str, str], int]) -> tuple[bool, ...]:
    supported = [False] * len(feature_index)
    for suite in entry.suites:
        for test in suite.tests:
            if test.passed:
                supported[feature_index[(suite.description, test.description)]] = True
    return tuple(supported)


def _groups_passing_vector(entry: ComparisonEntry, group_names: list[str]) -> tuple[bool, ...]:
    # A group passes only if the library has tests for it and none of them failed.
    passing: dict[str, bool] = {}
    for suite in entry.non_empty_suites:
        passing[suite.description] = passing.get(suite.description, True) and suite.all_passing
    return tuple(passing.get(name, False) for name in group_names)
