"""Cloning strategies compared by the shipped conformance suite.

Each cloner takes any object and returns what the strategy considers a deep
copy of it. Exceptions are left to propagate: the runner turns them into test
failures.
"""

from __future__ import annotations

import copy
import json
import marshal
import pickle
from dataclasses import dataclass
from typing import Any

import yaml

from libcompare.conformance.versions import library_label
from libcompare.domain.protocols import Cloner


def pickle_clone(obj: Any) -> Any:
    return pickle.loads(pickle.dumps(obj, protocol=pickle.HIGHEST_PROTOCOL))


def marshal_clone(obj: Any) -> Any:
    return marshal.loads(marshal.dumps(obj))


def json_clone(obj: Any) -> Any:
    return json.loads(json.dumps(obj))


def yaml_clone(obj: Any) -> Any:
    # Full python tags are needed to rebuild arbitrary objects.
    return yaml.load(yaml.dump(obj, Dumper=yaml.Dumper), Loader=yaml.UnsafeLoader)  # noqa: S506


@dataclass(frozen=True)
class CloneLibrary:
    """A cloner and the name/distribution used to label it."""

    name: str
    cloner: Cloner
    distribution: str | None = None

    @property
    def label(self) -> str:
        return library_label(self.name, self.distribution)


LIBRARIES: tuple[CloneLibrary, ...] = (
    CloneLibrary("copy.deepcopy", copy.deepcopy),
    CloneLibrary("copy.copy", copy.copy),
    CloneLibrary("pickle", pickle_clone),
    CloneLibrary("marshal", marshal_clone),
    CloneLibrary("json", json_clone),
    CloneLibrary("yaml", yaml_clone, distribution="PyYAML"),
)
