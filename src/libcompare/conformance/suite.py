"""The cloning conformance suite, instantiated once per library.

``clone_library_suite(label, cloner)`` returns a pytest class whose nested
``Test*`` classes are the suites of one library entry. Every test closes over
*cloner*, so the same suite runs unchanged against each strategy.
"""

from __future__ import annotations

import re
from array import array
from collections import OrderedDict, defaultdict
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from libcompare.domain.protocols import Cloner

TYPECODES = "bBhHiIlLqQfd"

# Module-level classes so that pickle and yaml can locate them by name.


class Box:
    def __init__(self, value: Any) -> None:
        self.value = value


class Grandparent:
    def __init__(self) -> None:
        self.grandparent_attr = "grandparent"


class Parent(Grandparent):
    def __init__(self) -> None:
        super().__init__()
        self.parent_attr = "parent"


class Child(Parent):
    def __init__(self) -> None:
        super().__init__()
        self.child_attr = "child"


class Node:
    def __init__(self, name: str) -> None:
        self.name = name
        self.parent: Node | None = None
        self.children: list[Node] = []


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass
class Counter:
    count: int = 0


class DefaultingDict(dict):
    """dict that answers missing keys with a fixed value."""

    missing_value = "default"

    def __missing__(self, key: Any) -> str:
        return self.missing_value


def make_default_list() -> list[Any]:
    return []


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def wrap(value: Any) -> dict[str, Any]:
    return {"my_property": value}


def check_attributes(type_name: str, value: Any, attributes: list[str]) -> None:
    for name in attributes:
        assert hasattr(value, name), f"The cloned {type_name} should have attribute {name!r}"


def check_clone(
    cloner: Cloner,
    type_name: str,
    value: Any,
    attributes: list[str] | None = None,
    *,
    distinct: bool = True,
) -> Any:
    """Clone *value* directly and check the basics; returns the clone."""
    cloned = cloner(value)
    if distinct:
        assert cloned is not value, (
            f"The cloned {type_name} should not reference the same object in memory"
        )
    assert type(cloned) is type(value), (
        f"The cloned {type_name} should be a {type(value).__name__}, "
        f"got {type(cloned).__name__}"
    )
    check_attributes(type_name, cloned, attributes or [])
    return cloned


def check_property_clone(
    cloner: Cloner,
    type_name: str,
    value: Any,
    attributes: list[str] | None = None,
    *,
    distinct: bool = True,
) -> Any:
    """Clone *value* held in a dict and check the basics; returns the cloned value."""
    obj = wrap(value)
    cloned_obj = cloner(obj)
    assert cloned_obj is not obj, "The cloned dict should not reference the same object in memory"
    assert "my_property" in cloned_obj, f"The dict holding the {type_name} lost its key"
    cloned = cloned_obj["my_property"]
    if distinct:
        assert cloned is not value, (
            f"The cloned {type_name} should not reference the same object in memory"
        )
    assert type(cloned) is type(value), (
        f"The cloned {type_name} should be a {type(value).__name__}, "
        f"got {type(cloned).__name__}"
    )
    check_attributes(type_name, cloned, attributes or [])
    return cloned


# ---------------------------------------------------------------------------
# Suite factory
# ---------------------------------------------------------------------------


def _typed_array_suite(typecode: str, cloner: Cloner) -> type:
    class TypedArray:
        def test_clone(self) -> None:
            value = array(typecode, [1, 2, 3])
            cloned = check_clone(cloner, "array", value, ["typecode", "itemsize"])
            assert cloned.typecode == typecode, "The typecode should be preserved"
            assert cloned.tolist() == value.tolist(), "The items should be preserved"

        def test_clone_in_property(self) -> None:
            value = array(typecode, [1, 2, 3])
            cloned = check_property_clone(cloner, "array", value, ["typecode"])
            assert cloned.tolist() == value.tolist(), "The items should be preserved"

        def test_mutation(self) -> None:
            value = array(typecode, [1, 2, 3])
            cloned = cloner(wrap(value))["my_property"]
            value[0] = 4
            assert cloned[0] == 1, "Mutating the original must not change the clone"

    TypedArray.test_clone.__doc__ = f"can clone an array('{typecode}')"
    TypedArray.test_clone_in_property.__doc__ = (
        f"can clone an array('{typecode}') contained in a dict value"
    )
    TypedArray.test_mutation.__doc__ = f"mutating an array('{typecode}') does not alter the clone"
    TypedArray.__name__ = TypedArray.__qualname__ = f"Test_{typecode}"
    TypedArray.__doc__ = f"array('{typecode}')"
    return TypedArray


def clone_library_suite(label: str, cloner: Cloner) -> type:
    """Build the conformance class for one cloning library.

    Assign the result to a ``Test*`` name in a test module to collect it.
    """

    class Library:
        class TestList:
            """list"""

            def test_clone(self) -> None:
                """can clone a list"""
                value = [{"my_property": 1}, 2]
                cloned = check_clone(cloner, "list", value, ["append"])
                assert cloned == value, "The items should be preserved"
                assert cloned[0] is not value[0], (
                    "Nested items should not reference the same object in memory"
                )

            def test_clone_in_property(self) -> None:
                """can clone a list contained in a dict value"""
                value = [1, 2, 3]
                cloned = check_property_clone(cloner, "list", value)
                assert cloned == value, "The items should be preserved"

            def test_mutation(self) -> None:
                """mutating a list does not alter the clone"""
                value = [123]
                cloned = cloner(wrap(value))["my_property"]
                value.append(456)
                assert len(cloned) != len(value), "Mutated lists must have different lengths"

        class TestDict:
            """dict"""

            def test_clone(self) -> None:
                """can clone a dict with nested dicts"""
                value = {"outer": {"inner": 1}}
                cloned = check_clone(cloner, "dict", value)
                assert cloned == value, "The items should be preserved"
                assert cloned["outer"] is not value["outer"], (
                    "Nested dicts should not reference the same object in memory"
                )

            def test_non_string_keys(self) -> None:
                """can clone a dict with non-string keys"""
                value = {1: "one", (2, 3): "pair"}
                cloned = check_clone(cloner, "dict", value)
                assert cloned == value, "Non-string keys should be preserved"

            def test_mutation(self) -> None:
                """mutating a dict does not alter the clone"""
                value = {"a": 1}
                cloned = cloner(wrap(value))["my_property"]
                value["b"] = 2
                assert "b" not in cloned, "Mutating the original must not change the clone"

        class TestSet:
            """set"""

            def test_clone(self) -> None:
                """can clone a set"""
                value = {1, 2, 3}
                cloned = check_clone(cloner, "set", value, ["add"])
                assert cloned == value, "The members should be preserved"

            def test_clone_in_property(self) -> None:
                """can clone a set contained in a dict value"""
                value = {"a", "b"}
                cloned = check_property_clone(cloner, "set", value)
                assert cloned == value, "The members should be preserved"

            def test_mutation(self) -> None:
                """mutating a set does not alter the clone"""
                value = {1}
                cloned = cloner(wrap(value))["my_property"]
                value.add(2)
                assert len(cloned) == 1, "Mutating the original must not change the clone"

        class TestBytearray:
            """bytearray"""

            def test_clone(self) -> None:
                """can clone a bytearray"""
                value = bytearray(b"hello")
                cloned = check_clone(cloner, "bytearray", value, ["decode"])
                assert cloned == value, "The bytes should be preserved"

            def test_clone_in_property(self) -> None:
                """can clone a bytearray contained in a dict value"""
                value = bytearray(b"hello")
                cloned = check_property_clone(cloner, "bytearray", value)
                assert len(cloned) == len(value), "The length should be preserved"

            def test_mutation(self) -> None:
                """mutating a bytearray does not alter the clone"""
                value = bytearray(b"abc")
                cloned = cloner(wrap(value))["my_property"]
                value[0] = ord("z")
                assert cloned[0] == ord("a"), "Mutating the original must not change the clone"

        class TestDatetime:
            """datetime"""

            def test_clone(self) -> None:
                """can clone a datetime"""
                value = datetime(2020, 1, 2, 3, 4, 5)
                cloned = check_clone(cloner, "datetime", value, distinct=False)
                assert cloned == value, "The timestamp should be preserved"

            def test_clone_in_property(self) -> None:
                """can clone a datetime contained in a dict value"""
                value = datetime(2020, 1, 2, 3, 4, 5)
                cloned = check_property_clone(cloner, "datetime", value, distinct=False)
                assert cloned == value, "The timestamp should be preserved"

            def test_timezone(self) -> None:
                """preserves the time zone"""
                value = datetime(2020, 1, 2, 3, 4, 5, tzinfo=UTC)
                cloned = cloner(value)
                assert isinstance(cloned, datetime), "The clone should be a datetime"
                assert cloned.tzinfo is not None, "The time zone should be preserved"
                assert cloned.utcoffset() == value.utcoffset(), "The offset should be preserved"

        class TestOrderedDict:
            """OrderedDict"""

            def test_clone(self) -> None:
                """can clone an OrderedDict and keep its order"""
                value = OrderedDict([("b", 1), ("a", 2)])
                cloned = check_clone(cloner, "OrderedDict", value, ["move_to_end"])
                assert list(cloned) == ["b", "a"], "The key order should be preserved"

            def test_clone_in_property(self) -> None:
                """can clone an OrderedDict contained in a dict value"""
                value = OrderedDict([("b", 1), ("a", 2)])
                cloned = check_property_clone(cloner, "OrderedDict", value)
                assert list(cloned.items()) == list(value.items()), "The items should be preserved"

        class TestDefaultdict:
            """defaultdict"""

            def test_clone(self) -> None:
                """can clone a defaultdict"""
                value = defaultdict(make_default_list, {"a": [1]})
                cloned = check_clone(cloner, "defaultdict", value, ["default_factory"])
                assert dict(cloned) == dict(value), "The items should be preserved"

            def test_default_factory(self) -> None:
                """keeps the default factory"""
                value = defaultdict(make_default_list)
                cloned = cloner(value)
                assert cloned["missing"] == [], "Missing keys should use the default factory"
                assert "missing" not in value, "Using the clone must not change the original"

            def test_missing_override(self) -> None:
                """can clone a dict subclass that overrides __missing__"""
                value = DefaultingDict(a=1)
                cloned = check_clone(cloner, "DefaultingDict", value)
                assert cloned["absent"] == "default", "The override should still answer"
                assert cloned["a"] == 1, "The items should be preserved"

        class TestObject:
            """object"""

            def test_clone(self) -> None:
                """can clone an object"""
                value = Box([1, 2])
                cloned = check_clone(cloner, "object", value, ["value"])
                assert cloned.value == [1, 2], "The attribute should be preserved"
                assert cloned.value is not value.value, (
                    "Attributes should not reference the same object in memory"
                )

            def test_clone_in_property(self) -> None:
                """can clone an object contained in a dict value"""
                value = Box("x")
                cloned = check_property_clone(cloner, "object", value, ["value"])
                assert cloned.value == "x", "The attribute should be preserved"

            def test_circular_reference(self) -> None:
                """allows circular references"""
                parent = Node("parent")
                child = Node("child")
                child.parent = parent
                parent.children.append(child)
                cloned = cloner(parent)
                assert cloned is not parent, "The clone should be a new object"
                assert cloned.children[0].parent is cloned, "The cycle should be preserved"

            def test_inheritance_attributes(self) -> None:
                """class inheritance preserves attributes in the inheritance chain"""
                cloned = check_clone(
                    cloner,
                    "Child",
                    Child(),
                    ["child_attr", "parent_attr", "grandparent_attr"],
                )
                assert cloned.grandparent_attr == "grandparent"

            def test_inheritance_isinstance(self) -> None:
                """class inheritance works with isinstance"""
                cloned = cloner(Child())
                assert isinstance(cloned, Child), "The clone should be a Child"
                assert isinstance(cloned, Parent), "The clone should be a Parent"
                assert isinstance(cloned, Grandparent), "The clone should be a Grandparent"

        class TestDataclass:
            """dataclass"""

            def test_frozen(self) -> None:
                """can clone a frozen dataclass"""
                value = Point(1, 2)
                cloned = check_clone(cloner, "Point", value, ["x", "y"], distinct=False)
                assert cloned == value, "The fields should be preserved"

            def test_mutation(self) -> None:
                """mutating a dataclass does not alter the clone"""
                value = Counter(1)
                cloned = cloner(wrap(value))["my_property"]
                value.count = 2
                assert cloned.count == 1, "Mutating the original must not change the clone"

        class TestPattern:
            """re.Pattern"""

            def test_clone(self) -> None:
                """can clone a compiled pattern"""
                value = re.compile(r"a+b", re.IGNORECASE)
                cloned = check_clone(cloner, "Pattern", value, ["match"], distinct=False)
                assert cloned.pattern == value.pattern, "The pattern should be preserved"
                assert cloned.flags == value.flags, "The flags should be preserved"

            def test_clone_in_property(self) -> None:
                """can clone a compiled pattern contained in a dict value"""
                value = re.compile(r"\d+")
                cloned = check_property_clone(cloner, "Pattern", value, distinct=False)
                assert cloned.match("42"), "The clone should still match"

        class TestTypedArrays:
            """typed arrays"""

    for typecode in TYPECODES:
        suite = _typed_array_suite(typecode, cloner)
        setattr(Library.TestTypedArrays, suite.__name__, suite)

    Library.__doc__ = label
    return Library
