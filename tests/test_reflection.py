from dataclasses import dataclass
from typing import NamedTuple

import pytest

from clice.reflection import (
    RangeKind,
    foreach,
    foreach_pair,
    is_reflectable,
    member_count,
    member_names,
    member_types,
    member_values,
    range_kind,
)


@dataclass
class X:
    x: int
    y: int


@dataclass
class A:
    a: int
    b: int


@dataclass
class Y:
    x: A


@dataclass
class H:
    x: A
    y: Y


@dataclass
class M:
    x: A
    y: Y
    h: H


@dataclass
class Derived(X):
    z: int


class Pair(NamedTuple):
    first: int
    second: str


def test_member_types_of_simple_struct():
    assert member_types(X) == (int, int)


def test_field_names():
    assert member_names(A) == ("a", "b")
    assert member_names(Y) == ("x",)
    assert member_names(H) == ("x", "y")
    assert member_names(M) == ("x", "y", "h")


def test_member_count():
    assert member_count(M) == 3
    assert member_count(X(1, 2)) == 2
    assert member_count((1, 2, 3)) == 3


def test_foreach_visits_every_member():
    seen = {}

    def visit(name, value):
        seen[name] = value

    assert foreach(X(1, 2), visit) is True
    assert seen == {"x": 1, "y": 2}


def test_foreach_pair_copies_values():
    x1 = X(1, 2)
    x2 = X(3, 4)
    copied = []

    def assign(lhs, rhs):
        copied.append(rhs)
        return rhs

    assert foreach_pair(x1, x2, assign) is True
    x1 = X(*copied)
    assert (x1.x, x1.y) == (3, 4)


def test_inheritance():
    assert member_types(Derived) == (int, int, int)
    assert member_names(Derived) == ("x", "y", "z")
    seen = {}
    assert foreach(Derived(1, 2, 3), lambda n, v: seen.__setitem__(n, v)) is True
    assert seen == {"x": 1, "y": 2, "z": 3}

    copied = []
    assert foreach_pair(Derived(1, 2, 3), Derived(4, 5, 6), lambda l, r: copied.append(r) or True)
    assert copied == [4, 5, 6]


def test_tuple_like():
    assert member_names((1, 2)) == ("0", "1")
    seen = {}
    assert foreach((1, 2), lambda n, v: seen.__setitem__(n, v)) is True
    assert seen == {"0": 1, "1": 2}

    pairs = []
    assert foreach_pair((1, 2), (3, 4), lambda l, r: pairs.append((l, r)) or True)
    assert pairs == [(1, 3), (2, 4)]


def test_namedtuple():
    assert member_names(Pair) == ("first", "second")
    assert member_types(Pair) == (int, str)
    assert member_values(Pair(7, "q")) == (7, "q")


def test_member_types_of_plain_tuple():
    assert member_types((1, "a", 2.0)) == (int, str, float)


def test_foreach_stops_on_false():
    visited = []

    def stop(name, value):
        visited.append(name)
        return False

    assert foreach(X(1, 2), stop) is False
    assert visited == ["x"]


def test_foreach_pair_stops_on_false():
    visited = []

    def stop(lhs, rhs):
        visited.append(lhs)
        return lhs != 1

    assert foreach_pair(X(1, 2), X(3, 4), stop) is False
    assert visited == [1]


def test_foreach_pair_count_mismatch():
    with pytest.raises(ValueError):
        foreach_pair(X(1, 2), Derived(1, 2, 3), lambda l, r: True)


def test_not_reflectable():
    assert is_reflectable(X) is True
    assert is_reflectable(X(1, 2)) is True
    assert is_reflectable((1,)) is True
    assert is_reflectable(5) is False
    assert is_reflectable([1, 2]) is False
    with pytest.raises(TypeError):
        member_names(5)
    with pytest.raises(TypeError):
        member_types({"a": 1})


def test_member_values_requires_instance():
    with pytest.raises(TypeError):
        member_values(X)


def test_member_values_nested():
    m = M(A(1, 2), Y(A(3, 4)), H(A(5, 6), Y(A(7, 8))))
    values = member_values(m)
    assert values[0] == A(1, 2)
    assert member_values(values[1]) == (A(3, 4),)


@pytest.mark.parametrize(
    "obj, kind",
    [
        ({1: 2}, RangeKind.MAP),
        (dict, RangeKind.MAP),
        ({1, 2}, RangeKind.SET),
        (frozenset(), RangeKind.SET),
        ([1, 2], RangeKind.SEQUENCE),
        ((1, 2), RangeKind.SEQUENCE),
        (list, RangeKind.SEQUENCE),
        ("abc", RangeKind.INVALID),
        (42, RangeKind.INVALID),
    ],
)
def test_range_kind(obj, kind):
    assert range_kind(obj) is kind