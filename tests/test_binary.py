import dataclasses
from enum import Enum

import pytest

from clice.binary import Proxy, binarify, is_directly_binarizable


@dataclasses.dataclass
class Point:
    x: int
    y: int


@dataclasses.dataclass
class Person:
    x: str
    age: int


@dataclasses.dataclass
class Foo:
    scores: list[int]


@dataclasses.dataclass
class Bar:
    foo: Foo


@dataclasses.dataclass
class Points:
    points: list[Point]


@dataclasses.dataclass
class Names:
    names: list[str]


class Shade(Enum):
    LIGHT = 0
    DARK = 1


@dataclasses.dataclass
class Tile:
    shade: Shade
    lit: bool


def test_directly_binarizable():
    assert is_directly_binarizable(int) is True
    assert is_directly_binarizable(Point) is True
    assert is_directly_binarizable(Person) is False
    assert is_directly_binarizable(Foo) is False
    assert is_directly_binarizable(Bar) is False
    assert is_directly_binarizable(list[int]) is False


def test_simple():
    proxy, size = binarify(Point(1, 2))
    assert proxy.value() == Point(1, 2)
    assert proxy.get("x").value() == 1
    assert proxy.get("y").value() == 2
    assert proxy.get(1).value() == 2
    assert size == len(proxy.buffer)


def test_nested():
    proxy, _ = binarify(Points([Point(1, 2), Point(3, 4)]))
    points = proxy.get("points")
    assert points[0].value() == Point(1, 2)
    assert points[1].value() == Point(3, 4)
    assert points[-1].value() == Point(3, 4)
    assert points.size() == 2
    assert points.as_array() == [Point(1, 2), Point(3, 4)]


def test_string_member():
    proxy, size = binarify(Person("alice", 30))
    name = proxy.get("x")
    assert name.as_string() == "alice"
    assert name.size() == len("alice")
    assert proxy.get("age").value() == 30
    offset, length = name.value()
    assert offset % 8 == 0
    assert proxy.buffer[offset + length] == 0
    assert offset + length + 1 <= size


def test_nested_list_in_record():
    proxy, _ = binarify(Bar(Foo([1, 2, 3])))
    scores = proxy.get("foo").get("scores")
    assert scores.as_array() == [1, 2, 3]
    assert len(scores) == 3


def test_list_of_strings():
    proxy, _ = binarify(Names(["a", "bc", ""]))
    names = proxy.get("names")
    assert [names[i].as_string() for i in range(names.size())] == ["a", "bc", ""]


def test_enum_and_bool_members_round_trip():
    proxy, _ = binarify(Tile(Shade.DARK, True))
    assert proxy.value() == Tile(Shade.DARK, True)


def test_packing_is_deterministic():
    first, _ = binarify(Points([Point(5, 6)]))
    second, _ = binarify(Points([Point(5, 6)]))
    assert first.buffer == second.buffer


def test_empty_list():
    proxy, _ = binarify(Foo([]))
    assert proxy.get("scores").as_array() == []


def test_errors():
    proxy, _ = binarify(Point(1, 2))
    with pytest.raises(KeyError):
        proxy.get("z")
    with pytest.raises(TypeError):
        proxy.get("x").as_string()
    with pytest.raises(TypeError):
        proxy.size()
    points = binarify(Points([Point(1, 2)]))[0].get("points")
    with pytest.raises(IndexError):
        points[1]
    with pytest.raises(TypeError):
        binarify([1, 2])
    with pytest.raises(TypeError):
        binarify(Person(3, 4))


def test_proxy_over_existing_buffer():
    proxy, _ = binarify(Point(7, 8))
    view = Proxy(proxy.buffer, Point, 0)
    assert view.value() == Point(7, 8)