from collections import namedtuple
from dataclasses import dataclass

import pytest

from clice.compare import equal, less, less_equal


@dataclass(eq=False)
class Point:
    x: int
    y: int


@dataclass(eq=False)
class Line:
    begin: Point
    end: Point


def test_equal_points():
    p1 = Point(1, 2)
    p2 = Point(1, 2)
    p3 = Point(2, 3)
    assert equal(p1, p2) is True
    assert equal(p1, p3) is False


def test_equal_lines():
    l1 = Line(Point(1, 2), Point(3, 4))
    l2 = Line(Point(1, 2), Point(3, 4))
    l3 = Line(Point(1, 2), Point(4, 5))
    assert equal(l1, l2) is True
    assert equal(l1, l3) is False


def test_less_points():
    p1 = Point(1, 2)
    p2 = Point(2, 3)
    assert less(p1, p2) is True
    assert less(p2, p1) is False


def test_less_lines():
    l1 = Line(Point(1, 2), Point(3, 4))
    l2 = Line(Point(1, 2), Point(4, 5))
    assert less(l1, l2) is True
    assert less(l2, l1) is False


def test_less_equal_records_are_not_less():
    assert less(Point(1, 2), Point(1, 2)) is False
    assert less_equal(Point(1, 2), Point(1, 2)) is True
    assert less_equal(Point(2, 2), Point(1, 2)) is False


def test_equal_lists_of_records():
    assert equal([Point(1, 2), Point(3, 4)], [Point(1, 2), Point(3, 4)]) is True
    assert equal([Point(1, 2)], [Point(1, 2), Point(3, 4)]) is False
    assert equal([Point(1, 2)], [Point(1, 3)]) is False


def test_less_lists_shorter_first():
    assert less([9, 9], [1, 1, 1]) is True
    assert less([1, 1, 1], [9, 9]) is False


def test_less_lists_same_length():
    assert less([1, 2], [1, 3]) is True
    assert less([1, 3], [1, 3]) is False


def test_named_and_plain_tuples():
    Pair = namedtuple("Pair", ["a", "b"])
    assert equal(Pair(1, [2]), Pair(1, [2])) is True
    assert less(Pair(1, 2), Pair(1, 3)) is True
    assert equal((1, 2), (1, 2, 3)) is False


def test_plain_values_fall_back_to_operators():
    assert equal("abc", "abc") is True
    assert less(1, 2) is True
    assert less("b", "a") is False


def test_incomparable_values_raise():
    with pytest.raises(TypeError):
        less(object(), object())