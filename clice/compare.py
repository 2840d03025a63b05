"""Structural equality and ordering for records, lists and plain values."""

from __future__ import annotations

from typing import Any

from clice.reflection import foreach_pair, is_reflectable, member_count

__all__ = ["equal", "less", "less_equal"]


def _both_lists(lhs: Any, rhs: Any) -> bool:
    return isinstance(lhs, list) and isinstance(rhs, list)


def _both_records(lhs: Any, rhs: Any) -> bool:
    return (
        type(lhs) is type(rhs)
        and not isinstance(lhs, type)
        and is_reflectable(lhs)
    )


def equal(lhs: Any, rhs: Any) -> bool:
    """Compare two values for equality.

    Lists compare by length and then element by element; records of the same
    type compare member by member; everything else uses ``==``.
    """
    if _both_lists(lhs, rhs):
        if len(lhs) != len(rhs):
            return False
        return all(equal(left, right) for left, right in zip(lhs, rhs))
    if _both_records(lhs, rhs):
        if member_count(lhs) != member_count(rhs):
            return False
        return foreach_pair(lhs, rhs, equal)
    return bool(lhs == rhs)


def less(lhs: Any, rhs: Any) -> bool:
    """Return True if ``lhs`` orders before ``rhs``.

    A shorter list orders first; lists of equal length are less when any
    element is less. Records of the same type compare lexicographically by
    member. Everything else uses ``<``.
    """
    if _both_lists(lhs, rhs):
        if len(lhs) != len(rhs):
            return len(lhs) < len(rhs)
        return any(less(left, right) for left, right in zip(lhs, rhs))
    if _both_records(lhs, rhs):
        outcome = False

        def step(left: Any, right: Any) -> bool:
            nonlocal outcome
            if less(left, right):
                outcome = True
                return False
            if less(right, left):
                outcome = False
                return False
            return True

        foreach_pair(lhs, rhs, step)
        return outcome
    return bool(lhs < rhs)


def less_equal(lhs: Any, rhs: Any) -> bool:
    """Return True if ``lhs`` equals or orders before ``rhs``."""
    return equal(lhs, rhs) or less(lhs, rhs)