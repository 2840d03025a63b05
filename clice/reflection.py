"""Structural reflection over records: dataclasses, named tuples and plain tuples."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping, Set
from enum import Enum
from typing import Any, Callable

__all__ = [
    "RangeKind",
    "range_kind",
    "is_reflectable",
    "member_names",
    "member_count",
    "member_values",
    "member_types",
    "foreach",
    "foreach_pair",
]


class RangeKind(Enum):
    """How a container is treated when walked generically."""

    MAP = 0
    SET = 1
    SEQUENCE = 2
    INVALID = 3


def _as_type(obj: Any) -> type:
    return obj if isinstance(obj, type) else type(obj)


def range_kind(obj: Any) -> RangeKind:
    """Classify a container (instance or type) as map, set or sequence.

    Strings iterate to strings of the same type, so they are not treated as
    ranges at all; neither is anything that cannot be iterated.
    """
    cls = _as_type(obj)
    if issubclass(cls, str):
        return RangeKind.INVALID
    if not issubclass(cls, Iterable):
        return RangeKind.INVALID
    if issubclass(cls, Mapping):
        return RangeKind.MAP
    if issubclass(cls, Set):
        return RangeKind.SET
    return RangeKind.SEQUENCE


def _is_namedtuple_type(cls: type) -> bool:
    return issubclass(cls, tuple) and isinstance(getattr(cls, "_fields", None), tuple)


def is_reflectable(obj: Any) -> bool:
    """Return True if members of ``obj`` can be enumerated by name."""
    if dataclasses.is_dataclass(obj):
        return True
    cls = _as_type(obj)
    if _is_namedtuple_type(cls):
        return True
    return isinstance(obj, tuple)


def _require(obj: Any) -> None:
    if not is_reflectable(obj):
        raise TypeError(f"{_as_type(obj).__name__} is not a reflectable struct")


def member_names(obj: Any) -> tuple[str, ...]:
    """Names of the members of ``obj``; positional tuples use "0", "1", ..."""
    _require(obj)
    if dataclasses.is_dataclass(obj):
        return tuple(field.name for field in dataclasses.fields(obj))
    cls = _as_type(obj)
    if _is_namedtuple_type(cls):
        return tuple(cls._fields)
    return tuple(str(index) for index in range(len(obj)))


def member_count(obj: Any) -> int:
    """Number of members of ``obj``."""
    return len(member_names(obj))


def member_values(obj: Any) -> tuple[Any, ...]:
    """Values of the members of an instance, in declaration order."""
    if isinstance(obj, type):
        raise TypeError("member values require an instance, not a type")
    _require(obj)
    if dataclasses.is_dataclass(obj):
        return tuple(getattr(obj, field.name) for field in dataclasses.fields(obj))
    return tuple(obj)


def _annotations(cls: type) -> dict[str, Any]:
    hints: dict[str, Any] = {}
    for base in reversed(cls.__mro__):
        hints.update(base.__dict__.get("__annotations__", {}))
    return hints


def member_types(cls: Any) -> tuple[Any, ...]:
    """Declared types of the members; a plain tuple reports its element types."""
    _require(cls)
    if dataclasses.is_dataclass(cls):
        hints = _annotations(_as_type(cls))
        return tuple(hints.get(f.name, f.type) for f in dataclasses.fields(cls))
    owner = _as_type(cls)
    if _is_namedtuple_type(owner):
        hints = _annotations(owner)
        return tuple(hints.get(name, object) for name in owner._fields)
    return tuple(type(value) for value in cls)


def _keep_going(result: Any) -> bool:
    return True if result is None else bool(result)


def foreach(obj: Any, callback: Callable[[str, Any], Any]) -> bool:
    """Call ``callback(name, value)`` for each member.

    A callback returning a falsy value other than None stops the walk.
    Returns True if every member was visited.
    """
    for name, value in zip(member_names(obj), member_values(obj)):
        if not _keep_going(callback(name, value)):
            return False
    return True


def foreach_pair(lhs: Any, rhs: Any, callback: Callable[[Any, Any], Any]) -> bool:
    """Call ``callback(lhs_value, rhs_value)`` for matching members of two records.

    A callback returning a falsy value other than None stops the walk.
    Returns True if every pair was visited.
    """
    left = member_values(lhs)
    right = member_values(rhs)
    if len(left) != len(right):
        raise ValueError(f"member count mismatch: {len(left)} != {len(right)}")
    for lv, rv in zip(left, right):
        if not _keep_going(callback(lv, rv)):
            return False
    return True