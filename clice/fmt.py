"""Debug rendering of values as JSON-like text."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from clice.enums import MaskEnum, ReflEnum, StringEnum
from clice.reflection import RangeKind, is_reflectable, member_names, member_values, range_kind

__all__ = ["dump", "pretty_dump"]


def _format_float(value: float) -> str:
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


def _key(key: Any) -> str:
    text = dump(key)
    return text if isinstance(key, str) else f'"{text}"'


def dump(obj: Any) -> str:
    """Render ``obj`` as text for debugging.

    Strings are quoted without escaping, records become objects keyed by
    member name, sequences become arrays, and maps and sets are enclosed in
    braces. This is slow and meant for debugging only.
    """
    if obj is None:
        return "null"
    if isinstance(obj, Enum):
        return obj.name
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, int):
        return str(obj)
    if isinstance(obj, float):
        return _format_float(obj)
    if isinstance(obj, str):
        return f'"{obj}"'
    if isinstance(obj, (ReflEnum, MaskEnum)):
        return f'"{obj.name()}"'
    if isinstance(obj, StringEnum):
        return f'"{obj.value}"'
    if isinstance(obj, type):
        raise TypeError(f"cannot dump the type {obj.__name__}")
    if is_reflectable(obj):
        body = ", ".join(
            f'"{name}": {dump(value)}'
            for name, value in zip(member_names(obj), member_values(obj))
        )
        return "{" + body + "}"
    kind = range_kind(obj)
    if kind is RangeKind.MAP:
        return "{" + ", ".join(f"{_key(k)}: {dump(v)}" for k, v in obj.items()) + "}"
    if kind is RangeKind.SET:
        return "{" + ", ".join(dump(element) for element in obj) + "}"
    if kind is RangeKind.SEQUENCE:
        return "[" + ", ".join(dump(element) for element in obj) + "]"
    raise TypeError(f"cannot dump {type(obj).__name__}")


def pretty_dump(obj: Any, indent: int = 2) -> str:
    """Render ``obj`` as indented JSON with sorted keys.

    Raises ValueError if the text from ``dump`` is not valid JSON.
    """
    if indent < 0:
        raise ValueError("indent must not be negative")
    text = dump(obj)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"cannot render {text!r} as JSON") from exc
    if indent == 0:
        return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(data, indent=indent, sort_keys=True, ensure_ascii=False)