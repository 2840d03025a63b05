"""Packing of records into one flat byte buffer, with typed views over it.

A record (a dataclass, a named tuple or a fixed-size ``tuple[...]``) is laid
out as a fixed-size root followed by one section per element type. Strings
and lists are stored as an ``(offset, size)`` pair of little-endian 32-bit
integers that point into their section. Every section starts on an 8-byte
boundary and the whole buffer is zero-filled, so equal inputs give equal bytes.

Scalar widths: ``bool`` takes 1 byte, ``int`` and plain ``Enum`` 4 bytes
(signed), ``float`` 8 bytes, and reflected enums the width of their
``underlying_bits``.
"""

from __future__ import annotations

import dataclasses
import struct
import typing
from enum import Enum
from functools import lru_cache
from typing import Any

from clice.enums import MaskEnum, ReflEnum
from clice.reflection import is_reflectable, member_names, member_types

__all__ = ["is_directly_binarizable", "binarify", "Proxy"]

_SPAN = struct.Struct("<II")
_UNSIGNED = {1: "<B", 2: "<H", 4: "<I", 8: "<Q"}
_CHAR = object()
_SECTION_ALIGN = 8


@dataclasses.dataclass(frozen=True)
class _Shape:
    kind: str
    size: int
    align: int
    fmt: str = ""
    element: Any = None
    fields: tuple[tuple[str, Any, int], ...] = ()


@dataclasses.dataclass
class _Section:
    count: int = 0
    total: int = 0
    offset: int = 0


def _round_up(value: int, align: int) -> int:
    return value + (-value) % align


def _is_fixed_tuple(tp: Any) -> bool:
    args = typing.get_args(tp)
    return typing.get_origin(tp) is tuple and bool(args) and args[-1] is not Ellipsis


def _is_record_type(tp: Any) -> bool:
    if _is_fixed_tuple(tp):
        return True
    if not isinstance(tp, type):
        return False
    if dataclasses.is_dataclass(tp):
        return True
    return issubclass(tp, tuple) and tp is not tuple and is_reflectable(tp)


def _record_fields(tp: Any) -> list[tuple[str, Any]]:
    if _is_fixed_tuple(tp):
        return [(str(index), arg) for index, arg in enumerate(typing.get_args(tp))]
    return list(zip(member_names(tp), member_types(tp)))


@lru_cache(maxsize=None)
def _shape(tp: Any) -> _Shape:
    if tp is bool:
        return _Shape("scalar", 1, 1, "<?")
    if isinstance(tp, type) and issubclass(tp, (ReflEnum, MaskEnum)):
        width = tp.underlying_bits // 8
        if width not in _UNSIGNED or tp.underlying_bits % 8:
            raise TypeError(f"unsupported enum width for {tp.__name__}")
        return _Shape("scalar", width, width, _UNSIGNED[width])
    if isinstance(tp, type) and issubclass(tp, Enum):
        return _Shape("scalar", 4, 4, "<i")
    if tp is int:
        return _Shape("scalar", 4, 4, "<i")
    if tp is float:
        return _Shape("scalar", 8, 8, "<d")
    if tp is str:
        return _Shape("string", _SPAN.size, 4)
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)
    if origin is list and len(args) == 1:
        return _Shape("array", _SPAN.size, 4, element=args[0])
    if origin is tuple and len(args) == 2 and args[-1] is Ellipsis:
        return _Shape("array", _SPAN.size, 4, element=args[0])
    if _is_record_type(tp):
        offset = 0
        align = 1
        fields = []
        for name, field_type in _record_fields(tp):
            field = _shape(field_type)
            offset = _round_up(offset, field.align)
            fields.append((name, field_type, offset))
            offset += field.size
            align = max(align, field.align)
        return _Shape("record", _round_up(offset, align), align, fields=tuple(fields))
    raise TypeError(f"cannot binarize values of type {tp!r}")


def is_directly_binarizable(tp: Any) -> bool:
    """True if values of ``tp`` hold no strings or lists, at any depth."""
    try:
        shape = _shape(tp)
    except TypeError:
        return False
    if shape.kind == "scalar":
        return True
    if shape.kind == "record":
        return all(is_directly_binarizable(field_type) for _, field_type, _ in shape.fields)
    return False


def _section_keys(tp: Any) -> list[Any]:
    shape = _shape(tp)
    if shape.kind == "string":
        return [_CHAR]
    if shape.kind == "array":
        return [shape.element, *_section_keys(shape.element)]
    if shape.kind == "record":
        return [key for _, field_type, _ in shape.fields for key in _section_keys(field_type)]
    return []


def _unique_keep_last(keys: list[Any]) -> list[Any]:
    seen: set[Any] = set()
    kept = []
    for key in reversed(keys):
        if key not in seen:
            seen.add(key)
            kept.append(key)
    kept.reverse()
    return kept


def _element_size(key: Any) -> int:
    return 1 if key is _CHAR else _shape(key).size


def _encode(value: Any) -> bytes:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value.encode("utf-8")


def _members(value: Any, tp: Any) -> list[Any]:
    shape = _shape(tp)
    if isinstance(value, tuple):
        members = list(value)
        if len(members) != len(shape.fields):
            raise ValueError(f"expected {len(shape.fields)} members, got {len(members)}")
        return members
    return [getattr(value, name) for name, _, _ in shape.fields]


def _raw(value: Any, tp: Any) -> Any:
    if isinstance(tp, type) and issubclass(tp, (ReflEnum, MaskEnum)):
        return value.value
    if isinstance(tp, type) and issubclass(tp, Enum):
        return int(value.value)
    if tp is bool:
        return bool(value)
    if tp is float:
        return float(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    return value


def _from_raw(raw: Any, tp: Any) -> Any:
    if isinstance(tp, type) and issubclass(tp, (ReflEnum, MaskEnum, Enum)):
        return tp(raw)
    if tp is bool:
        return bool(raw)
    return raw


def _build(tp: Any, values: list[Any]) -> Any:
    if _is_fixed_tuple(tp):
        return tuple(values)
    if dataclasses.is_dataclass(tp):
        names = [name for name, _, _ in _shape(tp).fields]
        return tp(**dict(zip(names, values)))
    return tp(*values)


def _read(buffer: bytes, tp: Any, offset: int) -> Any:
    shape = _shape(tp)
    if shape.kind == "scalar":
        return _from_raw(struct.unpack_from(shape.fmt, buffer, offset)[0], tp)
    if shape.kind in ("string", "array"):
        return _SPAN.unpack_from(buffer, offset)
    values = [
        _read(buffer, field_type, offset + field_offset)
        for _, field_type, field_offset in shape.fields
    ]
    return _build(tp, values) if is_directly_binarizable(tp) else tuple(values)


class _Packer:
    def __init__(self, tp: Any) -> None:
        self.tp = tp
        self.sections = {key: _Section() for key in _unique_keep_last(_section_keys(tp))}
        self.buffer = bytearray()

    def _count(self, value: Any, tp: Any) -> None:
        shape = _shape(tp)
        if shape.kind == "string":
            self.sections[_CHAR].total += len(_encode(value)) + 1
        elif shape.kind == "array":
            items = list(value)
            self.sections[shape.element].total += len(items)
            for item in items:
                self._count(item, shape.element)
        elif shape.kind == "record":
            for (_, field_type, _), member in zip(shape.fields, _members(value, tp)):
                self._count(member, field_type)

    def _write(self, value: Any, tp: Any, dest: int) -> None:
        shape = _shape(tp)
        if shape.kind == "scalar":
            try:
                struct.pack_into(shape.fmt, self.buffer, dest, _raw(value, tp))
            except struct.error as exc:
                raise ValueError(f"{value!r} does not fit in {tp!r}") from exc
        elif shape.kind == "string":
            data = _encode(value)
            section = self.sections[_CHAR]
            offset = section.offset + section.count
            section.count += len(data) + 1
            self.buffer[offset:offset + len(data)] = data
            _SPAN.pack_into(self.buffer, dest, offset, len(data))
        elif shape.kind == "array":
            items = list(value)
            section = self.sections[shape.element]
            stride = _shape(shape.element).size
            offset = section.offset + section.count * stride
            section.count += len(items)
            for position, item in enumerate(items):
                self._write(item, shape.element, offset + position * stride)
            _SPAN.pack_into(self.buffer, dest, offset, len(items))
        else:
            for (_, field_type, field_offset), member in zip(shape.fields, _members(value, tp)):
                self._write(member, field_type, dest + field_offset)

    def pack(self, value: Any) -> bytearray:
        self._count(value, self.tp)
        size = _shape(self.tp).size
        for key, section in self.sections.items():
            size = _round_up(size, _SECTION_ALIGN)
            section.offset = size
            size += section.total * _element_size(key)
        self.buffer = bytearray(size)
        self._write(value, self.tp, 0)
        return self.buffer


class Proxy:
    """A typed view of one value inside a packed buffer."""

    __slots__ = ("buffer", "tp", "offset")

    def __init__(self, buffer: bytes, tp: Any, offset: int = 0) -> None:
        self.buffer = buffer
        self.tp = tp
        self.offset = offset

    @property
    def _shape(self) -> _Shape:
        return _shape(self.tp)

    def value(self) -> Any:
        """The stored value.

        Scalars and records without strings or lists come back as Python
        values; strings and lists as their ``(offset, size)`` pair; other
        records as a tuple of their members' stored values.
        """
        return _read(self.buffer, self.tp, self.offset)

    def get(self, key: int | str) -> Proxy:
        """View of a record member, chosen by position or by name."""
        shape = self._shape
        if shape.kind != "record":
            raise TypeError(f"{self.tp!r} has no members")
        if isinstance(key, int):
            if not 0 <= key < len(shape.fields):
                raise IndexError(f"member index {key} out of range")
            _, field_type, field_offset = shape.fields[key]
        else:
            match = next((field for field in shape.fields if field[0] == key), None)
            if match is None:
                raise KeyError(key)
            _, field_type, field_offset = match
        return Proxy(self.buffer, field_type, self.offset + field_offset)

    def _span(self, kind: str) -> tuple[int, int]:
        if self._shape.kind != kind:
            raise TypeError(f"{self.tp!r} is not a {kind}")
        return _SPAN.unpack_from(self.buffer, self.offset)

    def as_string(self) -> str:
        """The stored string."""
        offset, size = self._span("string")
        return bytes(self.buffer[offset:offset + size]).decode("utf-8")

    def as_array(self) -> list[Any]:
        """The stored values of every element of a list."""
        return [self[index].value() for index in range(self.size())]

    def __getitem__(self, index: int) -> Proxy:
        offset, size = self._span("array")
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError(f"element index {index} out of range")
        element = self._shape.element
        return Proxy(self.buffer, element, offset + index * _shape(element).size)

    def size(self) -> int:
        """Length of a stored string (in bytes) or list."""
        kind = self._shape.kind
        if kind not in ("string", "array"):
            raise TypeError(f"{self.tp!r} has no size")
        return _SPAN.unpack_from(self.buffer, self.offset)[1]

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"Proxy({self.tp!r} at {self.offset})"


def binarify(obj: Any) -> tuple[Proxy, int]:
    """Pack ``obj`` into a buffer; return a view of it and the buffer size."""
    tp = type(obj)
    if tp in (list, tuple):
        raise TypeError("a bare list or tuple has no element type; wrap it in a record")
    _shape(tp)
    buffer = _Packer(tp).pack(obj)
    return Proxy(bytes(buffer), tp, 0), len(buffer)