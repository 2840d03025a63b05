"""Conversion between Python values and JSON-compatible data.

Values are turned into plain JSON data (None, bool, int, float, str, list,
dict) and back again, guided by a target type such as ``list[int]``,
``dict[int, str]`` or a dataclass. Types with custom needs get a ``Serde``
subclass. A stateless serde is registered by defining it. A stateful one
carries state and is handed to ``serialize``/``deserialize`` as an extra
argument.
"""

from __future__ import annotations

import dataclasses
import inspect
import json
import types
import typing
from collections.abc import Mapping, Set
from enum import Enum
from typing import Any, ClassVar

from clice.enums import MaskEnum, ReflEnum, StringEnum
from clice.reflection import (
    RangeKind,
    is_reflectable,
    member_names,
    member_types,
    member_values,
    range_kind,
)

__all__ = ["Serde", "is_stateful", "serialize", "deserialize"]

_STATELESS: dict[Any, type["Serde"]] = {}
_STATEFUL: dict[Any, type["Serde"]] = {}
_INSTANCES: dict[type["Serde"], "Serde"] = {}


class Serde:
    """Custom conversion for the type named by ``target``.

    A subclass that sets ``target`` is registered for that type. A
    subclass with ``stateful = True`` is not used on its own: an instance
    must be passed to ``serialize``/``deserialize``. That instance is then
    used for every value of the target type found while walking the data.
    """

    target: ClassVar[Any] = None
    stateful: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "target" not in cls.__dict__ or cls.target is None:
            return
        if cls.stateful:
            _STATEFUL[cls.target] = cls
            _STATELESS.pop(cls.target, None)
        else:
            _STATELESS[cls.target] = cls
            _STATEFUL.pop(cls.target, None)

    def serialize(self, value: Any) -> Any:
        """Turn ``value`` into JSON data."""
        raise TypeError(f"{type(self).__name__} does not serialize values")

    def deserialize(self, value: Any) -> Any:
        """Turn JSON data back into a value of the target type."""
        raise TypeError(f"{type(self).__name__} does not deserialize values")


def _stateless(cls: type[Serde]) -> Serde:
    instance = _INSTANCES.get(cls)
    if instance is None:
        instance = _INSTANCES[cls] = cls()
    return instance


def _is_union(tp: Any) -> bool:
    origin = typing.get_origin(tp)
    return origin is typing.Union or origin is types.UnionType


def _is_record_type(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    if dataclasses.is_dataclass(tp):
        return True
    return issubclass(tp, tuple) and tp is not tuple and is_reflectable(tp)


def _is_fixed_tuple(tp: Any) -> bool:
    args = typing.get_args(tp)
    return typing.get_origin(tp) is tuple and bool(args) and args[-1] is not Ellipsis


def _collection(tp: Any) -> tuple[str, Any, tuple[Any, ...]] | None:
    """Classify a container type as map, set or sequence with its factory."""
    origin = typing.get_origin(tp) or tp
    args = typing.get_args(tp)
    if not isinstance(origin, type) or issubclass(origin, (str, bytes, bytearray)):
        return None
    if _is_record_type(origin):
        return None
    abstract = inspect.isabstract(origin)
    if issubclass(origin, Mapping):
        return "map", dict if abstract else origin, args
    if issubclass(origin, Set):
        return "set", set if abstract else origin, args
    if issubclass(origin, tuple):
        if args and args[-1] is not Ellipsis:
            return None
        return "seq", tuple, args[:1]
    if range_kind(origin) is RangeKind.SEQUENCE:
        return "seq", list if abstract else origin, args
    return None


def _is_stateful(target: Any, seen: frozenset[Any]) -> bool:
    if target in seen:
        return False
    seen = seen | {target}
    if target in _STATEFUL:
        return True
    if target in _STATELESS:
        return False
    args = typing.get_args(target)
    if args:
        return any(_is_stateful(arg, seen) for arg in args if arg is not Ellipsis)
    if _is_record_type(target):
        return any(_is_stateful(member, seen) for member in member_types(target))
    return False


def is_stateful(target: Any) -> bool:
    """True if converting ``target`` needs a stateful serde somewhere inside."""
    return _is_stateful(target, frozenset())


def _key_text(key: Any, args: tuple[Serde, ...]) -> str:
    if isinstance(key, str):
        return key
    return json.dumps(serialize(key, *args), separators=(",", ":"), ensure_ascii=False)


def serialize(value: Any, *args: Serde) -> Any:
    """Turn ``value`` into JSON data, using any stateful serdes given."""
    cls = type(value)
    for serde in args:
        if serde.target is cls:
            return serde.serialize(value)
    for serde in args:
        if isinstance(serde.target, type) and isinstance(value, serde.target):
            return serde.serialize(value)
    for base in cls.__mro__:
        if base in _STATEFUL:
            raise TypeError(f"serializing {cls.__name__} requires a {_STATEFUL[base].__name__}")
        if base in _STATELESS:
            return _stateless(_STATELESS[base]).serialize(value)

    if value is None:
        return None
    if isinstance(value, (ReflEnum, MaskEnum, StringEnum)):
        return value.value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, str):
        return value
    if is_reflectable(value) and not isinstance(value, type):
        return {
            name: serialize(member, *args)
            for name, member in zip(member_names(value), member_values(value))
        }
    kind = range_kind(value)
    if kind is RangeKind.MAP:
        result: dict[str, Any] = {}
        for key, item in value.items():
            result.setdefault(_key_text(key, args), serialize(item, *args))
        return result
    if kind in (RangeKind.SET, RangeKind.SEQUENCE) and not isinstance(value, type):
        return [serialize(element, *args) for element in value]
    raise TypeError(f"cannot serialize {cls.__name__}")


def _expect(value: Any, kinds: type | tuple[type, ...], what: str) -> None:
    if not isinstance(value, kinds) or (isinstance(value, bool) and bool not in _as_tuple(kinds)):
        raise TypeError(f"expected {what}, got {type(value).__name__}")


def _as_tuple(kinds: type | tuple[type, ...]) -> tuple[type, ...]:
    return kinds if isinstance(kinds, tuple) else (kinds,)


def _integer(value: Any) -> int:
    _expect(value, (int, float), "a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise TypeError(f"expected an integer, got {value!r}")
        return int(value)
    return value


def _zero(tp: Any) -> Any:
    """The value a missing member takes, like value-initialisation."""
    if tp is Any or tp is object or tp is None or tp is type(None):
        return None
    if _is_union(tp):
        if type(None) in typing.get_args(tp):
            return None
        raise TypeError(f"no default value for {tp!r}")
    if _is_fixed_tuple(tp):
        return tuple(_zero(arg) for arg in typing.get_args(tp))
    if isinstance(tp, type):
        if issubclass(tp, (ReflEnum, MaskEnum)):
            return tp()
        if issubclass(tp, Enum):
            try:
                return tp(0)
            except ValueError as exc:
                raise TypeError(f"no default value for {tp.__name__}") from exc
        if issubclass(tp, (bool, int, float, str)):
            return tp()
        if _is_record_type(tp):
            return _deserialize_record(tp, {}, ())
    shape = _collection(tp)
    if shape is not None:
        return shape[1]()
    raise TypeError(f"no default value for {tp!r}")


def _deserialize_record(target: Any, value: Any, args: tuple[Serde, ...]) -> Any:
    if dataclasses.is_dataclass(target):
        fields = [f for f in dataclasses.fields(target) if f.init]
        if not dataclasses.fields(target):
            return target()
        _expect(value, dict, "an object")
        hints = dict(zip(member_names(target), member_types(target)))
        kwargs = {}
        for field in fields:
            if field.name in value:
                kwargs[field.name] = deserialize(hints[field.name], value[field.name], *args)
            elif (
                field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING
            ):
                kwargs[field.name] = _zero(hints[field.name])
        return target(**kwargs)

    if _is_fixed_tuple(target):
        names = tuple(str(index) for index in range(len(typing.get_args(target))))
        hints_list = typing.get_args(target)
        defaults: dict[str, Any] = {}
        build = tuple
    else:
        names = member_names(target)
        hints_list = member_types(target)
        defaults = dict(getattr(target, "_field_defaults", {}))
        build = None
    if not names:
        return target() if build is None else ()
    _expect(value, dict, "an object")
    items = []
    for name, hint in zip(names, hints_list):
        if name in value:
            items.append(deserialize(hint, value[name], *args))
        elif name in defaults:
            items.append(defaults[name])
        else:
            items.append(_zero(hint))
    return tuple(items) if build is not None else target(*items)


def _deserialize_collection(
    shape: tuple[str, Any, tuple[Any, ...]], value: Any, args: tuple[Serde, ...]
) -> Any:
    kind, factory, params = shape
    if kind == "map":
        _expect(value, dict, "an object")
        key_type = params[0] if params else Any
        item_type = params[1] if len(params) > 1 else Any
        result: dict[Any, Any] = {}
        for name, item in value.items():
            if key_type in (Any, str, object):
                key = name
            else:
                try:
                    parsed = json.loads(name)
                except json.JSONDecodeError:
                    continue
                key = deserialize(key_type, parsed, *args)
            if key not in result:
                result[key] = deserialize(item_type, item, *args)
        return factory(result) if factory is not dict else result
    _expect(value, list, "an array")
    element_type = params[0] if params else Any
    return factory(deserialize(element_type, element, *args) for element in value)


def deserialize(target: Any, value: Any, *args: Serde) -> Any:
    """Build a value of type ``target`` from JSON data."""
    for serde in args:
        if serde.target == target:
            return serde.deserialize(value)
    if target in _STATEFUL:
        raise TypeError(f"deserializing {target!r} requires a {_STATEFUL[target].__name__}")
    if target in _STATELESS:
        return _stateless(_STATELESS[target]).deserialize(value)

    if target is Any or target is object:
        return value
    if target is None or target is type(None):
        if value is not None:
            raise TypeError(f"expected null, got {type(value).__name__}")
        return None
    if _is_union(target):
        members = [arg for arg in typing.get_args(target) if arg is not type(None)]
        if value is None and len(members) < len(typing.get_args(target)):
            return None
        if len(members) == 1:
            return deserialize(members[0], value, *args)
        raise TypeError(f"cannot deserialize into {target!r}")
    if _is_fixed_tuple(target):
        return _deserialize_record(target, value, args)

    if isinstance(target, type):
        if issubclass(target, (ReflEnum, MaskEnum)):
            return target(_integer(value))
        if issubclass(target, StringEnum):
            return target(value)
        if issubclass(target, Enum):
            try:
                return target(value)
            except ValueError as exc:
                raise TypeError(f"{value!r} is not a {target.__name__}") from exc
        if issubclass(target, bool):
            _expect(value, bool, "a boolean")
            return target(value)
        if issubclass(target, int):
            return target(_integer(value))
        if issubclass(target, float):
            _expect(value, (int, float), "a number")
            return target(value)
        if issubclass(target, str):
            _expect(value, str, "a string")
            return target(value)
        if _is_record_type(target):
            return _deserialize_record(target, value, args)

    shape = _collection(target)
    if shape is not None:
        return _deserialize_collection(shape, value, args)
    raise TypeError(f"cannot deserialize into {target!r}")