"""Enumerations that carry a compact integer value and know their names."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

__all__ = ["enum_name", "ReflEnum", "MaskEnum", "StringEnum"]

_MISSING = object()


def enum_name(value: Any) -> str:
    """Name of an enumerator, or of a reflected enum value."""
    if isinstance(value, (ReflEnum, MaskEnum)):
        return value.name()
    if isinstance(value, Enum):
        return value.name
    raise TypeError(f"{type(value).__name__} is not an enumeration value")


def _build_table(cls: type) -> None:
    """Read the nested Kind enum of ``cls`` and record its name table."""
    kind = getattr(cls, "Kind", None)
    if not (isinstance(kind, type) and issubclass(kind, Enum)):
        raise TypeError(f"{cls.__name__} must define a nested Kind enumeration")

    names_by_value: dict[int, str] = {}
    for member in kind:
        number = int(member.value)
        names_by_value.setdefault(number, member.name)
        if not hasattr(cls, member.name):
            setattr(cls, member.name, member)

    begin = int(getattr(cls, "first_enum", 0))
    last = getattr(cls, "last_enum", None)
    if last is None:
        end = begin
        while end in names_by_value:
            end += 1
    else:
        end = int(last)

    names = []
    for number in range(begin, end):
        if number not in names_by_value:
            raise TypeError(f"{cls.__name__}.Kind has no enumerator with value {number}")
        names.append(names_by_value[number])

    cls._begin = begin
    cls._end = end
    cls._names = tuple(names)


def _check_raw(cls: type, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{cls.__name__} cannot be built from {type(value).__name__}")
    if not 0 <= value < (1 << cls.underlying_bits):
        raise ValueError(
            f"{value} does not fit in the {cls.underlying_bits}-bit value of {cls.__name__}"
        )
    return value


class ReflEnum:
    """An enum value stored as an integer, backed by a nested ``Kind`` enum.

    Subclasses define ``Kind``; the enumerators are also reachable on the
    subclass itself. ``invalid_enum`` gives the value of a default-built
    instance, ``first_enum`` and ``last_enum`` bound the name table, and
    ``underlying_bits`` the width of the stored value.
    """

    __slots__ = ("_value",)

    Kind: ClassVar[type[Enum]]
    underlying_bits: ClassVar[int] = 8
    _begin: ClassVar[int]
    _end: ClassVar[int]
    _names: ClassVar[tuple[str, ...]]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        _build_table(cls)
        for member in cls.Kind:
            if not 0 <= int(member.value) < (1 << cls.underlying_bits):
                raise TypeError(
                    f"{cls.__name__}: underlying value is too small to hold all enum values"
                )

    def __init__(self, value: Any = _MISSING) -> None:
        cls = type(self)
        if value is _MISSING:
            self._value = cls._invalid()
        elif isinstance(value, cls.Kind):
            self._value = int(value.value)
        else:
            self._value = _check_raw(cls, value)

    @classmethod
    def _invalid(cls) -> int:
        invalid = getattr(cls, "invalid_enum", None)
        if invalid is None:
            raise TypeError(f"{cls.__name__} does not define invalid_enum")
        return int(invalid.value) if isinstance(invalid, Enum) else int(invalid)

    @property
    def value(self) -> int:
        """The stored integer value."""
        return self._value

    def kind(self) -> Enum:
        """The Kind enumerator for the stored value."""
        return self.Kind(self._value)

    def name(self) -> str:
        """The enumerator name of the stored value."""
        cls = type(self)
        if not cls._begin <= self._value < cls._end:
            raise ValueError(f"{self._value} has no name in {cls.__name__}")
        return cls._names[self._value - cls._begin]

    def is_one_of(self, *args: Enum) -> bool:
        """True if the stored value equals any of the given enumerators."""
        for kind in args:
            if not isinstance(kind, self.Kind):
                raise TypeError(f"expected {self.Kind.__name__}, got {type(kind).__name__}")
        return any(self._value == int(kind.value) for kind in args)

    @classmethod
    def all(cls) -> tuple[str, ...]:
        """Names of every enumerator in the name table, in value order."""
        return cls._names

    def __bool__(self) -> bool:
        return self._value != self._invalid()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value < other._value

    def __hash__(self) -> int:
        return hash((type(self), self._value))

    def __repr__(self) -> str:
        cls = type(self)
        if cls._begin <= self._value < cls._end:
            return f"{cls.__name__}.{cls._names[self._value - cls._begin]}"
        return f"{cls.__name__}({self._value})"


class MaskEnum:
    """A set of flags stored as a bit mask, one bit per ``Kind`` enumerator."""

    __slots__ = ("_value",)

    Kind: ClassVar[type[Enum]]
    underlying_bits: ClassVar[int] = 8
    _begin: ClassVar[int]
    _end: ClassVar[int]
    _names: ClassVar[tuple[str, ...]]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        _build_table(cls)
        if cls.underlying_bits < cls._end:
            raise TypeError(
                f"{cls.__name__}: underlying value is too small to hold all enum values"
            )

    def __init__(self, *args: Any) -> None:
        cls = type(self)
        if not args:
            self._value = 0
        elif all(isinstance(arg, cls.Kind) for arg in args):
            mask = 0
            for kind in args:
                mask |= 1 << int(kind.value)
            self._value = mask
        elif len(args) == 1:
            self._value = _check_raw(cls, args[0])
        else:
            raise TypeError(f"{cls.__name__} takes enumerators or a single raw value")

    def _bit(self, kind: Any) -> int:
        if not isinstance(kind, self.Kind):
            raise TypeError(f"expected {self.Kind.__name__}, got {type(kind).__name__}")
        return 1 << int(kind.value)

    @property
    def value(self) -> int:
        """The raw bit mask."""
        return self._value

    def name(self) -> str:
        """Names of the set flags, joined with " | "."""
        cls = type(self)
        parts = []
        for bit in range(cls.underlying_bits):
            if not self._value & (1 << bit):
                continue
            if not cls._begin <= bit < cls._end:
                raise ValueError(f"bit {bit} has no name in {cls.__name__}")
            parts.append(cls._names[bit - cls._begin])
        return " | ".join(parts)

    def is_one_of(self, *args: Enum) -> bool:
        """True if any of the given flags is set."""
        return any(self._value & self._bit(kind) for kind in args)

    @classmethod
    def all(cls) -> tuple[str, ...]:
        """Names of every flag, in bit order."""
        return cls._names

    def __bool__(self) -> bool:
        return self._value != 0

    def __or__(self, other: Any) -> MaskEnum:
        return type(self)(self._value | self._bit(other))

    def __and__(self, other: Any) -> MaskEnum:
        if type(other) is type(self):
            return type(self)(self._value & other._value)
        return type(self)(self._value & self._bit(other))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash((type(self), self._value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value:#x})"


class StringEnum:
    """A value restricted to the members of the subclass's ``ALL`` collection."""

    __slots__ = ("_value",)

    ALL: ClassVar[tuple[Any, ...]]

    def __init__(self, value: Any) -> None:
        cls = type(self)
        choices = getattr(cls, "ALL", None)
        if choices is None:
            raise TypeError(f"{cls.__name__} must define all possible enum values in ALL")
        if value not in choices:
            raise ValueError(f"{value!r} is not a valid {cls.__name__}")
        self._value = value

    @property
    def value(self) -> Any:
        """The stored value."""
        return self._value

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash((type(self), self._value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"