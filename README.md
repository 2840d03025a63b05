# clice

Small building blocks for treating plain data objects (dataclasses, named
tuples and tuples) as structured records: reflection, structural comparison
and hashing, JSON conversion, packing into a flat byte buffer, reflected
enumerations, logging and a few path helpers.

## Modules

- `clice.reflection`: inspect records with `is_reflectable`, `member_names`
  (plain tuples use `"0"`, `"1"`, ...), `member_count`, `member_values` and
  `member_types`. `foreach(obj, callback)` calls `callback(name, value)` per
  member and `foreach_pair(lhs, rhs, callback)` calls it on matching members of
  two records; a callback returning a falsy value other than `None` stops the
  walk. `range_kind` classifies a container as `RangeKind.MAP`, `SET`,
  `SEQUENCE` or `INVALID` (strings and non-iterables).
- `clice.compare`: `equal`, `less` and `less_equal`. Lists compare by length
  first, records of the same type member by member (lexicographically for
  `less`); other values use `==` and `<`.
- `clice.hashing`: `hash_value`, a structural hash that also covers lists and
  records holding lists.
- `clice.enums`:
  - `ReflEnum`: a value backed by a nested `Kind` enum. A subclass may set
    `invalid_enum` (the value of a default-built instance), `first_enum`,
    `last_enum` and `underlying_bits`. Instances offer `value`, `kind()`,
    `name()`, `is_one_of(...)`, `all()`, truthiness (not invalid), equality
    and ordering.
  - `MaskEnum`: a bit mask with one bit per `Kind` enumerator. Build it from
    enumerators or a raw value; `name()` reads like `"A | B | C"`; it supports
    `|`, `&`, `is_one_of(...)` and `all()`.
  - `StringEnum`: a value restricted to the subclass's `ALL` collection.
  - `enum_name(value)`: the name of an enumerator or reflected enum value.
- `clice.jsonserde`: `serialize(value, *serdes)` turns values into JSON data
  (`None`, `bool`, `int`, `float`, `str`, `list`, `dict`), and
  `deserialize(target, value, *serdes)` builds a value of a target type such as
  `list[int]`, `dict[int, str]`, `set[int]` or a dataclass. Map keys that are
  not strings are written as JSON text. Missing record members take their
  default or a zero value. Subclass `Serde` with a `target` to customise a
  type; with `stateful = True` an instance must be passed in and is used for
  every value of that type. `is_stateful(target)` tells whether a type needs
  one.
- `clice.fmt`: `dump(obj)` renders an object as JSON-like text for debugging;
  `pretty_dump(obj, indent=2)` re-renders it as indented JSON with sorted keys,
  raising `ValueError` if the dump is not valid JSON.
- `clice.binary`: `binarify(obj)` packs a record into one zero-filled buffer,
  with a fixed-size root and one 8-byte-aligned section per element type, and
  returns `(Proxy, size)`. A `Proxy` reads back with `value()`, `get(index or
  name)`, `as_string()`, `as_array()`, indexing and `size()`.
  `is_directly_binarizable(tp)` is true for types holding no strings or lists.
- `clice.logger`: `log(level, fmt, *args)` and `info`, `warn`, `debug`,
  `trace`, `fatal` write `[UTC time] [coloured tag] message` lines to standard
  error, formatting with `str.format`. `fatal` then raises `FatalError`.
  `check(expr, message, *args)` raises `AssertionError` when `expr` is false
  (skipped under `python -O`).
- `clice.filesystem`: `join(*parts)` appends path components with the native
  separator; `real_path(file)` resolves an existing file or raises
  `FileNotFoundError`; `init_resource_dir(executable)` finds and remembers
  `../lib/clang/20` relative to the executable's directory, and
  `resource_dir()` returns it (or `""`).

## Example

```python
from dataclasses import dataclass

from clice.binary import binarify
from clice.compare import equal, less
from clice.jsonserde import deserialize, serialize


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Points:
    points: list[Point]


assert equal(Point(1, 2), Point(1, 2))
assert less(Point(1, 2), Point(2, 3))
assert serialize(Point(1, 2)) == {"x": 1, "y": 2}
assert deserialize(Point, {"x": 1, "y": 2}) == Point(1, 2)

proxy, size = binarify(Points([Point(1, 2), Point(3, 4)]))
assert proxy.get("points")[1].value() == Point(3, 4)
```

## What this package does not do

It is a library of helpers only. It has no command-line program, no language
server and no network or editor integration; it does not compile, index or
analyse source code.

## Tests

Install with the `test` extra and run `pytest`.