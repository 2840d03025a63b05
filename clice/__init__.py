"""Reflection, comparison, hashing, JSON conversion, binary packing and logging helpers for plain data objects."""

__version__ = "0.0.1"

__all__ = [
    "binary",
    "compare",
    "enums",
    "filesystem",
    "fmt",
    "hashing",
    "jsonserde",
    "logger",
    "reflection",
]