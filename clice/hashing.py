"""Structural hashing that also covers lists and records with list members."""

from __future__ import annotations

from typing import Any

from clice.reflection import is_reflectable, member_values

__all__ = ["hash_value"]


def hash_value(value: Any) -> int:
    """Hash a value by its structure.

    Lists combine the hashes of their elements, records combine the hashes of
    their members, and everything else uses the built-in hash.
    """
    if isinstance(value, list):
        return hash(tuple(hash_value(element) for element in value))
    if not isinstance(value, type) and is_reflectable(value):
        return hash(tuple(hash_value(member) for member in member_values(value)))
    return hash(value)