"""Path joining, real paths and the location of the compiler resource directory."""

from __future__ import annotations

import os
from pathlib import Path

__all__ = ["join", "real_path", "resource_dir", "init_resource_dir"]

_SEPARATORS = os.sep + (os.altsep or "")
_resource_dir = ""


def join(*args: str | os.PathLike[str]) -> str:
    """Append path components with the native separator.

    Empty components are skipped, and a later component that starts with a
    separator is appended rather than replacing what came before.
    """
    result = ""
    for part in map(os.fspath, args):
        if not part:
            continue
        if not result:
            result = part
            continue
        part = part.lstrip(_SEPARATORS)
        if not part:
            continue
        if result.endswith(tuple(_SEPARATORS)):
            result += part
        else:
            result += os.sep + part
    return result


def real_path(file: str | os.PathLike[str]) -> str:
    """The absolute path of an existing file with all links resolved.

    Raises FileNotFoundError if the file does not exist.
    """
    return str(Path(os.fspath(file)).resolve(strict=True))


def resource_dir() -> str:
    """The resource directory found by ``init_resource_dir``, or ""."""
    return _resource_dir


def init_resource_dir(execute: str | os.PathLike[str]) -> str:
    """Find ``../lib/clang/20`` next to the executable's directory and remember it.

    Returns the resolved directory. Raises FileNotFoundError, leaving the
    remembered directory unchanged, if it does not exist.
    """
    global _resource_dir
    candidate = join(os.path.dirname(os.fspath(execute)), "..", "lib", "clang", "20")
    found = real_path(candidate)
    _resource_dir = found
    return found