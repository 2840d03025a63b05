"""Timestamped, coloured log lines on standard error, and debug checks."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, NoReturn

__all__ = [
    "Level",
    "FatalError",
    "log",
    "info",
    "warn",
    "debug",
    "trace",
    "fatal",
    "check",
]


class Level(Enum):
    """Severity of a log line."""

    INFO = 0
    WARN = 1
    DEBUG = 2
    TRACE = 3
    FATAL = 4


_TAGS = {
    Level.INFO: "\033[32mINFO\033[0m",
    Level.WARN: "\033[33mWARN\033[0m",
    Level.DEBUG: "\033[36mDEBUG\033[0m",
    Level.TRACE: "\033[35mTRACE\033[0m",
    Level.FATAL: "\033[31mFATAL ERROR\033[0m",
}


class FatalError(RuntimeError):
    """Raised after a fatal message has been logged."""


def log(level: Level, fmt: str, *args: Any) -> None:
    """Write one line: UTC time, coloured level tag, formatted message."""
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    sys.stderr.write(f"[{stamp}] [{_TAGS[level]}] {fmt.format(*args)}\n")


def info(fmt: str, *args: Any) -> None:
    """Log at INFO level."""
    log(Level.INFO, fmt, *args)


def warn(fmt: str, *args: Any) -> None:
    """Log at WARN level."""
    log(Level.WARN, fmt, *args)


def debug(fmt: str, *args: Any) -> None:
    """Log at DEBUG level."""
    log(Level.DEBUG, fmt, *args)


def trace(fmt: str, *args: Any) -> None:
    """Log at TRACE level."""
    log(Level.TRACE, fmt, *args)


def fatal(fmt: str, *args: Any) -> NoReturn:
    """Log at FATAL level, then raise FatalError with the message."""
    log(Level.FATAL, fmt, *args)
    raise FatalError(fmt.format(*args))


def check(expr: Any, message: str, *args: Any) -> None:
    """Raise AssertionError with the formatted message if ``expr`` is false.

    Like ``assert``, the check is skipped when Python runs optimised.
    """
    if __debug__ and not expr:
        text = message.format(*args)
        sys.stderr.write(f"ASSERT FAIL: {text}\n")
        raise AssertionError(text)