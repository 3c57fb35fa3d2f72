"""\
Classification
==============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides the public API for attaching a severity level to
an error and reading it back. Every function here is total: tagging
always succeeds once the error exists and reading never raises, even if
something unexpected was stored under the level key.

Tagging is fluent, so an error can be classified where it is raised::

    raise warning(TimeoutError("upstream is slow"))

A level set this way is never replaced by the process-wide default
level, see `faultline.core.policy`.
"""

from __future__ import annotations

import typing as t
from contextlib import contextmanager

from faultline.core.data import LEVEL_KEY
from faultline.core.data import _metadata
from faultline.core.data import _peek
from faultline.core.levels import Level

if t.TYPE_CHECKING:
    from collections.abc import Iterator

__all__: tuple[str, ...] = (
    "critical",
    "debug",
    "error",
    "info",
    "tag_as_level",
    "tagging",
    "trace",
    "try_get_level",
    "warning",
)


def tag_as_level[E: BaseException](
    exc: E,
    level: Level,
    override: bool = True,
) -> E:
    """Record a severity level on an error.

    :param exc: The error to classify.
    :param level: The severity level to record.
    :param override: Whether to replace a level that is already set,
        defaults to `True`. When `False`, a valid existing level is
        kept and the call does nothing.
    :return: The same error, for chaining.
    """
    data = _metadata(exc)
    name = level.name
    if override:
        data[LEVEL_KEY] = name
        return exc
    current = data.setdefault(LEVEL_KEY, name)
    # NOTE(xames3): A malformed value reads as no level at all, so a
    # non-overriding write is allowed to replace it.
    if current != name and Level.parse(current) is None:
        data[LEVEL_KEY] = name
    return exc


def try_get_level(exc: BaseException) -> Level | None:
    """Return the severity level recorded on an error, if any.

    :param exc: The error to inspect.
    :return: The recorded level or `None` if the error was never
        classified or holds a value that is not a level.
    """
    data = _peek(exc)
    if not data:
        return None
    return Level.parse(data.get(LEVEL_KEY))


def trace[E: BaseException](exc: E, override: bool = True) -> E:
    """Classify an error as `TRACE`."""
    return tag_as_level(exc, Level.TRACE, override)


def debug[E: BaseException](exc: E, override: bool = True) -> E:
    """Classify an error as `DEBUG`."""
    return tag_as_level(exc, Level.DEBUG, override)


def info[E: BaseException](exc: E, override: bool = True) -> E:
    """Classify an error as `INFO`."""
    return tag_as_level(exc, Level.INFO, override)


def warning[E: BaseException](exc: E, override: bool = True) -> E:
    """Classify an error as `WARNING`."""
    return tag_as_level(exc, Level.WARNING, override)


def error[E: BaseException](exc: E, override: bool = True) -> E:
    """Classify an error as `ERROR`."""
    return tag_as_level(exc, Level.ERROR, override)


def critical[E: BaseException](exc: E, override: bool = True) -> E:
    """Classify an error as `CRITICAL`."""
    return tag_as_level(exc, Level.CRITICAL, override)


@contextmanager
def tagging(level: Level, override: bool = True) -> Iterator[None]:
    """Classify any error escaping the block, then re-raise it.

    This is the scoped form of catching an error, retagging it and
    raising it again. The original traceback is preserved.

    .. code-block:: python

        with tagging(Level.INFO):
            cache.refresh()

    :param level: The severity level to record.
    :param override: Whether to replace a level that is already set,
        defaults to `True`.
    """
    try:
        yield
    except BaseException as exc:
        tag_as_level(exc, level, override)
        raise
