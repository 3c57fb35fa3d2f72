"""\
Levels
======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module defines the closed, ordered set of severity levels that can
be attached to an error.
"""

from __future__ import annotations

import enum
import logging
import typing as t

__all__: tuple[str, ...] = ("Level", "TRACE")

TRACE: t.Final[int] = 5

logging.addLevelName(TRACE, "TRACE")


class Level(enum.IntEnum):
    """Severity levels for captured errors.

    Levels are ordered from the least to the most severe, so they can be
    compared directly, e.g. ``Level.WARNING < Level.ERROR``. A level is
    stored on an error as its member name and read back with
    :meth:`parse`.
    """

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    CRITICAL = 5

    @classmethod
    def parse(cls, value: t.Any) -> Level | None:
        """Parse a stored value back into a level.

        Member names are matched case-insensitively. Numeric strings,
        unknown names and non-string values are not levels.

        :param value: The value to parse.
        :return: The matching level or `None` if the value is not one.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return cls.__members__.get(value.strip().upper())

    @property
    def logging_level(self) -> int:
        """Return the matching standard library logging level."""
        if self is Level.TRACE:
            return TRACE
        return logging.getLevelNamesMapping()[self.name]
