"""\
Base Tools
==========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Tuesday, July 22 2025
Last updated on: Sunday, October 18 2026

Base components.

This module provides the foundational mixin shared by the policy, hook,
channel and store objects of this framework, giving them a consistent
and bounded string representation for debugging.
"""

from __future__ import annotations

import typing as t
from collections.abc import Iterator
from collections.abc import Sequence

__all__: Sequence[str] = ["Observable"]

_AttributeStream = Iterator[tuple[str, t.Any]]

# NOTE(xames3): These limits are used to prevent excessive output and
# are not intended to be changed by users.
_SEQUENCE_LIMIT: t.Final[int] = 5
_DICTIONARY_LIMIT: t.Final[int] = 3
_STRING_LIMIT: t.Final[int] = 60


class Observable:
    """Provide observable behaviour for derived classes.

    This class serves as a mixin for the framework objects that need to
    expose their state in a consistent and controlled manner. Derived
    classes override `__inspect_attrs__` to choose what is shown and
    inherit a concise `__repr__` built from it.

    .. note::

        This class uses `__slots__` and only includes the `__weakref__`
        slot, which makes it safe to use as a mixin without introducing
        significant overhead.
    """

    __slots__: tuple[str, ...] = ("__weakref__",)

    def __inspect_attrs__(self) -> _AttributeStream:
        """Inspect and yield public attributes of the instance.

        :yield: An iterator yielding tuples of attribute names and their
            corresponding values.

        .. note::

            Only attributes that do not start with underscore and are
            not None are included in the introspection output.
        """
        for attr in getattr(self, "__dict__", {}):
            value = getattr(self, attr)
            if not attr.startswith("_") and value is not None:
                yield attr, value

    def _format(self, value: t.Any) -> str:
        """Format value for string representation.

        Circular references are replaced with type indicators, long
        strings are truncated, and large sequences and dictionaries show
        their type and length rather than their full contents.

        :param value: The value to format.
        :return: A formatted string representation of the value.
        """
        if value is self:
            return f"<circular-{type(self).__name__}>"
        elif isinstance(value, str) and len(value) > _STRING_LIMIT:
            return repr(f"{value[:_STRING_LIMIT - 3]}...")
        elif (
            isinstance(value, (list, tuple, set, frozenset))
            and len(value) > _SEQUENCE_LIMIT
        ):
            return f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict) and len(value) > _DICTIONARY_LIMIT:
            return f"dict({len(value)} items)"
        return repr(value)

    def __repr__(self) -> str:
        """Return a string representation of the instance."""
        attrs = [
            f"{name}={self._format(value)}"
            for name, value in self.__inspect_attrs__()
        ]
        return f"{type(self).__name__}({', '.join(attrs)})"
