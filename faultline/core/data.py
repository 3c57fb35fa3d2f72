"""\
Error data
==========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides the metadata side-channel attached to error
instances. Every error gets its own string-keyed map which is created
lazily on the first write and lives exactly as long as the error does.
The map carries the severity tag under a reserved, namespaced key and
any custom data attached by the application before the error is logged.

The map is stored on the instance itself rather than in a global table
because exceptions do not support weak references.
"""

from __future__ import annotations

import typing as t

from faultline.core.exceptions import MetadataError

__all__: tuple[str, ...] = (
    "LEVEL_KEY",
    "add_log_data",
    "get_log_data",
)

LEVEL_KEY: t.Final[str] = "faultline.level"
_DATA_ATTR: t.Final[str] = "__error_data__"


def _metadata(exc: BaseException) -> dict[str, str]:
    """Return the metadata map of an error, creating it if needed.

    `dict.setdefault` is atomic, so two threads writing to the same
    error for the first time always end up sharing one map.
    """
    return vars(exc).setdefault(_DATA_ATTR, {})


def _peek(exc: BaseException) -> dict[str, str] | None:
    """Return the metadata map of an error without creating it."""
    return vars(exc).get(_DATA_ATTR)


def add_log_data[E: BaseException](exc: E, key: str, value: t.Any) -> E:
    """Attach a custom key/value pair to an error.

    Custom data travels with the error and is forwarded to the store
    when the error gets logged. Values are stored as strings.

    .. code-block:: python

        try:
            checkout(cart)
        except PaymentError as exc:
            add_log_data(exc, "User Id", user.id)
            store.log(exc)

    :param exc: The error to attach the data to.
    :param key: Name of the entry.
    :param value: Value of the entry, converted with `str`.
    :return: The same error, for chaining.
    :raises MetadataError: If the key is the reserved level key.
    """
    if key == LEVEL_KEY:
        raise MetadataError(
            f"{LEVEL_KEY!r} is reserved, use the classification API instead"
        )
    _metadata(exc)[key] = str(value)
    return exc


def get_log_data(exc: BaseException) -> dict[str, str]:
    """Return a snapshot of all data attached to an error."""
    data = _peek(exc)
    return dict(data) if data else {}
