"""\
Stores
======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides the store abstraction captured errors are written
to, and a bounded in-memory store.

When an error is logged, every entry of its metadata is copied into the
custom data of the resulting record, including the reserved level key.
The level of a record therefore reads the same before and after going
through a store.
"""

from __future__ import annotations

import threading
import traceback
import typing as t
from abc import ABC
from abc import abstractmethod
from collections import deque
from datetime import UTC
from datetime import datetime
from uuid import uuid4

from faultline.core.base import Observable
from faultline.core.config import Config
from faultline.core.data import LEVEL_KEY
from faultline.core.data import get_log_data
from faultline.core.exceptions import StoreError
from faultline.core.levels import Level
from faultline.utils.logging import get_logger
from faultline.utils.opentelemetry import record_error

if t.TYPE_CHECKING:
    from collections.abc import Iterator
    from collections.abc import Mapping

__all__: tuple[str, ...] = (
    "ErrorRecord",
    "ErrorStore",
    "MemoryErrorStore",
)

logger = get_logger(__name__)


class ErrorRecord(Observable):
    """A captured error, as kept by a store.

    :param application: Name of the application the error comes from.
    :param type: Fully qualified name of the error type.
    :param message: Human-readable description of the error.
    :param detail: Formatted traceback of the error.
    :param custom_data: Custom data of the error, level included.
    :param created: When the error was captured, defaults to now.
    """

    __slots__: tuple[str, ...] = (
        "_id",
        "_application",
        "_type",
        "_message",
        "_detail",
        "_custom_data",
        "_created",
    )

    def __init__(
        self,
        application: str,
        type: str,
        message: str,
        detail: str,
        custom_data: Mapping[str, str] | None = None,
        *,
        created: datetime | None = None,
    ) -> None:
        """Initialise a record."""
        self._id = uuid4()
        self._application = application
        self._type = type
        self._message = message
        self._detail = detail
        self._custom_data = dict(custom_data or {})
        self._created = created or datetime.now(UTC)

    def __inspect_attrs__(self) -> Iterator[tuple[str, t.Any]]:
        """Show the identity, type, message and level of the record."""
        yield "id", str(self._id)[:8]
        yield "type", self._type
        yield "message", self._message
        if self.level is not None:
            yield "level", self.level.name

    @classmethod
    def from_error(
        cls,
        exc: BaseException,
        application: str,
        custom_data: Mapping[str, t.Any] | None = None,
    ) -> ErrorRecord:
        """Build a record from an error and its metadata.

        :param exc: The captured error.
        :param application: Name of the application.
        :param custom_data: Extra entries; they win over the metadata
            attached to the error.
        :return: A new record.
        """
        data = get_log_data(exc)
        if custom_data:
            for key, value in custom_data.items():
                data[key] = str(value)
        kind = type(exc)
        return cls(
            application=application,
            type=f"{kind.__module__}.{kind.__qualname__}",
            message=str(exc),
            detail="".join(traceback.format_exception(exc)),
            custom_data=data,
        )

    @property
    def id(self) -> str:
        """Get the unique identifier of the record."""
        return str(self._id)

    @property
    def application(self) -> str:
        """Get the application name."""
        return self._application

    @property
    def type(self) -> str:
        """Get the error type."""
        return self._type

    @property
    def message(self) -> str:
        """Get the error message."""
        return self._message

    @property
    def detail(self) -> str:
        """Get the formatted traceback."""
        return self._detail

    @property
    def created(self) -> datetime:
        """Get the capture time, in UTC."""
        return self._created

    @property
    def custom_data(self) -> dict[str, str]:
        """Get a copy of the custom data."""
        return self._custom_data.copy()

    @property
    def level(self) -> Level | None:
        """Get the level recorded with the error, if any."""
        return Level.parse(self._custom_data.get(LEVEL_KEY))


class ErrorStore(Observable, ABC):
    """Abstract store for captured errors.

    Writing is synchronous so that errors can be logged from anywhere,
    including interpreter hooks. Reading is asynchronous because real
    stores usually sit behind a database or a network connection.

    :param application: Name of the application recorded with every
        error, defaults to `Config().capture.application`.
    """

    __slots__: tuple[str, ...] = ("_application",)

    def __init__(self, application: str | None = None) -> None:
        """Initialise the store."""
        self._application = application or Config().capture.application

    def __inspect_attrs__(self) -> Iterator[tuple[str, t.Any]]:
        """Show the store name and application."""
        yield "name", self.name
        yield "application", self._application

    @property
    def name(self) -> str:
        """Get the name of the store."""
        return type(self).__name__

    @property
    def application(self) -> str:
        """Get the application name."""
        return self._application

    def log(
        self,
        exc: BaseException,
        custom_data: Mapping[str, t.Any] | None = None,
    ) -> ErrorRecord:
        """Capture an error into the store.

        The error is also reported through the logger at its level (or
        `ERROR` when it carries none) and recorded on the active
        OpenTelemetry span.

        :param exc: The error to capture.
        :param custom_data: Extra entries stored with the error.
        :return: The stored record.
        :raises StoreError: If the record could not be persisted.
        """
        record = ErrorRecord.from_error(exc, self._application, custom_data)
        level = record.level
        logger.log(
            (level or Level.ERROR).logging_level,
            f"Captured {record.type}: {record.message}",
            extra={"store": self.name, "record": record.id},
        )
        record_error(exc, level)
        try:
            self._save(record)
        except StoreError:
            raise
        except Exception as error:
            raise StoreError(
                f"could not save {record.type} in {self.name}: {error}"
            ) from error
        return record

    @abstractmethod
    def _save(self, record: ErrorRecord) -> None:
        """Persist a record."""
        raise NotImplementedError

    @abstractmethod
    async def get_count(self) -> int:
        """Return the number of stored records."""
        raise NotImplementedError

    @abstractmethod
    async def get_all(self) -> list[ErrorRecord]:
        """Return the stored records, newest first."""
        raise NotImplementedError


class MemoryErrorStore(ErrorStore):
    """Bounded, thread-safe in-memory store.

    Once full, the oldest records are dropped to make room for new
    ones. This store is meant for tests, development and short-lived
    processes; nothing survives a restart.

    :param size: Maximum number of records kept, defaults to
        `Config().capture.store_size`.
    :param application: Name of the application, defaults to
        `Config().capture.application`.
    """

    __slots__: tuple[str, ...] = ("_records", "_lock")

    def __init__(
        self,
        size: int | None = None,
        application: str | None = None,
    ) -> None:
        """Initialise an empty store."""
        super().__init__(application)
        if size is None:
            size = Config().capture.store_size
        if size < 1:
            raise StoreError(f"store size must be positive, got {size}")
        self._records: deque[ErrorRecord] = deque(maxlen=size)
        self._lock = threading.Lock()

    def __inspect_attrs__(self) -> Iterator[tuple[str, t.Any]]:
        """Show the store name, application and capacity."""
        yield from super().__inspect_attrs__()
        yield "size", self._records.maxlen

    def _save(self, record: ErrorRecord) -> None:
        """Append a record, evicting the oldest one when full."""
        with self._lock:
            self._records.append(record)

    # NOTE(xames3): Reads take the same lock as `_save`. It is held for a
    # length check or a copy of the buffer only, never across an
    # `await`, so the event loop is not blocked in practice.
    async def get_count(self) -> int:
        """Return the number of stored records."""
        with self._lock:
            return len(self._records)

    async def get_all(self) -> list[ErrorRecord]:
        """Return the stored records, newest first."""
        with self._lock:
            return list(reversed(self._records))
