"""\
Configurations
==============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, August 02 2025
Last updated on: Sunday, October 18 2026

This module provides the configurations used throughout this framework:
logging, telemetry and the capture settings that decide the default
level given to unclassified errors and the size of the in-memory store.
"""

from __future__ import annotations

import threading
import typing as t
from weakref import WeakKeyDictionary as WKDictionary

from faultline.core.exceptions import ConfigValidationError
from faultline.core.levels import Level


if t.TYPE_CHECKING:
    from collections.abc import Iterable

__all__: tuple[str, ...] = (
    "CaptureConfig",
    "Config",
    "ConsoleLoggerConfig",
    "FileLoggerConfig",
    "LoggerConfig",
    "TTYLoggerConfig",
    "TelemetryConfig",
    "config_property",
)

_ALLOWED_LOG_LEVELS: tuple[str, ...] = (
    "TRACE",
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
)
_ALLOWED_ERROR_LEVELS: tuple[str, ...] = tuple(Level.__members__)
# NOTE(xames3): The default log format uses the special `qualName`
# attribute to include the fully qualified name of the logging function,
# which provides more context in the log messages without changing the
# logger's name.
_DEFAULT_LOG_FMT: t.Final[str] = (
    "%(asctime)s %(levelname)s %(qualName)s:%(lineno)d %(extra)s: %(message)s"
)
_DEFAULT_LOG_DATEFMT: t.Final[str] = "%Y-%m-%dT%H:%M:%SZ"


class config_property[T]:  # noqa: N801
    """Descriptor for configuration properties.

    This descriptor class creates and provides functionalities like
    Python's built-in `property` object decorator, but with additional
    features for configuration management: default values, immutable
    (frozen) properties and validation against allowed values, a custom
    check or a numeric range.
    """

    __slots__: tuple[str, ...] = (
        "allowed",
        "between",
        "check",
        "default",
        "description",
        "frozen",
        "locks",
        "property",
        "validate",
    )

    _object_locks: WKDictionary[object, threading.RLock] = WKDictionary()
    _global_lock: threading.RLock = threading.RLock()

    def __init__(
        self,
        default: T,
        *,
        frozen: bool = False,
        description: str | None = None,
        allowed: Iterable[T] | None = None,
        check: t.Callable[[T], bool] | None = None,
        between: tuple[int | float, ...] | None = None,
    ) -> None:
        """Initialise configuration property."""
        self.default = default
        self.frozen = frozen
        self.description = description
        self.allowed = allowed
        self.check = check
        self.between = between
        self.property: str = ""
        self.validate: bool = any([self.between, self.check, self.allowed])
        self.locks: dict[int, threading.RLock] = {}

    def __set_name__(self, instance: type, value: str) -> None:
        """Configure and set the property value on the owner class.

        The default value is validated once, when the owning class is
        created, so a broken default fails at import time.

        :param instance: The class where the property is being set.
        :param value: The name of the property to be set.
        """
        self.property = f"_{value}"
        if self.default is not None and self.validate:
            try:
                self.__validate__(self.default)
            except ConfigValidationError as error:
                raise ConfigValidationError(
                    f"got invalid value for {value!r}: {error}"
                ) from error
        setattr(instance, self.property, self.default)

    @t.overload
    def __get__(self, instance: None, owner: type) -> config_property[T]: ...

    @t.overload
    def __get__(self, instance: object, owner: type) -> T: ...

    def __get__(
        self,
        instance: object | None,
        owner: type,
    ) -> config_property[T] | T:
        """Get and return the property value from the instance.

        :param instance: The instance where the property is accessed.
        :param owner: The owner class of the property (not used).
        :return: The value of the property from the instance.
        """
        if instance is None:
            return self
        return getattr(instance, self.property, self.default)

    def __set__(self, instance: object, value: T) -> None:
        """Set the property with validation & immutability checks.

        :param instance: The instance where the property is being set.
        :param value: The value to be set for the property.
        :raises ConfigValidationError: If the property is frozen or the
            value does not pass validation.
        """
        if self.frozen:
            raise ConfigValidationError(
                f"cannot modify frozen property: {self.property[1:]!r}",
            )
        if self.validate:
            with self._acquire_lock(instance):
                self.__validate__(value)
                setattr(instance, self.property, value)
            return
        setattr(instance, self.property, value)

    def __validate__(self, value: t.Any) -> None:
        """Validate the property value based on constraints.

        :param value: The value to be validated.
        :raises ConfigValidationError: If the value does not meet the
            validation criteria.
        """
        if self.allowed is not None and value not in self.allowed:
            raise ConfigValidationError(
                f"{value!r} is not one of the allowed values "
                f"({', '.join(str(item) for item in self.allowed)})"
            )
        if self.check is not None:
            try:
                if not self.check(value):
                    raise ConfigValidationError("property validation failed")
            except ConfigValidationError:
                raise
            except Exception as error:
                raise ConfigValidationError(
                    f"property validation failed for {value!r} with "
                    f"message: {error}"
                ) from error
        if self.between is not None and len(self.between) == 2:
            minimum, maximum = self.between
            if not all(
                isinstance(num, int | float) for num in (minimum, maximum)
            ):
                raise ConfigValidationError("must be a tuple of two numbers")
            if not (minimum <= value <= maximum):
                raise ConfigValidationError(
                    f"{value} is not between {minimum} and {maximum}"
                )

    def _acquire_lock(self, instance: object) -> threading.RLock:
        """Return the lock guarding writes on an instance.

        Instances supporting weak references share a class-wide weak
        table, so their locks go away with them. Other instances fall
        back to a table keyed by identity on this descriptor.

        :param instance: The instance where the property is being set.
        :return: A reentrant lock dedicated to the instance.
        """
        with self._global_lock:
            try:
                lock = self._object_locks.get(instance)
                if lock is None:
                    lock = self._object_locks[instance] = threading.RLock()
            except TypeError:
                lock = self.locks.setdefault(id(instance), threading.RLock())
            return lock


class FileLoggerConfig:
    """File logger configuration.

    This class provides configuration options for logging to a file with
    options for log rotation and backup retention.
    """

    enable: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    level: config_property[str] = config_property(
        "INFO",
        allowed=_ALLOWED_LOG_LEVELS,
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    datefmt: config_property[str] = config_property(_DEFAULT_LOG_DATEFMT)
    path: config_property[str] = config_property(
        "logs",
        check=lambda x: bool(str(x).strip()),
    )
    output: config_property[str] = config_property("faultline.log")
    encoding: config_property[str] = config_property("utf-8", frozen=True)
    max_bytes: config_property[int] = config_property(10485760)
    backups: config_property[int] = config_property(5, check=lambda x: x >= 0)


class ConsoleLoggerConfig:
    """Console logger configuration.

    This class provides configuration options for logging to the console
    or the tty, usually during development and debugging.
    """

    enable: config_property[bool] = config_property(
        True,
        allowed=[True, False],
    )
    level: config_property[str] = config_property(
        "DEBUG",
        allowed=_ALLOWED_LOG_LEVELS,
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    datefmt: config_property[str] = config_property(_DEFAULT_LOG_DATEFMT)
    colour: config_property[bool] = config_property(
        True,
        allowed=[True, False],
    )


TTYLoggerConfig = ConsoleLoggerConfig


class LoggerConfig:
    """Logger configuration.

    This class combines the console and file logger configurations with
    the settings shared by both of them.
    """

    level: config_property[str] = config_property(
        "DEBUG",
        allowed=_ALLOWED_LOG_LEVELS,
    )
    as_json: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    file: FileLoggerConfig = FileLoggerConfig()
    tty: TTYLoggerConfig = TTYLoggerConfig()


class CaptureConfig:
    """Error capture configuration.

    This class holds the settings of the capture layer: the level given
    to errors nobody classified once the default level hook is enabled,
    the application name recorded with every captured error and the
    number of records kept by the in-memory store.
    """

    default_level: config_property[str] = config_property(
        "CRITICAL",
        allowed=_ALLOWED_ERROR_LEVELS,
    )
    application: config_property[str] = config_property(
        "faultline",
        check=lambda x: bool(x.strip()),
    )
    store_size: config_property[int] = config_property(
        200,
        between=(1, 100000),
    )


class TelemetryConfig:
    """Telemetry configuration."""

    enabled: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    name: config_property[str | None] = config_property(None)


class Config:
    """Configuration.

    This class serves as the main configuration object for the framework.
    It provides a centralised place to manage the logging, telemetry and
    capture settings.
    """

    name: config_property[str] = config_property("faultline", frozen=True)
    version: config_property[str] = config_property("18.10.2026", frozen=True)
    debug: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    logger: LoggerConfig = LoggerConfig()
    capture: CaptureConfig = CaptureConfig()
    telemetry: TelemetryConfig = TelemetryConfig()
