"""\
Logging
=======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Friday, July 04 2025
Last updated on: Sunday, October 18 2026

This module provides logging utilities and configuration helpers for
the framework. It builds on the standard Python logging library with
formatters for coloured, plain and JSON output that automatically
render any extra fields passed to a log call.

The framework itself only logs at `DEBUG` for hook and channel
transitions, and at the level of the error whenever a store captures
one. Applications decide where these records go by calling `configure`
or by setting up logging on their own.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
import typing as t
from pathlib import Path

from faultline.utils.filesystem import mkdir

if t.TYPE_CHECKING:
    from faultline.core.config import LoggerConfig

__all__: list[str] = [
    "ColouredFormatter",
    "FaultlineFormatter",
    "JSONFormatter",
    "configure",
    "get_logger",
]


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    This formatter outputs log records in JSON format, which is useful
    when logs are collected and processed by log management systems or
    observability platforms.

    :param extras: Whether to include extra fields in output, defaults
        to `True`. If set to `False`, only the standard log fields will
        be included in the output.
    """

    def __init__(self, extras: bool = True):
        """Initialise the JSON formatter instance."""
        super().__init__()
        self.extras = extras

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        :param record: The log record to format.
        :return: JSON-formatted log message.
        """
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if self.extras:
            for key, value in record.__dict__.items():
                if (
                    key not in payload
                    and key not in FaultlineFormatter.LOG_RECORD_ATTRS
                    and not key.startswith("_")
                ):
                    payload[key] = value
        return json.dumps(payload, default=str)


class FaultlineFormatter(logging.Formatter):
    """Custom formatter that automatically includes extra fields.

    The formatter detects extra fields (those not part of the standard
    `LogRecord` attributes) and makes them available as `%(extra)s` in
    the format string, so contextual information is rendered
    consistently without building strings at every log call.

    :param fmt: The format string for log messages, defaults to `None`.
    :param datefmt: The format string for timestamps, defaults to
        `None`.
    :param extra_format: Format string for individual extra fields,
        defaults to `key: value`.
    :param extra_separator: Separator between multiple extra fields,
        defaults to a single space.
    :var LOG_RECORD_ATTRS: Set of standard `LogRecord` attributes.
    """

    LOG_RECORD_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "asctime",
        "taskName",
        "qualName",
        "extra",
    }

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        extra_format: str = "{key}: {value}",
        extra_separator: str = " ",
    ) -> None:
        """Initialise the custom formatter."""
        super().__init__(fmt, datefmt)
        self.extra = extra_format
        self.extra_separator = extra_separator

    def extras(self, record: logging.LogRecord) -> str:
        """Render the extra fields of a record, sorted by name."""
        entries = [
            self.extra.format(key=key, value=value)
            for key, value in sorted(record.__dict__.items())
            if key not in self.LOG_RECORD_ATTRS and not key.startswith("_")
        ]
        if not entries:
            return ""
        return self.extra_separator.join(entries) + " "

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with automatic extra field handling.

        :param record: The log record to format.
        :return: Formatted log message with extra fields.
        """
        clone = logging.makeLogRecord(record.__dict__)
        clone.extra = self.extras(record)
        if not hasattr(clone, "qualName"):
            clone.qualName = f"{record.name}.{record.funcName}"
        return super().format(clone)


class ColouredFormatter(FaultlineFormatter):
    """Formatter with fixed-width, optionally coloured level names.

    Colours are only applied when `is_tty` is set, ensuring that log
    files remain clean and free of ANSI escape sequences.

    :var COLORS: Dictionary mapping log levels to ANSI colour codes.
    """

    COLORS = {
        "TRACE": "\x1b[38;5;245m",
        "DEBUG": "\x1b[38;5;14m",
        "INFO": "\x1b[38;5;41m",
        "WARNING": "\x1b[38;5;215m",
        "ERROR": "\x1b[38;5;204m",
        "CRITICAL": "\x1b[38;5;197m",
        "QUALNAME": "\x1b[38;5;140m",
        "RESET": "\x1b[0m",
    }

    is_tty: bool = False

    def format(self, record: logging.LogRecord) -> str:
        """Format log record.

        :param record: The log record to format.
        :return: Formatted log message, with colours only for TTY
            output.
        """
        clone = logging.makeLogRecord(record.__dict__)
        qualname = f"{record.name}.{record.funcName}"
        if self.is_tty:
            reset = self.COLORS["RESET"]
            colour = self.COLORS.get(record.levelname, reset)
            clone.levelname = f"{colour}{record.levelname:>8s}{reset}"
            clone.qualName = f"{self.COLORS['QUALNAME']}{qualname}{reset}"
        else:
            clone.levelname = f"{record.levelname:>8s}"
            clone.qualName = qualname
        return super().format(clone)


def configure(config: LoggerConfig) -> logging.Logger:
    """Configure the framework logger from the logger configuration.

    Handlers are attached to the `faultline` logger rather than the
    root logger, so configuring the framework never changes how the
    application's own records are handled.

    :param config: Logger configuration settings.
    :return: The configured framework logger.
    """
    logger = logging.getLogger("faultline")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    levels: list[int] = []
    if config.tty.enable:
        tty = logging.StreamHandler(sys.stdout)
        tty.setLevel(config.tty.level)
        if config.as_json:
            tty.setFormatter(JSONFormatter())
        else:
            formatter = ColouredFormatter(
                fmt=config.tty.fmt,
                datefmt=config.tty.datefmt,
                extra_format="[{key}: {value}]",
            )
            formatter.is_tty = config.tty.colour and sys.stdout.isatty()
            tty.setFormatter(formatter)
        logger.addHandler(tty)
        levels.append(tty.level)
    if config.file.enable:
        path = Path(mkdir(config.file.path)) / config.file.output
        file = logging.handlers.RotatingFileHandler(
            filename=path,
            maxBytes=config.file.max_bytes,
            backupCount=config.file.backups,
            encoding=config.file.encoding,
        )
        file.setLevel(config.file.level)
        if config.as_json:
            file.setFormatter(JSONFormatter())
        else:
            file.setFormatter(
                ColouredFormatter(
                    fmt=config.file.fmt,
                    datefmt=config.file.datefmt,
                    extra_format="[{key}: {value}]",
                )
            )
        logger.addHandler(file)
        levels.append(file.level)
    logger.setLevel(
        max(min(levels), logging.getLevelName(config.level))
        if levels
        else config.level
    )
    return logger


def get_logger(logger_name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    :param logger_name: Logger name.
    :return: Logger instance.
    """
    return logging.getLogger(logger_name)
