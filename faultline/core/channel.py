"""\
Channels
========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides the notification channels through which the
framework observes errors process-wide. A channel keeps a set of
handlers and calls each of them with every error it observes.

The base `ErrorChannel` is driven manually through `publish`, which
makes it the natural target for tests and for integrations that
already know when an error happened, e.g. a web framework's error
middleware. Two channels hook into the interpreter itself:

- `RaiseChannel` observes every error at the moment it is raised,
  whether it is handled later or not, using `sys.monitoring`.
- `UnhandledChannel` observes errors nothing caught, using
  `sys.excepthook` and `threading.excepthook`.

A handler that raises is logged and skipped, it never stops the other
handlers. A channel calls them from whatever thread or task raised the
error, so they must be safe to run concurrently.
"""

from __future__ import annotations

import sys
import threading
import typing as t

from faultline.core.base import Observable
from faultline.core.exceptions import HookError
from faultline.utils.logging import get_logger

if t.TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Iterator
    from types import CodeType
    from types import TracebackType

__all__: tuple[str, ...] = (
    "ErrorChannel",
    "ErrorHandler",
    "RaiseChannel",
    "UnhandledChannel",
)

ErrorHandler = t.Callable[[BaseException], None]

_TOOL_NAME: t.Final[str] = "faultline"
# NOTE(xames3): Tool ids 0, 1, 2 and 5 are conventionally taken by
# debuggers, coverage, profilers and optimisers. The free ones are tried
# first so that we stay out of their way whenever possible.
_TOOL_IDS: t.Final[tuple[int, ...]] = (3, 4, 2, 5, 1, 0)

logger = get_logger(__name__)


class ErrorChannel(Observable):
    """Process-wide notification channel for observed errors.

    Registration is serialised with a lock. Publishing never takes the
    lock, it iterates over an immutable snapshot of the handlers, so a
    handler may be added or removed while errors are being published
    from other threads.

    The same handler may be subscribed more than once and is then
    called once per subscription. Callers that need at most one
    subscription are expected to guard it themselves, see
    `faultline.core.hooks.DefaultLevelHook`.
    """

    __slots__: tuple[str, ...] = ("_handlers", "_lock")

    def __init__(self) -> None:
        """Initialise a channel without handlers."""
        self._handlers: tuple[ErrorHandler, ...] = ()
        self._lock = threading.RLock()

    def __inspect_attrs__(self) -> Iterator[tuple[str, t.Any]]:
        """Show the number of subscribed handlers."""
        yield "handlers", len(self._handlers)

    @property
    def handlers(self) -> tuple[ErrorHandler, ...]:
        """Return the subscribed handlers."""
        return self._handlers

    def subscribe(self, handler: ErrorHandler) -> None:
        """Subscribe a handler to this channel.

        :param handler: Callable invoked with every observed error.
        """
        with self._lock:
            if not self._handlers:
                self._install()
            self._handlers = (*self._handlers, handler)
        logger.debug(
            "Handler subscribed",
            extra={"channel": type(self).__name__, "handler": handler},
        )

    def unsubscribe(self, handler: ErrorHandler) -> None:
        """Remove one subscription of a handler from this channel.

        Removing a handler that is not subscribed does nothing.

        :param handler: The handler to remove.
        """
        with self._lock:
            handlers = list(self._handlers)
            try:
                handlers.remove(handler)
            except ValueError:
                return
            self._handlers = tuple(handlers)
            if not self._handlers:
                self._uninstall()
        logger.debug(
            "Handler unsubscribed",
            extra={"channel": type(self).__name__, "handler": handler},
        )

    def publish(self, exc: BaseException) -> None:
        """Notify every subscribed handler about an error.

        A handler that fails is logged and skipped. Its error never
        reaches the other handlers nor the code that raised `exc`.

        :param exc: The observed error.
        """
        for handler in self._handlers:
            try:
                handler(exc)
            except Exception:
                logger.exception(
                    "Handler failed",
                    extra={"channel": type(self).__name__, "handler": handler},
                )

    def _install(self) -> None:
        """Start observing errors, called with the first handler."""

    def _uninstall(self) -> None:
        """Stop observing errors, called after the last handler."""


class RaiseChannel(ErrorChannel):
    """Channel observing every error when it is raised.

    The channel registers itself as a `sys.monitoring` tool listening
    to `RAISE` events while at least one handler is subscribed, and
    releases the tool id once the last handler goes away. Errors are
    published when they are raised, before any `except` clause had a
    chance to look at them, so a handled error is observed too.

    .. note::

        Errors raised while a monitoring callback is already running,
        including those raised by the handlers themselves, are not
        reported by the interpreter.
    """

    __slots__: tuple[str, ...] = ("_tool",)

    def __init__(self) -> None:
        """Initialise a channel that is not yet monitoring."""
        super().__init__()
        self._tool: int | None = None

    def __inspect_attrs__(self) -> Iterator[tuple[str, t.Any]]:
        """Show the handlers and the claimed monitoring tool id."""
        yield from super().__inspect_attrs__()
        yield "tool", self._tool

    @property
    def tool(self) -> int | None:
        """Return the claimed monitoring tool id, if any."""
        return self._tool

    def _on_raise(
        self,
        code: CodeType,
        offset: int,
        exc: BaseException,
    ) -> None:
        """Forward a `RAISE` event to the handlers."""
        self.publish(exc)

    def _install(self) -> None:
        """Claim a monitoring tool id and listen to raised errors.

        :raises HookError: If every monitoring tool id is taken.
        """
        monitoring = sys.monitoring
        for tool in _TOOL_IDS:
            try:
                monitoring.use_tool_id(tool, _TOOL_NAME)
            except ValueError:
                continue
            break
        else:
            raise HookError("no free sys.monitoring tool id is available")
        monitoring.register_callback(
            tool, monitoring.events.RAISE, self._on_raise
        )
        monitoring.set_events(tool, monitoring.events.RAISE)
        self._tool = tool
        logger.debug("Monitoring raised errors", extra={"tool": tool})

    def _uninstall(self) -> None:
        """Stop listening and release the monitoring tool id."""
        tool, self._tool = self._tool, None
        if tool is None:
            return
        monitoring = sys.monitoring
        monitoring.set_events(tool, monitoring.events.NO_EVENTS)
        monitoring.register_callback(tool, monitoring.events.RAISE, None)
        monitoring.free_tool_id(tool)
        logger.debug("Stopped monitoring raised errors", extra={"tool": tool})


class UnhandledChannel(ErrorChannel):
    """Channel observing errors that nothing caught.

    While at least one handler is subscribed, the channel replaces
    `sys.excepthook` and `threading.excepthook` with hooks that publish
    the error and then delegate to the hooks that were installed
    before, so the usual traceback is still printed. The previous hooks
    are restored once the last handler goes away.
    """

    __slots__: tuple[str, ...] = ("_sys_hook", "_thread_hook")

    def __init__(self) -> None:
        """Initialise a channel that is not yet hooked."""
        super().__init__()
        self._sys_hook: Callable[..., t.Any] | None = None
        self._thread_hook: Callable[..., t.Any] | None = None

    @property
    def installed(self) -> bool:
        """Check whether the interpreter hooks are in place."""
        return self._sys_hook is not None

    def _excepthook(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        """Publish an unhandled error of the main thread."""
        try:
            self.publish(exc)
        finally:
            hook = self._sys_hook or sys.__excepthook__
            hook(exc_type, exc, tb)

    def _threading_excepthook(self, args: threading.ExceptHookArgs) -> None:
        """Publish an unhandled error of a worker thread."""
        try:
            if args.exc_value is not None:
                self.publish(args.exc_value)
        finally:
            hook = self._thread_hook or threading.__excepthook__
            hook(args)

    def _install(self) -> None:
        """Install the interpreter hooks."""
        self._sys_hook = sys.excepthook
        self._thread_hook = threading.excepthook
        sys.excepthook = self._excepthook
        threading.excepthook = self._threading_excepthook

    def _uninstall(self) -> None:
        """Restore the interpreter hooks found on install."""
        if self._sys_hook is None:
            return
        sys.excepthook = self._sys_hook
        threading.excepthook = self._thread_hook
        self._sys_hook = None
        self._thread_hook = None
