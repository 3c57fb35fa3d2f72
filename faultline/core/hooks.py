"""\
Hooks
=====

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module manages the process-wide subscriptions of the framework:
the hook that applies the default level policy to every raised error,
and the observer that logs unhandled errors into a store.

The default level hook is opt-in. It is usually enabled once, early
during start-up::

    from faultline import enable_default_level

    hook = enable_default_level()

From then on, any raised error that was not classified explicitly reads
as `Level.CRITICAL`. Enabling and disabling are idempotent and safe to
call from several threads at once.
"""

from __future__ import annotations

import threading
import typing as t

from faultline.core.base import Observable
from faultline.core.channel import ErrorChannel
from faultline.core.channel import RaiseChannel
from faultline.core.channel import UnhandledChannel
from faultline.core.config import Config
from faultline.core.levels import Level
from faultline.core.policy import DefaultLevelPolicy
from faultline.utils.logging import get_logger

if t.TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from faultline.core.channel import ErrorHandler
    from faultline.core.store import ErrorStore

__all__: tuple[str, ...] = (
    "DefaultLevelHook",
    "disable_default_level",
    "enable_default_level",
    "get_hook",
    "get_unhandled_channel",
    "observe_unhandled",
)

logger = get_logger(__name__)

_hook: DefaultLevelHook | None = None
_unhandled: UnhandledChannel | None = None
_lock: threading.Lock = threading.Lock()


class DefaultLevelHook(Observable):
    """Toggle for the default level policy on a channel.

    The hook has two states, disabled (the initial one) and enabled.
    Enabling subscribes the policy on the channel, disabling removes it
    again. Both transitions are serialised with a lock: concurrent calls
    to `enable` never subscribe the policy twice, and `disable` returns
    only once the policy is fully unsubscribed.

    The hook can also be used as a context manager, which enables it
    for the duration of the block::

        with DefaultLevelHook(channel=channel):
            ...

    :param policy: Policy to apply, defaults to a `DefaultLevelPolicy`
        with the default level from `Config().capture`.
    :param channel: Channel to subscribe to, defaults to a new
        `RaiseChannel`.
    """

    __slots__: tuple[str, ...] = ("_policy", "_channel", "_enabled", "_lock")

    def __init__(
        self,
        policy: DefaultLevelPolicy | None = None,
        channel: ErrorChannel | None = None,
    ) -> None:
        """Initialise a disabled hook."""
        if policy is None:
            level = Level.parse(Config().capture.default_level)
            policy = DefaultLevelPolicy(level or Level.CRITICAL)
        self._policy = policy
        self._channel = channel if channel is not None else RaiseChannel()
        self._enabled = False
        self._lock = threading.Lock()

    def __inspect_attrs__(self) -> Iterator[tuple[str, t.Any]]:
        """Show the state, the policy and the channel."""
        yield "enabled", self._enabled
        yield "policy", self._policy
        yield "channel", self._channel

    def __enter__(self) -> DefaultLevelHook:
        """Enable the hook for the duration of a block."""
        self.enable()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Disable the hook on leaving the block."""
        self.disable()

    @property
    def enabled(self) -> bool:
        """Check whether the policy is currently subscribed."""
        return self._enabled

    @property
    def policy(self) -> DefaultLevelPolicy:
        """Return the policy applied by this hook."""
        return self._policy

    @property
    def channel(self) -> ErrorChannel:
        """Return the channel this hook subscribes to."""
        return self._channel

    def enable(self) -> bool:
        """Subscribe the policy, unless it already is.

        :return: `True` if the hook was enabled by this call.
        :raises HookError: If the channel cannot start observing errors.
        """
        with self._lock:
            if self._enabled:
                return False
            self._channel.subscribe(self._policy)
            self._enabled = True
        logger.debug(
            "Default level enabled",
            extra={"level": self._policy.level.name},
        )
        return True

    def disable(self) -> bool:
        """Unsubscribe the policy, unless it already is.

        :return: `True` if the hook was disabled by this call.
        """
        with self._lock:
            if not self._enabled:
                return False
            self._channel.unsubscribe(self._policy)
            self._enabled = False
        logger.debug("Default level disabled")
        return True


def get_hook() -> DefaultLevelHook:
    """Return the process-wide default level hook.

    The hook is created on first use and observes every raised error
    through a `RaiseChannel`. There is exactly one such hook per
    process.
    """
    global _hook
    with _lock:
        if _hook is None:
            _hook = DefaultLevelHook()
        return _hook


def enable_default_level() -> DefaultLevelHook:
    """Apply the default level to every error raised from now on.

    :return: The process-wide hook.
    """
    hook = get_hook()
    hook.enable()
    return hook


def disable_default_level() -> DefaultLevelHook:
    """Stop applying the default level to raised errors.

    :return: The process-wide hook.
    """
    hook = get_hook()
    hook.disable()
    return hook


def get_unhandled_channel() -> UnhandledChannel:
    """Return the process-wide channel of unhandled errors.

    This is the channel `observe_unhandled` subscribes to when none is
    given. Pass the handler it returned to `unsubscribe` on this channel
    to stop observing.
    """
    global _unhandled
    with _lock:
        if _unhandled is None:
            _unhandled = UnhandledChannel()
        return _unhandled


def observe_unhandled(
    store: ErrorStore,
    channel: ErrorChannel | None = None,
) -> ErrorHandler:
    """Log every unhandled error into a store.

    The error is logged just before the interpreter reports it, so the
    process still terminates the way it normally would. Deciding to
    crash is left to the application.

    :param store: Store receiving the unhandled errors.
    :param channel: Channel to observe, defaults to the process-wide
        `UnhandledChannel`.
    :return: The subscribed handler, to pass to `unsubscribe` on the
        channel later, `get_unhandled_channel()` when none was given.
    """
    if channel is None:
        channel = get_unhandled_channel()

    def handler(exc: BaseException) -> None:
        """Log an unhandled error."""
        store.log(exc)

    channel.subscribe(handler)
    logger.debug(
        "Observing unhandled errors",
        extra={"store": store.name, "channel": type(channel).__name__},
    )
    return handler
