"""\
Default level policy
====================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides the rule that assigns a default severity level to
errors nobody classified explicitly. The policy is applied to every
error observed by a channel (see `faultline.core.channel`) once it is
enabled through `faultline.core.hooks`.

Three kinds of errors are treated specially:

1. Exception groups are wrappers around the errors that actually
   happened. Logging the group next to its members would only add
   noise, so the group itself is never tagged and its members are
   classified one by one instead, however deeply they are nested.
2. Control-flow signals such as task cancellation describe an expected
   change of course rather than a fault and are left untagged.
3. Errors that already carry a level keep it. An explicit level always
   wins over the default.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import typing as t

from faultline.core.base import Observable
from faultline.core.classify import tag_as_level
from faultline.core.classify import try_get_level
from faultline.core.levels import Level

if t.TYPE_CHECKING:
    from collections.abc import Iterator

__all__: tuple[str, ...] = (
    "CONTROL_FLOW_ERRORS",
    "DefaultLevelPolicy",
)

CONTROL_FLOW_ERRORS: t.Final[tuple[type[BaseException], ...]] = (
    asyncio.CancelledError,
    concurrent.futures.CancelledError,
    GeneratorExit,
    StopIteration,
    StopAsyncIteration,
    KeyboardInterrupt,
    SystemExit,
)


class DefaultLevelPolicy(Observable):
    """Assign a default level to unclassified errors.

    The policy holds no mutable state, so one instance may be invoked
    concurrently from any number of threads or tasks. It only ever
    reads and writes the metadata of the errors passed to it.

    :param level: Level assigned to unclassified errors, defaults to
        `Level.CRITICAL`.
    :param control_flow: Error types that are never tagged, defaults to
        `CONTROL_FLOW_ERRORS`.
    """

    __slots__: tuple[str, ...] = ("_level", "_control_flow")

    def __init__(
        self,
        level: Level = Level.CRITICAL,
        *,
        control_flow: tuple[type[BaseException], ...] = CONTROL_FLOW_ERRORS,
    ) -> None:
        """Initialise the policy with a default level."""
        self._level = level
        self._control_flow = tuple(control_flow)

    def __inspect_attrs__(self) -> Iterator[tuple[str, t.Any]]:
        """Show the default level and the ignored error types."""
        yield "level", self._level
        yield "control_flow", [kind.__name__ for kind in self._control_flow]

    def __call__(self, exc: BaseException) -> None:
        """Apply the policy to an observed error."""
        self.apply(exc)

    @property
    def level(self) -> Level:
        """Return the default level."""
        return self._level

    @property
    def control_flow(self) -> tuple[type[BaseException], ...]:
        """Return the error types treated as control flow."""
        return self._control_flow

    def is_composite(self, exc: BaseException) -> bool:
        """Check whether an error only wraps other errors."""
        return isinstance(exc, BaseExceptionGroup)

    def is_control_flow(self, exc: BaseException) -> bool:
        """Check whether an error is a control-flow signal."""
        return isinstance(exc, self._control_flow)

    def leaves(self, exc: BaseException) -> Iterator[BaseException]:
        """Yield the non-composite errors of an error tree.

        The tree is walked depth-first, in the order the errors appear
        in their groups. The walk is iterative and tracks visited
        errors by identity, so an error shared by several groups is
        yielded once and a malformed, cyclic tree still terminates.

        :param exc: The root of the tree.
        :yield: Every error that is not a group itself.
        """
        seen: set[int] = set()
        stack: list[BaseException] = [exc]
        while stack:
            current = stack.pop()
            if id(current) in seen:
                continue
            seen.add(id(current))
            if self.is_composite(current):
                stack.extend(reversed(current.exceptions))
            else:
                yield current

    def apply(self, exc: BaseException) -> None:
        """Tag every unclassified fault of an error tree.

        :param exc: The observed error, possibly a group.
        """
        for leaf in self.leaves(exc):
            if self.is_control_flow(leaf):
                continue
            if try_get_level(leaf) is not None:
                continue
            tag_as_level(leaf, self._level, override=False)
