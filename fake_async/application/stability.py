"""Quiescence tracking: a shared pending-work counter and a waiter on it."""

from __future__ import annotations

import asyncio
from typing import Callable

from vtime.errors import InvalidArgument


class PendingWorkCounter:
    """Count of outstanding async work, maintained by the code under test."""

    __slots__ = ("_count", "_listeners")

    def __init__(self) -> None:
        self._count = 0
        self._listeners: list[Callable[[], object]] = []

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_stable(self) -> bool:
        return self._count == 0

    def increment(self) -> int:
        self._count += 1
        return self._count

    def decrement(self) -> int:
        if self._count == 0:
            raise InvalidArgument("Pending work counter cannot go below zero")
        self._count -= 1
        if self._count == 0:
            for listener in list(self._listeners):
                listener()
        return self._count

    def add_listener(self, listener: Callable[[], object]) -> Callable[[], None]:
        """Call ``listener`` each time the count drops to zero."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove


class StabilityWaiter:
    """Suspends callers until the pending-work counter reaches zero.

    Does no queue introspection and applies no timeout; wrap the call in
    ``asyncio.wait_for`` when the work may never settle.
    """

    __slots__ = ("_counter", "_waiters")

    def __init__(self, counter: PendingWorkCounter) -> None:
        self._counter = counter
        self._waiters: list[asyncio.Future[None]] = []
        counter.add_listener(self._on_stable)

    @property
    def counter(self) -> PendingWorkCounter:
        return self._counter

    @property
    def waiting(self) -> int:
        return sum(1 for future in self._waiters if not future.done())

    async def when_stable(self) -> None:
        if self._counter.is_stable:
            return
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        try:
            await future
        finally:
            if future in self._waiters:
                self._waiters.remove(future)

    def _on_stable(self) -> None:
        waiters, self._waiters = self._waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(None)
