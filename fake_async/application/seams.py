"""Injectable async seams: the one object code under test schedules through."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from vtime.errors import ScopeAlreadyActive, ScopeNotActive

from fake_async.adapters.event_loop_primitives import EventLoopPrimitives
from fake_async.ports.async_primitives import AsyncPrimitives


@dataclass(frozen=True, slots=True)
class SeamHandle:
    """Handle returned by the seams; remembers which strategy issued it."""

    strategy: AsyncPrimitives
    token: Any


class AsyncSeams:
    """Delegates the schedule primitives to the currently selected strategy.

    Code under test holds an ``AsyncSeams`` instead of calling the event loop
    directly. An InterceptionScope swaps the strategy for the duration of a
    test and restores the ambient one on exit. Handles always cancel through
    the strategy that issued them, whichever one is current at cancel time.
    """

    __slots__ = ("_ambient", "_current")

    def __init__(self, ambient: AsyncPrimitives | None = None) -> None:
        self._ambient: AsyncPrimitives = ambient or EventLoopPrimitives()
        self._current: AsyncPrimitives = self._ambient

    @property
    def ambient(self) -> AsyncPrimitives:
        return self._ambient

    @property
    def current(self) -> AsyncPrimitives:
        return self._current

    @property
    def intercepted(self) -> bool:
        return self._current is not self._ambient

    def install(self, strategy: AsyncPrimitives) -> None:
        if self.intercepted:
            raise ScopeAlreadyActive("Async seams are already intercepted by another scope")
        self._current = strategy

    def restore(self) -> None:
        if not self.intercepted:
            raise ScopeNotActive("Async seams are not intercepted")
        self._current = self._ambient

    # ------------------------------------------------------------------
    # Seams
    # ------------------------------------------------------------------
    def schedule_delayed(self, delay_ms: float, callback: Callable[[], object]) -> SeamHandle:
        strategy = self._current
        return SeamHandle(strategy, strategy.schedule_delayed(delay_ms, callback))

    def schedule_immediate(self, callback: Callable[[], object]) -> SeamHandle:
        strategy = self._current
        return SeamHandle(strategy, strategy.schedule_immediate(callback))

    def request_frame(self, callback: Callable[[], object]) -> SeamHandle:
        strategy = self._current
        return SeamHandle(strategy, strategy.request_frame(callback))

    def cancel(self, handle: SeamHandle | None) -> None:
        """Cancel ``handle``; anything that is not a SeamHandle is ignored."""
        if not isinstance(handle, SeamHandle):
            return
        handle.strategy.cancel(handle.token)
