"""Ambient-runtime primitives backed by the running asyncio event loop."""

from __future__ import annotations

import asyncio
import math
from typing import Callable

from vtime.constants import FRAME_INTERVAL_MS
from vtime.errors import InvalidArgument

from fake_async.ports.async_primitives import AsyncPrimitives


class EventLoopPrimitives(AsyncPrimitives):
    """Schedules work on a real asyncio loop in wall-clock time."""

    __slots__ = ("_loop",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def schedule_delayed(self, delay_ms: float, callback: Callable[[], object]) -> asyncio.TimerHandle:
        if not math.isfinite(delay_ms) or delay_ms < 0:
            raise InvalidArgument(f"delay must be a finite number >= 0, got {delay_ms}")
        return self.loop.call_later(delay_ms / 1000.0, callback)

    def schedule_immediate(self, callback: Callable[[], object]) -> asyncio.Handle:
        return self.loop.call_soon(callback)

    def request_frame(self, callback: Callable[[], object]) -> asyncio.TimerHandle:
        return self.loop.call_later(FRAME_INTERVAL_MS / 1000.0, callback)

    def cancel(self, handle: asyncio.Handle) -> None:
        handle.cancel()
