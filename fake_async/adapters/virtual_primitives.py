"""Primitives that route every seam into a virtual-time Scheduler."""

from __future__ import annotations

from typing import Callable

from vtime.constants import FRAME_INTERVAL_MS, SOURCE_FRAME, SOURCE_IMMEDIATE, SOURCE_TIMEOUT
from vtime.scheduler import Scheduler

from fake_async.ports.async_primitives import AsyncPrimitives


class VirtualPrimitives(AsyncPrimitives):
    """Queues work on ``scheduler``; nothing runs until the test drains it."""

    __slots__ = ("_scheduler",)

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def schedule_delayed(self, delay_ms: float, callback: Callable[[], object]) -> int:
        return self._scheduler.schedule(delay_ms, callback, source=SOURCE_TIMEOUT)

    def schedule_immediate(self, callback: Callable[[], object]) -> int:
        return self._scheduler.schedule_micro(callback, source=SOURCE_IMMEDIATE)

    def request_frame(self, callback: Callable[[], object]) -> int:
        return self._scheduler.schedule(FRAME_INTERVAL_MS, callback, source=SOURCE_FRAME)

    def cancel(self, handle: int) -> None:
        self._scheduler.cancel(handle)
