"""Monotonic virtual clock."""

from __future__ import annotations

from .errors import InvalidArgument


class Clock:
    """Virtual-time counter that moves only when the scheduler says so."""

    __slots__ = ("_now_ms",)

    def __init__(self, start_ms: float = 0) -> None:
        if start_ms < 0:
            raise InvalidArgument("start_ms must be >= 0")
        self._now_ms = start_ms

    @property
    def now_ms(self) -> float:
        return self._now_ms

    def advance(self, amount_ms: float) -> float:
        if amount_ms < 0:
            raise InvalidArgument(f"Clock cannot go backwards (amount={amount_ms})")
        self._now_ms += amount_ms
        return self._now_ms

    def advance_to(self, timestamp_ms: float) -> float:
        """Move forward to ``timestamp_ms``; earlier timestamps are a no-op."""
        if timestamp_ms > self._now_ms:
            self._now_ms = timestamp_ms
        return self._now_ms

    def __repr__(self) -> str:
        return f"Clock(now_ms={self._now_ms})"
