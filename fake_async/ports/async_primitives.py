"""Port for the schedule-async primitives code under test depends on."""

from __future__ import annotations

from typing import Any, Callable, Protocol


class AsyncPrimitives(Protocol):
    """Strategy that actually runs delayed callbacks and continuations."""

    def schedule_delayed(self, delay_ms: float, callback: Callable[[], object]) -> Any:
        """Run ``callback`` after ``delay_ms`` and return a cancellable handle."""

    def schedule_immediate(self, callback: Callable[[], object]) -> Any:
        """Run ``callback`` as soon as the current step yields."""

    def request_frame(self, callback: Callable[[], object]) -> Any:
        """Run ``callback`` on the next animation frame."""

    def cancel(self, handle: Any) -> None:
        """Cancel a handle returned by one of the schedule methods."""
