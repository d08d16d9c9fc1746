"""
Minimal data grid model for the demo.

Filtering is synchronous; the "model updated" notification is delivered
asynchronously through the injected seams and counted as pending work.
"""

from __future__ import annotations

from typing import Any, Callable

from fake_async.application.seams import AsyncSeams
from fake_async.application.stability import PendingWorkCounter

ModelUpdatedListener = Callable[[int], object]


class GridModel:
    """Row model with a case-insensitive quick filter across all columns."""

    __slots__ = (
        "_seams",
        "_pending_work",
        "_rows",
        "_displayed",
        "_quick_filter_text",
        "_listeners",
    )

    def __init__(self, seams: AsyncSeams, pending_work: PendingWorkCounter) -> None:
        self._seams = seams
        self._pending_work = pending_work
        self._rows: list[dict[str, Any]] = []
        self._displayed: list[dict[str, Any]] = []
        self._quick_filter_text = ""
        self._listeners: list[ModelUpdatedListener] = []

    @property
    def quick_filter_text(self) -> str:
        return self._quick_filter_text

    def on_model_updated(self, listener: ModelUpdatedListener) -> None:
        self._listeners.append(listener)

    def set_row_data(self, rows: list[dict[str, Any]] | None) -> None:
        self._rows = list(rows or [])
        self._refresh()

    def set_quick_filter(self, text: str | None) -> None:
        self._quick_filter_text = (text or "").strip()
        self._refresh()

    def displayed_row_count(self) -> int:
        return len(self._displayed)

    def _refresh(self) -> None:
        needle = self._quick_filter_text.lower()
        if needle:
            self._displayed = [row for row in self._rows if needle in _row_text(row)]
        else:
            self._displayed = list(self._rows)
        self._announce_model_updated()

    def _announce_model_updated(self) -> None:
        self._pending_work.increment()
        self._seams.schedule_delayed(0, self._fire_model_updated)

    def _fire_model_updated(self) -> None:
        try:
            count = self.displayed_row_count()
            for listener in list(self._listeners):
                listener(count)
        finally:
            self._pending_work.decrement()


def _row_text(row: dict[str, Any]) -> str:
    parts: list[str] = []
    for value in row.values():
        if isinstance(value, dict):
            parts.append(_row_text(value))
        else:
            parts.append(str(value).lower())
    return " ".join(parts)
