"""
Pending task records held by the macrotask and microtask queues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from .constants import SOURCE_TIMEOUT


class TaskKind(str, Enum):
    MACRO = "macro"
    MICRO = "micro"


@dataclass(order=True)
class PendingTask:
    """A queued callback, ordered by due time then by insertion sequence.

    ``depth`` counts the macrotask hops between this task and the work that
    was queued before the current flush began.
    """

    due_ms: float
    seq: int
    task_id: int = field(compare=False)
    kind: TaskKind = field(compare=False, default=TaskKind.MACRO)
    callback: Callable[[], object] = field(compare=False, default=lambda: None, repr=False)
    source: str = field(compare=False, default=SOURCE_TIMEOUT)
    cancelled: bool = field(compare=False, default=False)
    depth: int = field(compare=False, default=0)

    def __repr__(self) -> str:
        flag = ", cancelled" if self.cancelled else ""
        return (
            f"PendingTask(#{self.task_id} {self.kind.value}/{self.source}, "
            f"due={self.due_ms}{flag})"
        )

    def run(self) -> None:
        self.callback()
