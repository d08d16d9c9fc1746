"""
Task queues with the two draining disciplines the scheduler needs:

- MacrotaskQueue: min-heap keyed by (due_ms, seq), stable FIFO at equal time
- MicrotaskQueue: strict FIFO, always due
"""

from __future__ import annotations

import heapq
from collections import deque

from .task import PendingTask, TaskKind


class MacrotaskQueue:
    """Time-ordered queue of delayed callbacks.

    Cancellation is lazy: a cancelled task stays in the heap and is
    discarded when it reaches the front.
    """

    __slots__ = ("_heap", "_by_id", "_live")

    def __init__(self) -> None:
        self._heap: list[PendingTask] = []
        self._by_id: dict[int, PendingTask] = {}
        self._live: int = 0

    def push(self, task: PendingTask) -> None:
        task.kind = TaskKind.MACRO
        heapq.heappush(self._heap, task)
        self._by_id[task.task_id] = task
        self._live += 1

    def cancel(self, task_id: int) -> bool:
        task = self._by_id.pop(task_id, None)
        if task is None or task.cancelled:
            return False
        task.cancelled = True
        self._live -= 1
        return True

    def peek(self) -> PendingTask | None:
        self._drop_cancelled_head()
        if self._heap:
            return self._heap[0]
        return None

    def pop_next(self, *, until: float | None = None) -> PendingTask | None:
        """Pop the earliest live task, or None if nothing is due by ``until``."""
        head = self.peek()
        if head is None or (until is not None and head.due_ms > until):
            return None
        heapq.heappop(self._heap)
        self._by_id.pop(head.task_id, None)
        self._live -= 1
        return head

    def rebase_depth(self, depth: int) -> None:
        for task in self._heap:
            task.depth = depth

    def discard_all(self) -> list[PendingTask]:
        """Empty the queue and return the live tasks it held, in due order."""
        live = sorted(task for task in self._heap if not task.cancelled)
        self._heap.clear()
        self._by_id.clear()
        self._live = 0
        return live

    @property
    def pending_count(self) -> int:
        return self._live

    def empty(self) -> bool:
        return self._live == 0

    def __len__(self) -> int:
        return self._live

    def __iter__(self):
        for task in sorted(self._heap):
            if not task.cancelled:
                yield task

    def _drop_cancelled_head(self) -> None:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)


class MicrotaskQueue:
    """FIFO of zero-delay continuations."""

    __slots__ = ("_queue", "_by_id", "_live")

    def __init__(self) -> None:
        self._queue: deque[PendingTask] = deque()
        self._by_id: dict[int, PendingTask] = {}
        self._live: int = 0

    def push(self, task: PendingTask) -> None:
        task.kind = TaskKind.MICRO
        self._queue.append(task)
        self._by_id[task.task_id] = task
        self._live += 1

    def cancel(self, task_id: int) -> bool:
        task = self._by_id.pop(task_id, None)
        if task is None or task.cancelled:
            return False
        task.cancelled = True
        self._live -= 1
        return True

    def pop_next(self) -> PendingTask | None:
        while self._queue:
            task = self._queue.popleft()
            if task.cancelled:
                continue
            self._by_id.pop(task.task_id, None)
            self._live -= 1
            return task
        return None

    def rebase_depth(self, depth: int) -> None:
        for task in self._queue:
            task.depth = depth

    def discard_all(self) -> list[PendingTask]:
        live = [task for task in self._queue if not task.cancelled]
        self._queue.clear()
        self._by_id.clear()
        self._live = 0
        return live

    @property
    def pending_count(self) -> int:
        return self._live

    def empty(self) -> bool:
        return self._live == 0

    def __len__(self) -> int:
        return self._live

    def __iter__(self):
        for task in self._queue:
            if not task.cancelled:
                yield task
