"""
Virtual-time scheduler: orchestrates the clock and both task queues.

Draining paths:
  - tick(amount): run everything due within the next ``amount`` ms
  - flush(max_passes): run everything queued in due order, with a pass
    budget that turns self-rescheduling timers into a loud failure
  - flush_microtasks(): fixed-point drain of the microtask queue

Microtasks are always drained to exhaustion before the next macrotask runs.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable

from .clock import Clock
from .constants import DEFAULT_MAX_PASSES, SOURCE_IMMEDIATE, SOURCE_TIMEOUT
from .errors import DrainLimitExceeded, InvalidArgument, ScopeAlreadyActive, ScopeNotActive
from .queues import MacrotaskQueue, MicrotaskQueue
from .task import PendingTask, TaskKind

logger = logging.getLogger(__name__)

RenderHook = Callable[[], object]


@dataclass(frozen=True, slots=True)
class SchedulerState:
    """Snapshot returned by Scheduler.describe_state()."""

    now: float
    pending_macrotasks: int
    pending_microtasks: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "now": self.now,
            "pendingMacrotasks": self.pending_macrotasks,
            "pendingMicrotasks": self.pending_microtasks,
        }


class Scheduler:
    """Deterministic scheduler for one test's asynchronous work."""

    __slots__ = (
        "clock",
        "macrotasks",
        "microtasks",
        "default_max_passes",
        "auto_render",
        "trace_enabled",
        "trace_log",
        "_depth",
        "_next_task_id",
        "_next_seq",
        "_render_hooks",
        "_active_scope",
    )

    def __init__(
        self,
        *,
        max_passes: int = DEFAULT_MAX_PASSES,
        auto_render: bool = False,
        trace: bool = False,
        start_ms: float = 0,
    ) -> None:
        if max_passes < 1:
            raise InvalidArgument(f"max_passes must be >= 1, got {max_passes}")

        self.clock = Clock(start_ms)
        self.macrotasks = MacrotaskQueue()
        self.microtasks = MicrotaskQueue()
        self.default_max_passes = max_passes
        self.auto_render = auto_render
        self.trace_enabled = trace
        self.trace_log: list[str] = []

        self._depth: int = -1
        self._next_task_id: int = 1
        self._next_seq: int = 0
        self._render_hooks: list[RenderHook] = []
        self._active_scope: object | None = None

    def _trace(self, msg: str) -> None:
        if self.trace_enabled:
            self.trace_log.append(f"[{self.clock.now_ms:>10}ms] {msg}")

    # ------------------------------------------------------------------
    # Scope guard
    # ------------------------------------------------------------------
    @property
    def active_scope(self) -> object | None:
        return self._active_scope

    def bind_scope(self, scope: object) -> None:
        """Mark ``scope`` as the one scope allowed to drive this scheduler."""
        if self._active_scope is not None:
            raise ScopeAlreadyActive("An interception scope is already active for this scheduler")
        self._active_scope = scope
        self._trace("scope entered")

    def release_scope(self, scope: object) -> list[PendingTask]:
        """Unbind ``scope`` and discard whatever is still queued.

        Returns the discarded tasks, macrotasks first, so the caller can
        report them as leaked.
        """
        if self._active_scope is not scope:
            raise ScopeNotActive("This scope is not the active scope of the scheduler")
        leftovers = self.macrotasks.discard_all() + self.microtasks.discard_all()
        self._active_scope = None
        self._trace(f"scope exited ({len(leftovers)} task(s) discarded)")
        return leftovers

    def _require_scope(self, operation: str) -> None:
        if self._active_scope is None:
            raise ScopeNotActive(f"{operation}() requires an active interception scope")

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    def schedule(
        self,
        delay_ms: float,
        callback: Callable[[], object],
        *,
        source: str = SOURCE_TIMEOUT,
    ) -> int:
        """Queue ``callback`` as a macrotask due ``delay_ms`` from now."""
        self._require_scope("schedule")
        if not math.isfinite(delay_ms) or delay_ms < 0:
            raise InvalidArgument(f"delay must be a finite number >= 0, got {delay_ms}")

        task = self._new_task(self.clock.now_ms + delay_ms, callback, TaskKind.MACRO, source)
        self.macrotasks.push(task)
        self._trace(f"schedule {source} #{task.task_id} due={task.due_ms}")
        return task.task_id

    def schedule_micro(
        self,
        callback: Callable[[], object],
        *,
        source: str = SOURCE_IMMEDIATE,
    ) -> int:
        """Queue ``callback`` as a microtask."""
        self._require_scope("schedule_micro")
        task = self._new_task(self.clock.now_ms, callback, TaskKind.MICRO, source)
        self.microtasks.push(task)
        self._trace(f"schedule {source} #{task.task_id} (micro)")
        return task.task_id

    def cancel(self, task_id: int) -> bool:
        """Cancel a queued task. Returns False if it already ran or is unknown.

        Allowed without an active scope: handles can outlive the scope that
        issued them, and cancelling one after exit is a no-op.
        """
        cancelled = self.macrotasks.cancel(task_id) or self.microtasks.cancel(task_id)
        if cancelled:
            self._trace(f"cancel #{task_id}")
        return cancelled

    def _new_task(
        self,
        due_ms: float,
        callback: Callable[[], object],
        kind: TaskKind,
        source: str,
    ) -> PendingTask:
        task = PendingTask(
            due_ms=due_ms,
            seq=self._next_seq,
            task_id=self._next_task_id,
            kind=kind,
            callback=callback,
            source=source,
            depth=self._depth + 1 if kind is TaskKind.MACRO else self._depth,
        )
        self._next_seq += 1
        self._next_task_id += 1
        return task

    # ------------------------------------------------------------------
    # Draining
    # ------------------------------------------------------------------
    def tick(self, amount_ms: float = 0) -> None:
        """Advance virtual time by ``amount_ms`` and run what falls due."""
        self._require_scope("tick")
        if not math.isfinite(amount_ms) or amount_ms < 0:
            raise InvalidArgument(f"tick amount must be a finite number >= 0, got {amount_ms}")

        target = self.clock.now_ms + amount_ms
        self._trace(f"tick {amount_ms}ms -> {target}")

        self._drain_microtasks()
        while True:
            task = self.macrotasks.pop_next(until=target)
            if task is None:
                break
            self.clock.advance_to(task.due_ms)
            self._run(task)
            self._drain_microtasks()

        self.clock.advance_to(target)
        self._render_after_call()

    def flush(self, max_passes: int | None = None) -> float:
        """Run every queued task in ``(due, seq)`` order, advancing time to
        each task's due time.

        Work queued before the call is pass 0; a macrotask queued while a
        pass-N task runs belongs to pass N + 1. Popping a task whose pass
        exceeds ``max_passes`` raises DrainLimitExceeded and leaves it queued.

        Returns the virtual milliseconds that elapsed.
        """
        self._require_scope("flush")
        limit = self.default_max_passes if max_passes is None else max_passes
        if limit < 1:
            raise InvalidArgument(f"max_passes must be >= 1, got {limit}")

        start = self.clock.now_ms
        self.microtasks.rebase_depth(-1)
        self.macrotasks.rebase_depth(0)
        self._trace(f"flush ({self.macrotasks.pending_count} queued)")

        self._drain_microtasks()
        while True:
            task = self.macrotasks.peek()
            if task is None:
                break
            if task.depth > limit:
                remaining = self.macrotasks.pending_count
                logger.warning(
                    "flush pass budget of %d exhausted with %d macrotask(s) queued",
                    limit,
                    remaining,
                )
                raise DrainLimitExceeded(limit, remaining)

            self.macrotasks.pop_next()
            self.clock.advance_to(task.due_ms)
            self._run(task)
            self._drain_microtasks()

        self._render_after_call()
        return self.clock.now_ms - start

    def flush_microtasks(self) -> None:
        """Drain microtasks until none are left, including ones queued meanwhile."""
        self._require_scope("flush_microtasks")
        self._drain_microtasks()
        self._render_after_call()

    def _drain_microtasks(self) -> None:
        while True:
            task = self.microtasks.pop_next()
            if task is None:
                return
            self._run(task)

    def _run(self, task: PendingTask) -> None:
        self._trace(f"run {task.kind.value} {task.source} #{task.task_id}")
        outer, self._depth = self._depth, task.depth
        try:
            task.run()
        finally:
            self._depth = outer
        if self.auto_render:
            self._fire_render_hooks()

    # ------------------------------------------------------------------
    # Render hook
    # ------------------------------------------------------------------
    def on_drain_step_rendered(self, hook: RenderHook) -> Callable[[], None]:
        """Register ``hook``; returns a callable that unregisters it."""
        self._render_hooks.append(hook)

        def unsubscribe() -> None:
            if hook in self._render_hooks:
                self._render_hooks.remove(hook)

        return unsubscribe

    def _render_after_call(self) -> None:
        if not self.auto_render:
            self._fire_render_hooks()

    def _fire_render_hooks(self) -> None:
        for hook in list(self._render_hooks):
            hook()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def now_ms(self) -> float:
        return self.clock.now_ms

    def describe_state(self) -> SchedulerState:
        """Snapshot for assertions; allowed with or without an active scope."""
        return SchedulerState(
            now=self.clock.now_ms,
            pending_macrotasks=self.macrotasks.pending_count,
            pending_microtasks=self.microtasks.pending_count,
        )
