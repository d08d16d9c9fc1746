"""Test-author facade wiring seams, scheduler, scope and stability waiter."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator

from vtime.errors import ScopeNotActive
from vtime.scheduler import Scheduler, SchedulerState

from fake_async.config import FakeAsyncConfig
from fake_async.application.scope import InterceptionScope, LeakReport
from fake_async.application.seams import AsyncSeams, SeamHandle
from fake_async.application.stability import PendingWorkCounter, StabilityWaiter
from fake_async.ports.async_primitives import AsyncPrimitives


class FakeAsyncHarness:
    """Per-test harness for deterministic async testing.

    The ``seams`` and the pending-work methods are handed to the code under
    test; everything else is for the test body.
    """

    __slots__ = (
        "config",
        "seams",
        "scheduler",
        "pending_work",
        "stability",
        "_scope",
    )

    def __init__(
        self,
        config: FakeAsyncConfig | None = None,
        *,
        ambient: AsyncPrimitives | None = None,
        seams: AsyncSeams | None = None,
    ) -> None:
        self.config = config or FakeAsyncConfig()
        self.seams = seams or AsyncSeams(ambient)
        self.scheduler = Scheduler(
            max_passes=self.config.max_passes,
            auto_render=self.config.auto_render,
            trace=self.config.trace,
        )
        self.pending_work = PendingWorkCounter()
        self.stability = StabilityWaiter(self.pending_work)
        self._scope: InterceptionScope | None = None

    # ------------------------------------------------------------------
    # Scope lifecycle
    # ------------------------------------------------------------------
    @property
    def scope_active(self) -> bool:
        return self._scope is not None and self._scope.active

    def enter_scope(self) -> InterceptionScope:
        scope = InterceptionScope(
            self.scheduler,
            self.seams,
            leak_policy=self.config.leak_policy,
        )
        scope.enter()
        self._scope = scope
        return scope

    def exit_scope(self, *, body_failed: bool = False) -> LeakReport:
        if self._scope is None:
            raise ScopeNotActive("exit_scope() called without an active scope")
        scope, self._scope = self._scope, None
        return scope.exit(body_failed=body_failed)

    @contextmanager
    def fake_async(self) -> Iterator[FakeAsyncHarness]:
        """Run the block with the seams routed into the virtual scheduler."""
        self.enter_scope()
        try:
            yield self
        except BaseException:
            self.exit_scope(body_failed=True)
            raise
        self.exit_scope()

    # ------------------------------------------------------------------
    # Collaborator surface
    # ------------------------------------------------------------------
    def schedule_delayed(self, delay_ms: float, callback: Callable[[], object]) -> SeamHandle:
        return self.seams.schedule_delayed(delay_ms, callback)

    def schedule_immediate(self, callback: Callable[[], object]) -> SeamHandle:
        return self.seams.schedule_immediate(callback)

    def request_frame(self, callback: Callable[[], object]) -> SeamHandle:
        return self.seams.request_frame(callback)

    def cancel(self, handle: SeamHandle) -> None:
        self.seams.cancel(handle)

    def increment_pending_work(self) -> int:
        return self.pending_work.increment()

    def decrement_pending_work(self) -> int:
        return self.pending_work.decrement()

    def on_drain_step_rendered(self, hook: Callable[[], object]) -> Callable[[], None]:
        return self.scheduler.on_drain_step_rendered(hook)

    # ------------------------------------------------------------------
    # Test-author surface
    # ------------------------------------------------------------------
    def tick(self, amount_ms: float = 0) -> None:
        self.scheduler.tick(amount_ms)

    def flush(self, max_passes: int | None = None) -> float:
        return self.scheduler.flush(max_passes)

    def flush_microtasks(self) -> None:
        self.scheduler.flush_microtasks()

    async def when_stable(self) -> None:
        await self.stability.when_stable()

    def describe_state(self) -> SchedulerState:
        return self.scheduler.describe_state()
