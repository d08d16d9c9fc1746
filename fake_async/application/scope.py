"""Interception scope: routes the async seams into a Scheduler for one test."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from types import TracebackType

from vtime.constants import (
    DEFAULT_LEAK_POLICY,
    LEAK_POLICIES,
    LEAK_POLICY_IGNORE,
    LEAK_POLICY_RAISE,
)
from vtime.errors import InvalidArgument, LeakedTasksOnTeardown, ScopeAlreadyActive, ScopeNotActive
from vtime.scheduler import Scheduler
from vtime.task import PendingTask, TaskKind

from fake_async.adapters.virtual_primitives import VirtualPrimitives
from fake_async.application.seams import AsyncSeams

logger = logging.getLogger(__name__)


class ScopeState(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class LeakReport:
    """Tasks that were still queued when a scope exited."""

    tasks: tuple[PendingTask, ...] = field(default_factory=tuple)

    @property
    def macrotasks(self) -> int:
        return sum(1 for task in self.tasks if task.kind is TaskKind.MACRO)

    @property
    def microtasks(self) -> int:
        return sum(1 for task in self.tasks if task.kind is TaskKind.MICRO)

    @property
    def total(self) -> int:
        return len(self.tasks)

    @property
    def leaked(self) -> bool:
        return bool(self.tasks)

    def sources(self) -> dict[str, int]:
        return dict(Counter(task.source for task in self.tasks))

    def summary(self) -> str:
        if not self.tasks:
            return "no tasks"
        by_source = ", ".join(f"{name}={count}" for name, count in sorted(self.sources().items()))
        return f"{self.macrotasks} macrotask(s), {self.microtasks} microtask(s) [{by_source}]"


class InterceptionScope:
    """Scoped redirection of the async seams into ``scheduler``.

    Usable as a context manager. Exit always restores the ambient
    primitives, including when the body raised.
    """

    __slots__ = ("scheduler", "seams", "leak_policy", "_state")

    def __init__(
        self,
        scheduler: Scheduler,
        seams: AsyncSeams,
        *,
        leak_policy: str = DEFAULT_LEAK_POLICY,
    ) -> None:
        if leak_policy not in LEAK_POLICIES:
            options = ", ".join(LEAK_POLICIES)
            raise InvalidArgument(f"Unknown leak policy {leak_policy!r}. Supported policies: {options}")

        self.scheduler = scheduler
        self.seams = seams
        self.leak_policy = leak_policy
        self._state = ScopeState.INACTIVE

    @property
    def state(self) -> ScopeState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is ScopeState.ACTIVE

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def enter(self) -> InterceptionScope:
        if self.active:
            raise ScopeAlreadyActive("This interception scope is already active")

        self.scheduler.bind_scope(self)
        try:
            self.seams.install(VirtualPrimitives(self.scheduler))
        except Exception:
            self.scheduler.release_scope(self)
            raise

        self._state = ScopeState.ACTIVE
        return self

    def exit(self, *, body_failed: bool = False) -> LeakReport:
        """Restore the seams, discard queued tasks and report any leak."""
        if not self.active:
            raise ScopeNotActive("exit() called on an inactive interception scope")

        try:
            self.seams.restore()
        finally:
            leftovers = self.scheduler.release_scope(self)
            self._state = ScopeState.INACTIVE

        report = LeakReport(tasks=tuple(leftovers))
        if report.leaked:
            self._report_leak(report, body_failed=body_failed)
        return report

    def _report_leak(self, report: LeakReport, *, body_failed: bool) -> None:
        if self.leak_policy == LEAK_POLICY_IGNORE:
            return
        if self.leak_policy == LEAK_POLICY_RAISE and not body_failed:
            raise LeakedTasksOnTeardown(report)
        logger.warning("Interception scope exited with queued work: %s", report.summary())

    def __enter__(self) -> InterceptionScope:
        return self.enter()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.exit(body_failed=exc_type is not None)
