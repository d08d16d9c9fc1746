"""Application layer: seams, scope lifecycle, quiescence and the test harness."""

from fake_async.application.harness import FakeAsyncHarness
from fake_async.application.scope import InterceptionScope, LeakReport, ScopeState
from fake_async.application.seams import AsyncSeams, SeamHandle
from fake_async.application.stability import PendingWorkCounter, StabilityWaiter

__all__ = [
    "AsyncSeams",
    "FakeAsyncHarness",
    "InterceptionScope",
    "LeakReport",
    "PendingWorkCounter",
    "ScopeState",
    "SeamHandle",
    "StabilityWaiter",
]
