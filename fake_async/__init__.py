"""Deterministic async testing on top of the vtime scheduler."""

from fake_async.application.harness import FakeAsyncHarness
from fake_async.application.scope import InterceptionScope, LeakReport, ScopeState
from fake_async.application.seams import AsyncSeams, SeamHandle
from fake_async.application.stability import PendingWorkCounter, StabilityWaiter
from fake_async.config import FakeAsyncConfig, load_fake_async_config

__all__ = [
    "AsyncSeams",
    "FakeAsyncConfig",
    "FakeAsyncHarness",
    "InterceptionScope",
    "LeakReport",
    "PendingWorkCounter",
    "ScopeState",
    "SeamHandle",
    "StabilityWaiter",
    "load_fake_async_config",
]
