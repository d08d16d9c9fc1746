"""Virtual-time task scheduler core: clock, task queues and drain loop."""

from vtime.clock import Clock
from vtime.errors import (
    DrainLimitExceeded,
    FakeAsyncError,
    InvalidArgument,
    LeakedTasksOnTeardown,
    ScopeAlreadyActive,
    ScopeNotActive,
)
from vtime.queues import MacrotaskQueue, MicrotaskQueue
from vtime.scheduler import Scheduler, SchedulerState
from vtime.task import PendingTask, TaskKind

__all__ = [
    "Clock",
    "DrainLimitExceeded",
    "FakeAsyncError",
    "InvalidArgument",
    "LeakedTasksOnTeardown",
    "MacrotaskQueue",
    "MicrotaskQueue",
    "PendingTask",
    "Scheduler",
    "SchedulerState",
    "ScopeAlreadyActive",
    "ScopeNotActive",
    "TaskKind",
]
