"""Error taxonomy for the virtual-time scheduler."""

from __future__ import annotations


class FakeAsyncError(Exception):
    """Base class for all scheduler and scope errors."""


class InvalidArgument(FakeAsyncError, ValueError):
    """A delay, tick amount, budget or counter change was out of range."""


class ScopeAlreadyActive(FakeAsyncError, RuntimeError):
    """An interception scope was entered while another one is active."""


class ScopeNotActive(FakeAsyncError, RuntimeError):
    """A scheduler operation was attempted with no active scope."""


class DrainLimitExceeded(FakeAsyncError, RuntimeError):
    """flush() hit its pass budget while tasks were still queued."""

    def __init__(self, max_passes: int, remaining: int) -> None:
        self.max_passes = max_passes
        self.remaining = remaining
        super().__init__(
            f"flush failed after reaching the limit of {max_passes} passes "
            f"({remaining} still queued). Does your code use a polling timeout?"
        )


class LeakedTasksOnTeardown(FakeAsyncError, RuntimeError):
    """A scope exited with tasks still queued under the 'raise' leak policy."""

    def __init__(self, report) -> None:
        self.report = report
        super().__init__(f"{report.total} task(s) still queued on scope exit: {report.summary()}")
