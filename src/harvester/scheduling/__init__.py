"""Cooperative tick scheduling."""

from harvester.scheduling.models import (
    CancellationToken,
    SchedulerError,
    TaskCancelled,
    TaskStatus,
)
from harvester.scheduling.scheduler import (
    TaskHandle,
    TickScheduler,
    every,
    next_tick,
    wait_seconds,
)

__all__ = [
    # Scheduler
    "TickScheduler",
    "TaskHandle",
    # Suspension points
    "next_tick",
    "wait_seconds",
    "every",
    # Models
    "CancellationToken",
    "TaskStatus",
    "TaskCancelled",
    "SchedulerError",
]
