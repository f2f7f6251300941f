"""Scheduling models: task status, cancellation tokens and errors."""

from __future__ import annotations

from enum import Enum, auto


class TaskStatus(Enum):
    """Lifecycle of a scheduled task."""

    RUNNING = auto()
    """Started and suspended at (or executing between) suspension points."""

    COMPLETED = auto()
    """Coroutine returned normally."""

    CANCELLED = auto()
    """Stopped through its cancellation token or forcibly closed."""

    FAILED = auto()
    """An exception escaped the coroutine."""


class TaskCancelled(Exception):
    """Thrown into a task at its next suspension point after cancel()."""


class SchedulerError(RuntimeError):
    """Scheduler misuse (re-entrant stepping, foreign awaitables)."""


class CancellationToken:
    """Cooperative cancellation flag handed to each task.

    The scheduler checks the token at every suspension point. Code running
    inside a task may also poll ``cancelled`` to bail out early.
    """

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __bool__(self) -> bool:
        return self._cancelled
