"""Cooperative tick scheduler.

All periodic components (Scanner, Dispatcher, Spawner) and every active worker
cycle run as native coroutines multiplexed onto a single tick. Code between two
suspension points runs atomically with respect to every other task, so shared
state (claims, busy flags, spawn point leases) needs no locks.

Usage:
    scheduler = TickScheduler()

    async def patrol():
        while True:
            dt = await next_tick()
            ...
            await wait_seconds(0.5)

    handle = scheduler.spawn(patrol(), name="patrol")
    scheduler.run(duration=10.0, dt=0.02)     # deterministic, synchronous
    await scheduler.run_async(10.0, 0.02)     # paced by asyncio.sleep
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Coroutine, Generator
from typing import Any

from harvester.scheduling.models import (
    CancellationToken,
    SchedulerError,
    TaskCancelled,
    TaskStatus,
)

logger = logging.getLogger(__name__)

_EPSILON = 1e-9


class _Suspend:
    """Awaitable yielded to the scheduler. Resumes with the time waited."""

    __slots__ = ("delay",)

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay

    def __await__(self) -> Generator[_Suspend, float, float]:
        waited = yield self
        return waited


def next_tick() -> _Suspend:
    """Suspend until the next tick. Resumes with that tick's delta."""
    return _Suspend(0.0)


def wait_seconds(seconds: float) -> _Suspend:
    """Suspend until at least `seconds` of accumulated tick time has passed."""
    if seconds < 0:
        raise ValueError(f"Cannot wait a negative duration: {seconds}")
    return _Suspend(seconds)


async def every(interval: float, callback: Callable[[], Any], *, run_first: bool = True) -> None:
    """Call `callback` every `interval` seconds until the task is stopped."""
    if run_first:
        callback()
    while True:
        await wait_seconds(interval)
        callback()


class TaskHandle:
    """Handle to a coroutine running on a TickScheduler."""

    def __init__(
        self,
        scheduler: TickScheduler,
        coro: Coroutine[Any, Any, Any],
        name: str,
    ) -> None:
        self.name = name
        self.token = CancellationToken()
        self.status = TaskStatus.RUNNING
        self.result: Any = None
        self.exception: BaseException | None = None
        self._scheduler = scheduler
        self._coro = coro
        self._remaining = 0.0
        self._waited = 0.0
        self._cancel_delivered = False

    @property
    def done(self) -> bool:
        return self.status is not TaskStatus.RUNNING

    @property
    def cancelled(self) -> bool:
        return self.status is TaskStatus.CANCELLED

    def cancel(self) -> None:
        """Request cooperative cancellation at the next suspension point."""
        if not self.done:
            self.token.cancel()

    def stop(self) -> None:
        """Forcibly end the task now. Its ``finally`` blocks still run."""
        self._scheduler._stop(self)

    def _finish(self, status: TaskStatus, exception: BaseException | None = None) -> None:
        self.status = status
        self.exception = exception

    def __repr__(self) -> str:
        return f"TaskHandle({self.name!r}, {self.status.name})"


class TickScheduler:
    """Single-threaded cooperative scheduler driven by explicit ticks.

    Each ``step(dt)`` resumes every ready task exactly once, in spawn order.
    Tasks spawned during a step run their first segment immediately and are
    first resumed on the following step.

    Args:
        paused: Start paused. A paused scheduler ignores ``step`` so that
            no time (and no timeout budget) elapses.
    """

    def __init__(self, paused: bool = False) -> None:
        self.paused = paused
        self._tasks: list[TaskHandle] = []
        self._time = 0.0
        self._tick = 0
        self._stepping = False
        self._current: TaskHandle | None = None
        self._spawned = 0

    @property
    def time(self) -> float:
        """Accumulated simulated time in seconds."""
        return self._time

    @property
    def tick_count(self) -> int:
        return self._tick

    @property
    def current(self) -> TaskHandle | None:
        """Task whose code is executing right now, if any."""
        return self._current

    def tasks(self) -> list[TaskHandle]:
        """Live (not yet finished) tasks in spawn order."""
        return [h for h in self._tasks if not h.done]

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> TaskHandle:
        """Start a coroutine and run it up to its first suspension point."""
        if not inspect.iscoroutine(coro):
            raise SchedulerError(f"spawn() expects a coroutine, got {type(coro).__name__}")
        self._spawned += 1
        handle = TaskHandle(self, coro, name or f"task-{self._spawned}")
        self._tasks.append(handle)
        # A just-created coroutine only accepts None.
        self._advance(handle, None)
        return handle

    def step(self, dt: float) -> None:
        """Advance the clock by dt and resume every ready task once."""
        if dt < 0:
            raise ValueError(f"Tick delta must be non-negative, got {dt}")
        if self._stepping:
            raise SchedulerError("step() called from inside a running task")
        if self.paused:
            return

        self._time += dt
        self._tick += 1
        self._stepping = True
        try:
            for handle in list(self._tasks):
                if handle.done:
                    continue
                handle._waited += dt
                handle._remaining -= dt
                if handle._remaining > _EPSILON and not handle.token.cancelled:
                    continue
                self._advance(handle, handle._waited)
        finally:
            self._stepping = False
            self._tasks = [h for h in self._tasks if not h.done]

    def run(self, duration: float, dt: float) -> None:
        """Step synchronously until `duration` seconds have been simulated."""
        if dt <= 0:
            raise ValueError(f"Tick delta must be positive, got {dt}")
        elapsed = 0.0
        while elapsed + _EPSILON < duration:
            self.step(dt)
            elapsed += dt

    async def run_async(self, duration: float, dt: float, realtime: bool = True) -> None:
        """Step from inside an asyncio loop, yielding to it between ticks.

        With ``realtime`` the loop sleeps ``dt`` between ticks, so the
        simulation advances at wall-clock pace.
        """
        if dt <= 0:
            raise ValueError(f"Tick delta must be positive, got {dt}")
        elapsed = 0.0
        while elapsed + _EPSILON < duration:
            self.step(dt)
            elapsed += dt
            await asyncio.sleep(dt if realtime else 0)

    def stop_all(self) -> None:
        """Forcibly stop every live task (teardown)."""
        for handle in list(self._tasks):
            handle.stop()
        self._tasks = [h for h in self._tasks if not h.done]

    def _advance(self, handle: TaskHandle, waited: float | None) -> None:
        previous = self._current
        self._current = handle
        try:
            if handle.token.cancelled and not handle._cancel_delivered:
                handle._cancel_delivered = True
                request = handle._coro.throw(TaskCancelled(handle.name))
            else:
                request = handle._coro.send(waited)
        except StopIteration as stop:
            handle.result = stop.value
            handle._finish(TaskStatus.COMPLETED)
            return
        except TaskCancelled:
            handle._finish(TaskStatus.CANCELLED)
            logger.debug("Task %s cancelled", handle.name)
            return
        except Exception as exc:
            handle._finish(TaskStatus.FAILED, exc)
            raise
        finally:
            self._current = previous

        if not isinstance(request, _Suspend):
            handle._coro.close()
            handle._finish(TaskStatus.FAILED)
            raise SchedulerError(
                f"Task {handle.name} awaited {request!r}; only next_tick() and "
                "wait_seconds() are supported"
            )
        handle._remaining = request.delay
        handle._waited = 0.0

    def _stop(self, handle: TaskHandle) -> None:
        if handle.done:
            return
        handle.token.cancel()
        if handle._coro.cr_running:
            # Cannot close a coroutine from inside itself; deliver at next suspension.
            return
        handle._coro.close()
        handle._finish(TaskStatus.CANCELLED)
        logger.debug("Task %s stopped", handle.name)
