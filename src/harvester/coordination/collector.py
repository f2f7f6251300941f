"""Timed collection with drift interruption."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from harvester.scheduling import next_tick


class Collector:
    """Accumulates collecting time for one worker.

    Progress does not survive an interruption: after drifting out of range and
    re-approaching, the timer starts again from zero.

    Attributes:
        elapsed: Collecting time in the current uninterrupted segment.
        interruptions: Drift interruptions during the last collect() call.
    """

    def __init__(self) -> None:
        self.elapsed = 0.0
        self.interruptions = 0

    async def collect(
        self,
        duration: float,
        is_missing: Callable[[], bool],
        is_out_of_range: Callable[[], bool],
        reacquire: Callable[[], Awaitable[bool]] | None = None,
    ) -> bool:
        """Collect for `duration` seconds of uninterrupted in-range time.

        Args:
            duration: Required uninterrupted collecting time.
            is_missing: True once the target disappeared.
            is_out_of_range: True once the worker drifted too far.
            reacquire: Re-approach the target; resolves to False on failure.

        Returns:
            True if collection completed with the target still present.
        """
        self.elapsed = 0.0
        self.interruptions = 0

        # Presence and range are checked after every tick, including the last.
        while True:
            if is_missing():
                return False

            if is_out_of_range():
                self.interruptions += 1
                self.elapsed = 0.0
                if reacquire is None or not await reacquire():
                    return False
                continue

            if self.elapsed >= duration:
                return True

            self.elapsed += await next_tick()
