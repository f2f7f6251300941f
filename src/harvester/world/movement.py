"""Straight-line MovementProvider.

Stands in for a navmesh agent: no obstacles, constant speed, target sampled
every retarget interval the way a path destination would be refreshed.
"""

from __future__ import annotations

from harvester.scheduling import next_tick
from harvester.world.entities import Body
from harvester.world.models import CancelPredicate, MoveOutcome, TargetProvider

MIN_RETARGET_INTERVAL = 0.01


class StraightLineMover:
    """Moves bodies straight at their target at a constant speed.

    Args:
        speed: Units per second.
        retarget_interval: How often the live target position is re-sampled.
    """

    def __init__(self, speed: float, retarget_interval: float = 0.15) -> None:
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}")
        self.speed = speed
        self.retarget_interval = max(MIN_RETARGET_INTERVAL, retarget_interval)

    async def move_toward(
        self,
        body: Body,
        target: TargetProvider,
        stop_distance: float,
        timeout: float,
        cancel: CancelPredicate | None = None,
    ) -> MoveOutcome:
        elapsed = 0.0
        until_retarget = 0.0
        destination = body.position
        stop_sqr = stop_distance * stop_distance

        while True:
            if cancel is not None and cancel():
                return MoveOutcome.CANCELED

            if until_retarget <= 0.0:
                destination = target()
                until_retarget = self.retarget_interval

            if body.position.sqr_distance(destination) <= stop_sqr:
                return MoveOutcome.ARRIVED

            if elapsed >= timeout:
                return MoveOutcome.TIMED_OUT

            dt = await next_tick()
            body.position = body.position.move_towards(destination, self.speed * dt)
            elapsed += dt
            until_retarget -= dt
