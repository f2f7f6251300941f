"""World models shared by capability protocols and implementations."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from harvester.core.geometry import Vec3


class MoveOutcome(Enum):
    """Result of a single move-toward request."""

    ARRIVED = "arrived"
    CANCELED = "canceled"
    TIMED_OUT = "timed_out"


TargetProvider = Callable[[], Vec3]
"""Returns the live target position. Sampled once per retarget interval."""

CancelPredicate = Callable[[], bool]
"""Returns True when the move should be abandoned. Checked every tick."""
