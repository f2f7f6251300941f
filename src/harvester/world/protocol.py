"""Capability protocols the coordination core consumes.

The core never moves bodies or tests overlap itself. It relies on these three
seams, so a physics engine, a navmesh or a test double can be plugged in.

Usage:
    world = World()                    # SpatialQuery + LivenessQuery
    mover = StraightLineMover(speed=5) # MovementProvider
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from harvester.core.geometry import Vec3
from harvester.core.identity import EntityId

if TYPE_CHECKING:
    from harvester.world.entities import Body
    from harvester.world.models import CancelPredicate, MoveOutcome, TargetProvider


@runtime_checkable
class SpatialQuery(Protocol):
    """"All collidable objects within radius R of point P"."""

    def query_near(self, point: Vec3, radius: float) -> list[Body]:
        """Return active, collidable bodies within radius (may be empty)."""
        ...


@runtime_checkable
class LivenessQuery(Protocol):
    """Liveness of entity handles (resources, workers, collection points)."""

    def is_alive(self, entity_id: EntityId | None) -> bool:
        """True if the handle refers to a live, active body."""
        ...


@runtime_checkable
class MovementProvider(Protocol):
    """Moves a body toward a (possibly moving) target inside a task."""

    async def move_toward(
        self,
        body: Body,
        target: TargetProvider,
        stop_distance: float,
        timeout: float,
        cancel: CancelPredicate | None = None,
    ) -> MoveOutcome:
        """Suspend the calling task until arrived, canceled or timed out.

        Args:
            body: Body to move.
            target: Live target position, re-sampled periodically.
            stop_distance: Arrival radius around the target.
            timeout: Budget in accumulated tick time.
            cancel: Checked every tick; True abandons the move.
        """
        ...
