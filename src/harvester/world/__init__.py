"""World state and external capabilities.

Architecture Note:
    world/ holds the pieces the coordination core treats as collaborators:
    bodies, the spatial/liveness queries and the movement provider. The
    in-memory World and StraightLineMover are reference implementations.
"""

from harvester.world.entities import Body, CollectionPoint, Resource
from harvester.world.models import MoveOutcome
from harvester.world.movement import StraightLineMover
from harvester.world.protocol import LivenessQuery, MovementProvider, SpatialQuery
from harvester.world.world import World

__all__ = [
    "Body",
    "Resource",
    "CollectionPoint",
    "MoveOutcome",
    "SpatialQuery",
    "LivenessQuery",
    "MovementProvider",
    "World",
    "StraightLineMover",
]
