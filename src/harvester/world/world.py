"""World: in-memory registry of bodies.

Reference implementation of the SpatialQuery and LivenessQuery capabilities.
A brute-force scan over registered bodies is plenty for the handful of
workers and resources around a single collection point.

Usage:
    world = World()
    resource = Resource(Vec3(10, 0, 0))
    world.spawn(resource)
    world.query_near(Vec3(0, 0, 0), radius=40)  # [resource]
    world.despawn(resource)
    world.is_alive(resource.entity_id)          # False
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TypeVar

from harvester.core.geometry import Vec3
from harvester.core.identity import EntityId
from harvester.storage.allocator import EntityAllocator
from harvester.world.entities import Body

BodyT = TypeVar("BodyT", bound=Body)

logger = logging.getLogger(__name__)


class World:
    """Owns entity handles and answers spatial and liveness queries."""

    def __init__(self) -> None:
        self._allocator = EntityAllocator()
        self._bodies: dict[EntityId, Body] = {}

    def spawn(self, body: Body) -> EntityId:
        """Register a body, issue it a fresh handle and activate it.

        Raises:
            ValueError: If the body is already live in this world.
        """
        if self.is_registered(body):
            raise ValueError(f"{body!r} is already spawned")
        entity = self._allocator.allocate()
        body.entity_id = entity
        body.active = True
        body.collidable = True
        self._bodies[entity] = body
        logger.debug("Spawned %r", body)
        return entity

    def despawn(self, body: Body) -> bool:
        """Deactivate a body and invalidate its handle.

        Returns:
            False if the body was not live (already despawned or never spawned).
        """
        entity = body.entity_id
        if entity is None or self._bodies.get(entity) is not body:
            return False
        body.detach()
        body.active = False
        del self._bodies[entity]
        self._allocator.deallocate(entity)
        logger.debug("Despawned %r", body)
        return True

    def is_registered(self, body: Body) -> bool:
        return body.entity_id is not None and self._bodies.get(body.entity_id) is body

    def is_alive(self, entity_id: EntityId | None) -> bool:
        if not self._allocator.is_alive(entity_id):
            return False
        body = self._bodies.get(entity_id)  # type: ignore[arg-type]
        return body is not None and body.active

    def get(self, entity_id: EntityId) -> Body | None:
        return self._bodies.get(entity_id)

    def query_near(self, point: Vec3, radius: float) -> list[Body]:
        """Active, collidable bodies within radius of point (inclusive)."""
        max_sqr = radius * radius
        return [
            body
            for body in self._bodies.values()
            if body.active and body.collidable and body.position.sqr_distance(point) <= max_sqr
        ]

    def bodies(self, kind: type[BodyT]) -> list[BodyT]:
        """All live bodies of a given type."""
        return [b for b in self._bodies.values() if isinstance(b, kind)]

    def __iter__(self) -> Iterator[Body]:
        return iter(list(self._bodies.values()))

    def __len__(self) -> int:
        return len(self._bodies)
