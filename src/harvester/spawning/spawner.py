"""Generic pooled spawner with exclusive spawn point leasing.

Usage:
    spawner = Spawner(points, ResourceHooks(world), ResourceSpawnerSettings())
    spawner.start(scheduler)       # try_spawn() every repeat_rate seconds
    ...
    spawner.release(resource)      # frees its spawn point, returns it to the pool
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from typing import Generic, Protocol, TypeVar, runtime_checkable

from harvester.config import SpawnerSettings
from harvester.core.geometry import Vec3
from harvester.pooling import ObjectPool, PoolHooks
from harvester.scheduling import TaskHandle, TickScheduler, every
from harvester.spawning.spawn_point import SpawnPoint

T = TypeVar("T")

logger = logging.getLogger(__name__)


@runtime_checkable
class SpawnHooks(PoolHooks[T], Protocol[T]):
    """Pool lifecycle plus the type-specific initializer run on each spawn."""

    def initialize(self, item: T, position: Vec3) -> None:
        """Place a freshly acquired instance at its spawn position."""
        ...


class Spawner(Generic[T]):
    """Periodically places pooled instances on free spawn points.

    A spawn attempt picks a uniformly random free point, acquires an instance
    and only then leases the point, so an exhausted pool never leaves a point
    occupied. Failed attempts are silent and simply retried next cycle.

    Args:
        points: Spawn points owned by this spawner.
        hooks: Type-specific pool lifecycle and initializer.
        settings: Cadence, pool sizing and optional max_active cap.
        rng: Random source for point selection.
        name: Task name, also used in log messages.
    """

    def __init__(
        self,
        points: Iterable[SpawnPoint],
        hooks: SpawnHooks[T],
        settings: SpawnerSettings | None = None,
        rng: random.Random | None = None,
        name: str = "spawner",
    ) -> None:
        self.settings = settings or SpawnerSettings()
        self.name = name
        self._points = list(points)
        self._hooks = hooks
        self._rng = rng or random.Random()
        self._pool: ObjectPool[T] = ObjectPool(
            hooks,
            capacity=self.settings.pool_capacity,
            max_size=self.settings.pool_max_size,
            collection_check=self.settings.collection_check,
        )
        self._owners: dict[int, SpawnPoint] = {}  # id(item) -> leased point
        self._task: TaskHandle | None = None

    @property
    def points(self) -> list[SpawnPoint]:
        return list(self._points)

    @property
    def pool(self) -> ObjectPool[T]:
        return self._pool

    @property
    def active_count(self) -> int:
        return self._pool.count_active

    @property
    def inactive_count(self) -> int:
        return self._pool.count_inactive

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done

    def start(self, scheduler: TickScheduler) -> None:
        """Attempt a spawn now and then every `repeat_rate` seconds."""
        if self.running:
            return
        self._task = scheduler.spawn(every(self.settings.repeat_rate, self.try_spawn), name=self.name)
        logger.info("%s started (%d points)", self.name, len(self._points))

    def stop(self) -> None:
        if self._task is not None:
            self._task.stop()
            self._task = None
            logger.info("%s stopped", self.name)

    def close(self) -> None:
        """Stop spawning and destroy retained pool instances."""
        self.stop()
        self._pool.dispose()

    def free_points(self) -> list[SpawnPoint]:
        return [p for p in self._points if p.available]

    def try_spawn(self) -> T | None:
        """Make one spawn attempt.

        Returns:
            The spawned instance, or None if no point was free, the
            max_active cap was reached, or the pool is exhausted.
        """
        max_active = self.settings.max_active
        if max_active is not None and self.active_count >= max_active:
            return None

        candidates = self.free_points()
        if not candidates:
            return None

        item = self._pool.acquire()
        if item is None:
            return None

        point = self._rng.choice(candidates)
        point.lease()
        self._owners[id(item)] = point
        self._hooks.initialize(item, point.position)
        logger.debug("%s spawned %r at %s", self.name, item, point.position.as_tuple())
        return item

    def owner_of(self, item: T) -> SpawnPoint | None:
        """Spawn point currently leased to item, if any."""
        return self._owners.get(id(item))

    def release(self, item: T) -> bool:
        """Free item's spawn point and return it to the pool.

        Returns:
            False if the item was not checked out of this spawner's pool.
        """
        point = self._owners.pop(id(item), None)
        if point is not None:
            point.release()
        released = self._pool.release(item)
        if released:
            logger.debug("%s released %r", self.name, item)
        return released
