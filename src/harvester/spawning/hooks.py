"""Spawn hooks for the two pooled body types."""

from __future__ import annotations

from harvester.config import WorkerSettings
from harvester.coordination.carry import CarryHandler
from harvester.coordination.worker import Worker
from harvester.core.geometry import Vec3
from harvester.scheduling import TickScheduler
from harvester.world.entities import Resource
from harvester.world.protocol import MovementProvider
from harvester.world.world import World


class WorkerHooks:
    """Creates workers and moves them in and out of the world."""

    def __init__(
        self,
        world: World,
        scheduler: TickScheduler,
        mover: MovementProvider,
        settings: WorkerSettings | None = None,
    ) -> None:
        self._world = world
        self._scheduler = scheduler
        self._mover = mover
        self._settings = settings or WorkerSettings()

    def create(self) -> Worker:
        return Worker(self._scheduler, self._mover, self._world, self._settings)

    def on_acquire(self, worker: Worker) -> None:
        self._world.spawn(worker)

    def on_release(self, worker: Worker) -> None:
        worker.stop()
        self._world.despawn(worker)

    def on_destroy(self, worker: Worker) -> None:
        worker.stop()
        self._world.despawn(worker)

    def initialize(self, worker: Worker, position: Vec3) -> None:
        worker.init(position)


class ResourceHooks:
    """Creates resources and resets their carry state across reuse."""

    def __init__(self, world: World) -> None:
        self._world = world
        self._carry = CarryHandler()

    def create(self) -> Resource:
        return Resource()

    def on_acquire(self, resource: Resource) -> None:
        self._world.spawn(resource)

    def on_release(self, resource: Resource) -> None:
        resource.clear_delivery_listeners()
        self._carry.set_carried(resource, False)
        self._world.despawn(resource)

    def on_destroy(self, resource: Resource) -> None:
        resource.clear_delivery_listeners()
        self._world.despawn(resource)

    def initialize(self, resource: Resource, position: Vec3) -> None:
        self._carry.set_carried(resource, False)
        resource.position = position
