"""Simulation: wires one collection point, its fleet and its resource field.

Usage:
    sim = Simulation(
        worker_spawn_points=[(2, 0, 0), (-2, 0, 0)],
        resource_spawn_points=[(15, 0, 5), (-12, 0, 9), (4, 0, -20)],
        seed=7,
    )
    with sim:
        sim.run(duration=60.0, dt=0.02)
    print(sim.counter.text)
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable

from harvester.config import SimulationConfig
from harvester.coordination import DeliveryCounter, DeliveryEvent, Dispatcher, Scanner, Worker
from harvester.core.geometry import ZERO, Vec3, within_range
from harvester.scheduling import TaskHandle, TickScheduler, every
from harvester.spawning import ResourceHooks, SpawnPoint, Spawner, WorkerHooks
from harvester.world import CollectionPoint, Resource, StraightLineMover, World

logger = logging.getLogger(__name__)

PointLike = Vec3 | tuple[float, float, float]


class Simulation:
    """Composition root for a single collection point.

    Resources delivered to the collection point are handed back to the
    resource spawner, which frees their spawn point for the next spawn.
    Resources a worker had to drop outside the scan radius (after a failed
    delivery) can never be rediscovered, so a sweep on the scan cadence
    returns them to the spawner as well.

    Args:
        config: All tunables. Defaults load from the environment.
        base_position: Where the collection point (and scanner) sits.
        worker_spawn_points: Locations workers spawn at (their homes).
        resource_spawn_points: Locations resources spawn at.
        seed: Seed for spawn point selection.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        *,
        base_position: PointLike = ZERO,
        worker_spawn_points: Iterable[PointLike] = (),
        resource_spawn_points: Iterable[PointLike] = (),
        seed: int | None = None,
    ) -> None:
        self.config = config or SimulationConfig()
        self.world = World()
        self.scheduler = TickScheduler()
        rng = random.Random(seed)

        self.collection_point = CollectionPoint(Vec3.of(base_position))
        self.world.spawn(self.collection_point)

        worker_settings = self.config.worker
        self.mover = StraightLineMover(worker_settings.move_speed, worker_settings.retarget_interval)

        self.scanner = Scanner(self.world, self.world, self.collection_point, self.config.scanner)
        self.dispatcher = Dispatcher(self.scanner, self.collection_point, self.config.dispatch)
        self.worker_spawner: Spawner[Worker] = Spawner(
            [SpawnPoint(p) for p in worker_spawn_points],
            WorkerHooks(self.world, self.scheduler, self.mover, worker_settings),
            self.config.worker_spawner,
            rng=rng,
            name="worker-spawner",
        )
        self.resource_spawner: Spawner[Resource] = Spawner(
            [SpawnPoint(p) for p in resource_spawn_points],
            ResourceHooks(self.world),
            self.config.resource_spawner,
            rng=rng,
            name="resource-spawner",
        )
        self.counter = DeliveryCounter()
        self._sweeper: TaskHandle | None = None
        self._started = False

    @property
    def delivered(self) -> int:
        return self.dispatcher.delivered_count

    @property
    def time(self) -> float:
        return self.scheduler.time

    @property
    def started(self) -> bool:
        return self._started

    def workers(self) -> list[Worker]:
        return self.world.bodies(Worker)

    def resources(self) -> list[Resource]:
        return self.world.bodies(Resource)

    def start(self) -> None:
        """Register observers and start every periodic component."""
        if self._started:
            return
        self.dispatcher.add_delivery_observer(self._recycle_delivered)
        self.counter.attach(self.dispatcher)
        self.worker_spawner.start(self.scheduler)
        self.resource_spawner.start(self.scheduler)
        self.scanner.start(self.scheduler)
        self.dispatcher.start(self.scheduler)
        self._sweeper = self.scheduler.spawn(
            every(self.config.scanner.interval, self.recycle_strays, run_first=False),
            name="stray-sweeper",
        )
        self._started = True
        logger.info("Simulation started")

    def stop(self) -> None:
        """Stop every component and unregister observers."""
        if not self._started:
            return
        self.dispatcher.stop()
        self.scanner.stop()
        if self._sweeper is not None:
            self._sweeper.stop()
            self._sweeper = None
        self.worker_spawner.stop()
        self.resource_spawner.stop()
        self.scheduler.stop_all()
        self.counter.detach()
        self.dispatcher.remove_delivery_observer(self._recycle_delivered)
        self._started = False
        logger.info("Simulation stopped after %.2fs, %d delivered", self.time, self.delivered)

    def step(self, dt: float) -> None:
        self.scheduler.step(dt)

    def run(self, duration: float, dt: float = 0.02) -> None:
        """Simulate `duration` seconds synchronously. Starts if needed."""
        self.start()
        self.scheduler.run(duration, dt)

    async def run_async(self, duration: float, dt: float = 0.02, realtime: bool = True) -> None:
        """Simulate inside a running asyncio loop. Starts if needed."""
        self.start()
        await self.scheduler.run_async(duration, dt, realtime=realtime)

    def recycle_strays(self) -> int:
        """Release resting resources that lie outside the scan radius.

        A resource still sitting on its own spawn point is left alone.

        Returns:
            Number of resources handed back to the resource spawner.
        """
        center = self.collection_point.position
        radius = self.config.scanner.radius
        strays = []
        for resource in self.resources():
            point = self.resource_spawner.owner_of(resource)
            if point is None or resource.parent is not None:
                continue
            at_spawn = resource.position == point.position
            if at_spawn or within_range(resource.position, center, radius):
                continue
            strays.append(resource)

        for resource in strays:
            logger.debug("Recycling stray %r", resource)
            self.resource_spawner.release(resource)
        return len(strays)

    def _recycle_delivered(self, event: DeliveryEvent) -> None:
        self.resource_spawner.release(event.resource)

    def __enter__(self) -> Simulation:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
