"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from harvester import (
    CollectionPoint,
    Dispatcher,
    DispatchSettings,
    Resource,
    Scanner,
    ScannerSettings,
    StraightLineMover,
    TickScheduler,
    Vec3,
    Worker,
    WorkerSettings,
    World,
)


def _run_until(
    scheduler: TickScheduler, predicate, dt: float = 0.05, timeout: float = 60.0
) -> float:
    elapsed = 0.0
    while not predicate():
        if elapsed >= timeout:
            raise AssertionError(f"Condition not reached within {timeout}s of simulated time")
        scheduler.step(dt)
        elapsed += dt
    return elapsed


@pytest.fixture
def run_until():
    """Step a scheduler until a predicate holds. Returns simulated seconds spent."""
    return _run_until


@pytest.fixture
def world():
    """Fresh World instance."""
    return World()


@pytest.fixture
def scheduler():
    """Fresh TickScheduler."""
    return TickScheduler()


@pytest.fixture
def worker_settings():
    """Fast, small-scale cycle tunables."""
    return WorkerSettings(
        move_speed=5.0,
        collection_range=1.0,
        collection_time=1.0,
        retarget_interval=0.1,
        resource_timeout=10.0,
        return_timeout=15.0,
        delivery_range=1.0,
        arrival_tolerance=0.1,
    )


@pytest.fixture
def collection_point(world):
    """Collection point spawned at the origin."""
    point = CollectionPoint(Vec3(0, 0, 0))
    world.spawn(point)
    return point


@pytest.fixture
def scanner(world, collection_point):
    return Scanner(world, world, collection_point, ScannerSettings(radius=40.0, interval=1.0))


@pytest.fixture
def dispatcher(scanner, collection_point):
    return Dispatcher(scanner, collection_point, DispatchSettings())


@pytest.fixture
def make_worker(world, scheduler, worker_settings):
    """Factory: spawn a worker whose home is `position`."""

    def _make(position=(0.0, 0.0, -3.0), settings=None) -> Worker:
        settings = settings or worker_settings
        mover = StraightLineMover(settings.move_speed, settings.retarget_interval)
        worker = Worker(scheduler, mover, world, settings)
        world.spawn(worker)
        worker.init(Vec3.of(position))
        return worker

    return _make


@pytest.fixture
def make_resource(world):
    """Factory: spawn a resource at `position`."""

    def _make(position) -> Resource:
        resource = Resource(Vec3.of(position))
        world.spawn(resource)
        return resource

    return _make
