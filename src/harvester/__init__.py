"""Harvester: task coordination for a fleet of resource-collecting workers.

A Scanner keeps a view of the resources and workers around a collection
point, a Dispatcher assigns idle workers to unclaimed resources each tick,
and every Worker runs a move-collect-carry-deliver cycle as a cooperative
task. Pooled Spawners keep the field stocked.

Usage:
    from harvester import Simulation

    sim = Simulation(
        worker_spawn_points=[(2, 0, 0), (-2, 0, 0)],
        resource_spawn_points=[(15, 0, 5), (-12, 0, 9)],
        seed=1,
    )
    sim.run(duration=30.0, dt=0.02)
    print(sim.delivered)
"""

__version__ = "0.1.0"

# Configuration
from harvester.config import (
    DispatchSettings,
    ScannerSettings,
    SimulationConfig,
    SpawnerSettings,
    WorkerSettings,
)

# Coordination
from harvester.coordination import (
    Assignment,
    ClaimState,
    DeliveryCounter,
    DeliveryEvent,
    Dispatcher,
    Scanner,
    Worker,
    WorkerState,
)

# Core primitives
from harvester.core import EntityId, Vec3

# Pooling and spawning
from harvester.pooling import ObjectPool, PoolHooks

# Scheduling
from harvester.scheduling import (
    TaskCancelled,
    TaskHandle,
    TickScheduler,
    next_tick,
    wait_seconds,
)
from harvester.simulation import Simulation
from harvester.spawning import ResourceHooks, SpawnPoint, Spawner, WorkerHooks

# World
from harvester.world import (
    Body,
    CollectionPoint,
    MoveOutcome,
    Resource,
    StraightLineMover,
    World,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "EntityId",
    "Vec3",
    # Scheduling
    "TickScheduler",
    "TaskHandle",
    "TaskCancelled",
    "next_tick",
    "wait_seconds",
    # World
    "World",
    "Body",
    "Resource",
    "CollectionPoint",
    "MoveOutcome",
    "StraightLineMover",
    # Pooling and spawning
    "ObjectPool",
    "PoolHooks",
    "SpawnPoint",
    "Spawner",
    "WorkerHooks",
    "ResourceHooks",
    # Coordination
    "Scanner",
    "Dispatcher",
    "Worker",
    "WorkerState",
    "Assignment",
    "ClaimState",
    "DeliveryEvent",
    "DeliveryCounter",
    # Configuration
    "ScannerSettings",
    "DispatchSettings",
    "WorkerSettings",
    "SpawnerSettings",
    "SimulationConfig",
    # Composition
    "Simulation",
]
