"""Pooled spawning with exclusive spawn point leases."""

from harvester.spawning.hooks import ResourceHooks, WorkerHooks
from harvester.spawning.spawn_point import SpawnPoint
from harvester.spawning.spawner import SpawnHooks, Spawner

__all__ = [
    "SpawnPoint",
    "Spawner",
    "SpawnHooks",
    "WorkerHooks",
    "ResourceHooks",
]
