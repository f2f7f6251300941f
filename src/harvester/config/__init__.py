"""Configuration module using Pydantic Settings.

Provides typed configuration with environment variable support.

Usage:
    from harvester.config import SimulationConfig, WorkerSettings

    config = SimulationConfig(worker=WorkerSettings(collection_time=1.0))
"""

from harvester.config.settings import (
    DispatchSettings,
    ResourceSpawnerSettings,
    ScannerSettings,
    SimulationConfig,
    SpawnerSettings,
    WorkerSettings,
    WorkerSpawnerSettings,
)

__all__ = [
    "ScannerSettings",
    "DispatchSettings",
    "WorkerSettings",
    "SpawnerSettings",
    "WorkerSpawnerSettings",
    "ResourceSpawnerSettings",
    "SimulationConfig",
]
