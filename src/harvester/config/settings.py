"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for every
tunable of the harvesting core.

Usage:
    from harvester.config import DispatchSettings, ScannerSettings

    # Load from environment variables (SCANNER_*, DISPATCH_*, ...)
    scanner = ScannerSettings()

    # Or override with explicit values
    dispatch = DispatchSettings(max_assignments_per_tick=5, allow_far_units=False)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env(prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class ScannerSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the Scanner around the collection point.

    Attributes:
        radius: Spatial query radius.
        interval: Seconds between scan ticks.

    Environment Variables:
        SCANNER_RADIUS
        SCANNER_INTERVAL
    """

    model_config = _env("SCANNER_")

    radius: float = Field(default=40.0, gt=0)
    interval: float = Field(default=3.0, gt=0)


class DispatchSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the Dispatcher.

    Attributes:
        interval: Seconds between dispatch ticks.
        max_assignments_per_tick: Upper bound on new assignments per tick.
        allow_far_units: When False, workers farther than
            unit_max_distance_from_base are not eligible.
        unit_max_distance_from_base: Eligibility radius for the far-unit policy.

    Environment Variables:
        DISPATCH_INTERVAL
        DISPATCH_MAX_ASSIGNMENTS_PER_TICK
        DISPATCH_ALLOW_FAR_UNITS
        DISPATCH_UNIT_MAX_DISTANCE_FROM_BASE
    """

    model_config = _env("DISPATCH_")

    interval: float = Field(default=0.5, gt=0)
    max_assignments_per_tick: int = Field(default=3, ge=0)
    allow_far_units: bool = True
    unit_max_distance_from_base: float = Field(default=60.0, ge=0)


class WorkerSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for a worker's collect-carry-deliver cycle.

    Attributes:
        move_speed: Units per second for the straight-line mover.
        collection_range: Distance at which collection can start.
        collection_time: Seconds of uninterrupted collecting before pickup.
        range_slack: Multiplier on collection_range before collection is
            interrupted by drift.
        retarget_interval: Seconds between target re-samples while moving.
        resource_timeout: Budget for reaching the resource.
        return_timeout: Budget for each leg back to base or home.
        delivery_range: Arrival radius around the collection point.
        arrival_tolerance: Arrival radius around the home position.
        carry_offset: Resource position relative to the carrying worker.

    Environment Variables:
        WORKER_MOVE_SPEED, WORKER_COLLECTION_RANGE, WORKER_COLLECTION_TIME, ...
        WORKER_CARRY_OFFSET as JSON, e.g. "[0, 1.2, 0.6]"
    """

    model_config = _env("WORKER_")

    move_speed: float = Field(default=6.0, gt=0)
    collection_range: float = Field(default=1.5, gt=0)
    collection_time: float = Field(default=2.0, ge=0)
    range_slack: float = Field(default=1.25, ge=1.0)
    retarget_interval: float = Field(default=0.15, gt=0)
    resource_timeout: float = Field(default=10.0, gt=0)
    return_timeout: float = Field(default=15.0, gt=0)
    delivery_range: float = Field(default=1.0, gt=0)
    arrival_tolerance: float = Field(default=0.1, gt=0)
    carry_offset: tuple[float, float, float] = (0.0, 1.2, 0.6)


class SpawnerSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for a pooled spawner.

    Attributes:
        repeat_rate: Seconds between spawn attempts.
        pool_capacity: Released instances retained for reuse.
        pool_max_size: Maximum instances alive at once (active + retained).
        collection_check: Report releases of instances not checked out.
        max_active: Optional cap on concurrently spawned instances.

    Environment Variables:
        SPAWNER_REPEAT_RATE
        SPAWNER_POOL_CAPACITY
        SPAWNER_POOL_MAX_SIZE
        SPAWNER_COLLECTION_CHECK
        SPAWNER_MAX_ACTIVE
    """

    model_config = _env("SPAWNER_")

    repeat_rate: float = Field(default=2.0, gt=0)
    pool_capacity: int = Field(default=3, ge=0)
    pool_max_size: int = Field(default=3, ge=1)
    collection_check: bool = True
    max_active: int | None = Field(default=None, ge=0)


class WorkerSpawnerSettings(SpawnerSettings):
    """Spawner settings for workers (WORKER_SPAWNER_*). Caps workers at 5."""

    model_config = _env("WORKER_SPAWNER_")

    pool_capacity: int = Field(default=5, ge=0)
    pool_max_size: int = Field(default=5, ge=1)
    max_active: int | None = Field(default=5, ge=0)


class ResourceSpawnerSettings(SpawnerSettings):
    """Spawner settings for resources (RESOURCE_SPAWNER_*)."""

    model_config = _env("RESOURCE_SPAWNER_")


@dataclass
class SimulationConfig:
    """All settings for one collection point and its fleet.

    Each section loads from its own environment prefix unless passed in.
    """

    scanner: ScannerSettings = field(default_factory=ScannerSettings)
    dispatch: DispatchSettings = field(default_factory=DispatchSettings)
    worker: WorkerSettings = field(default_factory=WorkerSettings)
    worker_spawner: SpawnerSettings = field(default_factory=WorkerSpawnerSettings)
    resource_spawner: SpawnerSettings = field(default_factory=ResourceSpawnerSettings)
