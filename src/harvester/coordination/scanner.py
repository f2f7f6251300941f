"""Scanner: periodic view of resources and workers around the collection point.

The scanner owns the claim bookkeeping. Claims are keyed by entity handle, so
a pooled resource that comes back under a new handle starts unclaimed.

Usage:
    scanner = Scanner(world, world, collection_point)
    scanner.start(scheduler)                  # scans every `interval` seconds
    resource = scanner.next_unclaimed_resource()  # claims it
    scanner.release_claim(resource.entity_id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from harvester.config import ScannerSettings
from harvester.core.geometry import Vec3
from harvester.core.identity import EntityId
from harvester.coordination.worker import Worker
from harvester.scheduling import TaskHandle, TickScheduler, every
from harvester.world.entities import Body, Resource
from harvester.world.protocol import LivenessQuery, SpatialQuery

logger = logging.getLogger(__name__)


class ClaimState(Enum):
    """Dispatch reservation state of a tracked resource."""

    UNCLAIMED = "unclaimed"
    CLAIMED = "claimed"


@dataclass(slots=True)
class TrackedResource:
    """A resource as seen by the last scan, with its claim state."""

    resource: Resource
    entity_id: EntityId
    state: ClaimState = ClaimState.UNCLAIMED


class Scanner:
    """Discovers resources and workers near a center body.

    Every scan replaces the worker set and merges resources: new ones enter
    unclaimed, known ones keep their claim state, and entries that left the
    result set, died, or were deactivated are purged together with their
    delivery subscription. Each scan is applied in one synchronous pass, so
    no other task ever observes a half-updated view.

    Args:
        spatial: Spatial query capability.
        liveness: Liveness capability.
        center: Body the scan is centered on (the collection point).
        settings: Radius and interval.
    """

    def __init__(
        self,
        spatial: SpatialQuery,
        liveness: LivenessQuery,
        center: Body,
        settings: ScannerSettings | None = None,
    ) -> None:
        self.settings = settings or ScannerSettings()
        self._spatial = spatial
        self._liveness = liveness
        self._center = center
        self._resources: dict[EntityId, TrackedResource] = {}
        self._workers: list[Worker] = []
        self._task: TaskHandle | None = None
        self._scans = 0

    @property
    def position(self) -> Vec3:
        return self._center.position

    @property
    def scan_count(self) -> int:
        return self._scans

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done

    def start(self, scheduler: TickScheduler) -> None:
        """Scan every `interval` seconds. The first scan happens after one interval."""
        if self.running:
            return
        self._task = scheduler.spawn(
            every(self.settings.interval, self.scan, run_first=False), name="scanner"
        )
        logger.info("Scanner started (radius=%s, interval=%s)", self.settings.radius, self.settings.interval)

    def stop(self) -> None:
        """Stop scanning and drop every tracked entry and subscription."""
        if self._task is not None:
            self._task.stop()
            self._task = None
        for entity_id in list(self._resources):
            self._untrack(entity_id)
        self._workers = []
        logger.info("Scanner stopped")

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def scan(self) -> None:
        """Run one spatial query and refresh the tracked view."""
        found = self._spatial.query_near(self.position, self.settings.radius)

        present: set[EntityId] = set()
        workers: list[Worker] = []
        for body in found:
            if isinstance(body, Resource):
                if body.entity_id is not None:
                    present.add(body.entity_id)
                    self._track(body, body.entity_id)
            elif isinstance(body, Worker):
                workers.append(body)

        self._workers = workers
        removed = self.prune(present)
        self._scans += 1
        logger.debug(
            "Scan %d: %d resources tracked (%d purged), %d workers",
            self._scans,
            len(self._resources),
            removed,
            len(workers),
        )

    def prune(self, present: set[EntityId] | None = None) -> int:
        """Purge dead or deactivated entries, and with `present`, absent ones.

        Returns:
            Number of entries removed.
        """
        stale = [
            entity_id
            for entity_id, tracked in self._resources.items()
            if not self._is_valid(tracked) or (present is not None and entity_id not in present)
        ]
        for entity_id in stale:
            self._untrack(entity_id)
        return len(stale)

    # ------------------------------------------------------------------
    # Queries used by the dispatcher
    # ------------------------------------------------------------------

    def next_unclaimed_resource(self) -> Resource | None:
        """Claim and return one unclaimed live resource, or None.

        Which one is returned among several candidates is unspecified.
        """
        self.prune()
        for tracked in self._resources.values():
            if tracked.state is ClaimState.UNCLAIMED:
                tracked.state = ClaimState.CLAIMED
                logger.debug("Claimed %r", tracked.resource)
                return tracked.resource
        return None

    def release_claim(self, entity_id: EntityId | None) -> bool:
        """Make a claimed resource available again.

        Returns:
            False if the handle is not tracked or not claimed.
        """
        if entity_id is None:
            return False
        tracked = self._resources.get(entity_id)
        if tracked is None or tracked.state is ClaimState.UNCLAIMED:
            return False
        tracked.state = ClaimState.UNCLAIMED
        logger.debug("Released claim on %r", tracked.resource)
        return True

    def forget(self, resource: Resource) -> bool:
        """Stop tracking a resource (it was delivered or recycled)."""
        entity_id = resource.entity_id
        tracked = self._resources.get(entity_id) if entity_id is not None else None
        if tracked is None or tracked.resource is not resource:
            return False
        self._untrack(entity_id)  # type: ignore[arg-type]
        return True

    def workers(self) -> list[Worker]:
        """Workers seen by the last scan that are still live."""
        self._workers = [
            w for w in self._workers if w.active and self._liveness.is_alive(w.entity_id)
        ]
        return list(self._workers)

    def tracked_resources(self) -> dict[EntityId, ClaimState]:
        """Snapshot of tracked handles and their claim state."""
        return {entity_id: t.state for entity_id, t in self._resources.items()}

    def is_tracked(self, entity_id: EntityId | None) -> bool:
        return entity_id in self._resources

    def is_claimed(self, entity_id: EntityId | None) -> bool:
        tracked = self._resources.get(entity_id) if entity_id is not None else None
        return tracked is not None and tracked.state is ClaimState.CLAIMED

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _track(self, resource: Resource, entity_id: EntityId) -> None:
        if entity_id in self._resources:
            return
        self._resources[entity_id] = TrackedResource(resource, entity_id)
        resource.subscribe_delivered(self._on_delivered)

    def _untrack(self, entity_id: EntityId) -> None:
        tracked = self._resources.pop(entity_id)
        # The same object may be tracked again under a newer handle.
        if not any(t.resource is tracked.resource for t in self._resources.values()):
            tracked.resource.unsubscribe_delivered(self._on_delivered)

    def _is_valid(self, tracked: TrackedResource) -> bool:
        resource = tracked.resource
        return (
            resource.active
            and resource.entity_id == tracked.entity_id
            and self._liveness.is_alive(tracked.entity_id)
        )

    def _on_delivered(self, resource: Resource) -> None:
        self.forget(resource)
