"""Dispatcher: the collection point's assignment loop.

Usage:
    dispatcher = Dispatcher(scanner, collection_point)
    dispatcher.add_delivery_observer(lambda event: print(event.total))
    dispatcher.start(scheduler)   # dispatch_tick() every `interval` seconds
"""

from __future__ import annotations

import logging

from harvester.config import DispatchSettings
from harvester.core.geometry import Vec3
from harvester.core.identity import EntityId
from harvester.coordination.events import DeliveryEvent, DeliveryObserver
from harvester.coordination.scanner import Scanner
from harvester.coordination.worker import Worker
from harvester.scheduling import TaskHandle, TickScheduler, every
from harvester.world.entities import CollectionPoint, Resource

logger = logging.getLogger(__name__)


class Dispatcher:
    """Matches idle workers to unclaimed resources and counts deliveries.

    Each tick takes the free workers from the scanner, closest to the
    collection point first, and assigns at most ``max_assignments_per_tick``
    of them. The tick stops at the first worker that cannot be given a
    resource: once the scanner runs dry there is nothing left to hand out.

    Args:
        scanner: Source of workers and resource claims.
        collection_point: Where workers deliver.
        settings: Interval, per-tick cap and far-unit policy.
    """

    def __init__(
        self,
        scanner: Scanner,
        collection_point: CollectionPoint,
        settings: DispatchSettings | None = None,
    ) -> None:
        self.settings = settings or DispatchSettings()
        self._scanner = scanner
        self._collection_point = collection_point
        self._observers: list[DeliveryObserver] = []
        self._delivered = 0
        self._task: TaskHandle | None = None

    @property
    def collection_point(self) -> CollectionPoint:
        return self._collection_point

    @property
    def position(self) -> Vec3:
        return self._collection_point.position

    @property
    def delivered_count(self) -> int:
        return self._delivered

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done

    def start(self, scheduler: TickScheduler) -> None:
        """Run dispatch_tick now and then every `interval` seconds."""
        if self.running:
            return
        self._task = scheduler.spawn(every(self.settings.interval, self.dispatch_tick), name="dispatcher")
        logger.info(
            "Dispatcher started (interval=%s, max_assignments_per_tick=%d)",
            self.settings.interval,
            self.settings.max_assignments_per_tick,
        )

    def stop(self) -> None:
        if self._task is not None:
            self._task.stop()
            self._task = None
            logger.info("Dispatcher stopped")

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def eligible_workers(self) -> list[Worker]:
        """Enabled, idle workers allowed by policy, closest first."""
        base = self.position
        max_distance = self.settings.unit_max_distance_from_base
        max_sqr = max_distance * max_distance

        eligible = [w for w in self._scanner.workers() if self._is_eligible(w, base, max_sqr)]
        eligible.sort(key=lambda w: w.position.sqr_distance(base))
        return eligible

    def dispatch_tick(self) -> int:
        """Issue up to max_assignments_per_tick assignments.

        Returns:
            Number of assignments made this tick.
        """
        assigned = 0
        candidates = self.eligible_workers()[: self.settings.max_assignments_per_tick]
        for worker in candidates:
            if not self._try_assign(worker):
                break
            assigned += 1

        if assigned:
            logger.debug("Dispatch tick: %d assigned of %d candidates", assigned, len(candidates))
        return assigned

    def _is_eligible(self, worker: Worker, base: Vec3, max_sqr: float) -> bool:
        if not worker.enabled or worker.busy:
            return False
        if self.settings.allow_far_units:
            return True
        return worker.position.sqr_distance(base) <= max_sqr

    def _try_assign(self, worker: Worker) -> bool:
        # The scanner prunes dead and inactive entries before claiming.
        resource = self._scanner.next_unclaimed_resource()
        if resource is None:
            return False
        if worker.assign(resource, self):
            return True
        # Lost a race with another assignment; the claim goes back.
        self._scanner.release_claim(resource.entity_id)
        return False

    # ------------------------------------------------------------------
    # Worker callbacks
    # ------------------------------------------------------------------

    def release_claim(self, entity_id: EntityId | None) -> bool:
        """Return a claim for a cycle that ended without delivery."""
        return self._scanner.release_claim(entity_id)

    def notify_delivered(self, resource: Resource) -> None:
        """Count a delivery and notify the resource's and our observers."""
        resource_id = resource.entity_id
        if resource_id is None:
            return
        self._delivered += 1
        event = DeliveryEvent(resource_id=resource_id, resource=resource, total=self._delivered)
        logger.debug("Delivered %r (total %d)", resource, self._delivered)

        resource.notify_delivered()
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception as exc:
                logger.warning("Delivery observer %r failed: %s", observer, exc, exc_info=True)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_delivery_observer(self, observer: DeliveryObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_delivery_observer(self, observer: DeliveryObserver) -> bool:
        """Unregister an observer. Safe to call with an unknown observer."""
        try:
            self._observers.remove(observer)
        except ValueError:
            return False
        return True

    @property
    def observer_count(self) -> int:
        return len(self._observers)
