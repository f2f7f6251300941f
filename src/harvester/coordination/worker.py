"""Worker task machine: move to resource, collect, carry, deliver.

State flow::

    IDLE -> MOVING_TO_RESOURCE -> COLLECTING -> RETURNING -> IDLE
                 |                    |             |
                 +---- cancel --------+-------------+--> RETURNING (home) -> IDLE

A worker runs at most one cycle at a time. Every cycle runs as its own task
on the scheduler, and every exit path (success, cancellation, timeout, forced
stop) ends in IDLE with the claim settled.

Carried-resource policy: a cycle that cannot deliver after pickup keeps the
resource through the home leg and drops it there, returning its claim, so
resources are never abandoned between spawn point and collection point.
A home outside the scan radius puts such a drop out of the scanner's reach;
the owner of the resource spawner has to recycle it (see
``Simulation.recycle_strays``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from harvester.config import WorkerSettings
from harvester.core.geometry import ZERO, Vec3, within_range
from harvester.core.identity import EntityId
from harvester.coordination.carry import CarryHandler
from harvester.coordination.collector import Collector
from harvester.scheduling import TaskHandle, TickScheduler
from harvester.world.entities import Body, CollectionPoint, Resource
from harvester.world.models import MoveOutcome
from harvester.world.protocol import LivenessQuery, MovementProvider

if TYPE_CHECKING:
    from harvester.coordination.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


class WorkerState(Enum):
    """Phases of the collect-carry-deliver cycle."""

    IDLE = "idle"
    MOVING_TO_RESOURCE = "moving_to_resource"
    COLLECTING = "collecting"
    RETURNING = "returning"


@dataclass(frozen=True, slots=True)
class Assignment:
    """Ephemeral pairing handed to a worker by the dispatcher.

    ``resource_id`` is captured at assignment time. Liveness checks and claim
    returns use it, never the resource's current handle, so a resource that
    is recycled mid-cycle is seen as gone.
    """

    worker: Worker
    resource: Resource
    resource_id: EntityId
    dispatcher: Dispatcher

    @property
    def collection_point(self) -> CollectionPoint:
        return self.dispatcher.collection_point


class Worker(Body):
    """Mobile harvester body with its own cooperative task.

    Args:
        scheduler: Scheduler the cycle task runs on.
        mover: Movement capability.
        liveness: Liveness capability for resources and the collection point.
        settings: Cycle tunables.
        position: Initial (and home) position.
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        mover: MovementProvider,
        liveness: LivenessQuery,
        settings: WorkerSettings | None = None,
        position: Vec3 = ZERO,
    ) -> None:
        super().__init__(position)
        self.settings = settings or WorkerSettings()
        self.home = position
        self.state = WorkerState.IDLE
        self.busy = False
        self.carried_resource: Resource | None = None
        self.assignment: Assignment | None = None
        self.deliveries = 0
        self._scheduler = scheduler
        self._mover = mover
        self._liveness = liveness
        self._collector = Collector()
        self._carry = CarryHandler()
        self._carry_offset = Vec3.of(self.settings.carry_offset)
        self._task: TaskHandle | None = None

    @property
    def enabled(self) -> bool:
        return self.active

    @property
    def collector(self) -> Collector:
        return self._collector

    @property
    def task(self) -> TaskHandle | None:
        """The running cycle task, if any."""
        if self._task is not None and self._task.done:
            return None
        return self._task

    def init(self, position: Vec3) -> None:
        """Place the worker and record the position as its home."""
        self.position = position
        self.home = position

    def assign(self, resource: Resource | None, dispatcher: Dispatcher | None) -> bool:
        """Start a cycle for resource, delivering to the dispatcher's collection point.

        Returns:
            False (and nothing changes) if the resource or collection point is
            absent, or the worker is already busy.
        """
        if resource is None or dispatcher is None:
            return False
        if self.busy:
            logger.debug("%r rejected %r: already busy", self, resource)
            return False
        resource_id = resource.entity_id
        if resource_id is None or not self._liveness.is_alive(resource_id):
            return False
        if not self._liveness.is_alive(dispatcher.collection_point.entity_id):
            return False

        self._stop_task()
        assignment = Assignment(self, resource, resource_id, dispatcher)
        self.assignment = assignment
        self.busy = True
        logger.debug("%r assigned %r", self, resource)
        self._task = self._scheduler.spawn(
            self._run_cycle(assignment), name=f"worker-{self.entity_id}"
        )
        return True

    def stop(self) -> None:
        """Forcibly end the current cycle, if any. The worker ends up IDLE."""
        self._stop_task()

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def _run_cycle(self, assignment: Assignment) -> None:
        delivered = False
        try:
            self._set_state(WorkerState.MOVING_TO_RESOURCE)
            if not await self._approach(assignment):
                await self._return_home()
                return

            self._set_state(WorkerState.COLLECTING)
            collected = await self._collector.collect(
                self.settings.collection_time,
                is_missing=lambda: not self._resource_alive(assignment),
                is_out_of_range=lambda: self._drifted(assignment.resource),
                reacquire=lambda: self._reacquire(assignment),
            )
            if not collected:
                await self._return_home()
                return

            self._pick_up(assignment.resource)
            delivered = await self._deliver(assignment)
            await self._return_home()
        finally:
            self._finish(assignment, delivered)

    async def _approach(self, assignment: Assignment) -> bool:
        resource = assignment.resource
        outcome = await self._mover.move_toward(
            self,
            target=lambda: resource.position,
            stop_distance=self.settings.collection_range,
            timeout=self.settings.resource_timeout,
            cancel=lambda: not self._resource_alive(assignment),
        )
        if outcome is not MoveOutcome.ARRIVED:
            logger.debug("%r gave up on %r: %s", self, resource, outcome.value)
        return outcome is MoveOutcome.ARRIVED

    async def _reacquire(self, assignment: Assignment) -> bool:
        self._set_state(WorkerState.MOVING_TO_RESOURCE)
        if not await self._approach(assignment):
            return False
        self._set_state(WorkerState.COLLECTING)
        return True

    async def _deliver(self, assignment: Assignment) -> bool:
        self._set_state(WorkerState.RETURNING)
        base = assignment.collection_point
        outcome = await self._mover.move_toward(
            self,
            target=lambda: base.position if self._base_alive(base) else self.home,
            stop_distance=self.settings.delivery_range,
            timeout=self.settings.return_timeout,
        )

        at_base = (
            outcome is MoveOutcome.ARRIVED
            and self._base_alive(base)
            and within_range(self.position, base.position, self.settings.delivery_range)
        )
        if not at_base or not self._resource_alive(assignment):
            logger.debug("%r could not deliver %r: %s", self, assignment.resource, outcome.value)
            return False

        resource = self._drop()
        if resource is None:
            return False
        self.deliveries += 1
        assignment.dispatcher.notify_delivered(resource)
        return True

    async def _return_home(self) -> bool:
        if self._at_home():
            return True
        self._set_state(WorkerState.RETURNING)
        outcome = await self._mover.move_toward(
            self,
            target=lambda: self.home,
            stop_distance=self.settings.arrival_tolerance,
            timeout=self.settings.return_timeout,
        )
        return outcome is MoveOutcome.ARRIVED

    def _finish(self, assignment: Assignment, delivered: bool) -> None:
        if self.carried_resource is not None:
            dropped = self._drop()
            logger.debug("%r dropped %r at %s", self, dropped, self.position.as_tuple())
        if not delivered:
            assignment.dispatcher.release_claim(assignment.resource_id)
        self.assignment = None
        self.busy = False
        self._set_state(WorkerState.IDLE)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _pick_up(self, resource: Resource) -> None:
        self._carry.set_carried(resource, True, self, self._carry_offset)
        self.carried_resource = resource

    def _drop(self) -> Resource | None:
        resource, self.carried_resource = self.carried_resource, None
        if resource is not None and resource.parent is self:
            self._carry.set_carried(resource, False)
        return resource

    def _resource_alive(self, assignment: Assignment) -> bool:
        return self._liveness.is_alive(assignment.resource_id)

    def _base_alive(self, base: CollectionPoint) -> bool:
        return self._liveness.is_alive(base.entity_id)

    def _drifted(self, resource: Resource) -> bool:
        limit = self.settings.collection_range * self.settings.range_slack
        return self.position.sqr_distance(resource.position) > limit * limit

    def _at_home(self) -> bool:
        return within_range(self.position, self.home, self.settings.arrival_tolerance)

    def _set_state(self, state: WorkerState) -> None:
        if state is not self.state:
            logger.debug("%r: %s -> %s", self, self.state.value, state.value)
        self.state = state

    def _stop_task(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done:
            task.stop()
