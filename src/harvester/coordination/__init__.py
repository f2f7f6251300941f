"""Task coordination: scanning, dispatch and the worker task machine.

Architecture Note:
    The Scanner refreshes its view of the world on its own cadence, the
    Dispatcher reads that view each tick and issues assignments, and every
    assignment runs as an independent Worker task. All three share one
    cooperative scheduler, so their interleaving is tick-atomic.
"""

from harvester.coordination.carry import CarryHandler
from harvester.coordination.collector import Collector
from harvester.coordination.dispatcher import Dispatcher
from harvester.coordination.events import DeliveryCounter, DeliveryEvent, DeliveryObserver
from harvester.coordination.scanner import ClaimState, Scanner, TrackedResource
from harvester.coordination.worker import Assignment, Worker, WorkerState

__all__ = [
    # Components
    "Scanner",
    "Dispatcher",
    "Worker",
    # Worker internals
    "Assignment",
    "WorkerState",
    "Collector",
    "CarryHandler",
    # Claims
    "ClaimState",
    "TrackedResource",
    # Events
    "DeliveryEvent",
    "DeliveryObserver",
    "DeliveryCounter",
]
