"""Delivery notifications and the delivered-resource counter."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from harvester.core.identity import EntityId
from harvester.world.entities import Resource

if TYPE_CHECKING:
    from harvester.coordination.dispatcher import Dispatcher


@dataclass(frozen=True, slots=True)
class DeliveryEvent:
    """One resource reached the collection point.

    Attributes:
        resource_id: Handle of the delivered resource at delivery time.
        resource: The delivered body (about to be recycled by its spawner).
        total: Dispatcher's delivered count including this delivery.
    """

    resource_id: EntityId
    resource: Resource = field(compare=False, repr=False)
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "resource_id": str(self.resource_id),
            "total": self.total,
        }


DeliveryObserver = Callable[[DeliveryEvent], None]
"""Signature: (event) -> None. Registered on a Dispatcher."""


class DeliveryCounter:
    """Keeps a running delivered count for a dispatcher.

    Register with ``attach`` on startup and call ``detach`` before teardown so
    the dispatcher does not keep a dangling callback.

    Example::

        counter = DeliveryCounter(label_prefix="Crystals: ")
        counter.attach(dispatcher)
        ...
        counter.text   # "Crystals: 4"
        counter.detach()
    """

    def __init__(self, label_prefix: str = "") -> None:
        self.label_prefix = label_prefix
        self.count = 0
        self.last_resource_id: EntityId | None = None
        self._dispatcher: Dispatcher | None = None

    @property
    def attached(self) -> bool:
        return self._dispatcher is not None

    @property
    def text(self) -> str:
        return f"{self.label_prefix}{self.count}"

    def attach(self, dispatcher: Dispatcher) -> None:
        if self._dispatcher is dispatcher:
            return
        self.detach()
        self._dispatcher = dispatcher
        self.count = dispatcher.delivered_count
        dispatcher.add_delivery_observer(self._on_delivered)

    def detach(self) -> None:
        if self._dispatcher is None:
            return
        self._dispatcher.remove_delivery_observer(self._on_delivered)
        self._dispatcher = None

    def _on_delivered(self, event: DeliveryEvent) -> None:
        self.count = event.total
        self.last_resource_id = event.resource_id
