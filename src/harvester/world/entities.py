"""World bodies: anything with a position that the spatial query can return.

Bodies are plain Python objects compared by identity. Their ``entity_id`` is
issued by the World on spawn and invalidated on despawn, so a pooled body that
comes back gets a new handle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from harvester.core.geometry import ZERO, Vec3
from harvester.core.identity import EntityId

logger = logging.getLogger(__name__)


class Body:
    """Positioned world object, optionally attached to a parent body.

    While attached, the position is derived from the parent's position plus
    ``local_offset``; detaching keeps the current world position.
    """

    def __init__(self, position: Vec3 = ZERO) -> None:
        self.entity_id: EntityId | None = None
        self.active = False
        self.collidable = True
        self.parent: Body | None = None
        self.local_offset = ZERO
        self._position = position

    @property
    def position(self) -> Vec3:
        if self.parent is not None:
            return self.parent.position + self.local_offset
        return self._position

    @position.setter
    def position(self, value: Vec3) -> None:
        if self.parent is not None:
            self.local_offset = value - self.parent.position
        else:
            self._position = value

    def attach_to(self, parent: Body, local_offset: Vec3) -> None:
        self.parent = parent
        self.local_offset = local_offset

    def detach(self) -> None:
        if self.parent is None:
            return
        world_position = self.position
        self.parent = None
        self.local_offset = ZERO
        self._position = world_position

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.entity_id}, {self.position.as_tuple()})"


DeliveryListener = Callable[["Resource"], None]


class Resource(Body):
    """Harvestable item. Scanners subscribe to hear when it gets delivered."""

    def __init__(self, position: Vec3 = ZERO) -> None:
        super().__init__(position)
        self._delivery_listeners: list[DeliveryListener] = []

    def subscribe_delivered(self, listener: DeliveryListener) -> None:
        if listener not in self._delivery_listeners:
            self._delivery_listeners.append(listener)

    def unsubscribe_delivered(self, listener: DeliveryListener) -> bool:
        try:
            self._delivery_listeners.remove(listener)
        except ValueError:
            return False
        return True

    def clear_delivery_listeners(self) -> None:
        self._delivery_listeners.clear()

    @property
    def listener_count(self) -> int:
        return len(self._delivery_listeners)

    def notify_delivered(self) -> None:
        """Tell every subscriber this resource reached the collection point."""
        for listener in list(self._delivery_listeners):
            listener(self)


class CollectionPoint(Body):
    """Fixed location where resources are delivered and counted."""
