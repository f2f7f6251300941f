"""Attaching a resource to its carrier."""

from __future__ import annotations

from harvester.core.geometry import ZERO, Vec3
from harvester.world.entities import Body


class CarryHandler:
    """Parents a body to a carrier and suppresses its collision while carried.

    A carried body is not collidable, so spatial queries stop returning it.
    Releasing it keeps its current world position and restores collision.
    """

    def set_carried(
        self,
        target: Body | None,
        carry: bool,
        parent: Body | None = None,
        local_offset: Vec3 = ZERO,
    ) -> None:
        if target is None:
            return

        if carry:
            if parent is None:
                raise ValueError("Carrying requires a parent body")
            target.attach_to(parent, local_offset)
            target.collidable = False
        else:
            target.detach()
            target.collidable = True
