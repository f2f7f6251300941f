"""Spawn points: fixed locations leased to one spawned instance at a time."""

from __future__ import annotations

from harvester.core.geometry import Vec3


class SpawnPoint:
    """Fixed location with an occupancy flag.

    ``free`` is False exactly while the point is leased to an in-flight
    pooled instance.
    """

    def __init__(self, position: Vec3 | tuple[float, float, float], enabled: bool = True) -> None:
        self.position = Vec3.of(position)
        self.enabled = enabled
        self._free = True

    @property
    def free(self) -> bool:
        return self._free

    @property
    def available(self) -> bool:
        return self.enabled and self._free

    def lease(self) -> bool:
        """Occupy the point. Returns False if it was already leased."""
        if not self._free:
            return False
        self._free = False
        return True

    def release(self) -> None:
        self._free = True

    def __repr__(self) -> str:
        state = "free" if self._free else "leased"
        return f"SpawnPoint({self.position.as_tuple()}, {state})"
