"""Small vector math used for positions, offsets and range checks.

Range comparisons throughout the package use squared distances so that no
square root is taken on hot paths.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vec3:
    """Immutable 3D vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def of(cls, value: Vec3 | tuple[float, float, float]) -> Vec3:
        """Coerce a tuple (as found in settings) into a Vec3."""
        if isinstance(value, Vec3):
            return value
        x, y, z = value
        return cls(float(x), float(y), float(z))

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def sqr_magnitude(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def magnitude(self) -> float:
        return math.sqrt(self.sqr_magnitude())

    def sqr_distance(self, other: Vec3) -> float:
        return (self - other).sqr_magnitude()

    def distance(self, other: Vec3) -> float:
        return math.sqrt(self.sqr_distance(other))

    def move_towards(self, target: Vec3, max_delta: float) -> Vec3:
        """Step toward target by at most max_delta, never overshooting."""
        offset = target - self
        sqr_dist = offset.sqr_magnitude()
        if sqr_dist == 0.0 or (max_delta >= 0.0 and sqr_dist <= max_delta * max_delta):
            return target
        dist = math.sqrt(sqr_dist)
        return self + offset * (max_delta / dist)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


ZERO = Vec3()


def within_range(a: Vec3, b: Vec3, radius: float) -> bool:
    """True if a and b are at most radius apart (inclusive)."""
    return a.sqr_distance(b) <= radius * radius
