"""Core functionalities: stateless primitives.

Architecture Note:
    core/ contains pure, stateless building blocks (identity handles and
    vector math) with no runtime state mutation. For stateful services, see
    world/, storage/, scheduling/, pooling/, spawning/ and coordination/.
"""

from harvester.core.geometry import ZERO, Vec3, within_range
from harvester.core.identity import EntityId

__all__ = [
    "EntityId",
    "Vec3",
    "ZERO",
    "within_range",
]
