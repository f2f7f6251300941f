"""Generic object pooling."""

from harvester.pooling.pool import ObjectPool
from harvester.pooling.protocol import PoolHooks

__all__ = [
    "ObjectPool",
    "PoolHooks",
]
