"""Generic object pool.

Usage:
    pool = ObjectPool(hooks, capacity=3, max_size=3)
    item = pool.acquire()      # None when exhausted
    pool.release(item)         # True; False if item was not checked out
"""

from __future__ import annotations

import logging
import warnings
from typing import Generic, TypeVar

from harvester.pooling.protocol import PoolHooks

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ObjectPool(Generic[T]):
    """Reusable-instance pool with lifecycle hooks.

    ``acquire`` reuses a retained instance when one is available, creates a
    new one while fewer than ``max_size`` instances exist, and otherwise
    returns None. ``release`` retains up to ``capacity`` instances and
    destroys the rest.

    An instance is never handed out twice without an intervening release.
    Releasing an instance that is not checked out is rejected (returns False)
    and leaves the pool untouched; with ``collection_check`` the misuse is
    also reported through ``warnings``.

    Args:
        hooks: Type-specific create/acquire/release/destroy callbacks.
        capacity: Maximum retained (inactive) instances.
        max_size: Maximum instances in existence (active + retained).
        collection_check: Warn on releases of instances not checked out.
    """

    def __init__(
        self,
        hooks: PoolHooks[T],
        capacity: int = 3,
        max_size: int = 3,
        collection_check: bool = True,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self._hooks = hooks
        self._capacity = capacity
        self._max_size = max_size
        self._collection_check = collection_check
        self._free: list[T] = []
        self._active: dict[int, T] = {}  # id(item) -> item

    @property
    def count_active(self) -> int:
        return len(self._active)

    @property
    def count_inactive(self) -> int:
        return len(self._free)

    @property
    def count_all(self) -> int:
        return len(self._active) + len(self._free)

    @property
    def max_size(self) -> int:
        return self._max_size

    def owns(self, item: T) -> bool:
        """True if item is currently checked out of this pool."""
        return id(item) in self._active

    def acquire(self) -> T | None:
        """Hand out a ready-to-use instance, or None if the pool is exhausted."""
        if self._free:
            item = self._free.pop()
        elif self.count_all < self._max_size:
            item = self._hooks.create()
        else:
            logger.debug("Pool exhausted (%d/%d active)", self.count_active, self._max_size)
            return None

        self._active[id(item)] = item
        self._hooks.on_acquire(item)
        return item

    def release(self, item: T) -> bool:
        """Return a checked-out instance to the pool.

        Returns:
            False if the item was not checked out from this pool.
        """
        if self._active.pop(id(item), None) is None:
            if self._collection_check:
                warnings.warn(
                    f"Released {item!r}, which is not checked out of this pool. Ignored.",
                    stacklevel=2,
                )
            return False

        self._hooks.on_release(item)
        if len(self._free) < self._capacity:
            self._free.append(item)
        else:
            self._hooks.on_destroy(item)
        return True

    def dispose(self) -> None:
        """Destroy every retained instance. Checked-out instances are untouched."""
        free, self._free = self._free, []
        for item in free:
            self._hooks.on_destroy(item)
