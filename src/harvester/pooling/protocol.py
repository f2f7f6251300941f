"""Lifecycle hooks a pool calls on its instances."""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class PoolHooks(Protocol[T]):
    """Type-specific lifecycle for pooled instances.

    The pool holds no knowledge of what it pools; everything type-specific
    (activation, listener wiring, parent detachment) lives here.
    """

    def create(self) -> T:
        """Build a brand-new instance."""
        ...

    def on_acquire(self, item: T) -> None:
        """Activate an instance being handed out (new or reused)."""
        ...

    def on_release(self, item: T) -> None:
        """Detach listeners, deactivate, detach from any parent."""
        ...

    def on_destroy(self, item: T) -> None:
        """Final teardown for an instance the pool will not retain."""
        ...
