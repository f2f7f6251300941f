"""Storage services."""

from harvester.storage.allocator import EntityAllocator

__all__ = [
    "EntityAllocator",
]
