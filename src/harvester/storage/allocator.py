"""Entity allocation service.

EntityAllocator is a stateful service that manages entity ID lifecycle.
"""

from __future__ import annotations

from harvester.core.identity import EntityId


class EntityAllocator:
    """Allocates entity IDs with generation tracking for recycling.

    Maintains a free list of deallocated entity indices with incremented
    generations so that recycled IDs never compare equal to stale handles.
    """

    def __init__(self) -> None:
        self._next_index = 0
        self._free_list: list[tuple[int, int]] = []  # (index, generation)
        self._generations: dict[int, int] = {}
        self._live: set[EntityId] = set()

    def allocate(self) -> EntityId:
        """Allocate new entity ID, reusing recycled slots when available.

        Returns:
            Newly allocated EntityId.
        """
        if self._free_list:
            index, gen = self._free_list.pop()
            entity = EntityId(index=index, generation=gen)
        else:
            index = self._next_index
            self._next_index += 1
            self._generations[index] = 0
            entity = EntityId(index=index, generation=0)
        self._live.add(entity)
        return entity

    def deallocate(self, entity: EntityId) -> bool:
        """Return entity ID for reuse with incremented generation.

        Returns:
            False if the handle was already stale (nothing changed).
        """
        if entity not in self._live:
            return False
        self._live.discard(entity)
        new_gen = entity.generation + 1
        self._generations[entity.index] = new_gen
        self._free_list.append((entity.index, new_gen))
        return True

    def is_alive(self, entity: EntityId | None) -> bool:
        """Check if entity ID is still valid (allocated and not recycled)."""
        if entity is None:
            return False
        return entity in self._live and self._generations.get(entity.index, -1) == entity.generation

    def __len__(self) -> int:
        return len(self._live)
