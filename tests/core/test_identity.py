"""Tests for entity identity and allocation.

Critical Invariants:
- Generation increments on recycle
- Stale handles are detected
- Double deallocation is harmless
"""

import pytest

from harvester.core.identity import EntityId
from harvester.storage.allocator import EntityAllocator


@pytest.fixture
def allocator():
    return EntityAllocator()


def test_generation_increments_on_recycle(allocator):
    """CRITICAL: Recycled entity must have generation+1.

    Why: A pooled body that comes back must not match handles held for its
    previous incarnation (claims, subscriptions).
    """
    entity1 = allocator.allocate()
    assert entity1.generation == 0

    allocator.deallocate(entity1)

    entity2 = allocator.allocate()
    assert entity2.index == entity1.index, "Should reuse same index"
    assert entity2.generation == 1, "INVARIANT: generation must increment"
    assert entity2 != entity1


def test_stale_handle_detection(allocator):
    """CRITICAL: is_alive() returns False for stale handles."""
    entity_old = allocator.allocate()
    allocator.deallocate(entity_old)

    assert not allocator.is_alive(entity_old), "Old generation should be stale"

    entity_new = allocator.allocate()
    assert allocator.is_alive(entity_new)
    assert not allocator.is_alive(entity_old)


def test_double_deallocate_is_rejected(allocator):
    """Deallocating a stale handle changes nothing."""
    entity = allocator.allocate()
    assert allocator.deallocate(entity) is True
    assert allocator.deallocate(entity) is False

    # Only one recycled slot exists, so the next two allocations differ in index
    first = allocator.allocate()
    second = allocator.allocate()
    assert first.index != second.index


def test_none_is_never_alive(allocator):
    assert not allocator.is_alive(None)


def test_unknown_handle_is_not_alive(allocator):
    assert not allocator.is_alive(EntityId(index=99, generation=0))


def test_len_counts_live_handles(allocator):
    a = allocator.allocate()
    allocator.allocate()
    allocator.deallocate(a)
    assert len(allocator) == 1


def test_entity_id_is_hashable_and_printable():
    entity = EntityId(index=3, generation=2)
    assert {entity: 1}[EntityId(index=3, generation=2)] == 1
    assert str(entity) == "3v2"
