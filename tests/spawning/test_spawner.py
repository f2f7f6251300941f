"""Tests for SpawnPoint leasing and the pooled Spawner.

Critical Invariants:
- A spawn point is leased to at most one in-flight instance
- A failed pool acquire leaves every point free
- Releasing an instance frees its point
"""

import random

import pytest

from harvester.config import SpawnerSettings
from harvester.core.geometry import Vec3
from harvester.spawning import SpawnHooks, SpawnPoint, Spawner


class Crate:
    def __init__(self, serial):
        self.serial = serial
        self.position = None


class CrateHooks:
    def __init__(self):
        self.created = 0
        self.placed = []

    def create(self):
        self.created += 1
        return Crate(self.created)

    def on_acquire(self, item):
        pass

    def on_release(self, item):
        item.position = None

    def on_destroy(self, item):
        pass

    def initialize(self, item, position):
        item.position = position
        self.placed.append(position)


def make_points(n):
    return [SpawnPoint((float(i), 0.0, 0.0)) for i in range(n)]


def make_spawner(points, **settings):
    values = {"pool_capacity": 5, "pool_max_size": 5, "repeat_rate": 1.0}
    values.update(settings)
    return Spawner(points, CrateHooks(), SpawnerSettings(**values), rng=random.Random(0))


def assert_exclusive_leases(spawner):
    owners = list(spawner._owners.values())
    assert len({id(p) for p in owners}) == len(owners), "INVARIANT: point leased twice"
    assert all(not p.free for p in owners)
    assert sum(not p.free for p in spawner.points) == len(owners)


def test_hooks_satisfy_protocol():
    assert isinstance(CrateHooks(), SpawnHooks)


def test_spawn_point_lease_is_exclusive():
    point = SpawnPoint(Vec3(1, 2, 3))
    assert point.lease() is True
    assert point.lease() is False
    assert not point.available
    point.release()
    assert point.available


def test_disabled_point_is_not_available():
    point = SpawnPoint((0, 0, 0), enabled=False)
    assert point.free
    assert not point.available


def test_try_spawn_places_at_leased_point():
    points = make_points(3)
    spawner = make_spawner(points)

    crate = spawner.try_spawn()
    assert crate is not None
    point = spawner.owner_of(crate)
    assert point in points
    assert not point.free
    assert crate.position == point.position


def test_no_free_points_means_no_spawn():
    """CRITICAL: Never more in-flight instances than spawn points."""
    spawner = make_spawner(make_points(2))

    assert spawner.try_spawn() is not None
    assert spawner.try_spawn() is not None
    assert spawner.try_spawn() is None

    assert spawner.active_count == 2
    assert_exclusive_leases(spawner)


def test_exhausted_pool_leaves_points_free():
    """CRITICAL: A failed acquire must not leak a lease."""
    points = make_points(3)
    spawner = make_spawner(points, pool_capacity=1, pool_max_size=1)

    assert spawner.try_spawn() is not None
    assert spawner.try_spawn() is None
    assert sum(p.free for p in points) == 2
    assert_exclusive_leases(spawner)


def test_max_active_caps_spawns():
    spawner = make_spawner(make_points(5), max_active=2)
    spawned = [spawner.try_spawn() for _ in range(4)]
    assert sum(c is not None for c in spawned) == 2


def test_release_frees_point_and_returns_to_pool():
    spawner = make_spawner(make_points(1))
    crate = spawner.try_spawn()
    point = spawner.owner_of(crate)

    assert spawner.release(crate) is True
    assert point.free
    assert spawner.owner_of(crate) is None
    assert spawner.active_count == 0
    assert spawner.inactive_count == 1

    again = spawner.try_spawn()
    assert again is crate


def test_release_unknown_item_rejected():
    spawner = make_spawner(make_points(1))
    with pytest.warns(UserWarning):
        assert spawner.release(Crate(99)) is False


def test_disabled_points_are_skipped():
    points = make_points(3)
    points[0].enabled = False
    points[1].enabled = False
    spawner = make_spawner(points)

    crate = spawner.try_spawn()
    assert spawner.owner_of(crate) is points[2]
    assert spawner.try_spawn() is None


def test_selection_uses_every_free_point():
    seen = set()
    for seed in range(30):
        points = make_points(3)
        spawner = Spawner(points, CrateHooks(), SpawnerSettings(), rng=random.Random(seed))
        crate = spawner.try_spawn()
        seen.add(points.index(spawner.owner_of(crate)))
    assert seen == {0, 1, 2}


def test_periodic_spawning(scheduler):
    spawner = make_spawner(make_points(5))
    spawner.start(scheduler)
    assert spawner.running
    assert spawner.active_count == 1  # first attempt happens immediately

    scheduler.run(duration=2.5, dt=0.1)
    assert spawner.active_count == 3
    assert_exclusive_leases(spawner)

    spawner.stop()
    scheduler.run(duration=2.0, dt=0.1)
    assert spawner.active_count == 3
    assert not spawner.running


def test_close_disposes_retained(scheduler):
    spawner = make_spawner(make_points(2))
    crate = spawner.try_spawn()
    spawner.release(crate)
    spawner.close()
    assert spawner.inactive_count == 0
