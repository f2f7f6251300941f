"""Tests for the Scanner's tracked view and claim bookkeeping.

Critical Invariants:
- After a scan, every tracked resource was in the result set, alive and active
- Pruning is idempotent
- A resource is handed out at most once until its claim is released
"""

import pytest

from harvester.config import ScannerSettings
from harvester.coordination import ClaimState, Scanner
from harvester.core.geometry import Vec3


def test_scan_tracks_resources_in_radius(scanner, make_resource):
    """Scenario: only the resource inside the radius is tracked, unclaimed."""
    near = make_resource((10, 0, 0))
    far = make_resource((50, 0, 0))

    scanner.scan()

    assert scanner.tracked_resources() == {near.entity_id: ClaimState.UNCLAIMED}
    assert not scanner.is_tracked(far.entity_id)
    assert scanner.scan_count == 1


def test_rescan_keeps_claim_state(scanner, make_resource):
    resource = make_resource((5, 0, 0))
    scanner.scan()
    assert scanner.next_unclaimed_resource() is resource

    scanner.scan()
    assert scanner.is_claimed(resource.entity_id)


def test_despawned_resource_purged_on_scan(world, scanner, make_resource):
    resource = make_resource((5, 0, 0))
    scanner.scan()
    world.despawn(resource)

    scanner.scan()
    assert scanner.tracked_resources() == {}
    assert resource.listener_count == 0


def test_resource_leaving_radius_purged(scanner, make_resource):
    resource = make_resource((5, 0, 0))
    scanner.scan()
    resource.position = Vec3(100, 0, 0)

    scanner.scan()
    assert not scanner.is_tracked(resource.entity_id)


def test_deactivated_resource_pruned(scanner, make_resource):
    resource = make_resource((5, 0, 0))
    scanner.scan()
    resource.active = False

    assert scanner.prune() == 1
    assert scanner.tracked_resources() == {}


def test_prune_is_idempotent(world, scanner, make_resource):
    keep = make_resource((5, 0, 0))
    gone = make_resource((6, 0, 0))
    scanner.scan()
    world.despawn(gone)

    assert scanner.prune() == 1
    snapshot = scanner.tracked_resources()
    assert scanner.prune() == 0
    assert scanner.tracked_resources() == snapshot == {keep.entity_id: ClaimState.UNCLAIMED}


def test_next_unclaimed_prunes_before_claiming(world, scanner, make_resource):
    """A resource that vanished between scans is never handed out."""
    resource = make_resource((5, 0, 0))
    scanner.scan()
    world.despawn(resource)

    assert scanner.next_unclaimed_resource() is None
    assert scanner.tracked_resources() == {}


def test_claims_are_exclusive(scanner, make_resource):
    """CRITICAL: Each resource is returned at most once while claimed."""
    a = make_resource((5, 0, 0))
    b = make_resource((6, 0, 0))
    scanner.scan()

    first = scanner.next_unclaimed_resource()
    second = scanner.next_unclaimed_resource()
    assert {first, second} == {a, b}
    assert scanner.next_unclaimed_resource() is None

    assert scanner.release_claim(first.entity_id) is True
    assert scanner.release_claim(first.entity_id) is False
    assert scanner.next_unclaimed_resource() is first


def test_release_claim_unknown_handle(scanner):
    assert scanner.release_claim(None) is False


def test_workers_replaced_each_scan(world, scanner, make_worker):
    worker = make_worker((3, 0, 0))
    scanner.scan()
    assert scanner.workers() == [worker]

    worker.position = Vec3(100, 0, 0)
    scanner.scan()
    assert scanner.workers() == []


def test_dead_workers_filtered(world, scanner, make_worker):
    worker = make_worker((3, 0, 0))
    scanner.scan()
    world.despawn(worker)
    assert scanner.workers() == []


def test_tracking_subscribes_to_delivery(scanner, make_resource):
    resource = make_resource((5, 0, 0))
    scanner.scan()
    scanner.scan()
    assert resource.listener_count == 1

    resource.notify_delivered()
    assert not scanner.is_tracked(resource.entity_id)
    assert resource.listener_count == 0


def test_forget_ignores_untracked(scanner, make_resource):
    resource = make_resource((5, 0, 0))
    assert scanner.forget(resource) is False


def test_recycled_resource_tracked_fresh(world, scanner, make_resource):
    """CRITICAL: A pooled resource back under a new handle starts unclaimed."""
    resource = make_resource((5, 0, 0))
    scanner.scan()
    old_id = resource.entity_id
    assert scanner.next_unclaimed_resource() is resource

    world.despawn(resource)
    world.spawn(resource)
    scanner.scan()

    assert not scanner.is_tracked(old_id)
    assert scanner.tracked_resources() == {resource.entity_id: ClaimState.UNCLAIMED}
    assert resource.listener_count == 1


def test_carried_resource_leaves_view(scanner, make_resource):
    resource = make_resource((5, 0, 0))
    scanner.scan()
    resource.collidable = False

    scanner.scan()
    assert scanner.tracked_resources() == {}


def test_periodic_scanning(world, scheduler, collection_point, make_resource):
    scanner = Scanner(world, world, collection_point, ScannerSettings(radius=40.0, interval=1.0))
    make_resource((5, 0, 0))

    scanner.start(scheduler)
    assert scanner.running
    assert scanner.scan_count == 0

    scheduler.run(duration=2.05, dt=0.05)
    assert scanner.scan_count == 2

    scanner.stop()
    assert not scanner.running
    assert scanner.tracked_resources() == {}


def test_settings_validation():
    with pytest.raises(ValueError):
        ScannerSettings(radius=-1)
