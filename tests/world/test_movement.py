"""Tests for the straight-line MovementProvider."""

import pytest

from harvester.core.geometry import Vec3
from harvester.world import Body, MoveOutcome, MovementProvider, StraightLineMover


def start_move(scheduler, mover, body, target, stop_distance=0.5, timeout=10.0, cancel=None):
    return scheduler.spawn(mover.move_toward(body, target, stop_distance, timeout, cancel))


def test_mover_satisfies_protocol():
    assert isinstance(StraightLineMover(1.0), MovementProvider)


def test_rejects_non_positive_speed():
    with pytest.raises(ValueError):
        StraightLineMover(0)


def test_arrives_within_stop_distance(scheduler, run_until):
    body = Body(Vec3(0, 0, 0))
    handle = start_move(scheduler, StraightLineMover(5.0), body, lambda: Vec3(10, 0, 0))

    run_until(scheduler, lambda: handle.done, dt=0.1)
    assert handle.result is MoveOutcome.ARRIVED
    assert body.position.distance(Vec3(10, 0, 0)) <= 0.5


def test_already_in_range_arrives_without_ticking(scheduler):
    body = Body(Vec3(0, 0, 0))
    handle = start_move(scheduler, StraightLineMover(5.0), body, lambda: Vec3(0.2, 0, 0))
    assert handle.done
    assert handle.result is MoveOutcome.ARRIVED


def test_times_out(scheduler, run_until):
    body = Body(Vec3(0, 0, 0))
    handle = start_move(scheduler, StraightLineMover(1.0), body, lambda: Vec3(100, 0, 0), timeout=1.0)

    run_until(scheduler, lambda: handle.done, dt=0.1)
    assert handle.result is MoveOutcome.TIMED_OUT
    assert body.position.x <= 1.2


def test_cancel_predicate_stops_movement(scheduler):
    body = Body(Vec3(0, 0, 0))
    flag = {"cancel": False}
    handle = start_move(
        scheduler,
        StraightLineMover(1.0),
        body,
        lambda: Vec3(100, 0, 0),
        cancel=lambda: flag["cancel"],
    )

    scheduler.run(duration=0.5, dt=0.1)
    assert not handle.done

    flag["cancel"] = True
    scheduler.step(0.1)
    assert handle.result is MoveOutcome.CANCELED


def test_follows_moving_target(scheduler, run_until):
    """Target is re-sampled every retarget interval."""
    body = Body(Vec3(0, 0, 0))
    target = Body(Vec3(5, 0, 0))
    handle = start_move(
        scheduler,
        StraightLineMover(4.0, retarget_interval=0.1),
        body,
        lambda: target.position,
        stop_distance=0.3,
    )

    scheduler.run(duration=0.5, dt=0.1)
    target.position = Vec3(-5, 0, 0)

    run_until(scheduler, lambda: handle.done, dt=0.1)
    assert handle.result is MoveOutcome.ARRIVED
    assert body.position.distance(Vec3(-5, 0, 0)) <= 0.3
