"""Tests for the position resolver."""

import pytest

from raid_timeline.timeline.model import BossMoveEvent, MoveEvent, Position
from raid_timeline.timeline.position import movement_points, resolve_position

ORIGIN = Position(0, 0)


def move(event_id, frame, to, duration, from_pos=None, easing="linear"):
    return MoveEvent(
        id=event_id,
        frame=frame,
        target_id="MT",
        to_pos=to,
        duration=duration,
        from_pos=from_pos,
        easing=easing,
    )


def test_linear_move_example():
    """A 30-frame move from (0,0) to (10,0) starting at frame 30."""
    events = [move("m1", 30, Position(10, 0), 30)]

    assert resolve_position(ORIGIN, events, 0) == ORIGIN
    assert resolve_position(ORIGIN, events, 30) == ORIGIN
    assert resolve_position(ORIGIN, events, 45) == Position(5, 0)
    assert resolve_position(ORIGIN, events, 60) == Position(10, 0)
    assert resolve_position(ORIGIN, events, 500) == Position(10, 0)


def test_chained_moves_are_continuous():
    """The second move starts where the first one ended."""
    events = [
        move("m1", 0, Position(10, 0), 10),
        move("m2", 20, Position(10, 10), 10),
    ]
    assert resolve_position(ORIGIN, events, 15) == Position(10, 0)
    assert resolve_position(ORIGIN, events, 20) == Position(10, 0)
    assert resolve_position(ORIGIN, events, 25) == Position(10, 5)
    assert resolve_position(ORIGIN, events, 30) == Position(10, 10)


def test_explicit_origin_wins_over_accumulated_position():
    events = [move("m1", 0, Position(10, 0), 10, from_pos=Position(-10, 0))]
    assert resolve_position(ORIGIN, events, 5) == Position(0, 0)


def test_easing_applies_to_progress():
    events = [move("m1", 0, Position(10, 0), 10, easing="easeIn")]
    assert resolve_position(ORIGIN, events, 5).x == pytest.approx(2.5)


def test_zero_duration_move_is_instant():
    events = [move("m1", 10, Position(3, 4), 0)]
    assert resolve_position(ORIGIN, events, 9) == ORIGIN
    assert resolve_position(ORIGIN, events, 10) == Position(3, 4)


def test_overlapping_moves_resolve_in_input_order():
    """While the first move runs, the second one is not yet applied."""
    events = [
        move("m1", 0, Position(10, 0), 20),
        move("m2", 5, Position(0, 10), 20),
    ]
    assert resolve_position(ORIGIN, events, 10) == Position(5, 0)


def test_boss_teleport_snaps():
    events = [
        BossMoveEvent(id="b1", frame=10, target_id="boss", to_pos=Position(0, -15), duration=30, teleport=True)
    ]
    assert resolve_position(ORIGIN, events, 10) == Position(0, -15)


def test_boss_move_defaults_to_ease_in_out():
    events = [BossMoveEvent(id="b1", frame=0, target_id="boss", to_pos=Position(0, 10), duration=20)]
    assert resolve_position(ORIGIN, events, 5).y == pytest.approx(1.25)
    assert resolve_position(ORIGIN, events, 10).y == pytest.approx(5)


def test_movement_points():
    events = [
        move("m1", 0, Position(10, 0), 10),
        move("m2", 20, Position(10, 10), 10),
    ]
    assert movement_points(ORIGIN, events) == [ORIGIN, Position(10, 0), Position(10, 10)]
