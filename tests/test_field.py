"""Tests for field override resolution."""

import pytest

from raid_timeline.timeline.field import FieldState, blend_override, resolve_field
from raid_timeline.timeline.model import Field, FieldChangeEvent, FieldOverride, FieldRevertEvent

BASE = Field(type="circle", size=40, background_color="#000000", background_opacity=0.2)


def change(change_id, frame, fade_in=0, **override):
    return FieldChangeEvent(
        id=f"c-{change_id}-{frame}",
        frame=frame,
        field_change_id=change_id,
        override=FieldOverride(**override),
        fade_in=fade_in,
    )


def revert(change_id, frame, fade_out=0):
    return FieldRevertEvent(id=f"r-{change_id}-{frame}", frame=frame, field_change_id=change_id, fade_out=fade_out)


def test_no_changes_returns_base():
    assert resolve_field(BASE, [], [], 100) == FieldState.from_field(BASE)


def test_change_fades_in_opacity_and_switches_colour_halfway():
    changes = [change("fc", 100, fade_in=10, background_color="#ff0000", background_opacity=1.0)]

    at_start = resolve_field(BASE, changes, [], 100)
    assert at_start.background_color == "#000000"
    assert at_start.background_opacity == pytest.approx(0.2)

    quarter = resolve_field(BASE, changes, [], 102.5)
    assert quarter.background_color == "#000000"
    assert quarter.background_opacity == pytest.approx(0.4)

    half = resolve_field(BASE, changes, [], 105)
    assert half.background_color == "#ff0000"

    full = resolve_field(BASE, changes, [], 150)
    assert full.background_color == "#ff0000"
    assert full.background_opacity == pytest.approx(1.0)


def test_revert_round_trip_restores_base():
    changes = [change("fc", 10, background_color="#ff0000")]
    reverts = [revert("fc", 50, fade_out=10)]

    assert resolve_field(BASE, changes, reverts, 50).background_color == "#ff0000"
    assert resolve_field(BASE, changes, reverts, 56).background_color == "#000000"
    assert resolve_field(BASE, changes, reverts, 60) == FieldState.from_field(BASE)


def test_most_recent_active_change_wins():
    changes = [
        change("first", 10, background_color="#111111"),
        change("second", 20, background_color="#222222"),
    ]
    assert resolve_field(BASE, changes, [], 15).background_color == "#111111"
    assert resolve_field(BASE, changes, [], 25).background_color == "#222222"

    # Reverting the newer change exposes the older one again.
    reverts = [revert("second", 30)]
    assert resolve_field(BASE, changes, reverts, 35).background_color == "#111111"


def test_revert_before_its_change_is_ignored():
    changes = [change("fc", 50, background_color="#ff0000")]
    reverts = [revert("fc", 10)]
    assert resolve_field(BASE, changes, reverts, 60).background_color == "#ff0000"


def test_blend_without_base_opacity_starts_from_default():
    base = Field(type="square", size=40, background_color="#000000")
    state = blend_override(base, FieldOverride(background_opacity=1.0), 1.0)
    assert state.background_opacity == pytest.approx(1.0)
    assert blend_override(base, FieldOverride(background_opacity=1.0), 0).background_opacity is None
