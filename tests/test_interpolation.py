"""Tests for interpolation primitives."""

import math

import pytest

from raid_timeline.timeline.interpolation import (
    apply_easing,
    blink,
    clamp01,
    lerp,
    resolve_envelope,
)


def test_lerp_endpoints_are_exact():
    """lerp should return the endpoints exactly at t=0 and t=1."""
    assert lerp(0.1, 0.7, 0) == 0.1
    assert lerp(0.1, 0.7, 1) == 0.7
    assert lerp(0, 10, 0.5) == 5


@pytest.mark.parametrize("easing", ["linear", "easeIn", "easeOut", "easeInOut"])
def test_easings_fix_endpoints(easing):
    assert apply_easing(0, easing) == 0
    assert apply_easing(1, easing) == 1


def test_easing_shapes():
    assert apply_easing(0.5, "easeIn") == pytest.approx(0.25)
    assert apply_easing(0.5, "easeOut") == pytest.approx(0.75)
    assert apply_easing(0.5, "easeInOut") == pytest.approx(0.5)
    assert apply_easing(0.25, "easeInOut") == pytest.approx(0.125)


def test_unknown_easing_falls_back_to_linear():
    assert apply_easing(0.3, "bounce") == pytest.approx(0.3)
    assert apply_easing(0.3, None) == pytest.approx(0.3)


def test_clamp01():
    assert clamp01(-1) == 0
    assert clamp01(2) == 1
    assert clamp01(0.4) == 0.4


class TestEnvelope:
    """resolve_envelope window semantics."""

    def test_zero_outside_window(self):
        assert resolve_envelope(9, 10, 5, 50, 5, 1) == 0
        assert resolve_envelope(50, 10, 5, 50, 5, 1) == 0

    def test_ramps(self):
        assert resolve_envelope(10, 10, 10, 100, 10, 0.8) == 0
        assert resolve_envelope(15, 10, 10, 100, 10, 0.8) == pytest.approx(0.4)
        assert resolve_envelope(50, 10, 10, 100, 10, 0.8) == pytest.approx(0.8)
        assert resolve_envelope(95, 10, 10, 100, 10, 0.8) == pytest.approx(0.4)

    def test_zero_fade_in_is_a_step(self):
        assert resolve_envelope(10, 10, 0, 100, 0, 0.6) == pytest.approx(0.6)

    def test_open_ended_window(self):
        assert resolve_envelope(10_000, 0, 0, math.inf, 0, 1) == 1

    def test_bounds(self):
        for frame in range(0, 120):
            value = resolve_envelope(frame, 10, 7, 90, 13, 0.5)
            assert 0 <= value <= 0.5


def test_blink_pulses():
    assert blink(0, 0, period=6) == pytest.approx(0)
    assert blink(3, 0, period=6) == pytest.approx(1)
    assert blink(6, 0, period=6) == pytest.approx(0, abs=1e-9)
