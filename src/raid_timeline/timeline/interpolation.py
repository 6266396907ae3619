"""Interpolation primitives shared by every resolver."""

import math
from typing import Callable


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation; callers clamp ``t``."""
    return a * (1 - t) + b * t


def _linear(t: float) -> float:
    return t


def _ease_in(t: float) -> float:
    return t * t


def _ease_out(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


def _ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return 1 - (-2 * t + 2) ** 2 / 2


EASINGS: dict[str, Callable[[float], float]] = {
    "linear": _linear,
    "easeIn": _ease_in,
    "easeOut": _ease_out,
    "easeInOut": _ease_in_out,
}


def apply_easing(t: float, easing: str | None) -> float:
    """Apply a named easing curve; unknown names fall back to linear."""
    return EASINGS.get(easing or "linear", _linear)(t)


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def resolve_envelope(
    frame: float,
    start: float,
    fade_in: float,
    end: float,
    fade_out: float,
    peak: float,
) -> float:
    """
    Opacity envelope with linear fade-in and fade-out ramps.

    Returns 0 before ``start`` and from ``end`` onwards. Across the first
    ``fade_in`` frames the value ramps from 0 to ``peak``; across the last
    ``fade_out`` frames before ``end`` it ramps back to 0. A zero fade is an
    instantaneous step. ``end`` may be ``math.inf`` for an open-ended window.

    Args:
        frame: Frame being evaluated
        start: First frame of the window
        fade_in: Fade-in length in frames
        end: Frame at which the window closes (exclusive)
        fade_out: Fade-out length in frames, ending at ``end``
        peak: Steady-state value

    Returns:
        The envelope value in ``[0, peak]``
    """
    if frame < start or frame >= end:
        return 0.0
    if fade_in > 0 and frame < start + fade_in:
        return peak * (frame - start) / fade_in
    if fade_out > 0 and frame > end - fade_out:
        return peak * (end - frame) / fade_out
    return peak


def blink(frame: float, start_frame: float, period: float = 10) -> float:
    """Pulsing factor in ``[0, 1]``; one half-cycle lasts ``period`` frames."""
    elapsed = frame - start_frame
    return abs(math.sin(elapsed / period * math.pi))
