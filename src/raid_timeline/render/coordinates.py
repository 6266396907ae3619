"""Conversions between game units and screen pixels."""

import math

from ..timeline.model import Position


def game_to_screen(position: Position, game_size: float, screen_size: float) -> tuple[float, float]:
    """
    Convert game coordinates (origin at the field centre) to pixels.

    Args:
        position: Game position
        game_size: Width of the field in game units
        screen_size: Width of the rendered field in pixels

    Returns:
        Pixel coordinates with the origin at the top-left corner
    """
    scale = screen_size / game_size
    half = screen_size / 2
    return (position.x * scale + half, position.y * scale + half)


def screen_to_game(point: tuple[float, float], game_size: float, screen_size: float) -> Position:
    scale = screen_size / game_size
    half = screen_size / 2
    return Position((point[0] - half) / scale, (point[1] - half) / scale)


def polar_to_game(angle: float, distance: float) -> Position:
    """Offset for a compass angle in degrees (north = 0, clockwise)."""
    radians = math.radians(angle - 90)
    return Position(math.cos(radians) * distance, math.sin(radians) * distance)


def rotate_point(
    point: tuple[float, float], center: tuple[float, float], degrees: float
) -> tuple[float, float]:
    """Rotate a pixel point clockwise around ``center`` (screen y grows downward)."""
    radians = math.radians(degrees)
    dx, dy = point[0] - center[0], point[1] - center[1]
    return (
        center[0] + dx * math.cos(radians) - dy * math.sin(radians),
        center[1] + dx * math.sin(radians) + dy * math.cos(radians),
    )
