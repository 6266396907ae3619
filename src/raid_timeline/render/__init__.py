"""Pillow rendering of resolved snapshots."""

from .coordinates import game_to_screen, polar_to_game, screen_to_game
from .frames import frame_range, generate_raster_frames, iter_snapshots, resolve_frames_parallel
from .render_context import RenderContext
from .renderer import Renderer

__all__ = [
    "game_to_screen",
    "screen_to_game",
    "polar_to_game",
    "frame_range",
    "iter_snapshots",
    "resolve_frames_parallel",
    "generate_raster_frames",
    "RenderContext",
    "Renderer",
]
