"""Rendering configuration and palette."""

from dataclasses import dataclass, field

from PIL import ImageColor

from ..constants import (
    DEFAULT_AOE_COLOR,
    DEFAULT_ENEMY_COLOR,
    GAME_SIZE,
    MARKER_COLORS,
    ROLE_COLORS,
    SCREEN_BACKGROUND_COLOR,
    SCREEN_SIZE,
)
from ..timeline.model import Position
from .coordinates import game_to_screen

Color = tuple[int, int, int]


@dataclass(frozen=True)
class RenderContext:
    """Screen geometry and colours shared by every drawing routine."""

    screen_size: int = SCREEN_SIZE
    game_size: float = GAME_SIZE
    background_color: str = SCREEN_BACKGROUND_COLOR
    aoe_color: str = DEFAULT_AOE_COLOR
    enemy_color: str = DEFAULT_ENEMY_COLOR
    player_radius: float = 1.2  # game units
    grid_color: str = "#3a3a6e"
    text_color: str = "#ffffff"
    path_color: str = "#00ffff"
    show_movement_paths: bool = False
    role_colors: dict[str, str] = field(default_factory=lambda: dict(ROLE_COLORS))
    marker_colors: dict[str, str] = field(default_factory=lambda: dict(MARKER_COLORS))

    @classmethod
    def darkmode(cls) -> "RenderContext":
        return cls()

    @classmethod
    def sized(cls, screen_size: int, show_movement_paths: bool = False) -> "RenderContext":
        return cls(screen_size=screen_size, show_movement_paths=show_movement_paths)

    @property
    def scale(self) -> float:
        """Pixels per game unit."""
        return self.screen_size / self.game_size

    def to_screen(self, position: Position) -> tuple[float, float]:
        return game_to_screen(position, self.game_size, self.screen_size)

    def length(self, game_units: float) -> float:
        return game_units * self.scale

    def role_color(self, role: str) -> str:
        return self.role_colors.get(role[:1].upper(), self.role_colors["P"])

    def marker_color(self, marker_type: str) -> str:
        return self.marker_colors.get(marker_type, self.text_color)


def rgba(color: str | None, opacity: float = 1.0, fallback: str = "#ffffff") -> tuple[int, int, int, int]:
    """Parse a CSS colour string and attach an alpha from ``opacity``."""
    try:
        red, green, blue = ImageColor.getrgb(color or fallback)[:3]
    except ValueError:
        red, green, blue = ImageColor.getrgb(fallback)[:3]
    alpha = round(max(0.0, min(1.0, opacity)) * 255)
    return (red, green, blue, alpha)
