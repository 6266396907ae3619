"""Renderer for drawing mechanic snapshots using Pillow."""

import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Callable

from PIL import Image, ImageDraw, ImageFont

from ..constants import DEBUFF_BLINK_PERIOD, DEBUFF_BLINK_THRESHOLD, GRID_RINGS
from ..timeline.field import FieldState
from ..timeline.interpolation import blink
from ..timeline.model import MechanicData, MoveEvent, Position
from ..timeline.position import movement_points
from ..timeline.snapshot import (
    ActiveAnnotation,
    ActiveAoE,
    ActiveCaption,
    ActiveCast,
    ActiveObject,
    EnemyState,
    PlayerState,
    Snapshot,
)
from .coordinates import rotate_point
from .render_context import RenderContext, rgba

logger = logging.getLogger(__name__)

DrawFn = Callable[[ImageDraw.ImageDraw], None]

# Fallback geometry (game units) when an AoE omits a dimension.
DEFAULT_RADIUS = 5.0
DEFAULT_INNER_RADIUS = 3.0
DEFAULT_CONE_ANGLE = 90.0
DEFAULT_LENGTH = 20.0
DEFAULT_WIDTH = 4.0
DEFAULT_ENEMY_SIZE = 3.0
DEBUFF_BADGE_SIZE = 14  # pixels at the reference screen size
CAST_BAR_WIDTH = 160
CAST_BAR_HEIGHT = 10
REFERENCE_SCREEN_SIZE = 800


@lru_cache(maxsize=32)
def _font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    return ImageFont.load_default(size=max(8, size))


@lru_cache(maxsize=8)
def _background_image(path: str, size: int) -> Image.Image | None:
    if not Path(path).is_file():
        logger.debug("Skipping non-local field background %s", path)
        return None
    with Image.open(path) as source:
        return source.convert("RGBA").resize((size, size))


class Renderer:
    """Renders snapshots of one mechanic as PIL Images."""

    def __init__(self, mechanic: MechanicData, render_context: RenderContext | None = None):
        """
        Initialize renderer.

        Args:
            mechanic: The mechanic the snapshots belong to (field shape, markers)
            render_context: Rendering configuration and theming
        """
        self.mechanic = mechanic
        self.context = render_context or RenderContext.darkmode()
        self.width = self.height = self.context.screen_size
        self.text_scale = self.context.screen_size / REFERENCE_SCREEN_SIZE
        self.paths = self._movement_paths() if self.context.show_movement_paths else {}

    def render(self, snapshot: Snapshot) -> Image.Image:
        """
        Render a snapshot.

        Layers are drawn back to front: field, markers, movement paths (when
        enabled), AoEs, objects, enemies, players, annotations, captions and
        cast bars.

        Returns:
            RGB image of the frame
        """
        img = Image.new("RGBA", (self.width, self.height), rgba(self.context.background_color))

        self._draw_field(img, snapshot.field)
        self._draw_markers(img)
        self._draw_movement_paths(img)
        for aoe in snapshot.active_aoes:
            self._draw_aoe(img, aoe)
        for gimmick in snapshot.active_objects:
            self._draw_object(img, gimmick)
        for enemy in snapshot.enemies:
            self._draw_enemy(img, enemy)
        for player in snapshot.players:
            self._draw_player(img, player, snapshot.frame)
        for text in snapshot.active_texts:
            if isinstance(text, ActiveAnnotation):
                self._draw_annotation(img, text)
            else:
                self._draw_caption(img, text)
        for cast in snapshot.active_casts:
            self._draw_cast(img, cast, snapshot)

        return img.convert("RGB")

    def _layer(self, img: Image.Image, draw_fn: DrawFn) -> None:
        """Draw onto a transparent layer and composite it, so overlaps blend."""
        overlay = Image.new("RGBA", img.size, (0, 0, 0, 0))
        draw_fn(ImageDraw.Draw(overlay, "RGBA"))
        img.alpha_composite(overlay)

    def _font_px(self, size: float) -> int:
        return round(size * self.text_scale)

    # ============================================
    # Field
    # ============================================

    def _field_box(self) -> list[float]:
        field = self.mechanic.field
        ctx = self.context
        width = field.width if field.type == "rectangle" and field.width else field.size
        height = field.height if field.type == "rectangle" and field.height else field.size
        cx, cy = ctx.to_screen(Position(0, 0))
        half_w, half_h = ctx.length(width) / 2, ctx.length(height) / 2
        return [cx - half_w, cy - half_h, cx + half_w, cy + half_h]

    def _draw_field(self, img: Image.Image, state: FieldState) -> None:
        box = self._field_box()
        circular = self.mechanic.field.type == "circle"

        def draw_background(draw: ImageDraw.ImageDraw) -> None:
            fill = rgba(state.background_color)
            if circular:
                draw.ellipse(box, fill=fill)
            else:
                draw.rectangle(box, fill=fill)

        self._layer(img, draw_background)

        if state.background_image:
            self._draw_background_image(img, state, box, circular)

        if self.mechanic.field.grid_enabled:
            self._layer(img, lambda draw: self._draw_grid(draw, box, circular))

    def _draw_background_image(
        self, img: Image.Image, state: FieldState, box: list[float], circular: bool
    ) -> None:
        size = round(box[2] - box[0])
        picture = _background_image(state.background_image, size)
        if picture is None:
            return
        opacity = 1.0 if state.background_opacity is None else state.background_opacity
        mask = Image.new("L", picture.size, 0)
        mask_draw = ImageDraw.Draw(mask)
        shape = mask_draw.ellipse if circular else mask_draw.rectangle
        shape([0, 0, size - 1, size - 1], fill=round(opacity * 255))
        layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
        layer.paste(picture, (round(box[0]), round(box[1])), mask)
        img.alpha_composite(layer)

    def _draw_grid(self, draw: ImageDraw.ImageDraw, box: list[float], circular: bool) -> None:
        color = rgba(self.context.grid_color, 0.8)
        cx, cy = (box[0] + box[2]) / 2, (box[1] + box[3]) / 2
        for ring in GRID_RINGS:
            radius = self.context.length(ring)
            if circular and radius > (box[2] - box[0]) / 2 + 1:
                continue
            draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], outline=color)
        draw.line([(cx, box[1]), (cx, box[3])], fill=color)
        draw.line([(box[0], cy), (box[2], cy)], fill=color)
        outline = draw.ellipse if circular else draw.rectangle
        outline(box, outline=rgba(self.context.grid_color), width=2)

    def _draw_markers(self, img: Image.Image) -> None:
        if not self.mechanic.markers:
            return
        radius = self.context.length(1.5)
        font = _font(self._font_px(18))

        def draw_markers(draw: ImageDraw.ImageDraw) -> None:
            for marker in self.mechanic.markers:
                x, y = self.context.to_screen(marker.position)
                color = self.context.marker_color(marker.type)
                box = [x - radius, y - radius, x + radius, y + radius]
                if marker.type.isdigit():
                    draw.rectangle(box, fill=rgba(color, 0.3), outline=rgba(color), width=2)
                else:
                    draw.ellipse(box, fill=rgba(color, 0.3), outline=rgba(color), width=2)
                draw.text((x, y), marker.type, font=font, fill=rgba(color), anchor="mm")

        self._layer(img, draw_markers)

    # ============================================
    # Movement paths
    # ============================================

    def _movement_paths(self) -> dict[str, list[Position]]:
        moves: dict[str, list[MoveEvent]] = {}
        for event in sorted(
            (e for e in self.mechanic.timeline if isinstance(e, MoveEvent)), key=lambda e: e.frame
        ):
            moves.setdefault(event.target_id, []).append(event)
        return {
            player.id: movement_points(player.position, moves[player.id])
            for player in self.mechanic.initial_players
            if player.id in moves
        }

    def _draw_movement_paths(self, img: Image.Image) -> None:
        if not self.paths:
            return
        color = self.context.path_color
        radius = 6 * self.text_scale
        font = _font(self._font_px(14))

        def draw_paths(draw: ImageDraw.ImageDraw) -> None:
            for points in self.paths.values():
                screen = [self.context.to_screen(point) for point in points]
                for number, (start, end) in enumerate(zip(screen, screen[1:]), start=1):
                    _dashed_line(draw, start, end, rgba(color, 0.5), scale=self.text_scale)
                    x, y = end
                    draw.ellipse(
                        [x - radius, y - radius, x + radius, y + radius],
                        fill=rgba(color, 0.3),
                        outline=rgba(color, 0.8),
                        width=2,
                    )
                    draw.text(
                        (x + 2 * radius, y - radius),
                        str(number),
                        font=font,
                        fill=rgba(color),
                        anchor="lm",
                    )

        self._layer(img, draw_paths)

    # ============================================
    # AoEs
    # ============================================

    def _draw_aoe(self, img: Image.Image, active: ActiveAoE) -> None:
        aoe = active.aoe
        ctx = self.context
        center = ctx.to_screen(active.position)
        fill = rgba(aoe.color, active.opacity, ctx.aoe_color)
        stroke = rgba(aoe.color, min(1.0, active.opacity + 0.3), ctx.aoe_color)
        direction = active.direction or 0.0

        def draw_shape(draw: ImageDraw.ImageDraw) -> None:
            if aoe.type == "circle":
                radius = ctx.length(aoe.radius or DEFAULT_RADIUS)
                draw.ellipse(_circle_box(center, radius), fill=fill, outline=stroke, width=2)
            elif aoe.type == "donut":
                outer = ctx.length(aoe.outer_radius or DEFAULT_RADIUS * 2)
                inner = ctx.length(aoe.inner_radius or DEFAULT_INNER_RADIUS)
                draw.ellipse(_circle_box(center, outer), fill=fill, outline=stroke, width=2)
                draw.ellipse(_circle_box(center, inner), fill=(0, 0, 0, 0), outline=stroke, width=2)
            elif aoe.type == "cone":
                radius = ctx.length(aoe.length or DEFAULT_LENGTH)
                half_angle = (aoe.angle or DEFAULT_CONE_ANGLE) / 2
                # Pillow measures angles clockwise from east; compass 0 is north.
                draw.pieslice(
                    _circle_box(center, radius),
                    direction - half_angle - 90,
                    direction + half_angle - 90,
                    fill=fill,
                    outline=stroke,
                    width=2,
                )
            elif aoe.type == "line":
                length = ctx.length(aoe.length or DEFAULT_LENGTH)
                width = ctx.length(aoe.width or DEFAULT_WIDTH)
                corners = [(-width / 2, 0), (width / 2, 0), (width / 2, -length), (-width / 2, -length)]
                draw.polygon(_placed(corners, center, direction), fill=fill, outline=stroke, width=2)
            elif aoe.type == "cross":
                arm_length = ctx.length(aoe.arm_length or DEFAULT_LENGTH / 2)
                arm_width = ctx.length(aoe.arm_width or DEFAULT_WIDTH)
                rotation = aoe.rotation or 0.0
                for corners in (
                    [(-arm_width / 2, -arm_length), (arm_width / 2, -arm_length),
                     (arm_width / 2, arm_length), (-arm_width / 2, arm_length)],
                    [(-arm_length, -arm_width / 2), (arm_length, -arm_width / 2),
                     (arm_length, arm_width / 2), (-arm_length, arm_width / 2)],
                ):
                    draw.polygon(_placed(corners, center, rotation), fill=fill, outline=stroke, width=2)
            else:
                logger.debug("Unknown AoE type %r for %s", aoe.type, aoe.id)

        self._layer(img, draw_shape)

    # ============================================
    # Entities
    # ============================================

    def _draw_object(self, img: Image.Image, active: ActiveObject) -> None:
        gimmick = active.gimmick
        x, y = self.context.to_screen(gimmick.position)
        half = self.context.length(gimmick.size) / 2
        fill = rgba(gimmick.color, active.opacity)

        def draw_object(draw: ImageDraw.ImageDraw) -> None:
            if gimmick.shape == "circle":
                draw.ellipse(_circle_box((x, y), half), fill=fill)
            elif gimmick.shape == "square":
                draw.rectangle([x - half, y - half, x + half, y + half], fill=fill)
            elif gimmick.shape == "triangle":
                draw.polygon([(x, y - half), (x + half, y + half), (x - half, y + half)], fill=fill)
            elif gimmick.shape == "diamond":
                draw.polygon([(x, y - half), (x + half, y), (x, y + half), (x - half, y)], fill=fill)
            if gimmick.icon:
                draw.text(
                    (x, y),
                    gimmick.icon,
                    font=_font(round(half * 1.2)),
                    fill=rgba(self.context.text_color, active.opacity),
                    anchor="mm",
                )

        self._layer(img, draw_object)

    def _draw_enemy(self, img: Image.Image, enemy: EnemyState) -> None:
        x, y = self.context.to_screen(enemy.position)
        radius = self.context.length(enemy.size or DEFAULT_ENEMY_SIZE) / 2
        color = enemy.color or self.context.enemy_color

        def draw_enemy(draw: ImageDraw.ImageDraw) -> None:
            draw.ellipse(_circle_box((x, y), radius), fill=rgba(color), outline=rgba("#ffffff"), width=2)
            draw.text(
                (x, y + radius + 4),
                enemy.name,
                font=_font(self._font_px(14)),
                fill=rgba(self.context.text_color),
                anchor="mt",
            )

        self._layer(img, draw_enemy)

    def _draw_player(self, img: Image.Image, player: PlayerState, frame: int) -> None:
        x, y = self.context.to_screen(player.position)
        radius = self.context.length(self.context.player_radius)
        color = self.context.role_color(player.role)
        badge = DEBUFF_BADGE_SIZE * self.text_scale

        def draw_player(draw: ImageDraw.ImageDraw) -> None:
            draw.ellipse(_circle_box((x, y), radius), fill=rgba(color), outline=rgba("#ffffff"), width=2)
            draw.text(
                (x, y),
                player.role,
                font=_font(self._font_px(12)),
                fill=rgba(self.context.text_color),
                anchor="mm",
            )
            left = x - len(player.debuffs) * (badge + 2) / 2
            top = y - radius - badge - 4
            for offset, debuff in enumerate(player.debuffs):
                alpha = 1.0
                if debuff.remaining_seconds < DEBUFF_BLINK_THRESHOLD:
                    alpha = 0.3 + 0.7 * blink(frame, debuff.start_frame, DEBUFF_BLINK_PERIOD)
                bx = left + offset * (badge + 2)
                draw.rectangle(
                    [bx, top, bx + badge, top + badge],
                    fill=rgba(debuff.color, alpha, "#9b59b6"),
                    outline=rgba("#ffffff", alpha),
                )

        self._layer(img, draw_player)

    # ============================================
    # Text and overlays
    # ============================================

    def _draw_annotation(self, img: Image.Image, active: ActiveAnnotation) -> None:
        annotation = active.annotation
        x, y = self.context.to_screen(annotation.position)
        font = _font(self._font_px(annotation.font_size))
        anchor = {"left": "lm", "right": "rm"}.get(annotation.align, "mm")

        def draw_text(draw: ImageDraw.ImageDraw) -> None:
            if annotation.background_color:
                box = draw.textbbox((x, y), annotation.text, font=font, anchor=anchor)
                draw.rectangle(
                    [box[0] - 4, box[1] - 2, box[2] + 4, box[3] + 2],
                    fill=rgba(annotation.background_color, active.opacity),
                )
            draw.text(
                (x, y),
                annotation.text,
                font=font,
                fill=rgba(annotation.color, active.opacity),
                anchor=anchor,
            )

        self._layer(img, draw_text)

    def _draw_caption(self, img: Image.Image, caption: ActiveCaption) -> None:
        if isinstance(caption.content, str):
            text = caption.content
        else:
            text = "\n".join(
                f"{'/'.join(entry.roles)}: {entry.text}" for entry in caption.content
            )
        y = {"top": 0.1, "bottom": 0.9}.get(caption.placement, 0.5) * self.height
        font = _font(self._font_px(28 if caption.text_type == "main" else 20))

        def draw_caption(draw: ImageDraw.ImageDraw) -> None:
            box = draw.multiline_textbbox((self.width / 2, y), text, font=font, anchor="mm", align="center")
            draw.rectangle(
                [box[0] - 10, box[1] - 6, box[2] + 10, box[3] + 6],
                fill=rgba("#000000", 0.6 * caption.opacity),
            )
            draw.multiline_text(
                (self.width / 2, y),
                text,
                font=font,
                fill=rgba(self.context.text_color, caption.opacity),
                anchor="mm",
                align="center",
            )

        self._layer(img, draw_caption)

    def _draw_cast(self, img: Image.Image, cast: ActiveCast, snapshot: Snapshot) -> None:
        caster = snapshot.enemy(cast.caster_id)
        if caster is None:
            x, y = self.width / 2, 24 * self.text_scale
        else:
            x, y = self.context.to_screen(caster.position)
            y -= self.context.length((caster.size or DEFAULT_ENEMY_SIZE) / 2) + 28 * self.text_scale
        width = CAST_BAR_WIDTH * self.text_scale
        height = CAST_BAR_HEIGHT * self.text_scale
        left = x - width / 2

        def draw_bar(draw: ImageDraw.ImageDraw) -> None:
            draw.rectangle([left, y, left + width, y + height], fill=rgba("#000000", 0.7))
            draw.rectangle(
                [left, y, left + width * cast.progress, y + height], fill=rgba("#f0c040")
            )
            draw.text(
                (x, y - 2),
                cast.skill_name,
                font=_font(self._font_px(14)),
                fill=rgba(self.context.text_color),
                anchor="mb",
            )

        self._layer(img, draw_bar)


def _circle_box(center: tuple[float, float], radius: float) -> list[float]:
    return [center[0] - radius, center[1] - radius, center[0] + radius, center[1] + radius]


def _placed(
    corners: list[tuple[float, float]], center: tuple[float, float], degrees: float
) -> list[tuple[float, float]]:
    """Translate shape-local corners (north is -y) to ``center`` and rotate clockwise."""
    return [
        rotate_point((center[0] + cx, center[1] + cy), center, degrees)
        for cx, cy in corners
    ]


def _dashed_line(
    draw: ImageDraw.ImageDraw,
    start: tuple[float, float],
    end: tuple[float, float],
    fill: tuple[int, int, int, int],
    scale: float = 1.0,
    dash: float = 6,
    gap: float = 4,
) -> None:
    (x0, y0), (x1, y1) = start, end
    length = math.hypot(x1 - x0, y1 - y0)
    if length == 0:
        return
    ux, uy = (x1 - x0) / length, (y1 - y0) / length
    dash, gap = dash * scale, gap * scale
    offset = 0.0
    while offset < length:
        stop = min(offset + dash, length)
        draw.line(
            [(x0 + ux * offset, y0 + uy * offset), (x0 + ux * stop, y0 + uy * stop)],
            fill=fill,
            width=max(1, round(2 * scale)),
        )
        offset = stop + gap
