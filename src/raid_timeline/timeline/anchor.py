"""Where an AoE sits and which way it points, given what it is anchored to."""

import math
from dataclasses import dataclass, field
from typing import Callable, Mapping

from .model import AoE, Position

AUTO_DIRECTION_TYPES = frozenset({"line", "cone"})


@dataclass(frozen=True)
class AnchorContext:
    """Live entity positions at one frame, as seen by AoE anchors."""

    frame: int
    player_positions: Mapping[str, Position] = field(default_factory=dict)
    enemy_positions: Mapping[str, Position] = field(default_factory=dict)
    object_positions: Mapping[str, Position] = field(default_factory=dict)
    debuff_holders: Mapping[str, str] = field(default_factory=dict)

    def player_position(self, player_id: str | None) -> Position | None:
        if player_id is None:
            return None
        return self.player_positions.get(player_id)

    def source_position(self, aoe: AoE) -> Position | None:
        """Live position of the entity ``aoe`` originates from, if it exists."""
        if aoe.source_type == "boss":
            return self.enemy_positions.get(aoe.source_id or "")
        if aoe.source_type == "player":
            return self.player_positions.get(aoe.source_id or "")
        if aoe.source_type == "object":
            return self.object_positions.get(aoe.source_id or "")
        if aoe.source_type == "debuff":
            holder = self.debuff_holders.get(aoe.source_debuff_id or "")
            return self.player_position(holder)
        return None


@dataclass(frozen=True)
class Anchor:
    position: Position
    direction: float | None


def calculate_direction(source: Position, target: Position) -> float:
    """Angle in degrees from ``source`` to ``target``; north is 0, clockwise."""
    dx = target.x - source.x
    dy = target.y - source.y
    return math.degrees(math.atan2(dx, -dy))


def resolve_anchor(
    aoe: AoE,
    show_frame: int,
    context: AnchorContext,
    context_at: Callable[[int], AnchorContext],
) -> Anchor | None:
    """
    Resolve an AoE's effective position and direction at ``context.frame``.

    An auto-directed line or cone sits on its live source (plus offset) and
    points at its target player, whatever its tracking mode.

    Args:
        aoe: The AoE as authored in its show event
        show_frame: Frame of the show event
        context: Entity positions at the frame being resolved
        context_at: Builds the context for another frame (used to freeze a
            delayed static AoE where its source stood at placement time)

    Returns:
        The anchor, or ``None`` when the AoE has nothing to attach to yet
    """
    if _awaiting_placement(aoe, show_frame, context.frame):
        return None
    if _auto_directed(aoe):
        return _aimed_anchor(aoe, context)
    position = _resolve_position(aoe, show_frame, context, context_at)
    if position is None:
        return None
    return Anchor(position=position, direction=aoe.direction)


def _awaiting_placement(aoe: AoE, show_frame: int, frame: int) -> bool:
    return (
        aoe.tracking_mode == "static"
        and aoe.placement_delay > 0
        and frame < show_frame + aoe.placement_delay
    )


def _auto_directed(aoe: AoE) -> bool:
    return aoe.auto_direction and aoe.type in AUTO_DIRECTION_TYPES and aoe.source_type != "fixed"


def _aimed_anchor(aoe: AoE, context: AnchorContext) -> Anchor:
    source = context.source_position(aoe)
    if source is None:
        return Anchor(position=aoe.position, direction=aoe.direction)
    target = context.player_position(aoe.target_player_id)
    direction = calculate_direction(source, target) if target else aoe.direction
    return Anchor(position=source.offset(aoe.offset_from_source), direction=direction)


def _resolve_position(
    aoe: AoE,
    show_frame: int,
    context: AnchorContext,
    context_at: Callable[[int], AnchorContext],
) -> Position | None:
    if aoe.tracking_mode == "track_source":
        if aoe.source_type == "fixed":
            return aoe.position
        source = context.source_position(aoe)
        return source.offset(aoe.offset_from_source) if source else None

    if aoe.tracking_mode == "track_target":
        target = context.player_position(aoe.target_player_id)
        return target.offset(aoe.offset_from_source) if target else None

    # static
    if aoe.placement_delay <= 0 or aoe.source_type == "fixed":
        return aoe.position
    placement_frame = show_frame + aoe.placement_delay
    placed_at = context if context.frame == placement_frame else context_at(placement_frame)
    source = placed_at.source_position(aoe)
    if source is None:
        return aoe.position
    return source.offset(aoe.offset_from_source)
