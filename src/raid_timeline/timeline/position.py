"""Resolve entity positions by replaying frame-ordered movement events."""

from typing import Iterable, Sequence

from .interpolation import apply_easing, lerp
from .model import MoveEvent, MovementEvent, Position


def resolve_position(
    initial: Position,
    move_events: Sequence[MovementEvent],
    frame: float,
) -> Position:
    """
    Compute where an entity stands at ``frame``.

    Events must be sorted by start frame. A finished move commits its target
    and the walk continues; a move in progress is interpolated and ends the
    walk, so overlapping moves resolve by input order rather than merging.
    A move without an explicit origin starts from the position accumulated
    so far.

    Args:
        initial: Position before any movement
        move_events: Frame-sorted ``move``/``boss_move`` events for one entity
        frame: Frame to resolve

    Returns:
        The resolved position
    """
    current = initial
    for event in move_events:
        if frame < event.frame:
            break
        end_frame = event.end_frame
        if frame >= end_frame:
            current = event.to_pos
            continue

        progress = (frame - event.frame) / (end_frame - event.frame)
        eased = apply_easing(progress, event.easing)
        origin = _explicit_origin(event) or current
        return Position(
            lerp(origin.x, event.to_pos.x, eased),
            lerp(origin.y, event.to_pos.y, eased),
        )
    return current


def _explicit_origin(event: MovementEvent) -> Position | None:
    if isinstance(event, MoveEvent):
        return event.from_pos
    return None


def movement_points(initial: Position, move_events: Iterable[MovementEvent]) -> list[Position]:
    """Waypoints of an entity's path: its start followed by every move target."""
    points = [initial]
    points.extend(event.to_pos for event in move_events)
    return points
