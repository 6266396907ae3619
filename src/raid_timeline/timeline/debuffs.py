"""Fold debuff add/remove events into the set each player carries."""

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from .model import ALL_PLAYERS, DebuffAddEvent, DebuffRemoveEvent

DebuffEvent = DebuffAddEvent | DebuffRemoveEvent


@dataclass(frozen=True)
class ActiveDebuff:
    id: str
    name: str
    duration_seconds: float
    start_frame: int
    remaining_seconds: float
    icon_url: str | None = None
    color: str | None = None


def debuff_fold_key(event: DebuffEvent) -> tuple[int, int]:
    """Sort key: frame order, adds before removes within a frame."""
    return (event.frame, 0 if isinstance(event, DebuffAddEvent) else 1)


def resolve_debuffs(
    player_ids: Sequence[str],
    events: Iterable[DebuffEvent],
    frame: int,
    fps: int,
) -> dict[str, tuple[ActiveDebuff, ...]]:
    """
    Resolve the debuffs every player carries at ``frame``.

    Re-adding a debuff a player already carries overwrites the entry in
    place. ``all`` targets every player of the roster.

    Args:
        player_ids: Roster in display order
        events: Debuff events; those after ``frame`` are skipped
        frame: Frame to resolve
        fps: Frames per second, for the remaining-time countdown

    Returns:
        Player id to active debuffs in application order
    """
    carried: dict[str, dict[str, DebuffAddEvent]] = {player_id: {} for player_id in player_ids}

    for event in sorted(events, key=debuff_fold_key):
        if event.frame > frame:
            continue
        for player_id in _targets(event.target_id, carried):
            if isinstance(event, DebuffAddEvent):
                carried[player_id][event.debuff.id] = event
            else:
                carried[player_id].pop(event.debuff_id, None)

    return {
        player_id: tuple(_active_debuff(add, frame, fps) for add in debuffs.values())
        for player_id, debuffs in carried.items()
    }


def _targets(target_id: str, carried: Mapping[str, object]) -> Sequence[str]:
    if target_id == ALL_PLAYERS:
        return list(carried)
    if target_id in carried:
        return [target_id]
    return []


def _active_debuff(event: DebuffAddEvent, frame: int, fps: int) -> ActiveDebuff:
    debuff = event.debuff
    elapsed_seconds = (frame - event.frame) / fps
    return ActiveDebuff(
        id=debuff.id,
        name=debuff.name,
        duration_seconds=debuff.duration_seconds,
        start_frame=event.frame,
        remaining_seconds=max(0.0, debuff.duration_seconds - elapsed_seconds),
        icon_url=debuff.icon_url,
        color=debuff.color,
    )


def debuff_holders(
    debuffs: Mapping[str, Sequence[ActiveDebuff]],
    player_order: Sequence[str],
) -> dict[str, str]:
    """Reverse index of debuff id to the first player in roster order carrying it."""
    holders: dict[str, str] = {}
    for player_id in player_order:
        for debuff in debuffs.get(player_id, ()):
            holders.setdefault(debuff.id, player_id)
    return holders
