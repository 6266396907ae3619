"""Drop entities hidden in the editor, together with the events that drive them."""

from dataclasses import replace
from typing import Iterable

from .model import (
    AoEHideEvent,
    AoEShowEvent,
    BossMoveEvent,
    CastEvent,
    DebuffAddEvent,
    DebuffRemoveEvent,
    MechanicData,
    MoveEvent,
    ObjectHideEvent,
    ObjectShowEvent,
    TextHideEvent,
    TextShowEvent,
    TimelineEvent,
)

HIDDEN_KINDS = ("player", "enemy", "marker", "aoe", "text", "object")


def hidden_key(kind: str, entity_id: str) -> str:
    return f"{kind}:{entity_id}"


def _event_key(event: TimelineEvent) -> str | None:
    if isinstance(event, (MoveEvent, DebuffAddEvent, DebuffRemoveEvent)):
        return hidden_key("player", event.target_id)
    if isinstance(event, BossMoveEvent):
        return hidden_key("enemy", event.target_id)
    if isinstance(event, CastEvent):
        return hidden_key("enemy", event.caster_id)
    if isinstance(event, AoEShowEvent):
        return hidden_key("aoe", event.aoe.id)
    if isinstance(event, AoEHideEvent):
        return hidden_key("aoe", event.aoe_id)
    if isinstance(event, TextShowEvent):
        return hidden_key("text", event.annotation.id)
    if isinstance(event, TextHideEvent):
        return hidden_key("text", event.annotation_id)
    if isinstance(event, ObjectShowEvent):
        return hidden_key("object", event.gimmick.id)
    if isinstance(event, ObjectHideEvent):
        return hidden_key("object", event.object_id)
    return None


def filter_hidden_objects(mechanic: MechanicData, hidden_keys: Iterable[str]) -> MechanicData:
    """
    Remove hidden entities from a mechanic before export.

    Keys have the form ``"<kind>:<id>"``; markers are keyed by their type
    (``"marker:A"``). Captions and field changes are never hidden.

    Returns:
        A new mechanic, or ``mechanic`` itself when nothing is hidden
    """
    hidden = set(hidden_keys)
    if not hidden:
        return mechanic

    return replace(
        mechanic,
        initial_players=tuple(
            p for p in mechanic.initial_players if hidden_key("player", p.id) not in hidden
        ),
        enemies=tuple(e for e in mechanic.enemies if hidden_key("enemy", e.id) not in hidden),
        markers=tuple(m for m in mechanic.markers if hidden_key("marker", m.type) not in hidden),
        timeline=tuple(event for event in mechanic.timeline if _event_key(event) not in hidden),
    )
