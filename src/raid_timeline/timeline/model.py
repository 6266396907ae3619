"""Immutable data model for raid mechanics and their timeline events."""

from dataclasses import dataclass
from typing import ClassVar, Literal, Union

from ..constants import DEFAULT_BOSS_MOVE_EASING, DEFAULT_MOVE_EASING

Easing = Literal["linear", "easeIn", "easeOut", "easeInOut"]
AoEType = Literal["circle", "cone", "line", "donut", "cross"]
AoESourceType = Literal["fixed", "boss", "object", "player", "debuff"]
AoETrackingMode = Literal["static", "track_source", "track_target"]

ALL_PLAYERS = "all"


@dataclass(frozen=True)
class Position:
    """Game coordinates; the field centre is the origin and y grows downward."""

    x: float
    y: float

    def offset(self, other: "Position | None") -> "Position":
        if other is None:
            return self
        return Position(self.x + other.x, self.y + other.y)


ORIGIN = Position(0.0, 0.0)


@dataclass(frozen=True)
class Debuff:
    """Debuff definition carried by a debuff_add event."""

    id: str
    name: str
    duration_seconds: float
    icon_url: str | None = None
    color: str | None = None


@dataclass(frozen=True)
class Player:
    id: str
    role: str
    position: Position
    job: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class Enemy:
    id: str
    name: str
    position: Position
    size: float | None = None
    color: str | None = None


@dataclass(frozen=True)
class AoE:
    """Area-of-effect geometry plus how it anchors to the field."""

    id: str
    type: AoEType
    position: Position
    color: str | None = None
    opacity: float | None = None
    # circle
    radius: float | None = None
    # donut
    inner_radius: float | None = None
    outer_radius: float | None = None
    # cone
    angle: float | None = None
    direction: float | None = None
    length: float | None = None
    # line
    width: float | None = None
    # cross
    arm_width: float | None = None
    arm_length: float | None = None
    rotation: float | None = None
    # anchoring
    source_type: AoESourceType = "fixed"
    source_id: str | None = None
    source_debuff_id: str | None = None
    tracking_mode: AoETrackingMode = "static"
    target_player_id: str | None = None
    placement_delay: int = 0
    auto_direction: bool = False
    offset_from_source: Position | None = None


@dataclass(frozen=True)
class GimmickObject:
    id: str
    name: str
    position: Position
    shape: Literal["circle", "square", "triangle", "diamond", "none"]
    size: float
    color: str
    icon: str | None = None
    image_url: str | None = None
    opacity: float | None = None


@dataclass(frozen=True)
class TextAnnotation:
    id: str
    text: str
    position: Position
    font_size: float
    color: str
    align: Literal["left", "center", "right"] = "center"
    background_color: str | None = None


@dataclass(frozen=True)
class RoleText:
    roles: tuple[str, ...]
    text: str


@dataclass(frozen=True)
class FieldMarker:
    type: str
    position: Position


@dataclass(frozen=True)
class Field:
    type: Literal["circle", "square", "rectangle"]
    size: float
    background_color: str
    grid_enabled: bool = True
    width: float | None = None
    height: float | None = None
    background_image: str | None = None
    background_opacity: float | None = None


@dataclass(frozen=True)
class FieldOverride:
    """Partial background override; unset fields keep the base value."""

    background_color: str | None = None
    background_image: str | None = None
    background_opacity: float | None = None


# ============================================
# Timeline events
# ============================================


@dataclass(frozen=True)
class TimelineEventBase:
    id: str
    frame: int

    type: ClassVar[str] = ""


@dataclass(frozen=True)
class MoveEvent(TimelineEventBase):
    """Player (or any entity) moves to ``to_pos`` over ``duration`` frames."""

    target_id: str
    to_pos: Position
    duration: int
    from_pos: Position | None = None
    easing: str = DEFAULT_MOVE_EASING

    type: ClassVar[str] = "move"

    @property
    def end_frame(self) -> int:
        return self.frame + max(0, self.duration)


@dataclass(frozen=True)
class BossMoveEvent(TimelineEventBase):
    target_id: str
    to_pos: Position
    duration: int
    teleport: bool = False
    easing: str = DEFAULT_BOSS_MOVE_EASING

    type: ClassVar[str] = "boss_move"

    @property
    def end_frame(self) -> int:
        if self.teleport:
            return self.frame
        return self.frame + max(0, self.duration)


@dataclass(frozen=True)
class AoEShowEvent(TimelineEventBase):
    aoe: AoE
    fade_in: int = 0

    type: ClassVar[str] = "aoe_show"


@dataclass(frozen=True)
class AoEHideEvent(TimelineEventBase):
    aoe_id: str
    fade_out: int = 0

    type: ClassVar[str] = "aoe_hide"


@dataclass(frozen=True)
class DebuffAddEvent(TimelineEventBase):
    target_id: str
    debuff: Debuff

    type: ClassVar[str] = "debuff_add"


@dataclass(frozen=True)
class DebuffRemoveEvent(TimelineEventBase):
    target_id: str
    debuff_id: str

    type: ClassVar[str] = "debuff_remove"


@dataclass(frozen=True)
class TextEvent(TimelineEventBase):
    """Legacy screen caption shown for a fixed number of frames."""

    text_type: Literal["main", "role"]
    content: str | tuple[RoleText, ...]
    position: Literal["top", "bottom", "center"]
    duration: int
    fade_in: int = 0
    fade_out: int = 0

    type: ClassVar[str] = "text"


@dataclass(frozen=True)
class CastEvent(TimelineEventBase):
    caster_id: str
    skill_name: str
    duration: int

    type: ClassVar[str] = "cast"


@dataclass(frozen=True)
class TextShowEvent(TimelineEventBase):
    annotation: TextAnnotation
    fade_in: int = 0

    type: ClassVar[str] = "text_show"


@dataclass(frozen=True)
class TextHideEvent(TimelineEventBase):
    annotation_id: str
    fade_out: int = 0

    type: ClassVar[str] = "text_hide"


@dataclass(frozen=True)
class ObjectShowEvent(TimelineEventBase):
    gimmick: GimmickObject
    fade_in: int = 0

    type: ClassVar[str] = "object_show"


@dataclass(frozen=True)
class ObjectHideEvent(TimelineEventBase):
    object_id: str
    fade_out: int = 0

    type: ClassVar[str] = "object_hide"


@dataclass(frozen=True)
class FieldChangeEvent(TimelineEventBase):
    field_change_id: str
    override: FieldOverride
    fade_in: int = 0

    type: ClassVar[str] = "field_change"


@dataclass(frozen=True)
class FieldRevertEvent(TimelineEventBase):
    field_change_id: str
    fade_out: int = 0

    type: ClassVar[str] = "field_revert"


TimelineEvent = Union[
    MoveEvent,
    BossMoveEvent,
    AoEShowEvent,
    AoEHideEvent,
    DebuffAddEvent,
    DebuffRemoveEvent,
    TextEvent,
    CastEvent,
    TextShowEvent,
    TextHideEvent,
    ObjectShowEvent,
    ObjectHideEvent,
    FieldChangeEvent,
    FieldRevertEvent,
]

MovementEvent = Union[MoveEvent, BossMoveEvent]

EVENT_TYPES: dict[str, type[TimelineEventBase]] = {
    event_class.type: event_class
    for event_class in (
        MoveEvent,
        BossMoveEvent,
        AoEShowEvent,
        AoEHideEvent,
        DebuffAddEvent,
        DebuffRemoveEvent,
        TextEvent,
        CastEvent,
        TextShowEvent,
        TextHideEvent,
        ObjectShowEvent,
        ObjectHideEvent,
        FieldChangeEvent,
        FieldRevertEvent,
    )
}


@dataclass(frozen=True)
class MechanicData:
    """A complete mechanic: roster, field and the timeline that animates them."""

    id: str
    name: str
    description: str
    duration_frames: int
    fps: int
    field: Field
    markers: tuple[FieldMarker, ...] = ()
    initial_players: tuple[Player, ...] = ()
    enemies: tuple[Enemy, ...] = ()
    timeline: tuple[TimelineEvent, ...] = ()
