"""Pydantic models for the mechanic JSON interchange format.

The wire format uses the editor's camelCase keys. Each model mirrors one
frozen dataclass in ``model`` field for field (same Python names, camelCase
aliases), so validated input converts to the engine's types with
``to_model()`` and engine values export back through ``from_attributes``.
"""

import dataclasses
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel

from ..constants import DEFAULT_DURATION_FRAMES, DEFAULT_FPS, FIELD_BACKGROUND_COLOR, GAME_SIZE
from . import model


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        allow_inf_nan=False,
        frozen=True,
    )

    builds: ClassVar[type]

    def to_model(self) -> Any:
        """Build the engine dataclass; unset optional values keep its defaults."""
        names = {item.name for item in dataclasses.fields(self.builds)}
        values = {
            name: _to_model(getattr(self, name))
            for name in type(self).model_fields
            if name in names and getattr(self, name) is not None
        }
        return self.builds(**values)


def _to_model(value: Any) -> Any:
    if isinstance(value, WireModel):
        return value.to_model()
    if isinstance(value, list):
        return tuple(_to_model(item) for item in value)
    return value


Frame = Annotated[int, Field(ge=0)]
Duration = Annotated[int, Field(ge=0)]
Opacity = Annotated[float, Field(ge=0, le=1)]
Size = Annotated[float, Field(ge=0)]
NonEmpty = Annotated[str, Field(min_length=1)]


class PositionModel(WireModel):
    builds = model.Position

    x: float
    y: float


class DebuffModel(WireModel):
    builds = model.Debuff

    id: NonEmpty
    name: str
    duration_seconds: float = Field(ge=0, alias="duration")
    icon_url: str | None = None
    color: str | None = None


class PlayerModel(WireModel):
    builds = model.Player

    id: NonEmpty
    role: NonEmpty
    position: PositionModel
    job: str | None = None
    name: str | None = None


class EnemyModel(WireModel):
    builds = model.Enemy

    id: NonEmpty
    name: str
    position: PositionModel
    size: Size | None = None
    color: str | None = None


class AoEModel(WireModel):
    builds = model.AoE

    id: NonEmpty
    type: model.AoEType
    position: PositionModel
    color: str | None = None
    opacity: Opacity | None = None
    radius: Size | None = None
    inner_radius: Size | None = None
    outer_radius: Size | None = None
    angle: float | None = None
    direction: float | None = None
    length: Size | None = None
    width: Size | None = None
    arm_width: Size | None = None
    arm_length: Size | None = None
    rotation: float | None = None
    source_type: model.AoESourceType | None = None
    source_id: str | None = None
    source_debuff_id: str | None = None
    tracking_mode: model.AoETrackingMode | None = None
    target_player_id: str | None = None
    placement_delay: Duration | None = None
    auto_direction: bool | None = None
    offset_from_source: PositionModel | None = None


class GimmickObjectModel(WireModel):
    builds = model.GimmickObject

    id: NonEmpty
    name: str
    position: PositionModel
    shape: Literal["circle", "square", "triangle", "diamond", "none"]
    size: Size
    color: str
    icon: str | None = None
    image_url: str | None = None
    opacity: Opacity | None = None


class TextAnnotationModel(WireModel):
    builds = model.TextAnnotation

    id: NonEmpty
    text: str
    position: PositionModel
    font_size: Size
    color: str
    align: Literal["left", "center", "right"] | None = None
    background_color: str | None = None


class RoleTextModel(WireModel):
    builds = model.RoleText

    roles: list[str]
    text: str


class FieldMarkerModel(WireModel):
    builds = model.FieldMarker

    type: str
    position: PositionModel


class FieldModel(WireModel):
    builds = model.Field

    type: Literal["circle", "square", "rectangle"] = "circle"
    size: float = Field(GAME_SIZE, gt=0)
    background_color: str = FIELD_BACKGROUND_COLOR
    grid_enabled: bool = True
    width: Size | None = None
    height: Size | None = None
    background_image: str | None = None
    background_opacity: Opacity | None = None


class FieldOverrideModel(WireModel):
    builds = model.FieldOverride

    background_color: str | None = None
    background_image: str | None = None
    background_opacity: Opacity | None = None


# ============================================
# Timeline events
# ============================================


class EventModel(WireModel):
    id: NonEmpty
    frame: Frame


class MoveEventModel(EventModel):
    builds = model.MoveEvent

    type: Literal["move"] = "move"
    target_id: str
    to_pos: PositionModel = Field(alias="to")
    duration: Duration
    from_pos: PositionModel | None = Field(None, alias="from")
    easing: model.Easing | None = None


class BossMoveEventModel(EventModel):
    builds = model.BossMoveEvent

    type: Literal["boss_move"] = "boss_move"
    target_id: str
    to_pos: PositionModel = Field(alias="to")
    duration: Duration
    teleport: bool | None = None
    easing: model.Easing | None = None


class AoEShowEventModel(EventModel):
    builds = model.AoEShowEvent

    type: Literal["aoe_show"] = "aoe_show"
    aoe: AoEModel
    fade_in: Duration | None = Field(None, alias="fadeInDuration")


class AoEHideEventModel(EventModel):
    builds = model.AoEHideEvent

    type: Literal["aoe_hide"] = "aoe_hide"
    aoe_id: str
    fade_out: Duration | None = Field(None, alias="fadeOutDuration")


class DebuffAddEventModel(EventModel):
    builds = model.DebuffAddEvent

    type: Literal["debuff_add"] = "debuff_add"
    target_id: str
    debuff: DebuffModel


class DebuffRemoveEventModel(EventModel):
    builds = model.DebuffRemoveEvent

    type: Literal["debuff_remove"] = "debuff_remove"
    target_id: str
    debuff_id: str


class TextEventModel(EventModel):
    builds = model.TextEvent

    type: Literal["text"] = "text"
    text_type: Literal["main", "role"]
    content: str | list[RoleTextModel]
    position: Literal["top", "bottom", "center"]
    duration: Duration
    fade_in: Duration | None = None
    fade_out: Duration | None = None


class CastEventModel(EventModel):
    builds = model.CastEvent

    type: Literal["cast"] = "cast"
    caster_id: str
    skill_name: str
    duration: Duration


class TextShowEventModel(EventModel):
    builds = model.TextShowEvent

    type: Literal["text_show"] = "text_show"
    annotation: TextAnnotationModel
    fade_in: Duration | None = Field(None, alias="fadeInDuration")


class TextHideEventModel(EventModel):
    builds = model.TextHideEvent

    type: Literal["text_hide"] = "text_hide"
    annotation_id: str
    fade_out: Duration | None = Field(None, alias="fadeOutDuration")


class ObjectShowEventModel(EventModel):
    builds = model.ObjectShowEvent

    type: Literal["object_show"] = "object_show"
    gimmick: GimmickObjectModel = Field(alias="object")
    fade_in: Duration | None = Field(None, alias="fadeInDuration")


class ObjectHideEventModel(EventModel):
    builds = model.ObjectHideEvent

    type: Literal["object_hide"] = "object_hide"
    object_id: str
    fade_out: Duration | None = Field(None, alias="fadeOutDuration")


class FieldChangeEventModel(EventModel):
    builds = model.FieldChangeEvent

    type: Literal["field_change"] = "field_change"
    field_change_id: str
    override: FieldOverrideModel
    fade_in: Duration | None = Field(None, alias="fadeInDuration")


class FieldRevertEventModel(EventModel):
    builds = model.FieldRevertEvent

    type: Literal["field_revert"] = "field_revert"
    field_change_id: str
    fade_out: Duration | None = Field(None, alias="fadeOutDuration")


EVENT_MODELS: dict[str, type[EventModel]] = {
    event_model.builds.type: event_model
    for event_model in (
        MoveEventModel,
        BossMoveEventModel,
        AoEShowEventModel,
        AoEHideEventModel,
        DebuffAddEventModel,
        DebuffRemoveEventModel,
        TextEventModel,
        CastEventModel,
        TextShowEventModel,
        TextHideEventModel,
        ObjectShowEventModel,
        ObjectHideEventModel,
        FieldChangeEventModel,
        FieldRevertEventModel,
    )
}


def _event_tag(value: Any) -> str | None:
    # Wire dicts carry "type"; engine events expose it as a class attribute.
    if isinstance(value, dict):
        return value.get("type")
    return getattr(value, "type", None)


TimelineEventModel = Annotated[
    Union[tuple(Annotated[event_model, Tag(tag)] for tag, event_model in EVENT_MODELS.items())],
    Discriminator(_event_tag),
]


class MechanicModel(WireModel):
    builds = model.MechanicData

    id: NonEmpty
    name: NonEmpty
    description: str = ""
    duration_frames: int = Field(DEFAULT_DURATION_FRAMES, gt=0)
    fps: int = Field(DEFAULT_FPS, gt=0)
    field: FieldModel
    markers: list[FieldMarkerModel] = []
    initial_players: list[PlayerModel]
    enemies: list[EnemyModel] = []
    timeline: list[TimelineEventModel]
