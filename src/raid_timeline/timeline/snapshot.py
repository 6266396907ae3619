"""Frame snapshot payloads produced by the timeline engine."""

from dataclasses import dataclass

from .debuffs import ActiveDebuff
from .field import FieldState
from .model import AoE, GimmickObject, Position, RoleText, TextAnnotation


@dataclass(frozen=True)
class PlayerState:
    id: str
    role: str
    position: Position
    debuffs: tuple[ActiveDebuff, ...] = ()
    job: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class EnemyState:
    id: str
    name: str
    position: Position
    size: float | None = None
    color: str | None = None


@dataclass(frozen=True)
class ActiveAoE:
    aoe: AoE
    position: Position
    direction: float | None
    opacity: float
    show_frame: int

    @property
    def id(self) -> str:
        return self.aoe.id


@dataclass(frozen=True)
class ActiveObject:
    gimmick: GimmickObject
    opacity: float

    @property
    def id(self) -> str:
        return self.gimmick.id


@dataclass(frozen=True)
class ActiveAnnotation:
    """A field-anchored text annotation."""

    annotation: TextAnnotation
    opacity: float

    @property
    def id(self) -> str:
        return self.annotation.id


@dataclass(frozen=True)
class ActiveCaption:
    """A screen-anchored caption from a legacy ``text`` event."""

    id: str
    text_type: str
    content: str | tuple[RoleText, ...]
    placement: str
    opacity: float


@dataclass(frozen=True)
class ActiveCast:
    id: str
    caster_id: str
    skill_name: str
    progress: float


@dataclass(frozen=True)
class Snapshot:
    """The complete resolved visual state at one frame."""

    frame: int
    players: tuple[PlayerState, ...]
    enemies: tuple[EnemyState, ...]
    active_aoes: tuple[ActiveAoE, ...]
    active_objects: tuple[ActiveObject, ...]
    active_texts: tuple[ActiveAnnotation | ActiveCaption, ...]
    active_casts: tuple[ActiveCast, ...]
    field: FieldState

    def player(self, player_id: str) -> PlayerState | None:
        return next((player for player in self.players if player.id == player_id), None)

    def enemy(self, enemy_id: str) -> EnemyState | None:
        return next((enemy for enemy in self.enemies if enemy.id == enemy_id), None)

    def aoe(self, aoe_id: str) -> ActiveAoE | None:
        return next((aoe for aoe in self.active_aoes if aoe.id == aoe_id), None)
