"""Timeline resolution engine: the full visual state as a pure function of frame."""

import logging
from typing import Callable, Iterable

from ..constants import DEFAULT_AOE_OPACITY, DEFAULT_OBJECT_OPACITY, DEFAULT_TEXT_OPACITY
from .anchor import AnchorContext, resolve_anchor
from .debuffs import ActiveDebuff, debuff_holders, resolve_debuffs
from .field import resolve_field
from .index import TimelineIndex
from .interpolation import clamp01, resolve_envelope
from .model import (
    AoEShowEvent,
    MechanicData,
    ObjectShowEvent,
    Position,
    TextShowEvent,
)
from .position import resolve_position
from .snapshot import (
    ActiveAnnotation,
    ActiveAoE,
    ActiveCaption,
    ActiveCast,
    ActiveObject,
    EnemyState,
    PlayerState,
    Snapshot,
)
from .visibility import HideWindow, ShowWindow, current_lifetime, resolve_visible

logger = logging.getLogger(__name__)


class TimelineEngine:
    """Resolves snapshots of one mechanic at arbitrary frames."""

    def __init__(self, mechanic: MechanicData, index: TimelineIndex | None = None):
        """
        Initialize the engine.

        Args:
            mechanic: The mechanic to resolve; treated as read-only
            index: A prebuilt partition of ``mechanic.timeline`` to reuse
        """
        self.mechanic = mechanic
        self.index = index if index is not None else TimelineIndex.from_timeline(mechanic.timeline)
        self.player_ids = tuple(player.id for player in mechanic.initial_players)
        logger.debug(
            "Engine ready for mechanic %s (%d events, %d players, %d enemies)",
            mechanic.id,
            len(mechanic.timeline),
            len(self.player_ids),
            len(mechanic.enemies),
        )

    def resolve(self, frame: int) -> Snapshot:
        """
        Resolve the complete visual state at ``frame``.

        Nothing is carried between calls, so frames may be requested in any
        order and from several workers at once.

        Raises:
            ValueError: If ``frame`` is negative
        """
        if frame < 0:
            raise ValueError(f"Frame must be non-negative (got {frame})")

        debuffs = resolve_debuffs(
            self.player_ids, self.index.debuffs.upto(frame), frame, self.mechanic.fps
        )
        objects = self._active_objects(frame)
        context = self._anchor_context(frame, debuffs, objects)
        contexts = {frame: context}

        def context_at(other_frame: int) -> AnchorContext:
            if other_frame not in contexts:
                contexts[other_frame] = self.anchor_context(other_frame)
            return contexts[other_frame]

        return Snapshot(
            frame=frame,
            players=self._players(context, debuffs),
            enemies=self._enemies(context),
            active_aoes=self._active_aoes(frame, context, context_at),
            active_objects=objects,
            active_texts=self._active_annotations(frame) + self._active_captions(frame),
            active_casts=self._active_casts(frame),
            field=resolve_field(
                self.mechanic.field,
                self.index.field_changes.upto(frame),
                self.index.field_reverts.upto(frame),
                frame,
            ),
        )

    def resolve_many(self, frames: Iterable[int]) -> list[Snapshot]:
        return [self.resolve(frame) for frame in frames]

    def anchor_context(self, frame: int) -> AnchorContext:
        """Entity positions and debuff holders at ``frame``."""
        debuffs = resolve_debuffs(
            self.player_ids, self.index.debuffs.upto(frame), frame, self.mechanic.fps
        )
        return self._anchor_context(frame, debuffs, self._active_objects(frame))

    def _anchor_context(
        self,
        frame: int,
        debuffs: dict[str, tuple[ActiveDebuff, ...]],
        objects: tuple[ActiveObject, ...],
    ) -> AnchorContext:
        return AnchorContext(
            frame=frame,
            player_positions={
                player.id: self._position_of(player.id, player.position, frame)
                for player in self.mechanic.initial_players
            },
            enemy_positions={
                enemy.id: self._position_of(enemy.id, enemy.position, frame)
                for enemy in self.mechanic.enemies
            },
            object_positions={
                active.gimmick.id: active.gimmick.position
                for active in objects
            },
            debuff_holders=debuff_holders(debuffs, self.player_ids),
        )

    def _position_of(self, entity_id: str, initial: Position, frame: int) -> Position:
        return resolve_position(initial, self.index.moves_upto(entity_id, frame), frame)

    def _players(
        self, context: AnchorContext, debuffs: dict[str, tuple[ActiveDebuff, ...]]
    ) -> tuple[PlayerState, ...]:
        return tuple(
            PlayerState(
                id=player.id,
                role=player.role,
                position=context.player_positions[player.id],
                debuffs=debuffs.get(player.id, ()),
                job=player.job,
                name=player.name,
            )
            for player in self.mechanic.initial_players
        )

    def _enemies(self, context: AnchorContext) -> tuple[EnemyState, ...]:
        return tuple(
            EnemyState(
                id=enemy.id,
                name=enemy.name,
                position=context.enemy_positions[enemy.id],
                size=enemy.size,
                color=enemy.color,
            )
            for enemy in self.mechanic.enemies
        )

    def _active_aoes(
        self,
        frame: int,
        context: AnchorContext,
        context_at: Callable[[int], AnchorContext],
    ) -> tuple[ActiveAoE, ...]:
        active: list[ActiveAoE] = []
        for bucket in self.index.aoe_tracks.values():
            lifetime = current_lifetime(bucket.upto(frame), AoEShowEvent)
            if lifetime is None:
                continue
            show = lifetime.show
            aoe = show.aoe

            # Placement gate comes before any fade.
            anchor = resolve_anchor(aoe, show.frame, context, context_at)
            if anchor is None:
                continue

            hide = lifetime.hide
            base_opacity = DEFAULT_AOE_OPACITY if aoe.opacity is None else aoe.opacity
            opacity = resolve_visible(
                ShowWindow(show.frame, show.fade_in),
                HideWindow(hide.frame, hide.fade_out) if hide else None,
                frame,
                base_opacity,
            )
            if opacity is None:
                continue
            active.append(
                ActiveAoE(
                    aoe=aoe,
                    position=anchor.position,
                    direction=anchor.direction,
                    opacity=opacity,
                    show_frame=show.frame,
                )
            )
        return tuple(active)

    def _active_objects(self, frame: int) -> tuple[ActiveObject, ...]:
        active: list[ActiveObject] = []
        for bucket in self.index.object_tracks.values():
            lifetime = current_lifetime(bucket.upto(frame), ObjectShowEvent)
            if lifetime is None:
                continue
            show, hide = lifetime.show, lifetime.hide
            gimmick = show.gimmick
            base_opacity = DEFAULT_OBJECT_OPACITY if gimmick.opacity is None else gimmick.opacity
            opacity = resolve_visible(
                ShowWindow(show.frame, show.fade_in),
                HideWindow(hide.frame, hide.fade_out) if hide else None,
                frame,
                base_opacity,
            )
            if opacity is not None:
                active.append(ActiveObject(gimmick=gimmick, opacity=opacity))
        return tuple(active)

    def _active_annotations(self, frame: int) -> tuple[ActiveAnnotation, ...]:
        active: list[ActiveAnnotation] = []
        for bucket in self.index.annotation_tracks.values():
            lifetime = current_lifetime(bucket.upto(frame), TextShowEvent)
            if lifetime is None:
                continue
            show, hide = lifetime.show, lifetime.hide
            opacity = resolve_visible(
                ShowWindow(show.frame, show.fade_in),
                HideWindow(hide.frame, hide.fade_out) if hide else None,
                frame,
                DEFAULT_TEXT_OPACITY,
            )
            if opacity is not None:
                active.append(ActiveAnnotation(annotation=show.annotation, opacity=opacity))
        return tuple(active)

    def _active_captions(self, frame: int) -> tuple[ActiveCaption, ...]:
        active: list[ActiveCaption] = []
        for event in self.index.captions.upto(frame):
            opacity = resolve_envelope(
                frame,
                event.frame,
                event.fade_in,
                event.frame + event.duration,
                event.fade_out,
                DEFAULT_TEXT_OPACITY,
            )
            if opacity > 0:
                active.append(
                    ActiveCaption(
                        id=event.id,
                        text_type=event.text_type,
                        content=event.content,
                        placement=event.position,
                        opacity=opacity,
                    )
                )
        return tuple(active)

    def _active_casts(self, frame: int) -> tuple[ActiveCast, ...]:
        active: list[ActiveCast] = []
        for event in self.index.casts.upto(frame):
            if frame > event.frame + event.duration:
                continue
            progress = 1.0 if event.duration <= 0 else (frame - event.frame) / event.duration
            active.append(
                ActiveCast(
                    id=event.id,
                    caster_id=event.caster_id,
                    skill_name=event.skill_name,
                    progress=clamp01(progress),
                )
            )
        return tuple(active)


def resolve(mechanic: MechanicData, frame: int) -> Snapshot:
    """Resolve ``mechanic`` at ``frame`` without keeping an engine around."""
    return TimelineEngine(mechanic).resolve(frame)
