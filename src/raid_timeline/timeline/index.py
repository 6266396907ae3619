"""One-time partition of a timeline into frame-sorted, per-target buckets."""

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, TypeVar

from .debuffs import DebuffEvent, debuff_fold_key
from .model import (
    AoEHideEvent,
    AoEShowEvent,
    BossMoveEvent,
    CastEvent,
    DebuffAddEvent,
    DebuffRemoveEvent,
    FieldChangeEvent,
    FieldRevertEvent,
    MoveEvent,
    MovementEvent,
    ObjectHideEvent,
    ObjectShowEvent,
    TextEvent,
    TextHideEvent,
    TextShowEvent,
    TimelineEvent,
    TimelineEventBase,
)

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT")


def _by_frame(event: TimelineEvent) -> int:
    return event.frame


@dataclass(frozen=True)
class FrameBucket(Generic[EventT]):
    """Events sorted by frame with a parallel frame list for prefix slicing."""

    events: tuple[EventT, ...] = ()
    frames: tuple[int, ...] = ()

    @classmethod
    def of(
        cls,
        events: Iterable[EventT],
        key: Callable[[EventT], object] = _by_frame,  # type: ignore[assignment]
    ) -> "FrameBucket[EventT]":
        ordered = tuple(sorted(events, key=key))  # type: ignore[arg-type]
        return cls(events=ordered, frames=tuple(event.frame for event in ordered))  # type: ignore[attr-defined]

    def upto(self, frame: float) -> tuple[EventT, ...]:
        """Events whose frame is at or before ``frame``; later ones are never visited."""
        return self.events[: bisect_right(self.frames, frame)]

    def __len__(self) -> int:
        return len(self.events)


@dataclass(frozen=True)
class TimelineIndex:
    """A timeline partitioned by event type and grouped per target."""

    moves: dict[str, FrameBucket[MovementEvent]] = field(default_factory=dict)
    aoe_tracks: dict[str, FrameBucket[AoEShowEvent | AoEHideEvent]] = field(default_factory=dict)
    object_tracks: dict[str, FrameBucket[ObjectShowEvent | ObjectHideEvent]] = field(
        default_factory=dict
    )
    annotation_tracks: dict[str, FrameBucket[TextShowEvent | TextHideEvent]] = field(
        default_factory=dict
    )
    debuffs: FrameBucket[DebuffEvent] = field(default_factory=FrameBucket)
    captions: FrameBucket[TextEvent] = field(default_factory=FrameBucket)
    casts: FrameBucket[CastEvent] = field(default_factory=FrameBucket)
    field_changes: FrameBucket[FieldChangeEvent] = field(default_factory=FrameBucket)
    field_reverts: FrameBucket[FieldRevertEvent] = field(default_factory=FrameBucket)

    @classmethod
    def from_timeline(cls, timeline: Iterable[TimelineEvent]) -> "TimelineIndex":
        """
        Partition ``timeline`` once.

        Every event must be one of the ``TimelineEvent`` variants.

        Raises:
            TypeError: If the timeline contains anything else
        """
        moves: dict[str, list[MovementEvent]] = {}
        aoes: dict[str, list[AoEShowEvent | AoEHideEvent]] = {}
        objects: dict[str, list[ObjectShowEvent | ObjectHideEvent]] = {}
        annotations: dict[str, list[TextShowEvent | TextHideEvent]] = {}
        debuffs: list[DebuffEvent] = []
        captions: list[TextEvent] = []
        casts: list[CastEvent] = []
        changes: list[FieldChangeEvent] = []
        reverts: list[FieldRevertEvent] = []

        events = list(timeline)
        for event in events:
            if not isinstance(event, TimelineEventBase):
                raise TypeError(f"Unsupported timeline event: {type(event).__name__}")

        # Stable sort so grouping order follows first appearance in time.
        for event in sorted(events, key=_by_frame):
            if isinstance(event, (MoveEvent, BossMoveEvent)):
                moves.setdefault(event.target_id, []).append(event)
            elif isinstance(event, AoEShowEvent):
                aoes.setdefault(event.aoe.id, []).append(event)
            elif isinstance(event, AoEHideEvent):
                aoes.setdefault(event.aoe_id, []).append(event)
            elif isinstance(event, ObjectShowEvent):
                objects.setdefault(event.gimmick.id, []).append(event)
            elif isinstance(event, ObjectHideEvent):
                objects.setdefault(event.object_id, []).append(event)
            elif isinstance(event, TextShowEvent):
                annotations.setdefault(event.annotation.id, []).append(event)
            elif isinstance(event, TextHideEvent):
                annotations.setdefault(event.annotation_id, []).append(event)
            elif isinstance(event, (DebuffAddEvent, DebuffRemoveEvent)):
                debuffs.append(event)
            elif isinstance(event, TextEvent):
                captions.append(event)
            elif isinstance(event, CastEvent):
                casts.append(event)
            elif isinstance(event, FieldChangeEvent):
                changes.append(event)
            elif isinstance(event, FieldRevertEvent):
                reverts.append(event)
            else:
                raise TypeError(f"Unsupported timeline event: {type(event).__name__}")

        index = cls(
            moves={target: FrameBucket.of(events) for target, events in moves.items()},
            aoe_tracks={aoe_id: FrameBucket.of(events) for aoe_id, events in aoes.items()},
            object_tracks={obj_id: FrameBucket.of(events) for obj_id, events in objects.items()},
            annotation_tracks={
                text_id: FrameBucket.of(events) for text_id, events in annotations.items()
            },
            debuffs=FrameBucket.of(debuffs, key=debuff_fold_key),
            captions=FrameBucket.of(captions),
            casts=FrameBucket.of(casts),
            field_changes=FrameBucket.of(changes),
            field_reverts=FrameBucket.of(reverts),
        )
        logger.debug(
            "Indexed timeline: %d move chains, %d AoEs, %d objects, %d annotations, "
            "%d debuff events, %d captions, %d casts, %d field events",
            len(index.moves),
            len(index.aoe_tracks),
            len(index.object_tracks),
            len(index.annotation_tracks),
            len(index.debuffs),
            len(index.captions),
            len(index.casts),
            len(index.field_changes) + len(index.field_reverts),
        )
        return index

    def moves_upto(self, target_id: str, frame: float) -> tuple[MovementEvent, ...]:
        bucket = self.moves.get(target_id)
        if bucket is None:
            return ()
        return bucket.upto(frame)
