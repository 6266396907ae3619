"""Show/hide pairs flattened into spans for timeline track displays."""

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .debuffs import debuff_fold_key
from .index import TimelineIndex
from .model import (
    ALL_PLAYERS,
    AoEShowEvent,
    DebuffAddEvent,
    DebuffRemoveEvent,
    FieldChangeEvent,
    FieldRevertEvent,
    ObjectShowEvent,
    TextShowEvent,
    TimelineEvent,
)


@dataclass(frozen=True)
class EventSpan:
    """
    One lifetime of an entity on the timeline.

    ``end_frame`` is the hide frame (the fade-out runs past it), or ``None``
    when the entity stays until the end of the mechanic.
    """

    key: str
    start_frame: int
    end_frame: int | None
    fade_in: int = 0
    fade_out: int = 0
    payload: Any = None

    @property
    def visible_until(self) -> float:
        if self.end_frame is None:
            return float("inf")
        return self.end_frame + self.fade_out


def _spans(
    events: Iterable[Any],
    show_type: type,
    key_of: Callable[[Any], str],
    payload_of: Callable[[Any], Any],
) -> list[EventSpan]:
    spans: list[EventSpan] = []
    open_spans: dict[str, EventSpan] = {}

    for event in events:
        key = key_of(event)
        current = open_spans.pop(key, None)
        if isinstance(event, show_type):
            if current is not None:
                # A re-show replaces the running lifetime.
                spans.append(_closed(current, event.frame, 0))
            open_spans[key] = EventSpan(
                key=key,
                start_frame=event.frame,
                end_frame=None,
                fade_in=getattr(event, "fade_in", 0),
                payload=payload_of(event),
            )
        elif current is not None:
            spans.append(_closed(current, event.frame, getattr(event, "fade_out", 0)))

    spans.extend(open_spans.values())
    return sorted(spans, key=_span_order)


def _span_order(span: EventSpan) -> tuple[int, str]:
    return (span.start_frame, span.key)


def _closed(span: EventSpan, frame: int, fade_out: int) -> EventSpan:
    return EventSpan(
        key=span.key,
        start_frame=span.start_frame,
        end_frame=frame,
        fade_in=span.fade_in,
        fade_out=fade_out,
        payload=span.payload,
    )


def aoe_spans(timeline: Iterable[TimelineEvent]) -> list[EventSpan]:
    index = TimelineIndex.from_timeline(timeline)
    return sorted([
        span
        for aoe_id, bucket in index.aoe_tracks.items()
        for span in _spans(bucket.events, AoEShowEvent, lambda _: aoe_id, lambda e: e.aoe)
    ], key=_span_order)


def object_spans(timeline: Iterable[TimelineEvent]) -> list[EventSpan]:
    index = TimelineIndex.from_timeline(timeline)
    return sorted([
        span
        for object_id, bucket in index.object_tracks.items()
        for span in _spans(
            bucket.events, ObjectShowEvent, lambda _: object_id, lambda e: e.gimmick
        )
    ], key=_span_order)


def annotation_spans(timeline: Iterable[TimelineEvent]) -> list[EventSpan]:
    index = TimelineIndex.from_timeline(timeline)
    return sorted([
        span
        for text_id, bucket in index.annotation_tracks.items()
        for span in _spans(
            bucket.events, TextShowEvent, lambda _: text_id, lambda e: e.annotation
        )
    ], key=_span_order)


def field_change_spans(timeline: Iterable[TimelineEvent]) -> list[EventSpan]:
    events = sorted(
        (e for e in timeline if isinstance(e, (FieldChangeEvent, FieldRevertEvent))),
        key=lambda e: e.frame,
    )
    return _spans(events, FieldChangeEvent, lambda e: e.field_change_id, lambda e: e.override)


def debuff_spans(timeline: Iterable[TimelineEvent], player_id: str) -> list[EventSpan]:
    """Debuff lifetimes of one player, including debuffs applied to ``all``."""
    events = sorted(
        (
            e
            for e in timeline
            if isinstance(e, (DebuffAddEvent, DebuffRemoveEvent))
            and e.target_id in (player_id, ALL_PLAYERS)
        ),
        key=debuff_fold_key,
    )
    return _spans(
        events,
        DebuffAddEvent,
        lambda e: e.debuff.id if isinstance(e, DebuffAddEvent) else e.debuff_id,
        lambda e: e.debuff,
    )
