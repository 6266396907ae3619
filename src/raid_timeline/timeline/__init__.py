"""Frame-addressable resolution of raid mechanic timelines."""

from .codec import (
    MechanicValidationError,
    ValidationIssue,
    ValidationResult,
    dump_mechanic,
    load_mechanic,
    mechanic_to_dict,
    parse_mechanic,
    snapshot_to_dict,
    validate_mechanic,
)
from .debuffs import ActiveDebuff, resolve_debuffs
from .engine import TimelineEngine, resolve
from .field import FieldState, resolve_field
from .filters import filter_hidden_objects
from .history import History
from .index import TimelineIndex
from .interpolation import apply_easing, lerp, resolve_envelope
from .model import MechanicData, Position, TimelineEvent
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
from .tracks import (
    EventSpan,
    annotation_spans,
    aoe_spans,
    debuff_spans,
    field_change_spans,
    object_spans,
)
from .visibility import resolve_visible

__all__ = [
    "MechanicData",
    "Position",
    "TimelineEvent",
    "TimelineEngine",
    "TimelineIndex",
    "resolve",
    "Snapshot",
    "PlayerState",
    "EnemyState",
    "ActiveAoE",
    "ActiveObject",
    "ActiveAnnotation",
    "ActiveCaption",
    "ActiveCast",
    "ActiveDebuff",
    "FieldState",
    "lerp",
    "apply_easing",
    "resolve_envelope",
    "resolve_position",
    "resolve_visible",
    "resolve_field",
    "resolve_debuffs",
    "MechanicValidationError",
    "ValidationIssue",
    "ValidationResult",
    "validate_mechanic",
    "parse_mechanic",
    "mechanic_to_dict",
    "load_mechanic",
    "dump_mechanic",
    "snapshot_to_dict",
    "filter_hidden_objects",
    "History",
    "EventSpan",
    "aoe_spans",
    "object_spans",
    "annotation_spans",
    "field_change_spans",
    "debuff_spans",
]
