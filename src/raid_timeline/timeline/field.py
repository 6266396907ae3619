"""Resolve the field background from a recency stack of overrides."""

from dataclasses import dataclass
from typing import Iterable

from ..constants import DEFAULT_BACKGROUND_OPACITY
from .interpolation import clamp01, lerp
from .model import Field, FieldChangeEvent, FieldOverride, FieldRevertEvent

# Discrete properties switch at this blend progress instead of cross-dissolving.
DISCRETE_SWITCH_PROGRESS = 0.5


@dataclass(frozen=True)
class FieldState:
    background_color: str
    background_image: str | None = None
    background_opacity: float | None = None

    @classmethod
    def from_field(cls, field: Field) -> "FieldState":
        return cls(
            background_color=field.background_color,
            background_image=field.background_image,
            background_opacity=field.background_opacity,
        )


def resolve_field(
    base: Field,
    changes: Iterable[FieldChangeEvent],
    reverts: Iterable[FieldRevertEvent],
    frame: float,
) -> FieldState:
    """
    Resolve background colour, image and opacity at ``frame``.

    Only the most recent change that is still active applies; a change whose
    revert is still fading out counts as active. Fade-in blends from the base
    toward the override and a fading revert mirrors that back toward the base.

    Args:
        base: The mechanic's authored field
        changes: ``field_change`` events
        reverts: ``field_revert`` events
        frame: Frame to resolve

    Returns:
        The resolved background state
    """
    active = _active_change(changes, reverts, frame)
    if active is None:
        return FieldState.from_field(base)

    change, revert = active
    if revert is not None:
        elapsed = (frame - revert.frame) / max(1, revert.fade_out)
        progress = 1 - clamp01(elapsed)
    elif change.fade_in > 0 and frame < change.frame + change.fade_in:
        progress = clamp01((frame - change.frame) / change.fade_in)
    else:
        progress = 1.0
    return blend_override(base, change.override, progress)


def _active_change(
    changes: Iterable[FieldChangeEvent],
    reverts: Iterable[FieldRevertEvent],
    frame: float,
) -> tuple[FieldChangeEvent, FieldRevertEvent | None] | None:
    applied = sorted(
        (change for change in changes if change.frame <= frame),
        key=lambda change: change.frame,
    )
    effective_reverts = sorted(
        (revert for revert in reverts if revert.frame <= frame),
        key=lambda revert: revert.frame,
    )

    active: tuple[FieldChangeEvent, FieldRevertEvent | None] | None = None
    for change in applied:
        revert = next(
            (
                candidate
                for candidate in effective_reverts
                if candidate.field_change_id == change.field_change_id
                and candidate.frame >= change.frame
            ),
            None,
        )
        if revert is None:
            active = (change, None)
        elif frame < revert.frame + revert.fade_out:
            active = (change, revert)
    return active


def blend_override(base: Field, override: FieldOverride, progress: float) -> FieldState:
    """
    Blend the base field toward ``override`` by ``progress`` in ``[0, 1]``.

    Opacity interpolates linearly; colour and image switch hard at the
    halfway point.
    """
    switched = progress >= DISCRETE_SWITCH_PROGRESS

    color = base.background_color
    if override.background_color is not None and switched:
        color = override.background_color

    image = base.background_image
    if override.background_image is not None and switched:
        image = override.background_image

    opacity = base.background_opacity
    if override.background_opacity is not None:
        start = base.background_opacity
        if start is None:
            start = DEFAULT_BACKGROUND_OPACITY
        opacity = lerp(start, override.background_opacity, progress)
        if progress <= 0:
            opacity = base.background_opacity

    return FieldState(
        background_color=color,
        background_image=image,
        background_opacity=opacity,
    )
