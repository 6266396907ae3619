"""Show/hide lifetimes and the opacity they imply at a given frame."""

import math
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

from .interpolation import resolve_envelope

ShowT = TypeVar("ShowT")
HideT = TypeVar("HideT")


@dataclass(frozen=True)
class ShowWindow:
    frame: int
    fade_in: int = 0


@dataclass(frozen=True)
class HideWindow:
    frame: int
    fade_out: int = 0


@dataclass(frozen=True)
class Lifetime(Generic[ShowT, HideT]):
    """The show event currently in effect for an id and the hide that closes it."""

    show: ShowT
    hide: HideT | None = None


def resolve_visible(
    show: ShowWindow,
    hide: HideWindow | None,
    frame: float,
    base_opacity: float = 1.0,
) -> float | None:
    """
    Resolve the opacity of a shown entity.

    Fade-in and fade-out factors compose multiplicatively, so an entity
    hidden while still fading in never jumps to full opacity.

    Args:
        show: When the entity appeared and its fade-in length
        hide: When it was hidden and its fade-out length, if it was
        frame: Frame to resolve
        base_opacity: The entity's configured opacity

    Returns:
        Opacity in ``[0, base_opacity]``, or ``None`` when not shown
    """
    if frame < show.frame:
        return None
    if hide is not None and frame >= hide.frame + hide.fade_out:
        return None

    opacity = base_opacity * resolve_envelope(
        frame, show.frame, show.fade_in, math.inf, 0, 1.0
    )
    if hide is not None and frame >= hide.frame:
        fade_out_end = hide.frame + hide.fade_out
        opacity *= resolve_envelope(
            frame, -math.inf, 0, fade_out_end, hide.fade_out, 1.0
        )
    return opacity


def current_lifetime(
    events: Iterable[ShowT | HideT], show_type: type[ShowT]
) -> Lifetime[ShowT, HideT] | None:
    """
    Pair the frame-sorted show/hide events of one id.

    A show opens a new lifetime, replacing any earlier one; the first hide
    after it closes the lifetime and later hides are ignored. A hide with no
    preceding show is a no-op.
    """
    show: ShowT | None = None
    hide: HideT | None = None
    for event in events:
        if isinstance(event, show_type):
            show, hide = event, None
        elif show is not None and hide is None:
            hide = event  # type: ignore[assignment]
    if show is None:
        return None
    return Lifetime(show=show, hide=hide)
