"""Shared export orchestration used by CLI and web app entry points."""

import logging
from typing import Iterator

from PIL import Image

from .output import resolve_output_provider
from .output.base import OutputProvider
from .render.frames import frame_range, generate_raster_frames, resolve_frames_parallel
from .render.render_context import RenderContext
from .timeline.model import MechanicData

logger = logging.getLogger(__name__)


def build_frame_stream(
    mechanic: MechanicData,
    frames: range,
    workers: int,
    render_context: RenderContext | None = None,
) -> Iterator[Image.Image]:
    """Resolve and rasterize ``frames`` in playback order."""
    snapshots = resolve_frames_parallel(mechanic, frames, workers)
    return generate_raster_frames(mechanic, snapshots, render_context)


def encode_mechanic(
    mechanic: MechanicData,
    output_path: str,
    *,
    start: int = 0,
    stop: int | None = None,
    step: int = 1,
    workers: int = 1,
    render_context: RenderContext | None = None,
    provider: OutputProvider | None = None,
) -> bytes:
    """
    Encode an animation of ``mechanic`` for the given output path.

    Args:
        mechanic: Mechanic to export
        output_path: Target path; its extension selects the format unless
            ``provider`` is given
        start: First frame
        stop: Frame to stop before (defaults to the mechanic length)
        step: Export every ``step``-th frame; playback speed is preserved
        workers: Worker processes used to resolve snapshots
        render_context: Rendering configuration
        provider: Explicit output provider

    Returns:
        Encoded animation bytes

    Raises:
        ValueError: If the format or frame range is invalid
    """
    target_provider = provider or resolve_output_provider(output_path)
    frames = frame_range(mechanic, start, stop, step)
    frame_duration = max(1, round(1000 * step / mechanic.fps))
    logger.debug(
        "Exporting %s: frames %d..%d step %d (%d ms per frame)",
        mechanic.id,
        frames.start,
        frames.stop,
        frames.step,
        frame_duration,
    )
    frame_stream = build_frame_stream(mechanic, frames, workers, render_context)
    return target_provider.encode(frame_stream, frame_duration=frame_duration)
