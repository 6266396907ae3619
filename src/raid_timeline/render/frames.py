"""Frame generators: resolve snapshots (optionally in worker processes) and rasterize them."""

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import Iterable, Iterator

from PIL import Image

from ..constants import EXPORT_BATCH_SIZE
from ..timeline.engine import TimelineEngine
from ..timeline.model import MechanicData
from ..timeline.snapshot import Snapshot
from .render_context import RenderContext
from .renderer import Renderer

logger = logging.getLogger(__name__)


def frame_range(
    mechanic: MechanicData, start: int = 0, stop: int | None = None, step: int = 1
) -> range:
    """Frames to export; ``stop`` is exclusive and defaults to the mechanic length."""
    if step < 1:
        raise ValueError(f"Frame step must be at least 1 (got {step})")
    if start < 0:
        raise ValueError(f"Start frame must be non-negative (got {start})")
    end = mechanic.duration_frames if stop is None else min(stop, mechanic.duration_frames)
    return range(start, end, step)


def iter_snapshots(
    mechanic: MechanicData, start: int = 0, stop: int | None = None, step: int = 1
) -> Iterator[Snapshot]:
    """Resolve frames in order within this process."""
    engine = TimelineEngine(mechanic)
    for frame in frame_range(mechanic, start, stop, step):
        yield engine.resolve(frame)


def _resolve_batch(args: tuple[MechanicData, list[int]]) -> list[Snapshot]:
    """Worker entry point: resolve one batch of frames."""
    mechanic, frames = args
    return TimelineEngine(mechanic).resolve_many(frames)


def resolve_frames_parallel(
    mechanic: MechanicData,
    frames: Iterable[int],
    workers: int,
    batch_size: int = EXPORT_BATCH_SIZE,
) -> Iterator[Snapshot]:
    """
    Resolve frames across worker processes.

    Every frame is independent, so batches are resolved in any order and
    yielded back in request order.

    Args:
        mechanic: Mechanic to resolve (pickled once per batch)
        frames: Frames to resolve
        workers: Number of worker processes; 1 or less resolves inline
        batch_size: Frames handed to a worker per task
    """
    frame_list = list(frames)
    if workers <= 1 or len(frame_list) <= batch_size:
        engine = TimelineEngine(mechanic)
        for frame in frame_list:
            yield engine.resolve(frame)
        return

    batches = [frame_list[i : i + batch_size] for i in range(0, len(frame_list), batch_size)]
    logger.debug("Resolving %d frames in %d batches on %d workers", len(frame_list), len(batches), workers)
    with ProcessPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_resolve_batch, (mechanic, batch)) for batch in batches]
        for future in futures:
            yield from future.result()


def generate_raster_frames(
    mechanic: MechanicData,
    snapshots: Iterable[Snapshot],
    render_context: RenderContext | None = None,
) -> Iterator[Image.Image]:
    """Render raster frame payloads from a snapshot stream."""
    renderer = Renderer(mechanic, render_context or RenderContext.darkmode())
    for snapshot in snapshots:
        yield renderer.render(snapshot)
