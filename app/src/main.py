"""FastAPI render server for raid mechanic timelines."""

import logging
import os
from typing import Any

from dotenv import load_dotenv
from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.responses import Response

from raid_timeline.constants import DEFAULT_EXPORT_WORKERS
from raid_timeline.export_pipeline import encode_mechanic
from raid_timeline.output import media_type_for_output_format, output_path_for_format
from raid_timeline.render.render_context import RenderContext
from raid_timeline.timeline.codec import parse_mechanic, snapshot_to_dict
from raid_timeline.timeline.engine import TimelineEngine
from raid_timeline.timeline.filters import filter_hidden_objects
from raid_timeline.timeline.model import MechanicData

load_dotenv()

logger = logging.getLogger(__name__)

MAX_RENDER_FRAMES = 900  # 30 seconds at 30 fps per request

app = FastAPI(title="Raid Timeline Render Server")


def _workers() -> int:
    try:
        return max(1, int(os.getenv("RAID_TIMELINE_WORKERS", DEFAULT_EXPORT_WORKERS)))
    except ValueError:
        logger.warning("Ignoring invalid RAID_TIMELINE_WORKERS value")
        return DEFAULT_EXPORT_WORKERS


def _parse(data: dict[str, Any]) -> MechanicData:
    try:
        return parse_mechanic(data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/snapshot")
def snapshot(
    mechanic: dict[str, Any] = Body(..., description="Mechanic JSON"),
    frame: int = Query(0, ge=0, description="Frame to resolve"),
):
    """Resolve one frame and return the snapshot as JSON."""
    data = _parse(mechanic)
    return snapshot_to_dict(TimelineEngine(data).resolve(frame))


@app.post("/api/render")
def render(
    mechanic: dict[str, Any] = Body(..., description="Mechanic JSON"),
    output_format: str = Query("gif", alias="format", description="Output format: gif or webp"),
    start: int = Query(0, ge=0),
    end: int | None = Query(None, ge=0),
    step: int = Query(1, ge=1),
    hide: list[str] = Query([], description="Entities to hide, e.g. aoe:tower1"),
    paths: bool = Query(False, description="Draw player movement paths"),
):
    """Render a mechanic and return the encoded animation."""
    data = filter_hidden_objects(_parse(mechanic), hide)
    stop = data.duration_frames if end is None else min(end, data.duration_frames)
    if len(range(start, stop, step)) > MAX_RENDER_FRAMES:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Too many frames requested (max {MAX_RENDER_FRAMES}); "
                "raise step or shorten the range"
            ),
        )

    try:
        output_path = output_path_for_format(output_format, base_name=data.id)
        media_type = media_type_for_output_format(output_format)
        encoded = encode_mechanic(
            data,
            output_path,
            start=start,
            stop=stop,
            step=step,
            workers=_workers(),
            render_context=RenderContext(show_movement_paths=paths),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Render failed for %s", data.id)
        raise HTTPException(status_code=500, detail=f"Failed to render animation: {e}")

    return Response(
        content=encoded,
        media_type=media_type,
        headers={"Content-Disposition": f"inline; filename={output_path}"},
    )
