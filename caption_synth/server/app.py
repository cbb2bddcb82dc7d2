"""FastAPI application with caption script routes and OpenAPI docs.

WHY: Render pipelines (n8n flows, job runners, curl) need an HTTP API to
turn transcript segments into a caption script without shelling out to the
CLI. FastAPI provides automatic OpenAPI documentation and request
validation.

HOW: A single FastAPI app exposes 5 endpoints grouped by tags. POST /scripts
builds the script synchronously from a JSON ScriptRequest and optionally
persists it under a job id; GET /scripts/{job_id} downloads a persisted
script. The remaining endpoints list presets, animations, and health.

RULES:
- All endpoints have OpenAPI descriptions on every parameter and response
- Error responses use a consistent ErrorResponse schema
- Invalid segments (bad times, end <= start) are 422, write failures 500
- Job ids never reach the filesystem with path separators in them
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from caption_synth import __version__, build_caption_script, write_caption_script
from caption_synth.adapters.segment_adapter import SegmentInputError, parse_segments
from caption_synth.config import (
    API_HOST,
    API_PORT,
    DEFAULT_OUTPUT_DIR,
    LOG_FORMAT,
    LOG_LEVEL,
    SCRIPT_MEDIA_TYPE,
    SCRIPT_SUFFIX,
)
from caption_synth.core.animations import list_animations
from caption_synth.core.ir import Canvas, InvalidSegmentError, PositionSpec
from caption_synth.core.presets import PRESETS, get_preset, list_presets
from caption_synth.server.models import (
    ErrorResponse,
    HealthResponse,
    PresetInfo,
    ScriptRequest,
    ScriptResponse,
)

logger = logging.getLogger(__name__)

# Persisted scripts live here; tests point it at a temporary directory.
OUTPUT_DIR = Path(DEFAULT_OUTPUT_DIR)

app = FastAPI(
    title="Caption Synth API",
    description=(
        "REST API for building animated ASS caption scripts from timed "
        "transcript segments. Choose a preset, override any style field, "
        "pick an animation and a safe-zone position, and get a script "
        "ready for ffmpeg/libass burn-in."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _request_options(request: ScriptRequest) -> dict:
    """Flatten style and animation overrides into build_caption_script options."""
    options = request.style.model_dump(exclude_none=True)
    animation = request.animation
    if animation.name is not None:
        options["animation"] = animation.name
    if animation.clip_y is not None:
        options["clip_y"] = animation.clip_y
    if animation.max_chars is not None:
        options["max_chars"] = animation.max_chars
    return options


def _count_events(script: str) -> int:
    return sum(1 for row in script.splitlines() if row.startswith("Dialogue:"))


def _check_job_id(job_id: str) -> None:
    """Raise HTTPException if the job id could escape the output directory."""
    if "/" in job_id or "\\" in job_id or ".." in job_id or not job_id.strip():
        raise HTTPException(status_code=400, detail="Invalid job id")
    # "." passes the checks above but names no file
    if Path(job_id).name in ("", ".", ".."):
        raise HTTPException(status_code=400, detail="Invalid job id")


# ---------------------------------------------------------------------------
# Endpoints: Scripts
# ---------------------------------------------------------------------------


@app.post(
    "/scripts",
    response_model=ScriptResponse,
    status_code=201,
    tags=["scripts"],
    summary="Build a caption script",
    description=(
        "Build an ASS caption script from timed segments. The preset fills "
        "every style field the request leaves out. With persist=true the "
        "script is also saved and can be downloaded from GET /scripts/{job_id}."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Invalid job id"},
        422: {"model": ErrorResponse, "description": "Invalid segments or request body"},
        500: {"model": ErrorResponse, "description": "Script could not be saved"},
    },
)
async def create_script(request: ScriptRequest) -> ScriptResponse:
    if request.job_id is not None:
        _check_job_id(request.job_id)
    job_id = request.job_id or uuid.uuid4().hex

    try:
        segments = parse_segments([seg.model_dump() for seg in request.segments])
        script = build_caption_script(
            segments,
            options=_request_options(request),
            preset=request.preset,
            position=PositionSpec(
                preset=request.position.preset,
                offset_x=request.position.offset_x,
                offset_y=request.position.offset_y,
            ),
            canvas=Canvas(width=request.canvas.width, height=request.canvas.height),
        )
    except (SegmentInputError, InvalidSegmentError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    output_file = None
    if request.persist:
        try:
            path = write_caption_script(script, job_id, OUTPUT_DIR)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except OSError as exc:
            logger.exception("Failed to save caption script for job %s", job_id)
            raise HTTPException(
                status_code=500,
                detail="Could not save script: {}".format(exc),
            )
        output_file = path.name

    return ScriptResponse(
        job_id=job_id,
        line_count=_count_events(script),
        script=script,
        output_file=output_file,
    )


@app.get(
    "/scripts/{job_id}",
    tags=["scripts"],
    summary="Download a persisted caption script",
    description="Download a script previously built with persist=true.",
    responses={
        200: {"content": {SCRIPT_MEDIA_TYPE: {}}, "description": "The ASS script"},
        400: {"model": ErrorResponse, "description": "Invalid job id"},
        404: {"model": ErrorResponse, "description": "Script not found"},
    },
)
async def download_script(job_id: str) -> Response:
    _check_job_id(job_id)
    filename = job_id if job_id.endswith(SCRIPT_SUFFIX) else job_id + SCRIPT_SUFFIX
    fpath = OUTPUT_DIR / filename
    if not fpath.is_file():
        raise HTTPException(
            status_code=404,
            detail="Script not found: {}".format(job_id),
        )

    return Response(
        content=fpath.read_bytes(),
        media_type=SCRIPT_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


# ---------------------------------------------------------------------------
# Endpoints: Catalogue
# ---------------------------------------------------------------------------


@app.get(
    "/presets",
    response_model=List[PresetInfo],
    tags=["catalogue"],
    summary="List visual presets",
    description="Returns every preset name with the style and animation values it sets.",
)
async def list_preset_infos() -> List[PresetInfo]:
    return [PresetInfo(name=name, settings=get_preset(name)) for name in list_presets()]


@app.get(
    "/animations",
    response_model=List[str],
    tags=["catalogue"],
    summary="List animation kinds",
    description="Returns every animation name accepted in animation.name.",
)
async def list_animation_names() -> List[str]:
    return list_animations()


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the caption-synth-api console script."""
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    logger.info("Serving %d presets on %s:%d", len(PRESETS), API_HOST, API_PORT)
    uvicorn.run(app, host=API_HOST, port=API_PORT)
