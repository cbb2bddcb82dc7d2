"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: ScriptRequest mirrors the keyword arguments of build_caption_script():
segments, a preset name, explicit style overrides, the animation, position
and canvas. Style fields are all Optional so that "not sent" means "take it
from the preset".

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Style override fields default to None, never to a concrete value
- Segment times are seconds (number) or ``H:MM:SS.cc`` strings
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from caption_synth.config import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SegmentModel(BaseModel):
    """One timed unit of transcript text."""

    start: Union[float, str] = Field(
        description="Start time: seconds, or an 'H:MM:SS.cc' timestamp.",
    )
    end: Union[float, str] = Field(
        description="End time: seconds, or an 'H:MM:SS.cc' timestamp. Must be after start.",
    )
    text: str = Field(description="Caption text for this segment.")


class StyleOptions(BaseModel):
    """Explicit style overrides layered over the chosen preset.

    RULES:
    - A field left out (None) falls back to the preset, then the default
    - box_color "none" switches off a preset's background box
    """

    font_family: Optional[str] = Field(default=None, description="Font family name.")
    font_size: Optional[int] = Field(default=None, gt=0, description="Font size in script pixels.")
    primary_color: Optional[str] = Field(default=None, description="Text colour as #RRGGBB.")
    primary_opacity: Optional[float] = Field(default=None, description="Text opacity, 0-100.")
    outline_color: Optional[str] = Field(default=None, description="Outline colour as #RRGGBB.")
    outline_width: Optional[float] = Field(default=None, ge=0, description="Outline width.")
    shadow_color: Optional[str] = Field(default=None, description="Shadow colour as #RRGGBB.")
    shadow_opacity: Optional[float] = Field(default=None, description="Shadow opacity, 0-100.")
    shadow_depth: Optional[float] = Field(default=None, ge=0, description="Shadow distance.")
    box_color: Optional[str] = Field(
        default=None,
        description="Background box colour as #RRGGBB, or 'none' to disable the box.",
    )
    box_opacity: Optional[float] = Field(default=None, description="Box opacity, 0-100.")
    box_padding: Optional[float] = Field(default=None, ge=0, description="Box padding.")
    line_spacing: Optional[float] = Field(default=None, description="Letter spacing.")
    bold: Optional[bool] = Field(default=None, description="Bold text.")
    italic: Optional[bool] = Field(default=None, description="Italic text.")
    underline: Optional[bool] = Field(default=None, description="Underlined text.")
    caps: Optional[str] = Field(
        default=None,
        description="Case transform: 'normal', 'allcaps' or 'titlecase'.",
    )
    emoji: Optional[bool] = Field(default=None, description="Append keyword emoji.")


class AnimationOptions(BaseModel):
    """Animation kind and its parameters."""

    name: Optional[str] = Field(
        default=None,
        description="Animation kind (see GET /animations). Defaults to the preset's.",
    )
    clip_y: Optional[int] = Field(
        default=None,
        description="Clip boundary for baseline-up; derived from the position if omitted.",
    )
    max_chars: Optional[int] = Field(
        default=None,
        gt=0,
        description="Characters per line for fall/rise/pan/baseline-up chunking.",
    )


class PositionOptions(BaseModel):
    """Safe-zone preset or explicit offsets from the canvas centre."""

    preset: Optional[str] = Field(
        default=None,
        description="'top-safe', 'center' or 'bottom-safe'. Overrides the offsets.",
    )
    offset_x: int = Field(default=0, description="Pixels right of centre.")
    offset_y: int = Field(default=0, description="Pixels above centre.")


class CanvasModel(BaseModel):
    """Script resolution."""

    width: int = Field(default=DEFAULT_CANVAS_WIDTH, gt=0, description="PlayResX.")
    height: int = Field(default=DEFAULT_CANVAS_HEIGHT, gt=0, description="PlayResY.")


class ScriptRequest(BaseModel):
    """Request body for POST /scripts.

    RULES:
    - segments must not be empty
    - persist=True writes the script under job_id (generated if omitted)
    """

    segments: List[SegmentModel] = Field(
        min_length=1,
        description="Timed segments in display order.",
    )
    preset: Optional[str] = Field(
        default=None,
        description="Visual preset name (see GET /presets), e.g. 'hero-pop'.",
    )
    style: StyleOptions = Field(
        default_factory=StyleOptions,
        description="Explicit style overrides; these win over the preset.",
    )
    animation: AnimationOptions = Field(
        default_factory=AnimationOptions,
        description="Animation override; defaults to the preset's animation.",
    )
    position: PositionOptions = Field(
        default_factory=PositionOptions,
        description="Where the captions sit on the canvas.",
    )
    canvas: CanvasModel = Field(
        default_factory=CanvasModel,
        description="Script resolution.",
    )
    persist: bool = Field(
        default=False,
        description="Save the script so it can be fetched from GET /scripts/{job_id}.",
    )
    job_id: Optional[str] = Field(
        default=None,
        description="Identifier for the persisted script. Generated if omitted.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "segments": [
                    {"start": 0.0, "end": 2.0, "text": "Hello world"},
                    {"start": 2.0, "end": 4.5, "text": "This is a test"},
                ],
                "preset": "hero-pop",
                "style": {"primary_color": "#FF0000"},
                "position": {"preset": "bottom-safe"},
                "persist": True,
            }
        ]
    }}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class ScriptResponse(BaseModel):
    """Response returned for a built caption script.

    RULES:
    - job_id is always set, even when the script was not persisted
    - output_file is only set when persist was requested
    """

    job_id: str = Field(description="Identifier of this build.")
    line_count: int = Field(description="Number of Dialogue rows in the script.")
    script: str = Field(description="The complete ASS script text.")
    output_file: Optional[str] = Field(
        default=None,
        description="File name of the persisted script, only present when persisted.",
    )


class PresetInfo(BaseModel):
    """A named preset and the fields it sets."""

    name: str = Field(description="Preset identifier used in requests.")
    settings: Dict[str, Any] = Field(description="Style and animation values the preset fills in.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
