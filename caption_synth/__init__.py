"""caption_synth: animated caption script synthesis for video compositing.

WHY: Short-form video captions need more than an SRT file: per-line
styling, safe-zone placement, and time-keyed animation. This package turns
timed transcript segments plus a style/animation configuration into an
Advanced SubStation Alpha script that ffmpeg/libass burns into the video.

HOW: build_caption_script() is the single public entry point. It resolves
the preset beneath the caller's explicit options, then runs the
CaptionScriptAssembler. write_caption_script() persists a finished script
under a job id.

RULES:
- Segments may be CaptionSegment objects or raw transcription JSON data
- Unknown preset/animation names never raise; they are logged and ignored
- Segments with end <= start raise InvalidSegmentError before any output
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from caption_synth.adapters.segment_adapter import SegmentInputError, parse_segments
from caption_synth.config import DEFAULT_STYLE_NAME
from caption_synth.core.assembler import CaptionScriptAssembler
from caption_synth.core.ir import (
    AnimationKind,
    AnimationSpec,
    Canvas,
    CaptionSegment,
    InvalidSegmentError,
    PositionSpec,
    StyleConfig,
)
from caption_synth.core.presets import PRESETS, list_presets, resolve_options

__version__ = "0.1.0"

__all__ = [
    "build_caption_script",
    "write_caption_script",
    "AnimationKind",
    "AnimationSpec",
    "Canvas",
    "CaptionSegment",
    "InvalidSegmentError",
    "PositionSpec",
    "PRESETS",
    "SegmentInputError",
    "StyleConfig",
    "list_presets",
]


def build_caption_script(
    segments: Union[Sequence[CaptionSegment], Any],
    options: Optional[Mapping[str, Any]] = None,
    preset: Optional[str] = None,
    position: Union[PositionSpec, str, None] = None,
    canvas: Optional[Canvas] = None,
    style_name: str = DEFAULT_STYLE_NAME,
) -> str:
    """Build a caption script from timed segments.

    Args:
        segments: CaptionSegment objects, or transcription JSON data
            (a list of ``{start, end, text}`` or ``{"segments": [...]}``).
        options: Explicit StyleConfig fields plus ``animation``, ``clip_y``,
            ``max_chars``. These win over the preset.
        preset: Preset name such as "Hero Pop".
        position: PositionSpec, or a safe-zone preset name.
        canvas: Script resolution; defaults to the configured canvas.
        style_name: Name of the single style row.

    Returns:
        The complete script text.

    Raises:
        SegmentInputError: If raw segment data is malformed.
        InvalidSegmentError: If any segment has end <= start.
    """
    if not all(isinstance(segment, CaptionSegment) for segment in segments):
        segments = parse_segments(segments)
    if isinstance(position, str):
        position = PositionSpec(preset=position)

    resolved = resolve_options(preset, options)
    assembler = CaptionScriptAssembler(canvas=canvas, style_name=style_name)
    return assembler.build(
        segments,
        resolved.style,
        resolved.animation,
        position or PositionSpec(),
    )


def write_caption_script(
    content: str,
    job_id: str,
    output_dir: Union[str, Path, None] = None,
) -> Path:
    """Persist a built script as ``<output_dir>/<job_id>.ass``."""
    return CaptionScriptAssembler.write(content, job_id, output_dir)
