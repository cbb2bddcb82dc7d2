"""Caption script assembly: header, style row, and event rows.

WHY: The compositor consumes one self-contained script. Its header, the
single style row, and every event row must agree on canvas size, style
name, anchor, and colours, so one class owns all of them and nothing else
writes script text.

HOW: CaptionScriptAssembler.build() validates every segment up front, then
for each segment prepares the text (whitespace, caps, emoji, escaping),
synthesizes its animation markup or hands it to the chunker, and renders
the resulting CaptionLines after the header. write() persists a finished
script under a job id through a temporary file and an atomic rename.

RULES:
- Segments are validated before any markup is generated
- Event rows appear in input order; chunked segments expand in place
- Box mode and outline mode are exclusive: BorderStyle 3 with the box
  colour and box_padding, or BorderStyle 1 with outline colour and width
- Unknown animation kinds are logged once per build and render as none
- write() never leaves a partially written script behind; OSError propagates
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Union

from caption_synth.config import DEFAULT_OUTPUT_DIR, DEFAULT_STYLE_NAME, SCRIPT_SUFFIX
from caption_synth.core.animations import SynthesisContext, synthesize
from caption_synth.core.chunker import USABLE_WIDTH_RATIO, chunk_segment
from caption_synth.core.colors import encode_color, inline_alpha
from caption_synth.core.ir import (
    AnimationKind,
    AnimationSpec,
    Canvas,
    CaptionLine,
    CaptionSegment,
    PositionSpec,
    StyleConfig,
)
from caption_synth.core.positions import alignment_anchor, resolve_position
from caption_synth.core.text import prepare_text

logger = logging.getLogger(__name__)

STYLE_FORMAT = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, "
    "OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, "
    "ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, "
    "MarginL, MarginR, MarginV, Encoding"
)
EVENT_FORMAT = (
    "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, "
    "Effect, Text"
)

SECONDARY_COLOUR = "&H000000FF"
BORDER_STYLE_OUTLINE = 1
BORDER_STYLE_BOX = 3


def _number(value: Union[int, float]) -> str:
    """Render 3.0 as "3" and 2.5 as "2.5"."""
    if float(value).is_integer():
        return str(int(value))
    return "{:g}".format(value)


def _flag(value: bool) -> str:
    return "-1" if value else "0"


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


class CaptionScriptAssembler:
    """Builds complete caption scripts for one canvas and style name.

    Instances hold no per-build state, so one assembler can serve
    concurrent builds.
    """

    def __init__(
        self,
        canvas: Optional[Canvas] = None,
        style_name: str = DEFAULT_STYLE_NAME,
    ) -> None:
        self.canvas = canvas or Canvas()
        self.style_name = style_name

    @property
    def margin(self) -> int:
        return int(round(self.canvas.width * (1 - USABLE_WIDTH_RATIO) / 2))

    def style_row(self, style: StyleConfig, anchor: int) -> str:
        """The single ``Style:`` row for the resolved StyleConfig."""
        primary = encode_color(style.primary_color, style.primary_opacity)
        if style.box_mode:
            border_style = BORDER_STYLE_BOX
            outline_colour = encode_color(style.box_color, style.box_opacity)
            back_colour = outline_colour
            outline = style.box_padding
        else:
            border_style = BORDER_STYLE_OUTLINE
            outline_colour = encode_color(style.outline_color)
            back_colour = encode_color(style.shadow_color, style.shadow_opacity)
            outline = style.outline_width

        fields = [
            self.style_name,
            style.font_family.replace(",", " "),
            str(style.font_size),
            primary,
            SECONDARY_COLOUR,
            outline_colour,
            back_colour,
            _flag(style.bold),
            _flag(style.italic),
            _flag(style.underline),
            "0",
            "100",
            "100",
            _number(style.line_spacing),
            "0",
            str(border_style),
            _number(outline),
            _number(style.shadow_depth),
            str(anchor),
            str(self.margin),
            str(self.margin),
            str(self.margin),
            "1",
        ]
        return "Style: " + ",".join(fields)

    def header(self, style: StyleConfig, anchor: int) -> List[str]:
        return [
            "[Script Info]",
            "ScriptType: v4.00+",
            "PlayResX: {}".format(self.canvas.width),
            "PlayResY: {}".format(self.canvas.height),
            "WrapStyle: 0",
            "ScaledBorderAndShadow: yes",
            "",
            "[V4+ Styles]",
            STYLE_FORMAT,
            self.style_row(style, anchor),
            "",
            "[Events]",
            EVENT_FORMAT,
        ]

    def build_lines(
        self,
        segments: Sequence[CaptionSegment],
        style: StyleConfig,
        animation: AnimationSpec,
        position: PositionSpec,
    ) -> List[CaptionLine]:
        """Validate segments and produce every CaptionLine in input order.

        Raises:
            InvalidSegmentError: If any segment has end <= start.
        """
        for segment in segments:
            segment.validate()

        if animation.kind == AnimationKind.UNKNOWN:
            logger.warning("Unknown animation '%s', rendering without animation", animation.name)

        point = resolve_position(position, self.canvas)
        anchor = alignment_anchor(position)
        style_markup = "\\an{}".format(anchor)
        reveal_alpha = inline_alpha(style.primary_opacity)

        lines: List[CaptionLine] = []
        for segment in segments:
            text = prepare_text(segment.text, style)
            ctx = SynthesisContext(
                start_ms=segment.start_ms,
                end_ms=segment.end_ms,
                position=point,
                canvas=self.canvas,
                font_size=style.font_size,
                anchor=anchor,
                reveal_alpha=reveal_alpha,
            )
            if animation.is_chunked:
                lines.extend(chunk_segment(text, animation, ctx, style_markup))
                continue

            markup = synthesize(text, animation, ctx)
            lines.append(CaptionLine(
                start_ms=segment.start_ms,
                end_ms=segment.end_ms,
                style_markup=style_markup,
                position_markup="\\pos({},{})".format(point.x, point.y),
                animation_markup=markup.override,
                text=markup.text,
            ))
        return lines

    def build(
        self,
        segments: Sequence[CaptionSegment],
        style: StyleConfig,
        animation: AnimationSpec,
        position: PositionSpec,
    ) -> str:
        """Assemble the full script text.

        Args:
            segments: Timed text, in display order.
            style: Resolved style (see presets.resolve_options()).
            animation: Animation kind and parameters.
            position: Safe-zone preset or explicit offsets.

        Returns:
            The script: header, then one ``Dialogue:`` row per line,
            newline-joined and newline-terminated.

        Raises:
            InvalidSegmentError: If any segment has end <= start.
        """
        lines = self.build_lines(segments, style, animation, position)
        rows = self.header(style, alignment_anchor(position))
        rows.extend(line.render(self.style_name) for line in lines)
        return "\n".join(rows) + "\n"

    @staticmethod
    def write(
        content: str,
        job_id: str,
        output_dir: Union[str, Path, None] = None,
    ) -> Path:
        """Persist a script as ``<output_dir>/<job_id>.ass``.

        The content goes to a temporary file in the target directory first
        and is renamed into place, so readers see either nothing or the
        whole script.

        Raises:
            ValueError: If job_id has no usable file name.
            OSError: If the directory cannot be created or written.
        """
        name = Path(str(job_id)).name
        if name in ("", ".", ".."):
            raise ValueError("Invalid job id: '{}'".format(job_id))
        if not name.endswith(SCRIPT_SUFFIX):
            name += SCRIPT_SUFFIX

        target_dir = Path(output_dir if output_dir is not None else DEFAULT_OUTPUT_DIR)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / name

        fd, tmp_name = tempfile.mkstemp(dir=str(target_dir), prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(content)
            # mkstemp creates 0600; give the script the mode a plain write would
            os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.info("Wrote caption script %s", target)
        return target
