"""Intermediate representation dataclasses for caption script synthesis.

WHY: Every stage of the engine (preset resolution, positioning, animation,
chunking, assembly) needs the same few values: timed segments, the resolved
style, where the text sits, and how it animates. Typed dataclasses give all
stages one shared vocabulary and keep the engine a pure function of them.

HOW: The main value types:
  CaptionSegment : one timed unit of transcript text (integer ms)
  StyleConfig    : the complete visual style, built once per build call
  CapsMode       : normal / allcaps / titlecase text transform
  PositionSpec   : named safe-zone preset or explicit centre offsets
  AnimationSpec  : closed animation kind plus kind-specific parameters
  Canvas         : script resolution (PlayResX / PlayResY)
  ResolvedOptions : StyleConfig + AnimationSpec after preset merging
  CaptionLine    : one emitted ``Dialogue:`` row

RULES:
- All times are integer milliseconds; formatting happens only on emission
- StyleConfig, PositionSpec, AnimationSpec, Canvas are frozen
- CaptionSegment.validate() raises InvalidSegmentError when end <= start
- AnimationKind.UNKNOWN is a real member; unknown names never raise
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from caption_synth.config import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH
from caption_synth.core.timecode import format_timestamp


class InvalidSegmentError(ValueError):
    """Raised when a segment's time interval is empty or inverted."""


@dataclass(frozen=True)
class CaptionSegment:
    """A timed unit of transcript text.

    RULES:
    - start_ms / end_ms: integer milliseconds from the start of the video
    - end_ms must be strictly greater than start_ms (see validate())
    - index: position in the caller's list, used in error messages
    """

    start_ms: int
    end_ms: int
    text: str
    index: int = 0

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    def validate(self) -> None:
        """Raise InvalidSegmentError if the interval is empty or inverted."""
        if self.end_ms <= self.start_ms:
            raise InvalidSegmentError(
                "Segment {} has end ({} ms) <= start ({} ms)".format(
                    self.index, self.end_ms, self.start_ms
                )
            )


class CapsMode(str, enum.Enum):
    NORMAL = "normal"
    ALLCAPS = "allcaps"
    TITLECASE = "titlecase"


@dataclass(frozen=True)
class StyleConfig:
    """The complete visual style of every line in one script.

    WHY: The style row in the script header and a few per-line overrides
    are all derived from these fields. Building it once and freezing it
    means no branch can quietly re-assign a colour halfway through a build.

    RULES:
    - Colours are ``#RRGGBB`` strings; opacities are 0-100 (100 = opaque)
    - box_color set → box mode (BorderStyle 3, box_padding as Outline)
    - box_color None → plain outline mode (BorderStyle 1, outline_width)
    - line_spacing is written to the style row's Spacing column
    """

    font_family: str = "Arial"
    font_size: int = 64
    primary_color: str = "#FFFFFF"
    primary_opacity: float = 100
    outline_color: str = "#000000"
    outline_width: float = 3
    shadow_color: str = "#000000"
    shadow_opacity: float = 50
    shadow_depth: float = 0
    box_color: Optional[str] = None
    box_opacity: float = 60
    box_padding: float = 12
    line_spacing: float = 0
    bold: bool = True
    italic: bool = False
    underline: bool = False
    caps: CapsMode = CapsMode.NORMAL
    emoji: bool = False

    @property
    def box_mode(self) -> bool:
        return bool(self.box_color)


@dataclass(frozen=True)
class PositionSpec:
    """Named safe-zone preset or explicit offsets from the canvas centre.

    Positive offset_y moves text up. A known preset always overrides the
    offsets; they are not merged.
    """

    preset: Optional[str] = None
    offset_x: int = 0
    offset_y: int = 0


class AnimationKind(str, enum.Enum):
    """Closed set of animation kinds understood by the synthesizer."""

    NONE = "none"
    FADE = "fade"
    TYPEWRITER = "typewriter"
    WORD_BY_WORD = "word-by-word"
    FALL = "fall"
    RISE = "rise"
    BASELINE_UP = "baseline-up"
    PAN_LEFT = "pan-left"
    PAN_RIGHT = "pan-right"
    BOUNCE = "bounce"
    POP = "pop"
    CINEMATIC = "cinematic"
    HERO_POP = "hero-pop"
    UNKNOWN = "unknown"


# Kinds whose effect only reads as single-line text; the chunker splits them.
CHUNKED_KINDS = frozenset({
    AnimationKind.FALL,
    AnimationKind.RISE,
    AnimationKind.BASELINE_UP,
    AnimationKind.PAN_LEFT,
    AnimationKind.PAN_RIGHT,
})


def normalize_name(name: str) -> str:
    """Fold case, spaces and underscores: ``"Hero Pop"`` → ``"hero-pop"``."""
    return "-".join(name.strip().lower().replace("_", " ").split())


@dataclass(frozen=True)
class AnimationSpec:
    """An animation kind plus its kind-specific parameters.

    RULES:
    - kind: the AnimationKind dispatched on by the synthesizer
    - name: the name the caller asked for (kept so UNKNOWN can be reported)
    - clip_y: clip boundary for baseline-up (default derived from position)
    - max_chars: character budget override for chunked kinds
    """

    kind: AnimationKind = AnimationKind.NONE
    name: str = "none"
    clip_y: Optional[int] = None
    max_chars: Optional[int] = None

    @classmethod
    def parse(
        cls,
        name: Optional[str],
        clip_y: Optional[int] = None,
        max_chars: Optional[int] = None,
    ) -> "AnimationSpec":
        """Build a spec from a free-form name; unrecognized names map to UNKNOWN."""
        if name is None or not str(name).strip():
            return cls(kind=AnimationKind.NONE, name="none", clip_y=clip_y, max_chars=max_chars)
        key = normalize_name(str(name))
        try:
            kind = AnimationKind(key)
        except ValueError:
            kind = AnimationKind.UNKNOWN
        return cls(kind=kind, name=str(name), clip_y=clip_y, max_chars=max_chars)

    @property
    def is_chunked(self) -> bool:
        return self.kind in CHUNKED_KINDS


@dataclass(frozen=True)
class Canvas:
    """Script resolution; every coordinate in the script is in this space."""

    width: int = DEFAULT_CANVAS_WIDTH
    height: int = DEFAULT_CANVAS_HEIGHT


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class ResolvedOptions:
    """Style and animation after explicit → preset → default merging."""

    style: StyleConfig
    animation: AnimationSpec


@dataclass
class CaptionLine:
    """One emitted ``Dialogue:`` row.

    The markup fields hold override tags without braces; render() wraps
    them in a single leading block in style, position, animation order.
    text may itself contain inline blocks (typewriter, word-by-word).
    """

    start_ms: int
    end_ms: int
    style_markup: str
    position_markup: str
    animation_markup: str
    text: str

    def render(self, style_name: str) -> str:
        leading = self.style_markup + self.position_markup + self.animation_markup
        payload = "{{{}}}{}".format(leading, self.text) if leading else self.text
        return "Dialogue: 0,{},{},{},,0,0,0,,{}".format(
            format_timestamp(self.start_ms),
            format_timestamp(self.end_ms),
            style_name,
            payload,
        )
