"""Animation override-tag synthesis, one function per animation kind.

WHY: Each animation is a small, fixed recipe of override tags (``\\fad``,
``\\t``, ``\\move``, ``\\clip``, scale keyframes). Keeping one function per
kind behind a single dict lookup makes each recipe testable on its own and
makes "unknown kind" an ordinary entry instead of a fall-through.

HOW: synthesize() looks up the kind in SYNTHESIZERS and calls it with the
escaped text, the AnimationSpec and a SynthesisContext (segment times,
resolved position, canvas, font size, anchor). Every synthesizer returns an
AnimationMarkup: tags for the leading override block, the (possibly
per-character or per-word tagged) text, and whether the tags already place
the line so the caller must not add ``\\pos``.

RULES:
- fade, bounce, pop, cinematic, hero-pop timings are fixed, not scaled to
  the segment duration
- typewriter reveals one character every TYPEWRITER_STEP_MS; long text can
  finish revealing before the segment ends, which is accepted
- word-by-word reveals one word every WORD_STEP_MS
- directional entrances end their ``\\move`` exactly at the resolved position
- UNKNOWN and NONE produce no markup
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from caption_synth.core.ir import AnimationKind, AnimationSpec, Canvas, Point
from caption_synth.core.text import split_units

FADE_IN_MS = 300
FADE_OUT_MS = 300
TYPEWRITER_STEP_MS = 30
WORD_STEP_MS = 200
ENTRANCE_MOVE_MS = 400
ENTRANCE_FADE_MS = 200

HIDDEN_ALPHA = "&HFF&"

# (start_ms, end_ms, scale_x, scale_y)
Keyframe = Tuple[int, int, int, int]

BOUNCE_INITIAL = (80, 120)
BOUNCE_KEYFRAMES: Sequence[Keyframe] = (
    (0, 120, 115, 90),
    (120, 240, 95, 105),
    (240, 360, 100, 100),
)

POP_INITIAL = (70, 70)
POP_KEYFRAMES: Sequence[Keyframe] = (
    (0, 200, 130, 130),
    (200, 400, 100, 100),
)

HERO_POP_INITIAL = (50, 50)
HERO_POP_KEYFRAMES: Sequence[Keyframe] = (
    (0, 180, 125, 125),
    (180, 320, 100, 100),
)


@dataclass(frozen=True)
class SynthesisContext:
    """Everything a synthesizer may need besides the text and the spec."""

    start_ms: int
    end_ms: int
    position: Point
    canvas: Canvas
    font_size: int
    anchor: int = 5
    reveal_alpha: str = "&H00&"

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass(frozen=True)
class AnimationMarkup:
    override: str = ""
    text: str = ""
    positioned: bool = False


Synthesizer = Callable[[str, AnimationSpec, SynthesisContext], AnimationMarkup]


def scale_keyframes(initial: Tuple[int, int], keyframes: Sequence[Keyframe]) -> str:
    """Initial ``\\fscx/\\fscy`` followed by one ``\\t`` per keyframe."""
    tags = ["\\fscx{}\\fscy{}".format(*initial)]
    for start, end, scale_x, scale_y in keyframes:
        tags.append("\\t({},{},\\fscx{}\\fscy{})".format(start, end, scale_x, scale_y))
    return "".join(tags)


def _reveal_tag(start_ms: int, end_ms: int, reveal_alpha: str) -> str:
    return "{{\\alpha{}\\t({},{},\\alpha{})}}".format(
        HIDDEN_ALPHA, start_ms, end_ms, reveal_alpha
    )


def _none(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    return AnimationMarkup(text=text)


def _fade(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    return AnimationMarkup(
        override="\\fad({},{})".format(FADE_IN_MS, FADE_OUT_MS), text=text
    )


def _typewriter(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    parts: List[str] = []
    for index, unit in enumerate(split_units(text)):
        if unit == " ":
            parts.append(unit)
            continue
        start = index * TYPEWRITER_STEP_MS
        parts.append(_reveal_tag(start, start + TYPEWRITER_STEP_MS, ctx.reveal_alpha) + unit)
    return AnimationMarkup(text="".join(parts))


def _word_by_word(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    if not text:
        return AnimationMarkup(text=text)
    words = text.split(" ")
    tagged = []
    for index, word in enumerate(words):
        start = index * WORD_STEP_MS
        tagged.append(_reveal_tag(start, start + WORD_STEP_MS, ctx.reveal_alpha) + word)
    return AnimationMarkup(text=" ".join(tagged))


def _entrance(dx: int, dy: int, ctx: SynthesisContext, extra: str = "") -> str:
    end = ctx.position
    move_ms = min(ENTRANCE_MOVE_MS, ctx.duration_ms)
    fade_ms = min(ENTRANCE_FADE_MS, ctx.duration_ms)
    return "\\move({},{},{},{},0,{})\\fad({},0){}".format(
        end.x + dx, end.y + dy, end.x, end.y, move_ms, fade_ms, extra
    )


def _vertical_travel(ctx: SynthesisContext) -> int:
    return ctx.font_size * 2


def _horizontal_travel(ctx: SynthesisContext) -> int:
    return ctx.canvas.width // 8


def _fall(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    return AnimationMarkup(
        override=_entrance(0, -_vertical_travel(ctx), ctx), text=text, positioned=True
    )


def _rise(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    return AnimationMarkup(
        override=_entrance(0, _vertical_travel(ctx), ctx), text=text, positioned=True
    )


def _pan_left(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    return AnimationMarkup(
        override=_entrance(_horizontal_travel(ctx), 0, ctx), text=text, positioned=True
    )


def _pan_right(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    return AnimationMarkup(
        override=_entrance(-_horizontal_travel(ctx), 0, ctx), text=text, positioned=True
    )


def default_clip_y(ctx: SynthesisContext) -> int:
    """Baseline of the line at its final position, for the given anchor."""
    if ctx.anchor in (1, 2, 3):
        return ctx.position.y
    if ctx.anchor in (7, 8, 9):
        return ctx.position.y + ctx.font_size
    return ctx.position.y + ctx.font_size // 2


def _baseline_up(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    clip_y = spec.clip_y if spec.clip_y is not None else default_clip_y(ctx)
    clip = "\\clip(0,0,{},{})".format(ctx.canvas.width, clip_y)
    return AnimationMarkup(
        override=_entrance(0, ctx.font_size, ctx, extra=clip), text=text, positioned=True
    )


def _bounce(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    return AnimationMarkup(override=scale_keyframes(BOUNCE_INITIAL, BOUNCE_KEYFRAMES), text=text)


def _pop(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    return AnimationMarkup(override=scale_keyframes(POP_INITIAL, POP_KEYFRAMES), text=text)


def _cinematic(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    # blur and scale settle together while the fade runs
    override = "\\blur12\\fscx110\\fscy110\\fad(400,300)\\t(0,600,\\blur0\\fscx100\\fscy100)"
    return AnimationMarkup(override=override, text=text)


def _hero_pop(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    override = scale_keyframes(HERO_POP_INITIAL, HERO_POP_KEYFRAMES) + "\\fad(120,150)"
    return AnimationMarkup(override=override, text=text)


SYNTHESIZERS: Dict[AnimationKind, Synthesizer] = {
    AnimationKind.NONE: _none,
    AnimationKind.FADE: _fade,
    AnimationKind.TYPEWRITER: _typewriter,
    AnimationKind.WORD_BY_WORD: _word_by_word,
    AnimationKind.FALL: _fall,
    AnimationKind.RISE: _rise,
    AnimationKind.BASELINE_UP: _baseline_up,
    AnimationKind.PAN_LEFT: _pan_left,
    AnimationKind.PAN_RIGHT: _pan_right,
    AnimationKind.BOUNCE: _bounce,
    AnimationKind.POP: _pop,
    AnimationKind.CINEMATIC: _cinematic,
    AnimationKind.HERO_POP: _hero_pop,
    AnimationKind.UNKNOWN: _none,
}


def synthesize(text: str, spec: AnimationSpec, ctx: SynthesisContext) -> AnimationMarkup:
    """Produce the animation markup for one line of escaped text."""
    return SYNTHESIZERS[spec.kind](text, spec, ctx)


def list_animations() -> List[str]:
    return [kind.value for kind in AnimationKind if kind != AnimationKind.UNKNOWN]
