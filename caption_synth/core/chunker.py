"""Split single-line animations into width-bounded, time-sliced chunks.

WHY: Directional entrances (fall, rise, pans, baseline-up) move the whole
line as one block; if the renderer wraps it onto two lines the motion and
the clip stop lining up. Instead each visual line becomes its own event
that plays during its share of the segment.

HOW: wrap_words() greedily packs whole words up to a character budget.
allocate_intervals() gives each chunk a slice of the segment proportional
to ``len(chunk) / len(text)``, aligned to centiseconds with a minimum
length, and forces the last chunk to end exactly at the segment end.
chunk_segment() turns each (chunk, interval) pair into a CaptionLine.

RULES:
- The budget is derived from font size and 90% of the canvas width unless
  the AnimationSpec carries max_chars
- A word longer than the budget is emitted alone and may overflow
- Every chunk gets at least MIN_CHUNK_MS, shrunk to an even split when the
  segment is too short to give every chunk that much
- A segment too short to give every chunk MIN_VISIBLE_MS gets fewer, longer
  chunks instead of zero-length events
- A non-positive font size gets a budget of one character, never an error
- Intervals are contiguous, so their durations sum to end - start exactly
"""

from __future__ import annotations

from typing import List, Tuple

from caption_synth.core.animations import SynthesisContext, synthesize
from caption_synth.core.ir import AnimationSpec, CaptionLine
from caption_synth.core.text import visible_length

MIN_CHUNK_MS = 100
# Shortest event a chunk may get; one centisecond is the smallest timestamp step.
MIN_VISIBLE_MS = 10
USABLE_WIDTH_RATIO = 0.9
AVERAGE_GLYPH_WIDTH = 0.55


def max_chars_per_line(font_size: int, canvas_width: int) -> int:
    """Estimate how many characters fit on one line."""
    if font_size <= 0:
        return 1
    usable = canvas_width * USABLE_WIDTH_RATIO
    return max(1, int(usable // (font_size * AVERAGE_GLYPH_WIDTH)))


def wrap_words(text: str, max_chars: int) -> List[str]:
    """Greedily pack whole words into lines of at most max_chars visible characters."""
    lines: List[str] = []
    current = ""
    for word in text.split():
        if not current:
            current = word
        elif visible_length(current) + 1 + visible_length(word) <= max_chars:
            current = current + " " + word
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def merge_chunks(chunks: List[str], limit: int) -> List[str]:
    """Join neighbouring chunks until there are at most ``limit`` of them.

    Chunks are grouped evenly in order, so a segment too short to show
    every line still shows every word.
    """
    limit = max(1, limit)
    if len(chunks) <= limit:
        return chunks
    size = -(-len(chunks) // limit)
    return [" ".join(chunks[i:i + size]) for i in range(0, len(chunks), size)]


def _align(ms: int) -> int:
    return ms - ms % 10


def allocate_intervals(
    chunks: List[str],
    text_length: int,
    start_ms: int,
    end_ms: int,
) -> List[Tuple[int, int]]:
    """Proportional, contiguous sub-intervals of ``[start_ms, end_ms]``.

    Args:
        chunks: The wrapped lines, in order.
        text_length: Visible length of the whole segment text.
        start_ms: Segment start.
        end_ms: Segment end; must be greater than start_ms.

    Returns:
        One ``(start, end)`` pair per chunk; the last ends at end_ms.
    """
    duration = end_ms - start_ms
    count = len(chunks)
    floor_ms = min(MIN_CHUNK_MS, _align(duration // count))
    total = max(1, text_length)

    intervals: List[Tuple[int, int]] = []
    cursor = start_ms
    for index, chunk in enumerate(chunks):
        remaining = count - index - 1
        if remaining == 0:
            intervals.append((cursor, end_ms))
            break
        share = max(floor_ms, _align(duration * visible_length(chunk) // total))
        latest = end_ms - remaining * floor_ms
        chunk_end = max(cursor, min(cursor + share, latest))
        intervals.append((cursor, chunk_end))
        cursor = chunk_end
    return intervals


def chunk_segment(
    text: str,
    spec: AnimationSpec,
    ctx: SynthesisContext,
    style_markup: str,
) -> List[CaptionLine]:
    """Emit one positioned, animated CaptionLine per wrapped chunk of text."""
    budget = spec.max_chars or max_chars_per_line(ctx.font_size, ctx.canvas.width)
    chunks = wrap_words(text, budget) or [text]
    chunks = merge_chunks(chunks, ctx.duration_ms // MIN_VISIBLE_MS)
    intervals = allocate_intervals(chunks, visible_length(text), ctx.start_ms, ctx.end_ms)

    lines: List[CaptionLine] = []
    for chunk, (chunk_start, chunk_end) in zip(chunks, intervals):
        chunk_ctx = SynthesisContext(
            start_ms=chunk_start,
            end_ms=chunk_end,
            position=ctx.position,
            canvas=ctx.canvas,
            font_size=ctx.font_size,
            anchor=ctx.anchor,
            reveal_alpha=ctx.reveal_alpha,
        )
        markup = synthesize(chunk, spec, chunk_ctx)
        position_markup = "" if markup.positioned else "\\pos({},{})".format(
            ctx.position.x, ctx.position.y
        )
        lines.append(CaptionLine(
            start_ms=chunk_start,
            end_ms=chunk_end,
            style_markup=style_markup,
            position_markup=position_markup,
            animation_markup=markup.override,
            text=markup.text,
        ))
    return lines
