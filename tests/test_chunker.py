"""Tests for single-line chunking of directional animations.

WHY: Chunk timing must cover the segment exactly. A gap flashes an empty
frame, an overlap stacks two lines, and a drifting end desynchronizes every
following caption.

HOW: Wrap known text at known budgets, allocate intervals, and check
contiguity, conservation and proportionality. chunk_segment() is checked
for every directional kind.

RULES:
- Intervals are contiguous and end exactly at the segment end
- Longer chunks never get less time than shorter ones (given the floor)
- Words longer than the budget are emitted alone
"""

import pytest

from caption_synth.core.animations import SynthesisContext
from caption_synth.core.chunker import (
    MIN_CHUNK_MS,
    allocate_intervals,
    chunk_segment,
    max_chars_per_line,
    merge_chunks,
    wrap_words,
)
from caption_synth.core.ir import CHUNKED_KINDS, AnimationSpec, Canvas, Point


def _ctx(start_ms, end_ms, font_size=64):
    return SynthesisContext(
        start_ms=start_ms,
        end_ms=end_ms,
        position=Point(540, 1632),
        canvas=Canvas(width=1080, height=1920),
        font_size=font_size,
        anchor=2,
    )


# ---------------------------------------------------------------------------
# wrap_words
# ---------------------------------------------------------------------------


class TestWrapWords:
    """Tests for wrap_words()."""

    def test_greedy_packing(self):
        assert wrap_words("The quick brown fox jumps over", 12) == [
            "The quick",
            "brown fox",
            "jumps over",
        ]

    def test_long_word_alone(self):
        assert wrap_words("a supercalifragilistic b", 5) == ["a", "supercalifragilistic", "b"]

    def test_fits_on_one_line(self):
        assert wrap_words("short line", 40) == ["short line"]

    def test_escapes_count_as_one_character(self):
        # "\{ab\}" is four visible characters
        assert wrap_words("\\{ab\\} cd", 7) == ["\\{ab\\} cd"]

    def test_budget_from_font_and_canvas(self):
        # 1080 * 0.9 / (64 * 0.55) = 27.6
        assert max_chars_per_line(64, 1080) == 27
        assert max_chars_per_line(10_000, 100) == 1

    @pytest.mark.parametrize("font_size", [0, -12])
    def test_budget_for_non_positive_font_size(self, font_size):
        assert max_chars_per_line(font_size, 1080) == 1

    def test_merge_chunks_groups_in_order(self):
        chunks = ["aa", "bb", "cc", "dd", "ee", "ff"]
        assert merge_chunks(chunks, 5) == ["aa bb", "cc dd", "ee ff"]
        assert merge_chunks(chunks, 6) == chunks
        assert merge_chunks(chunks, 0) == ["aa bb cc dd ee ff"]


# ---------------------------------------------------------------------------
# allocate_intervals
# ---------------------------------------------------------------------------


class TestAllocateIntervals:
    """Tests for allocate_intervals()."""

    def test_thirty_characters_in_three_chunks(self):
        chunks = ["The quick", "brown fox", "jumps over"]
        intervals = allocate_intervals(chunks, 30, 0, 3000)
        assert intervals == [(0, 900), (900, 1800), (1800, 3000)]

    @pytest.mark.parametrize("start, end", [(0, 3000), (1234, 5678), (0, 150), (500, 507)])
    def test_contiguous_and_conserved(self, start, end):
        chunks = ["one two", "three", "four five six", "seven"]
        intervals = allocate_intervals(chunks, 32, start, end)
        assert intervals[0][0] == start
        assert intervals[-1][1] == end
        for (_, prev_end), (next_start, _) in zip(intervals, intervals[1:]):
            assert prev_end == next_start
        assert sum(e - s for s, e in intervals) == end - start
        assert all(e >= s for s, e in intervals)

    def test_minimum_chunk_length(self):
        chunks = ["a", "b", "a much much longer chunk"]
        intervals = allocate_intervals(chunks, 28, 0, 10_000)
        assert all(e - s >= MIN_CHUNK_MS for s, e in intervals)

    def test_single_chunk_is_whole_segment(self):
        assert allocate_intervals(["all of it"], 9, 200, 900) == [(200, 900)]


# ---------------------------------------------------------------------------
# chunk_segment
# ---------------------------------------------------------------------------


class TestChunkSegment:
    """Tests for chunk_segment() across every directional kind."""

    @pytest.mark.parametrize("kind", sorted(CHUNKED_KINDS, key=lambda k: k.value))
    def test_duration_conserved_for_every_kind(self, kind):
        spec = AnimationSpec(kind=kind, name=kind.value, max_chars=12)
        lines = chunk_segment("The quick brown fox jumps over", spec, _ctx(1000, 4000), "\\an2")
        assert len(lines) == 3
        assert lines[0].start_ms == 1000
        assert lines[-1].end_ms == 4000
        assert sum(line.end_ms - line.start_ms for line in lines) == 3000
        for line in lines:
            assert line.animation_markup.startswith("\\move(")
            # the move already positions the line
            assert line.position_markup == ""

    def test_chunks_carry_their_text(self):
        spec = AnimationSpec.parse("rise", max_chars=12)
        lines = chunk_segment("The quick brown fox jumps over", spec, _ctx(0, 3000), "\\an2")
        assert [line.text for line in lines] == ["The quick", "brown fox", "jumps over"]

    def test_budget_derived_when_unset(self):
        spec = AnimationSpec.parse("fall")
        lines = chunk_segment("Short enough", spec, _ctx(0, 2000), "\\an2")
        assert len(lines) == 1
        assert (lines[0].start_ms, lines[0].end_ms) == (0, 2000)

    def test_move_duration_capped_by_chunk(self):
        spec = AnimationSpec.parse("pan-left", max_chars=3)
        lines = chunk_segment("aa bb cc dd", spec, _ctx(0, 400), "\\an2")
        for line in lines:
            assert ",0,{})".format(line.end_ms - line.start_ms) in line.animation_markup

    def test_very_short_segment_merges_chunks(self):
        # 50 ms cannot give six chunks a centisecond each
        spec = AnimationSpec.parse("rise", max_chars=2)
        lines = chunk_segment("aa bb cc dd ee ff", spec, _ctx(0, 50), "\\an2")
        assert [line.text for line in lines] == ["aa bb", "cc dd", "ee ff"]
        assert all(line.end_ms > line.start_ms for line in lines)
        assert lines[-1].end_ms == 50

    def test_zero_font_size_still_chunks(self):
        spec = AnimationSpec.parse("fall")
        lines = chunk_segment("Hello world again", spec, _ctx(0, 3000, font_size=0), "\\an2")
        assert [line.text for line in lines] == ["Hello", "world", "again"]
