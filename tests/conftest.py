"""Shared test fixtures for the caption_synth test suite.

WHY: Most test modules need the same few segments, a fixed canvas, and a
parsed script to inspect. Centralizing them here keeps every module on the
same sample data.

HOW: Pytest fixtures provide CaptionSegment lists, the equivalent raw
transcription JSON, a 1080x1920 canvas, and a helper that splits a built
script into its Dialogue rows.

RULES:
- The canvas is always explicit so env overrides never change expectations
- Raw JSON uses seconds, like transcription services emit
"""

from typing import Any, Dict, List

import pytest

from caption_synth.core.ir import Canvas, CaptionSegment


# ---------------------------------------------------------------------------
# Sample segments
# ---------------------------------------------------------------------------

SAMPLE_JSON: List[Dict[str, Any]] = [
    {"start": 0.0, "end": 2.0, "text": "Hello world"},
    {"start": 2.0, "end": 4.5, "text": "This is a test"},
    {"start": 4.5, "end": 7.0, "text": "Captions {with braces}"},
]


@pytest.fixture
def canvas():
    """Vertical 9:16 canvas."""
    return Canvas(width=1080, height=1920)


@pytest.fixture
def sample_json():
    """Raw transcription JSON: a bare list of {start, end, text}."""
    return [dict(item) for item in SAMPLE_JSON]


@pytest.fixture
def sample_segments():
    """The SAMPLE_JSON segments as CaptionSegments (integer ms)."""
    return [
        CaptionSegment(start_ms=0, end_ms=2000, text="Hello world", index=0),
        CaptionSegment(start_ms=2000, end_ms=4500, text="This is a test", index=1),
        CaptionSegment(start_ms=4500, end_ms=7000, text="Captions {with braces}", index=2),
    ]


@pytest.fixture
def hello_segment():
    """A single 3-second segment."""
    return [CaptionSegment(start_ms=0, end_ms=3000, text="Hello world")]


def dialogue_rows(script: str) -> List[str]:
    """Every ``Dialogue:`` row of a built script, in order."""
    return [row for row in script.splitlines() if row.startswith("Dialogue:")]


def dialogue_fields(row: str) -> List[str]:
    """Split a Dialogue row into its 10 fields (Text may contain commas)."""
    return row[len("Dialogue: "):].split(",", 9)
