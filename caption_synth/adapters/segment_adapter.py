"""Adapter: transcription JSON to CaptionSegment objects.

WHY: Speech-to-text output reaches the engine either as a bare list of
``{start, end, text}`` objects or wrapped in a whisper-style
``{"segments": [...]}`` response, with times as seconds or as
``H:MM:SS.cc`` strings. The engine works in integer milliseconds only.

HOW: The document is validated against SEGMENTS_SCHEMA with jsonschema,
unwrapped if needed, and every entry is converted with to_milliseconds().

RULES:
- Extra keys on segments (id, tokens, avg_logprob, ...) are ignored
- start/end are non-negative numbers (seconds) or script timestamps
- Schema violations and unreadable JSON raise SegmentInputError
- end <= start is NOT checked here; the assembler rejects it
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Union

import jsonschema

from caption_synth.core.ir import CaptionSegment
from caption_synth.core.timecode import to_milliseconds


class SegmentInputError(ValueError):
    """Raised when a transcription document cannot be read as segments."""


_TIME_SCHEMA: Dict[str, Any] = {
    "anyOf": [
        {"type": "number", "minimum": 0},
        {"type": "string", "pattern": r"^\d+:[0-5]\d:[0-5]\d\.\d{2}$"},
        {"type": "string", "pattern": r"^\d+(\.\d+)?$"},
    ]
}

_SEGMENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["start", "end", "text"],
    "properties": {
        "start": _TIME_SCHEMA,
        "end": _TIME_SCHEMA,
        "text": {"type": "string"},
    },
}

SEGMENTS_SCHEMA: Dict[str, Any] = {
    "anyOf": [
        {"type": "array", "items": _SEGMENT_SCHEMA},
        {
            "type": "object",
            "required": ["segments"],
            "properties": {"segments": {"type": "array", "items": _SEGMENT_SCHEMA}},
        },
    ]
}


def _validate(data: Any) -> None:
    validator = jsonschema.Draft7Validator(SEGMENTS_SCHEMA)
    error = jsonschema.exceptions.best_match(validator.iter_errors(data))
    if error is None:
        return
    location = "/".join(str(part) for part in error.absolute_path) or "<root>"
    raise SegmentInputError("Invalid segment input at {}: {}".format(location, error.message))


def parse_segments(data: Any) -> List[CaptionSegment]:
    """Convert a parsed transcription document into CaptionSegments.

    Args:
        data: A list of segment dicts, or a dict with a ``segments`` list.

    Returns:
        Segments in document order, times in milliseconds.

    Raises:
        SegmentInputError: If the document does not match SEGMENTS_SCHEMA.
    """
    _validate(data)
    items = data["segments"] if isinstance(data, dict) else data
    return [
        CaptionSegment(
            start_ms=to_milliseconds(item["start"]),
            end_ms=to_milliseconds(item["end"]),
            text=item["text"],
            index=index,
        )
        for index, item in enumerate(items)
    ]


def load_segments(path: Union[str, Path]) -> List[CaptionSegment]:
    """Read a UTF-8 JSON file (``-`` for stdin) and parse its segments."""
    if str(path) == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SegmentInputError("Input is not valid JSON: {}".format(exc)) from exc
    return parse_segments(data)
