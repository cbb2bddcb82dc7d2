"""Adapter modules for converting external transcript data into engine types.

WHY: Transcription services return timed segments in a few slightly
different JSON shapes. Adapters normalize them into CaptionSegment lists so
the engine only ever sees one representation.

RULES:
- Adapters validate input and raise SegmentInputError on bad documents
- Adapters never touch markup or styling
"""

from caption_synth.adapters.segment_adapter import (
    SegmentInputError,
    load_segments,
    parse_segments,
)

__all__ = ["SegmentInputError", "load_segments", "parse_segments"]
