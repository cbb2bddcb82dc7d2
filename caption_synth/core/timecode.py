"""Conversion between integer milliseconds and the script time format.

The script format is ``H:MM:SS.cc``: hours unpadded, minutes and seconds
zero-padded to two digits, centiseconds zero-padded to two digits.
Everything inside the engine works in integer milliseconds; this module is
the only place that knows about the text form.
"""

from __future__ import annotations

import re
from typing import Union

TIMESTAMP_RE = re.compile(r"^(\d+):([0-5]\d):([0-5]\d)\.(\d{2})$")


def format_timestamp(ms: int) -> str:
    """Format milliseconds as ``H:MM:SS.cc``; sub-centisecond values are floored."""
    if ms < 0:
        raise ValueError("Timestamp cannot be negative: {} ms".format(ms))
    total_cs = int(ms) // 10
    cs = total_cs % 100
    total_s = total_cs // 100
    return "{}:{:02d}:{:02d}.{:02d}".format(
        total_s // 3600, (total_s % 3600) // 60, total_s % 60, cs
    )


def parse_timestamp(value: str) -> int:
    """Parse ``H:MM:SS.cc`` into milliseconds.

    Raises:
        ValueError: If the string is not in the script time format.
    """
    match = TIMESTAMP_RE.match(value.strip())
    if match is None:
        raise ValueError("Not a H:MM:SS.cc timestamp: '{}'".format(value))
    hours, minutes, seconds, centis = (int(part) for part in match.groups())
    return ((hours * 3600 + minutes * 60 + seconds) * 100 + centis) * 10


def to_milliseconds(value: Union[int, float, str]) -> int:
    """Coerce seconds (number) or a ``H:MM:SS.cc`` string to milliseconds.

    Numeric strings such as ``"1.5"`` are read as seconds, matching what
    transcription services put in their JSON.
    """
    if isinstance(value, bool):
        raise ValueError("Boolean is not a time value")
    if isinstance(value, (int, float)):
        return int(round(value * 1000))
    text = str(value).strip()
    if ":" in text:
        return parse_timestamp(text)
    return int(round(float(text) * 1000))
