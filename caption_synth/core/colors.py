"""Hex colour to packed script colour conversion.

WHY: The script format stores colours as ``&HAABBGGRR``: an inverted alpha
byte (00 = opaque, FF = transparent) followed by the channels in reverse
order. Getting either the inversion or the byte order wrong renders the
wrong colour without any error, so the conversion lives in one place.

HOW: Validate the hex string with a regex, split it into channels, compute
alpha as ``round((100 - opacity) * 2.55)``, and emit upper-case hex.

RULES:
- Input hex matches ``#?[0-9a-fA-F]{6}``; anything else → ``&H00000000``
- Opacity 0-100 (100 = fully opaque), clamped; non-numeric → 100
- Output order is alpha, blue, green, red
- Never raises on bad style input; a missing colour must not abort a build
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)

HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")
PACKED_COLOR_RE = re.compile(r"^&H([0-9a-fA-F]{8})$")

FALLBACK_COLOR = "&H00000000"
"""Fully opaque black, used whenever the input colour is unusable."""


def _clamp_opacity(opacity: Any) -> float:
    try:
        value = float(opacity)
    except (TypeError, ValueError):
        logger.debug("Non-numeric opacity %r, using 100", opacity)
        return 100.0
    if value != value:  # NaN
        return 100.0
    return min(100.0, max(0.0, value))


def opacity_to_alpha(opacity: Any) -> int:
    """Convert 0-100 opacity to the inverted 0-255 alpha byte."""
    return int(round((100 - _clamp_opacity(opacity)) * 2.55))


def _split_channels(hex_color: Optional[str]) -> Optional[Tuple[str, str, str]]:
    if not isinstance(hex_color, str):
        return None
    match = HEX_COLOR_RE.match(hex_color.strip())
    if match is None:
        return None
    rgb = match.group(1).upper()
    return rgb[0:2], rgb[2:4], rgb[4:6]


def encode_color(hex_color: Optional[str], opacity: Any = 100) -> str:
    """Encode ``#RRGGBB`` plus opacity as ``&HAABBGGRR``.

    Args:
        hex_color: Colour such as ``"#FFCC00"`` or ``"ffcc00"``.
        opacity: 0-100, where 100 is fully opaque.

    Returns:
        Packed colour string for the style row.
    """
    channels = _split_channels(hex_color)
    if channels is None:
        logger.debug("Invalid colour %r, falling back to %s", hex_color, FALLBACK_COLOR)
        return FALLBACK_COLOR
    red, green, blue = channels
    return "&H{:02X}{}{}{}".format(opacity_to_alpha(opacity), blue, green, red)


def decode_color(packed: str) -> Tuple[int, int, int, int]:
    """Decode ``&HAABBGGRR`` into ``(red, green, blue, alpha)``.

    Raises:
        ValueError: If the string is not a packed colour.
    """
    match = PACKED_COLOR_RE.match(packed.strip())
    if match is None:
        raise ValueError("Not a packed colour: '{}'".format(packed))
    value = match.group(1)
    alpha = int(value[0:2], 16)
    blue = int(value[2:4], 16)
    green = int(value[4:6], 16)
    red = int(value[6:8], 16)
    return red, green, blue, alpha


def inline_color(hex_color: Optional[str]) -> str:
    """Colour in override-tag form, ``&HBBGGRR&`` (no alpha byte)."""
    channels = _split_channels(hex_color)
    if channels is None:
        return "&H000000&"
    red, green, blue = channels
    return "&H{}{}{}&".format(blue, green, red)


def inline_alpha(opacity: Any) -> str:
    """Alpha in override-tag form, ``&HAA&``."""
    return "&H{:02X}&".format(opacity_to_alpha(opacity))
