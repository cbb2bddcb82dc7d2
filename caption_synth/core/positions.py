"""Safe-zone presets and explicit offsets to absolute canvas coordinates.

RULES:
- Offsets are measured from the canvas centre; positive y is up
- A known preset wins over explicit offsets (override, not merge)
- Preset offsets are fractions of the canvas height, so they hold for any
  resolution; x is always the horizontal centre for a preset
- Unknown preset names are logged and fall back to the explicit offsets
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from caption_synth.core.ir import Canvas, Point, PositionSpec, normalize_name

logger = logging.getLogger(__name__)

# Vertical offset from centre, as a fraction of canvas height.
SAFE_ZONE_OFFSETS: Dict[str, float] = {
    "top-safe": 0.35,
    "center": 0.0,
    "bottom-safe": -0.35,
}

# Numpad alignment anchor written to the style row and as \an on each line.
ALIGNMENT_ANCHORS: Dict[str, int] = {
    "top-safe": 8,
    "center": 5,
    "bottom-safe": 2,
}

DEFAULT_ANCHOR = 5


def _known_preset(spec: PositionSpec, warn: bool = True) -> Optional[str]:
    if not spec.preset:
        return None
    key = normalize_name(spec.preset)
    if key == "centre":
        key = "center"
    if key not in SAFE_ZONE_OFFSETS:
        if warn:
            logger.warning(
                "Unknown position preset '%s', using explicit offsets", spec.preset
            )
        return None
    return key


def resolve_position(spec: PositionSpec, canvas: Canvas) -> Point:
    """Resolve a PositionSpec to absolute ``(x, y)`` on the canvas."""
    centre_x = canvas.width / 2
    centre_y = canvas.height / 2
    preset = _known_preset(spec)
    if preset is not None:
        offset = SAFE_ZONE_OFFSETS[preset] * canvas.height
        return Point(x=int(round(centre_x)), y=int(round(centre_y - offset)))
    return Point(
        x=int(round(centre_x + spec.offset_x)),
        y=int(round(centre_y - spec.offset_y)),
    )


def alignment_anchor(spec: PositionSpec) -> int:
    """Numpad anchor for the spec: 8 top-safe, 2 bottom-safe, 5 otherwise."""
    preset = _known_preset(spec, warn=False)
    if preset is None:
        return DEFAULT_ANCHOR
    return ALIGNMENT_ANCHORS[preset]
