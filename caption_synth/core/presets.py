"""Named visual presets and the explicit → preset → default merge.

WHY: Callers usually want "the Hero Pop look" rather than eighteen style
fields. A preset is a default-fill layer beneath whatever the caller sets
explicitly, so a caller can take a preset and still change one colour.

HOW: Each preset is a plain dict of StyleConfig fields plus the animation
fields. resolve_options() walks every known field and takes the first of:
the caller's explicit value (if not None), the preset's value, DEFAULTS.
The merged dict is then turned into a frozen StyleConfig and AnimationSpec.

RULES:
- Presets are frozen constants; get_preset() hands out copies
- Preset names are matched with normalize_name() ("Hero Pop" == "hero-pop")
- Unknown preset names log a warning and resolve to an empty override set
- An explicit box_color of "" or "none" switches a preset's box off
- Explicit keys that are neither style nor animation fields are ignored
"""

from __future__ import annotations

import copy
import logging
from dataclasses import asdict, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

from caption_synth.core.ir import (
    AnimationSpec,
    CapsMode,
    ResolvedOptions,
    StyleConfig,
    normalize_name,
)

logger = logging.getLogger(__name__)

STYLE_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(StyleConfig))
ANIMATION_FIELDS: Tuple[str, ...] = ("animation", "clip_y", "max_chars")

DEFAULTS: Dict[str, Any] = dict(
    asdict(StyleConfig()),
    animation="none",
    clip_y=None,
    max_chars=None,
)

# Big, loud, all-caps punch-in for short-form hooks
PRESET_HERO_POP: Dict[str, Any] = {
    "font_family": "Montserrat ExtraBold",
    "font_size": 84,
    "primary_color": "#FFFFFF",
    "outline_color": "#000000",
    "outline_width": 6,
    "shadow_depth": 3,
    "bold": True,
    "caps": "allcaps",
    "animation": "hero-pop",
}

# Yellow pop-in captions with a keyword emoji appended
PRESET_EMOJI_POP: Dict[str, Any] = {
    "font_family": "Poppins",
    "font_size": 72,
    "primary_color": "#FFE600",
    "outline_color": "#000000",
    "outline_width": 5,
    "bold": True,
    "emoji": True,
    "animation": "pop",
}

PRESET_CINEMATIC: Dict[str, Any] = {
    "font_family": "Georgia",
    "font_size": 56,
    "primary_color": "#F5F0E6",
    "outline_width": 1,
    "shadow_depth": 2,
    "shadow_opacity": 70,
    "bold": False,
    "caps": "titlecase",
    "animation": "cinematic",
}

PRESET_CLEAN: Dict[str, Any] = {
    "font_family": "Helvetica",
    "font_size": 54,
    "outline_width": 2,
    "bold": False,
    "animation": "fade",
}

# Lower-third style text on an opaque box, rising in line by line
PRESET_NEWS_BOX: Dict[str, Any] = {
    "font_family": "Roboto",
    "font_size": 52,
    "primary_color": "#FFFFFF",
    "box_color": "#101820",
    "box_opacity": 80,
    "box_padding": 14,
    "bold": True,
    "animation": "rise",
}

PRESET_TYPEWRITER: Dict[str, Any] = {
    "font_family": "Courier New",
    "font_size": 52,
    "primary_color": "#E8E8E8",
    "box_color": "#000000",
    "box_opacity": 55,
    "box_padding": 10,
    "bold": False,
    "animation": "typewriter",
}

PRESET_KARAOKE_WORDS: Dict[str, Any] = {
    "font_family": "Arial Black",
    "font_size": 68,
    "outline_width": 4,
    "caps": "allcaps",
    "animation": "word-by-word",
}

# Preset lookup by normalized name
PRESETS: Dict[str, Dict[str, Any]] = {
    "hero-pop": PRESET_HERO_POP,
    "emoji-pop": PRESET_EMOJI_POP,
    "cinematic": PRESET_CINEMATIC,
    "clean": PRESET_CLEAN,
    "news-box": PRESET_NEWS_BOX,
    "typewriter": PRESET_TYPEWRITER,
    "karaoke-words": PRESET_KARAOKE_WORDS,
}


def list_presets() -> List[str]:
    return sorted(PRESETS)


def get_preset(name: Optional[str]) -> Dict[str, Any]:
    """Return a copy of the named preset, or {} if the name is unknown.

    None or an empty name means "no preset" and is not logged.
    """
    if not name or not str(name).strip():
        return {}
    bundle = PRESETS.get(normalize_name(str(name)))
    if bundle is None:
        logger.warning(
            "Unknown preset '%s'. Available: %s", name, ", ".join(list_presets())
        )
        return {}
    return copy.deepcopy(bundle)


def _parse_caps(value: Any) -> CapsMode:
    if isinstance(value, CapsMode):
        return value
    try:
        return CapsMode(normalize_name(str(value)).replace("-", ""))
    except ValueError:
        logger.warning("Unknown caps mode '%s', using normal", value)
        return CapsMode.NORMAL


def merge_fields(
    bundle: Mapping[str, Any],
    explicit: Mapping[str, Any],
) -> Dict[str, Any]:
    """Three-tier field resolution: explicit → preset bundle → DEFAULTS."""
    merged: Dict[str, Any] = {}
    for key in STYLE_FIELDS + ANIMATION_FIELDS:
        if explicit.get(key) is not None:
            merged[key] = explicit[key]
        elif key in bundle:
            merged[key] = bundle[key]
        else:
            merged[key] = DEFAULTS[key]
    return merged


def resolve_options(
    preset_name: Optional[str] = None,
    explicit: Optional[Mapping[str, Any]] = None,
) -> ResolvedOptions:
    """Merge a preset beneath explicit caller values.

    Args:
        preset_name: Preset name such as "Hero Pop"; None for no preset.
        explicit: Caller-supplied StyleConfig fields and ``animation``,
            ``clip_y``, ``max_chars``. None values count as "not set".

    Returns:
        ResolvedOptions with a frozen StyleConfig and AnimationSpec.
    """
    explicit = dict(explicit or {})
    unknown = sorted(set(explicit) - set(STYLE_FIELDS) - set(ANIMATION_FIELDS))
    if unknown:
        logger.warning("Ignoring unknown style options: %s", ", ".join(unknown))

    merged = merge_fields(get_preset(preset_name), explicit)

    box_color = merged["box_color"]
    if isinstance(box_color, str) and box_color.strip().lower() in ("", "none"):
        merged["box_color"] = None
    merged["caps"] = _parse_caps(merged["caps"])
    merged["font_size"] = int(merged["font_size"])

    style = StyleConfig(**{key: merged[key] for key in STYLE_FIELDS})
    animation = AnimationSpec.parse(
        merged["animation"],
        clip_y=merged["clip_y"],
        max_chars=merged["max_chars"],
    )
    return ResolvedOptions(style=style, animation=animation)
