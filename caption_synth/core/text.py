"""Caption text preparation: whitespace, capitalization, emoji, escaping.

WHY: Transcript text arrives with stray newlines, inconsistent spacing, and
characters that mean something to the renderer. A newline would split an
event row in two; a literal ``{`` would open an override block and swallow
the rest of the line.

HOW: prepare_text() runs the steps in a fixed order: collapse whitespace,
apply the caps mode, optionally inject an emoji, then escape. Escaped text
is split into display units with split_units() so per-character animation
never inserts a tag between a backslash and the brace it escapes.

RULES:
- All whitespace (including newlines) collapses to single spaces
- ``{`` → ``\\{`` and ``}`` → ``\\}``
- A raw backslash becomes U+FF3C (fullwidth reverse solidus) so it can never
  combine with a following character into an override sequence
- titlecase upper-cases the first letter of each word and leaves the rest
- Emoji injection adds one emoji after the earliest keyword in the text
"""

from __future__ import annotations

import re
from typing import Dict, List

from caption_synth.core.ir import CapsMode, StyleConfig

BACKSLASH_SUBSTITUTE = "＼"

# Keyword → emoji for the emoji-pop preset
EMOJI_KEYWORDS: Dict[str, str] = {
    "boom": "\U0001f4a5", "explode": "\U0001f4a5", "blast": "\U0001f4a3",
    "crash": "\U0001f4a5", "bang": "\U0001f4a5",
    "lol": "\U0001f602", "haha": "\U0001f923", "funny": "\U0001f606",
    "joke": "\U0001f639", "laugh": "\U0001f604",
    "think": "\U0001f914", "idea": "\U0001f4a1", "plan": "\U0001f9e0",
    "strategy": "\U0001f4ca", "brain": "\U0001f9e0", "tip": "\U0001f4a1",
    "fire": "\U0001f525", "hot": "\U0001f975", "spicy": "\U0001f336",
    "lit": "\U0001f4af",
    "heart": "❤", "love": "\U0001f60d", "hug": "\U0001f917",
    "sweet": "\U0001f36d",
    "magic": "✨", "wow": "\U0001f632", "surprise": "\U0001f389",
    "shine": "\U0001f31f", "sparkle": "\U0001f4ab",
    "money": "\U0001f4b8", "rich": "\U0001f4b0", "paid": "\U0001f911",
    "coins": "\U0001fa99",
    "sale": "\U0001f6cd", "shop": "\U0001f6d2", "discount": "\U0001f3f7",
    "win": "\U0001f3c6", "success": "\U0001f680", "goal": "\U0001f3af",
    "score": "\U0001f4c8", "reward": "\U0001f381",
    "sad": "\U0001f622", "cry": "\U0001f62d", "tired": "\U0001f971",
    "stress": "\U0001f629",
    "chill": "\U0001f60e", "relax": "\U0001f9d8", "easy": "\U0001f44c",
    "fast": "⚡", "quick": "\U0001f680", "speed": "\U0001f3c3",
    "boss": "\U0001f451", "queen": "\U0001f478", "king": "\U0001f934",
    "legend": "\U0001f3c5",
    "new": "\U0001f195", "launch": "\U0001f680", "update": "\U0001f501",
    "build": "\U0001f9f1",
    "email": "\U0001f4e7", "message": "\U0001f4ac", "alert": "\U0001f514",
    "clock": "⏰", "calendar": "\U0001f4c5", "late": "⌛",
    "party": "\U0001f973", "play": "\U0001f3ae", "vibe": "\U0001f3b5",
    "verified": "✅", "safe": "\U0001f6e1", "code": "\U0001f4bb",
    "voice": "\U0001f3a4", "camera": "\U0001f3a5", "video": "\U0001f4f9",
    "viral": "\U0001f4c8", "growth": "\U0001f331", "boost": "\U0001f680",
    "automation": "\U0001f916",
}

_KEYWORD_RE = re.compile(
    r"\b({})\b".format("|".join(sorted(EMOJI_KEYWORDS, key=len, reverse=True))),
    re.IGNORECASE,
)


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def apply_caps(text: str, caps: CapsMode) -> str:
    if caps == CapsMode.ALLCAPS:
        return text.upper()
    if caps == CapsMode.TITLECASE:
        return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))
    return text


def inject_emoji(text: str) -> str:
    """Append the matching emoji to the earliest keyword; text is unchanged if none match."""
    match = _KEYWORD_RE.search(text)
    if match is None:
        return text
    emoji = EMOJI_KEYWORDS[match.group(1).lower()]
    return text[:match.end()] + emoji + text[match.end():]


def escape_text(text: str) -> str:
    """Escape characters that would be read as override markup."""
    return (
        text.replace("\\", BACKSLASH_SUBSTITUTE)
        .replace("{", "\\{")
        .replace("}", "\\}")
    )


def split_units(escaped: str) -> List[str]:
    """Split escaped text into display units, keeping ``\\{`` / ``\\}`` whole."""
    units: List[str] = []
    i = 0
    while i < len(escaped):
        if escaped[i] == "\\" and i + 1 < len(escaped):
            units.append(escaped[i:i + 2])
            i += 2
        else:
            units.append(escaped[i])
            i += 1
    return units


def visible_length(escaped: str) -> int:
    """Number of characters the viewer sees in escaped text."""
    return len(split_units(escaped))


def prepare_text(text: str, style: StyleConfig) -> str:
    """Run the full preparation pipeline for one segment's text."""
    prepared = apply_caps(normalize_whitespace(text), style.caps)
    if style.emoji:
        prepared = inject_emoji(prepared)
    return escape_text(prepared)
