"""Configuration constants and .env loading.

WHY: Canvas size, output location, and server settings change between
deployments (vertical shorts vs. landscape video, local disk vs. mounted
volume). Keeping them as plain module-level constants makes them easy to
find and override without touching the engine.

HOW: python-dotenv loads the .env file on import. Every constant reads an
environment variable with a sensible default.

RULES:
- All defaults can be overridden via environment variables
- Canvas defaults to 1080x1920 (9:16 vertical video)
- Scripts are written as ``<job_id>.ass`` under CAPTION_OUTPUT_DIR
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------

DEFAULT_CANVAS_WIDTH = int(os.getenv("CAPTION_CANVAS_WIDTH", "1080"))
DEFAULT_CANVAS_HEIGHT = int(os.getenv("CAPTION_CANVAS_HEIGHT", "1920"))

# ---------------------------------------------------------------------------
# Script output
# ---------------------------------------------------------------------------

DEFAULT_STYLE_NAME = os.getenv("CAPTION_STYLE_NAME", "Default")
DEFAULT_OUTPUT_DIR = os.getenv("CAPTION_OUTPUT_DIR", "output/captions")

SCRIPT_SUFFIX = ".ass"
"""File extension of every persisted caption script."""

SCRIPT_MEDIA_TYPE = "text/x-ssa"

# ---------------------------------------------------------------------------
# HTTP API and logging
# ---------------------------------------------------------------------------

API_HOST = os.getenv("CAPTION_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("CAPTION_API_PORT", "8000"))
LOG_LEVEL = os.getenv("CAPTION_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
