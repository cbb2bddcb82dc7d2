"""Command-line interface for caption script synthesis.

WHY: Editors and render scripts need to turn a transcription JSON file into
a burn-in caption script from the terminal, and pipe the result straight
into ffmpeg. The CLI wires the segment adapter, preset resolution, and the
assembler behind a single command.

HOW: argparse collects the segments path, a preset name, and any explicit
style/animation/position overrides. Flags left unset are passed as None so
the preset (then the defaults) fills them. The script goes to stdout unless
--output, --job-id or --output-dir names a file target.

RULES:
- Positional argument: segments JSON path, ``-`` reads stdin
- Explicit flags always win over the preset; unset flags never override it
- Status output goes to stderr (not stdout), so stdout stays pipeable
- Exit code 1 on unreadable input, invalid segments, or filesystem errors
- --list-presets prints preset and animation names and exits 0
"""

from __future__ import annotations

import argparse
import logging
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from caption_synth import build_caption_script, write_caption_script
from caption_synth.adapters.segment_adapter import SegmentInputError, load_segments
from caption_synth.config import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    LOG_FORMAT,
    LOG_LEVEL,
)
from caption_synth.core.animations import list_animations
from caption_synth.core.ir import Canvas, CapsMode, InvalidSegmentError, PositionSpec
from caption_synth.core.positions import SAFE_ZONE_OFFSETS
from caption_synth.core.presets import list_presets

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed immediately."""
    print(msg, file=sys.stderr, flush=True)


def _positive_int(value: str) -> int:
    """argparse type for sizes that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("Expected a whole number, got '{}'".format(value))
    if number <= 0:
        raise argparse.ArgumentTypeError("Must be positive, got {}".format(number))
    return number


def _parse_canvas(value: str) -> Canvas:
    """argparse type for ``WIDTHxHEIGHT``, e.g. ``1920x1080``."""
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(
            "Canvas must look like WIDTHxHEIGHT, got '{}'".format(value)
        )
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("Canvas dimensions must be positive")
    return Canvas(width=width, height=height)


def _explicit_options(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect only the style/animation flags the user actually set."""
    options = {
        "font_family": args.font,
        "font_size": args.font_size,
        "primary_color": args.color,
        "outline_color": args.outline_color,
        "outline_width": args.outline_width,
        "box_color": args.box_color,
        "box_opacity": args.box_opacity,
        "caps": args.caps,
        "bold": args.bold,
        "animation": args.animation,
        "max_chars": args.max_chars,
    }
    return {key: value for key, value in options.items() if value is not None}


def _print_catalogue() -> None:
    print("Presets:")
    for name in list_presets():
        print("  {}".format(name))
    print("Animations:")
    for name in list_animations():
        print("  {}".format(name))
    print("Positions:")
    for name in SAFE_ZONE_OFFSETS:
        print("  {}".format(name))


def run(args: argparse.Namespace) -> None:
    """Load segments, build the script, and emit it.

    RULES:
    - --output writes exactly that file (``.ass`` appended if missing)
    - --job-id / --output-dir write ``<output_dir>/<job_id>.ass``; a job id
      is generated when only --output-dir is given
    - Otherwise the script is written to stdout
    """
    segments = load_segments(args.segments)
    _status("Loaded {} segment(s) from {}".format(len(segments), args.segments))

    position = PositionSpec(
        preset=args.position,
        offset_x=args.offset_x,
        offset_y=args.offset_y,
    )
    script = build_caption_script(
        segments,
        options=_explicit_options(args),
        preset=args.preset,
        position=position,
        canvas=args.canvas,
    )

    if args.output:
        target = Path(args.output)
        path = write_caption_script(script, target.name, target.parent)
        _status("Saved: {}".format(path))
    elif args.job_id or args.output_dir:
        job_id = args.job_id or uuid.uuid4().hex
        path = write_caption_script(script, job_id, args.output_dir)
        _status("Saved: {}".format(path))
    else:
        sys.stdout.write(script)
        sys.stdout.flush()


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() lets tests inspect the
    parser without building anything.
    """
    parser = argparse.ArgumentParser(
        prog="caption-synth",
        description="Build an animated ASS caption script from timed "
                    "transcript segments (JSON).",
    )

    parser.add_argument(
        "segments",
        nargs="?",
        help="Path to a segments JSON file, or '-' for stdin.",
    )

    # Look and motion
    parser.add_argument(
        "--preset",
        default=None,
        help="Visual preset. Available: {}.".format(", ".join(list_presets())),
    )
    parser.add_argument(
        "--animation",
        default=None,
        help="Animation kind, overrides the preset's. "
             "Available: {}.".format(", ".join(list_animations())),
    )
    parser.add_argument("--font", default=None, help="Font family name.")
    parser.add_argument(
        "--font-size", type=_positive_int, default=None, help="Font size in script pixels."
    )
    parser.add_argument("--color", default=None, help="Text colour as #RRGGBB.")
    parser.add_argument("--outline-color", default=None, help="Outline colour as #RRGGBB.")
    parser.add_argument("--outline-width", type=float, default=None, help="Outline width.")
    parser.add_argument(
        "--box-color",
        default=None,
        help="Background box colour as #RRGGBB; 'none' turns a preset's box off.",
    )
    parser.add_argument("--box-opacity", type=float, default=None, help="Box opacity, 0-100.")
    parser.add_argument(
        "--caps",
        choices=[mode.value for mode in CapsMode],
        default=None,
        help="Text case transform.",
    )
    parser.add_argument(
        "--bold",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Bold text (default: from preset).",
    )
    parser.add_argument(
        "--max-chars",
        type=_positive_int,
        default=None,
        help="Character budget per line for fall/rise/pan/baseline-up chunking.",
    )

    # Placement
    parser.add_argument(
        "--position",
        default=None,
        help="Safe-zone preset: {}.".format(", ".join(SAFE_ZONE_OFFSETS)),
    )
    parser.add_argument("--offset-x", type=int, default=0, help="Pixels right of centre.")
    parser.add_argument("--offset-y", type=int, default=0, help="Pixels above centre.")
    parser.add_argument(
        "--canvas",
        type=_parse_canvas,
        default=None,
        help="Script resolution as WIDTHxHEIGHT "
             "(default: {}x{}).".format(DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT),
    )

    # Output
    parser.add_argument("--output", "-o", default=None, help="Write the script to this file.")
    parser.add_argument("--job-id", default=None, help="Save as <output-dir>/<job-id>.ass.")
    parser.add_argument("--output-dir", default=None, help="Directory for --job-id output.")

    parser.add_argument(
        "--list-presets",
        action="store_true",
        help="List presets, animations and positions, then exit.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``caption-synth`` and ``python -m caption_synth``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format=LOG_FORMAT,
    )

    if args.list_presets:
        _print_catalogue()
        return
    if not args.segments:
        parser.error("the segments path is required")

    try:
        run(args)
    except (SegmentInputError, InvalidSegmentError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        # Unusable job id
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
