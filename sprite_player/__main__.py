#!/usr/bin/env python3

"""
Sprite Player - OpenGL viewer for sprite sheet animations

Usage:
    python -m sprite_player <sheet.json> [animation]
    python -m sprite_player hero.json walk --tempo 2 --run 3
    python -m sprite_player hero.json --reversed --size 128x128

Controls:
    Space       - Play/Stop
    Left/Right  - Previous/Next frame
    R           - Reverse direction
    Up/Down     - Faster/Slower
    Home        - First frame
    ESC/Q       - Quit
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .playback.playhead import PlayOptions
from .player import SheetOptions

logger = logging.getLogger("sprite_player")


def parse_size(value: str) -> Tuple[int, int]:
    """'WxH' -> (W, H)"""
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size '{value}', expected WxH")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got '{value}'")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprite-player",
        description="Play a sprite sheet animation in a window",
    )
    parser.add_argument("sheet", help="Sprite sheet JSON manifest")
    parser.add_argument(
        "animation", nargs="?", help="Animation to play (default: all frames)",
    )
    parser.add_argument("--image", help="Sheet image, overrides meta.image")
    parser.add_argument(
        "--size", type=parse_size,
        help="Drawing surface size as WxH (default: 256x256)",
    )
    parser.add_argument("--delay", type=float, help="Default frame delay in ms")
    parser.add_argument("--tempo", type=float, help="Playback speed multiplier")
    parser.add_argument(
        "--run", type=int, help="Number of passes, -1 loops forever",
    )
    parser.add_argument(
        "--reversed", action="store_true", help="Play the animation backwards",
    )
    parser.add_argument(
        "--start-sprite", type=int,
        help="Catalog index (0-based) of the frame to show as soon as the sheet is loaded",
    )
    parser.add_argument(
        "--no-fill", action="store_true",
        help="Draw frames at native size instead of scaling to the surface",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Verbose logging",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> Tuple[SheetOptions, PlayOptions]:
    width, height = args.size if args.size else (None, None)
    sheet = SheetOptions(
        url=args.sheet,
        image_url=args.image,
        width=width,
        height=height,
        start_sprite=args.start_sprite,
        fill_canvas=not args.no_fill,
    )
    play = PlayOptions(
        delay=args.delay,
        tempo=args.tempo,
        run=args.run,
        reversed=True if args.reversed else None,
    )
    return sheet, play


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not Path(args.sheet).exists():
        logger.error("File '%s' not found", args.sheet)
        sys.exit(1)

    sheet_options, play_options = options_from_args(args)

    try:
        from .app import SpriteViewer
        viewer = SpriteViewer(sheet_options, script=args.animation,
                              play_options=play_options)
        asyncio.run(viewer.run())
    except Exception:
        logger.exception("Viewer stopped with an error")
        sys.exit(1)


if __name__ == "__main__":
    main()
