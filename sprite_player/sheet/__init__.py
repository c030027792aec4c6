"""Sprite sheet data: frames, manifest loading and scripts"""

from .frames import Point, Rect, Size, SpriteFrame, parse_frame_tags, parse_frames
from .loader import LoadedSheet, load_sheet
from .model import ALL_SCRIPT, SpriteSheetModel

__all__ = [
    "Point",
    "Rect",
    "Size",
    "SpriteFrame",
    "parse_frames",
    "parse_frame_tags",
    "LoadedSheet",
    "load_sheet",
    "ALL_SCRIPT",
    "SpriteSheetModel",
]
