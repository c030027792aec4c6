"""
Sprite Player - scriptable sprite sheet animation

Requisitos:
    pip install glfw PyOpenGL PyOpenGL_accelerate pillow numpy
"""

import logging

from .errors import SpritePlayerError, LoadFailure, AnimationNotFound, FrameNotFound
from .player import SpritePlayer, SheetOptions
from .playback import PlayOptions, Playhead, PlayheadController, RenderScheduler, FrameHost, Visibility
from .renderer import ImageSurface, resolve_draw_rect
from .sheet import SpriteFrame, SpriteSheetModel, load_sheet

# Library default: log records go nowhere unless the application
# configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    "SpritePlayer",
    "SheetOptions",
    "PlayOptions",
    "Playhead",
    "PlayheadController",
    "RenderScheduler",
    "FrameHost",
    "Visibility",
    "ImageSurface",
    "resolve_draw_rect",
    "SpriteFrame",
    "SpriteSheetModel",
    "load_sheet",
    "SpritePlayerError",
    "LoadFailure",
    "AnimationNotFound",
    "FrameNotFound",
]
