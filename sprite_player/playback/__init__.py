"""Playback engine: playhead state, controller and render loop"""

from .playhead import PLAYHEAD_DEFAULTS, Playhead, PlayOptions, build_playhead
from .controller import PlayheadController
from .scheduler import FrameHost, RenderScheduler, Visibility

__all__ = [
    "PLAYHEAD_DEFAULTS",
    "Playhead",
    "PlayOptions",
    "build_playhead",
    "PlayheadController",
    "FrameHost",
    "RenderScheduler",
    "Visibility",
]
