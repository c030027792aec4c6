"""Paints one sprite frame onto a surface"""

import logging
from typing import Optional

from PIL import Image

from ..sheet.frames import SpriteFrame
from .geometry import DrawRect, resolve_draw_rect
from .surface import Surface

logger = logging.getLogger(__name__)


class FramePainter:
    """
    Clears the surface and blits a frame's packed rect into its resolved
    destination rectangle.

    The sheet image is only known once the asset load finishes, so it is
    assigned after construction.
    """

    def __init__(self, surface: Surface, fill_canvas: bool = True,
                 logger: logging.Logger = logger):
        self.surface = surface
        self.fill_canvas = fill_canvas
        self.logger = logger
        self.image: Optional[Image.Image] = None

    def paint(self, frame: SpriteFrame) -> Optional[DrawRect]:
        """Draw the frame; returns the destination rect, or None if nothing was drawn"""
        if self.image is None:
            self.logger.warning("cannot draw frame %s: sheet image not loaded", frame.index)
            return None
        if not frame.has_geometry:
            self.logger.warning("cannot draw frame %s: no geometry", frame.index)
            return None

        surface = self.surface
        surface.clear(0, 0, surface.width, surface.height)

        rect = resolve_draw_rect(frame, surface.width, surface.height, self.fill_canvas)
        src = frame.frame
        self.logger.debug("drawImage %s %s %s %s -> %s",
                          src.x, src.y, src.w, src.h, rect)
        surface.draw_image(self.image,
                           src.x, src.y, src.w, src.h,
                           rect.x, rect.y, rect.w, rect.h)
        return rect
