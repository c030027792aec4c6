"""
Drawing surfaces

The player only needs two primitives from whatever it draws on: clear a
region, and blit a region of the sheet image into a destination
rectangle (the same pair a 2D canvas offers). ImageSurface implements
them on a fixed-size PIL RGBA image; the OpenGL viewer uploads that image
as a texture whenever it changes.
"""

from typing import Protocol

import numpy as np
from PIL import Image


class Surface(Protocol):
    """Fixed-size 2D drawing target"""

    width: int
    height: int

    def clear(self, x: float, y: float, w: float, h: float) -> None:
        ...

    def draw_image(self, image: Image.Image,
                   sx: float, sy: float, sw: float, sh: float,
                   dx: float, dy: float, dw: float, dh: float) -> None:
        ...


class ImageSurface:
    """
    Surface backed by a PIL RGBA image.

    ==========================================================================
    CHANGE TRACKING
    ==========================================================================

    `version` goes up on every mutation. Consumers that mirror the pixels
    elsewhere (the GL viewer's texture) compare it with the version they
    last copied instead of re-uploading every frame.

    ==========================================================================
    SCALING
    ==========================================================================

    Blits are resized with NEAREST sampling, for the same reason the
    texture uses GL_NEAREST: sprite sheets are usually pixel art, and
    interpolation would blur the pixel edges.

    ==========================================================================
    """

    CLEAR_COLOR = (0, 0, 0, 0)

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.image = Image.new('RGBA', (self.width, self.height), self.CLEAR_COLOR)
        self.version = 0

    def clear(self, x: float = 0, y: float = 0, w: float = None, h: float = None):
        """Clear a region to transparent (whole surface by default)"""
        if w is None:
            w = self.width
        if h is None:
            h = self.height
        box = (int(round(x)), int(round(y)), int(round(x + w)), int(round(y + h)))
        self.image.paste(self.CLEAR_COLOR, box)
        self.version += 1

    def draw_image(self, image: Image.Image,
                   sx: float, sy: float, sw: float, sh: float,
                   dx: float, dy: float, dw: float, dh: float):
        """
        Copy image region (sx, sy, sw, sh) into (dx, dy, dw, dh).

        Alpha is respected (the region is its own paste mask). Parts that
        fall outside the surface are clipped by PIL. Empty source or
        destination rectangles draw nothing.
        """
        size = (int(round(dw)), int(round(dh)))
        if size[0] <= 0 or size[1] <= 0 or sw <= 0 or sh <= 0:
            return

        region = image.crop((int(sx), int(sy), int(sx + sw), int(sy + sh)))
        if region.mode != 'RGBA':
            region = region.convert('RGBA')
        if region.size != size:
            region = region.resize(size, Image.Resampling.NEAREST)

        self.image.paste(region, (int(round(dx)), int(round(dy))), region)
        self.version += 1

    def to_array(self) -> np.ndarray:
        """Pixels as a (height, width, 4) uint8 array"""
        return np.asarray(self.image, dtype=np.uint8)
