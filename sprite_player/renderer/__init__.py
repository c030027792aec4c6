# ============================================
# sprite_player/renderer/__init__.py
# ============================================
"""
Frame geometry and drawing surfaces

The OpenGL pieces (opengl_renderer, texture, sprite_batch) need a live GL
context and are imported by the viewer directly.
"""

from .geometry import DrawRect, fill_size, resolve_draw_rect
from .surface import ImageSurface, Surface
from .painter import FramePainter

__all__ = [
    "DrawRect",
    "fill_size",
    "resolve_draw_rect",
    "ImageSurface",
    "Surface",
    "FramePainter",
]
