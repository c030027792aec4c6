"""
Frame geometry: where on the surface a sprite frame is drawn

=============================================================================
FILL-CANVAS MODE
=============================================================================

The sprite's untrimmed size (sourceSize) is scaled to fit the surface
while keeping its aspect ratio, and centred on the axis it doesn't fill:

    surface 200x100, sprite 50x50

    r = min(200/50, 100/50) = 2        -> drawn 100x100

    +----------+----------+----------+
    |          |##########|          |
    |  50 px   |##########|  50 px   |   x offset = (200 - 100) / 2
    |          |##########|          |
    +----------+----------+----------+

Using the SMALLER ratio guarantees both dimensions fit. The larger ratio
would overflow the other axis.

Without fill-canvas the sprite is drawn at native size at (0, 0), r = 1.

=============================================================================
TRIM CORRECTION
=============================================================================

A trimmed frame lost its transparent padding. Its trim origin (scaled
by r) is added to the destination origin and taken off the width and
height, so the visible pixels land where they would have been inside
the untrimmed box.

=============================================================================
"""

from dataclasses import dataclass
from typing import Tuple

from ..sheet.frames import SpriteFrame


@dataclass(frozen=True)
class DrawRect:
    """Destination rectangle on the surface, plus the scale used"""
    x: float
    y: float
    w: float
    h: float
    ratio: float = 1.0


def fill_size(src_w: float, src_h: float,
              max_w: float, max_h: float) -> Tuple[float, float, float, float, float]:
    """
    Fit (src_w, src_h) inside (max_w, max_h), keeping aspect ratio.

    Returns:
    --------
    (x, y, w, h, r) : centred rectangle and the scale ratio
    """
    if max_w / src_w > max_h / src_h:
        # Height is the limiting axis, centre horizontally
        r = max_h / src_h
        w = src_w * r
        h = max_h
        x = (max_w - w) * 0.5
        y = 0
    else:
        r = max_w / src_w
        w = max_w
        h = src_h * r
        x = 0
        y = (max_h - h) * 0.5
    return x, y, w, h, r


def resolve_draw_rect(frame: SpriteFrame, dest_w: float, dest_h: float,
                      fill_canvas: bool = True) -> DrawRect:
    """Map a frame to its destination rectangle on a dest_w x dest_h surface"""
    src_w = frame.source_size.w
    src_h = frame.source_size.h

    if fill_canvas:
        x, y, w, h, r = fill_size(src_w, src_h, dest_w, dest_h)
    else:
        x, y, w, h, r = 0, 0, src_w, src_h, 1

    if frame.trimmed and frame.sprite_source_size is not None:
        trim_x = frame.sprite_source_size.x * r
        trim_y = frame.sprite_source_size.y * r
        x += trim_x
        y += trim_y
        w -= trim_x
        h -= trim_y

    return DrawRect(x, y, w, h, r)
