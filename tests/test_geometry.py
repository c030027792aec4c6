"""Tests for sprite_player/renderer/geometry.py — fill-canvas and trim placement."""

from __future__ import annotations

import pytest

from sprite_player.renderer.geometry import DrawRect, fill_size, resolve_draw_rect
from sprite_player.sheet.frames import Point, Rect, Size, SpriteFrame


def _frame(src_w, src_h, trimmed=False, trim=None):
    return SpriteFrame(
        index=0,
        frame=Rect(0, 0, src_w, src_h),
        source_size=Size(src_w, src_h),
        sprite_source_size=trim,
        trimmed=trimmed,
    )


# ---------------------------------------------------------------------------
# fill_size
# ---------------------------------------------------------------------------

def test_fill_size_wide_surface_centres_horizontally():
    x, y, w, h, r = fill_size(50, 50, 200, 100)
    assert (x, y, w, h, r) == (50, 0, 100, 100, 2)


def test_fill_size_tall_surface_centres_vertically():
    x, y, w, h, r = fill_size(50, 50, 100, 200)
    assert (x, y, w, h, r) == (0, 50, 100, 100, 2)


def test_fill_size_equal_ratios_fills_exactly():
    assert fill_size(32, 16, 64, 32) == (0, 0, 64, 32, 2)


def test_fill_size_downscale():
    x, y, w, h, r = fill_size(200, 100, 100, 100)
    assert r == 0.5
    assert (w, h) == (100, 50)
    assert y == 25


# ---------------------------------------------------------------------------
# resolve_draw_rect
# ---------------------------------------------------------------------------

def test_fill_canvas_scales_source_size():
    rect = resolve_draw_rect(_frame(16, 16), 64, 64)
    assert rect == DrawRect(0, 0, 64, 64, 4)


def test_native_size_without_fill():
    rect = resolve_draw_rect(_frame(16, 8), 64, 64, fill_canvas=False)
    assert rect == DrawRect(0, 0, 16, 8, 1)


def test_trim_offset_scaled_by_ratio():
    frame = _frame(32, 32, trimmed=True, trim=Point(2, 1))
    rect = resolve_draw_rect(frame, 64, 64)
    assert rect.ratio == 2
    assert (rect.x, rect.y) == (4, 2)
    assert (rect.w, rect.h) == (60, 62)


def test_trim_offset_native_size():
    frame = _frame(32, 32, trimmed=True, trim=Point(3, 5))
    rect = resolve_draw_rect(frame, 100, 100, fill_canvas=False)
    assert rect == DrawRect(3, 5, 29, 27, 1)


def test_untrimmed_frame_ignores_sprite_source_size():
    frame = _frame(32, 32, trimmed=False, trim=Point(3, 5))
    rect = resolve_draw_rect(frame, 32, 32)
    assert rect == DrawRect(0, 0, 32, 32, 1)


@pytest.mark.parametrize("dest", [(64, 32), (32, 64), (48, 48)])
def test_fill_canvas_fits_inside_surface(dest):
    rect = resolve_draw_rect(_frame(20, 30), *dest)
    assert rect.x + rect.w <= dest[0] + 1e-9
    assert rect.y + rect.h <= dest[1] + 1e-9
