"""Tests for sprite_player/player.py — load gate and async playback controls."""

from __future__ import annotations

import asyncio
import threading
from unittest.mock import MagicMock

import pytest

from sprite_player.errors import LoadFailure
from sprite_player.playback.playhead import PlayOptions
from sprite_player.playback.scheduler import FrameHost
from sprite_player.player import SheetOptions, SpritePlayer
from sprite_player.renderer.surface import ImageSurface

from conftest import COLORS


def make_player(sheet, host=None, **options):
    options.setdefault("width", 16)
    options.setdefault("height", 16)
    return SpritePlayer(SheetOptions(**options), host=host or FrameHost(),
                        loader=lambda _: sheet)


# ---------------------------------------------------------------------------
# Load gate
# ---------------------------------------------------------------------------

def test_controls_wait_for_load(loaded_sheet):
    release = threading.Event()

    def slow_loader(options):
        release.wait(5)
        return loaded_sheet

    async def scenario():
        player = SpritePlayer(SheetOptions(width=16, height=16), loader=slow_loader)
        try:
            task = asyncio.ensure_future(player.play("all"))
            await asyncio.sleep(0.02)
            assert not task.done()
            assert not player.is_loaded()
        finally:
            release.set()
        await task
        assert player.is_loaded()
        assert player.is_playing()
        assert player.current_sprite() == 0

    asyncio.run(scenario())


def test_default_loader_reads_files(sheet_files):
    async def scenario():
        player = SpritePlayer(SheetOptions(url=str(sheet_files), width=16, height=16))
        await player.wait_loaded()
        assert len(player.model.frames) == 6
        assert player.painter.image.size == (96, 16)

    asyncio.run(scenario())


def test_load_failure_keeps_gate_closed(caplog):
    def failing_loader(options):
        raise LoadFailure("cannot read manifest hero.json")

    async def scenario():
        player = SpritePlayer(SheetOptions(width=16, height=16), loader=failing_loader)
        await player._load_task
        assert not player.is_loaded()
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(player.play("all"), timeout=0.05)

    asyncio.run(scenario())
    assert "sprite sheet load failed" in caplog.text


def test_malformed_frames_fail_the_load(loaded_sheet, caplog):
    loaded_sheet.manifest["frames"] = "nothing"

    async def scenario():
        player = make_player(loaded_sheet)
        await player._load_task
        assert not player.is_loaded()

    asyncio.run(scenario())
    assert "unsupported frames value" in caplog.text


def test_null_frame_rect_fails_the_load(loaded_sheet, caplog):
    loaded_sheet.manifest["frames"][1]["frame"] = None

    async def scenario():
        player = make_player(loaded_sheet)
        await player._load_task
        assert not player.is_loaded()

    asyncio.run(scenario())
    errors = [r for r in caplog.records if r.levelname == "ERROR"]
    assert len(errors) == 1
    assert "'frame' must be an object" in errors[0].getMessage()


def test_non_object_frame_fails_the_load(loaded_sheet, caplog):
    loaded_sheet.manifest["frames"].append("hero_6.png")

    async def scenario():
        player = make_player(loaded_sheet)
        await player._load_task
        assert not player.is_loaded()

    asyncio.run(scenario())
    assert "sprite sheet load failed" in caplog.text


def test_zero_size_frame_is_skipped(loaded_sheet, caplog):
    loaded_sheet.manifest["frames"][0]["sourceSize"] = {"w": 0, "h": 0}

    async def scenario():
        host = FrameHost()
        player = make_player(loaded_sheet, host=host)
        await player.play("all", PlayOptions(delay=10))
        await player.go_to(0)
        assert player.current_sprite() == 0
        assert not player.surface.to_array().any()

        host.pump(10)
        assert player.current_sprite() == 1
        assert tuple(player.surface.to_array()[8, 8]) == COLORS[1]

    asyncio.run(scenario())
    assert "no geometry" in caplog.text


def test_surface_required():
    with pytest.raises(ValueError):
        SpritePlayer(SheetOptions())


# ---------------------------------------------------------------------------
# After load
# ---------------------------------------------------------------------------

def test_on_loaded_and_start_sprite(loaded_sheet):
    on_loaded = MagicMock()

    async def scenario():
        player = make_player(loaded_sheet, start_sprite=3, on_loaded=on_loaded)
        await player.wait_loaded()
        on_loaded.assert_called_once_with()
        assert player.current_sprite() == 3
        assert tuple(player.surface.to_array()[8, 8]) == COLORS[3]

    asyncio.run(scenario())


def test_start_sprite_out_of_range(loaded_sheet):
    async def scenario():
        player = make_player(loaded_sheet, start_sprite=10)
        await player.wait_loaded()
        assert player.current_sprite() is None

    asyncio.run(scenario())


def test_scripted_animation_with_throttle(loaded_sheet):
    # walk = [index 2, index 5 (delay 100)] at tempo 2
    async def scenario():
        host = FrameHost()
        player = make_player(loaded_sheet, host=host)
        player.add_script("walk", [{"index": 2}, {"index": 5, "delay": 100}])

        await player.play("walk", PlayOptions(delay=100, tempo=2))
        assert player.current_sprite() == 2
        assert tuple(player.surface.to_array()[8, 8]) == COLORS[2]

        host.pump(30)
        assert player.current_sprite() == 2

        host.pump(50)
        assert player.current_sprite() == 5
        assert tuple(player.surface.to_array()[8, 8]) == COLORS[5]

    asyncio.run(scenario())


def test_option_animations(loaded_sheet):
    async def scenario():
        player = make_player(loaded_sheet, animations={"jump": [4, 5]})
        await player.play("jump")
        assert player.current_sprite() == 4

    asyncio.run(scenario())


def test_stepping_controls(loaded_sheet):
    async def scenario():
        player = make_player(loaded_sheet)
        await player.play("all", PlayOptions(play=False))

        await player.next()
        await player.next()
        assert player.current_sprite() == 1
        await player.previous()
        assert player.current_sprite() == 0
        await player.go_to(-1)
        assert player.current_sprite() == 5
        await player.reset()
        assert player.current_sprite() == 0

        await player.reverse()
        assert player.is_reversed()
        await player.set_tempo(3)
        assert player.get_tempo() == 3

        await player.show_sprite(2)
        assert player.current_sprite() == 2
        assert not player.is_playing()

    asyncio.run(scenario())


def test_stop_control(loaded_sheet):
    async def scenario():
        player = make_player(loaded_sheet)
        await player.play("all")
        assert player.is_playing()
        await player.stop()
        assert not player.is_playing()

    asyncio.run(scenario())


# ---------------------------------------------------------------------------
# destroy()
# ---------------------------------------------------------------------------

def test_destroy_clears_created_surface(loaded_sheet):
    async def scenario():
        host = FrameHost()
        player = make_player(loaded_sheet, host=host)
        await player.play("all")
        assert player.surface.to_array().any()

        player.destroy()
        assert not player.is_playing()
        assert not player.surface.to_array().any()

        host.pump(100)
        assert host.pending == 0

    asyncio.run(scenario())


def test_destroy_leaves_caller_surface(loaded_sheet):
    async def scenario():
        surface = ImageSurface(16, 16)
        player = SpritePlayer(SheetOptions(), surface=surface, loader=lambda _: loaded_sheet)
        await player.play("all")
        player.destroy()
        assert surface.to_array().any()

    asyncio.run(scenario())


def test_destroy_cancels_pending_load(loaded_sheet):
    release = threading.Event()

    def slow_loader(options):
        release.wait(5)
        return loaded_sheet

    async def scenario():
        player = SpritePlayer(SheetOptions(width=16, height=16), loader=slow_loader)
        await asyncio.sleep(0)
        try:
            player.destroy()
            with pytest.raises(asyncio.CancelledError):
                await player._load_task
        finally:
            release.set()
        assert not player.is_loaded()

    asyncio.run(scenario())
