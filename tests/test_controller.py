"""Tests for sprite_player/playback/controller.py — the playhead state machine."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sprite_player.playback.controller import PlayheadController
from sprite_player.playback.playhead import PLAYHEAD_DEFAULTS, PlayOptions
from sprite_player.sheet.model import ALL_SCRIPT, SpriteSheetModel


@pytest.fixture
def model(manifest):
    m = SpriteSheetModel()
    m.populate(manifest)
    return m


@pytest.fixture
def painter():
    return MagicMock()


@pytest.fixture
def start_loop():
    return MagicMock()


@pytest.fixture
def controller(model, painter, start_loop):
    c = PlayheadController(model, painter, start_loop=start_loop)
    c.reset_playhead(model.script(ALL_SCRIPT))
    return c


def painted(painter):
    return [c.args[0].index for c in painter.paint.call_args_list]


# ---------------------------------------------------------------------------
# play()
# ---------------------------------------------------------------------------

def test_play_named_script_replaces_playhead(controller, model, start_loop):
    model.add_script("walk", [1, 2, 3])
    controller.playhead.tempo = 3
    controller.play("walk")

    playhead = controller.playhead
    assert [f.index for f in playhead.script] == [1, 2, 3]
    assert playhead.tempo == PLAYHEAD_DEFAULTS.tempo
    assert playhead.run == -1
    assert playhead.current_frame == -1
    assert playhead.play
    start_loop.assert_called_once()


def test_play_options_layer_over_defaults(controller):
    controller.play(ALL_SCRIPT, PlayOptions(delay=80, run=2))
    playhead = controller.playhead
    assert playhead.delay == 80
    assert playhead.run == 2
    assert playhead.tempo == 1


def test_play_inline_entries(controller):
    controller.play([4, {"index": 5, "delay": 10}])
    assert [f.index for f in controller.playhead.script] == [4, 5]
    assert controller.playhead.script[1].delay == 10


def test_play_with_options_only_uses_options_script(controller):
    controller.play(PlayOptions(script=[2, 0], tempo=2))
    assert [f.index for f in controller.playhead.script] == [2, 0]
    assert controller.playhead.tempo == 2


def test_play_with_options_only_keeps_current_script(controller, model):
    controller.play("all", PlayOptions(run=1))
    controller.play(PlayOptions(tempo=2))
    assert len(controller.playhead.script) == len(model.frames)
    assert controller.playhead.run == -1


def test_play_fires_on_play(controller):
    on_play = MagicMock()
    controller.play(ALL_SCRIPT, PlayOptions(on_play=on_play))
    on_play.assert_called_once_with()


def test_play_paused_does_not_start_loop(controller, start_loop):
    controller.play(ALL_SCRIPT, PlayOptions(play=False))
    start_loop.assert_not_called()


def test_unknown_animation_falls_back_to_default(controller, model):
    model.add_script("default", [3])
    controller.play("missing")
    assert [f.index for f in controller.playhead.script] == [3]


def test_unknown_animation_without_default(controller, painter, start_loop, caplog):
    # Scenario: no "missing" and no "default" script
    on_play = MagicMock()
    controller.playhead.on_play = on_play
    controller.play("missing")

    assert controller.playhead.run == 0
    assert controller.playhead.play is False
    painter.paint.assert_not_called()
    start_loop.assert_not_called()
    on_play.assert_not_called()
    assert 'animation "missing" not found' in caplog.text


def test_resume_without_args(controller, start_loop):
    controller.stop()
    controller.playhead.current_frame = 2
    controller.play()
    assert controller.playhead.play
    assert controller.playhead.current_frame == 2
    start_loop.assert_called_once()


def test_resume_exhausted_plays_one_more_pass(controller):
    controller.playhead.run = 0
    controller.playhead.play = False
    controller.play()
    assert controller.playhead.run == 1
    assert controller.playhead.play


def test_resume_stopped_keeps_positive_run(controller):
    controller.playhead.run = 3
    controller.playhead.play = False
    controller.play()
    assert controller.playhead.run == 3


# ---------------------------------------------------------------------------
# Stepping
# ---------------------------------------------------------------------------

def test_next_single_run_stops_after_last_frame(controller, painter):
    # Scenario: [f0, f1, f2], run=1
    on_stop = MagicMock()
    controller.play([0, 1, 2], PlayOptions(run=1, on_stop=on_stop))

    for _ in range(3):
        controller.next()
    assert painted(painter) == [0, 1, 2]

    controller.next()
    assert controller.playhead.current_frame == 0
    assert controller.playhead.run == 0
    assert controller.playhead.play is False
    assert painted(painter) == [0, 1, 2]
    on_stop.assert_called_once_with()


def test_next_infinite_run_never_decrements(controller):
    controller.play([0, 1])
    for _ in range(7):
        controller.next()
    assert controller.playhead.run == -1
    assert controller.playhead.play


def test_reversed_starts_past_the_end(controller, painter):
    # Scenario: reversed script of 3 frames
    controller.play(PlayOptions(script=[0, 1, 2], reversed=True))
    assert controller.playhead.current_frame == 3

    controller.previous()
    assert controller.playhead.current_frame == 2
    assert painted(painter) == [2]


def test_previous_wraps_and_counts_pass(controller, painter):
    controller.play(PlayOptions(script=[0, 1], reversed=True, run=2))
    for _ in range(3):
        controller.previous()
    # 1, 0, wrap -> 1
    assert controller.playhead.run == 1
    assert painted(painter) == [1, 0, 1]


def test_stepping_while_stopped_still_draws(controller, painter):
    controller.play([0, 1, 2], PlayOptions(play=False, run=1))
    for _ in range(4):
        controller.next()
    assert controller.playhead.run == 0
    # play is false, so the wrap does not call stop() and frame 0 is drawn
    assert painted(painter) == [0, 1, 2, 0]


@pytest.mark.parametrize("n, expected", [(0, 0), (2, 2), (3, 0), (-1, 2), (7, 1)])
def test_go_to_wraps(controller, n, expected):
    controller.play([0, 1, 2])
    controller.go_to(n)
    assert controller.playhead.current_frame == expected
    assert controller.current_sprite() == expected


def test_go_to_empty_script(controller, painter, caplog):
    controller.play([])
    controller.go_to(1)
    painter.paint.assert_not_called()
    assert "script is empty" in caplog.text


def test_reverse_toggles(controller):
    assert not controller.is_reversed()
    controller.reverse()
    assert controller.is_reversed()
    controller.reverse()
    assert not controller.is_reversed()


def test_show_sprite_stops_and_draws(controller, painter):
    controller.play(ALL_SCRIPT)
    controller.show_sprite(4)
    assert not controller.is_playing()
    assert controller.current_sprite() == 4
    assert painted(painter) == [4]


def test_show_sprite_unknown_index(controller, painter, caplog):
    controller.show_sprite(42)
    painter.paint.assert_not_called()
    assert "frame not found" in caplog.text


# ---------------------------------------------------------------------------
# Drawing / timing
# ---------------------------------------------------------------------------

def test_next_delay_uses_frame_delay_and_tempo(controller):
    controller.play([0, {"index": 1, "delay": 100}], PlayOptions(tempo=2))
    controller.next()
    assert controller.playhead.next_delay == 25
    controller.next()
    assert controller.playhead.next_delay == 50


def test_zero_frame_delay_is_respected(controller):
    controller.play([{"index": 0, "delay": 0}])
    controller.next()
    assert controller.playhead.next_delay == 0


def test_same_sprite_is_not_repainted(controller, painter):
    on_frame = MagicMock()
    controller.play([1, 1, 2], PlayOptions(on_frame=on_frame))
    for _ in range(3):
        controller.next()
    assert painted(painter) == [1, 2]
    assert [c.args[0] for c in on_frame.call_args_list] == [0, 1, 2]


def test_tempo_accessors(controller):
    controller.set_tempo(0.5)
    assert controller.get_tempo() == 0.5
