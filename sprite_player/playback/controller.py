"""
Playhead controller: the playback state machine

=============================================================================
STATES
=============================================================================

    IDLE       play = False
    PLAYING    play = True, the scheduler advances frames
    EXHAUSTED  run = 0

    IDLE --play()--> PLAYING --stop()--> IDLE
    PLAYING --last pass wraps (run 1 -> 0)--> stop() -> IDLE + EXHAUSTED
    EXHAUSTED --play()--> PLAYING with run = 1 (plays one more pass)

=============================================================================
STEPPING
=============================================================================

Forward, script of 3 frames, run = 1:

    current_frame: -1 -> 0 -> 1 -> 2 -> (3 = len, wrap) 0, run 1 -> 0
    draws:              f0   f1   f2    stop() instead of drawing

A reversed playhead starts at the sentinel len(script), so the first
previous() lands on the last frame.

=============================================================================
These methods are synchronous. SpritePlayer wraps them in coroutines that
wait for the sheet to load; RenderScheduler calls them directly from its
tick, which only runs once the sheet is loaded.
=============================================================================
"""

import logging
from typing import Callable, List, Optional, Sequence, Union

from ..errors import AnimationNotFound, FrameNotFound
from ..renderer.painter import FramePainter
from ..sheet.frames import ScriptEntry, SpriteFrame
from ..sheet.model import SpriteSheetModel
from .playhead import Playhead, PlayOptions, build_playhead

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT = 'default'


class PlayheadController:
    """Owns the Playhead and implements every playback operation on it"""

    def __init__(self, model: SpriteSheetModel, painter: FramePainter,
                 start_loop: Callable[[], None] = None,
                 logger: logging.Logger = logger):
        self.model = model
        self.painter = painter
        self.start_loop = start_loop
        self.logger = logger
        self.playhead: Playhead = build_playhead([])

    def reset_playhead(self, script: List[SpriteFrame]):
        """Defaults + script, without starting anything (used after load)"""
        self.playhead = build_playhead(script)

    # =========================================================================
    # PLAY / STOP
    # =========================================================================

    def play(self, script: Union[str, Sequence[ScriptEntry], PlayOptions, None] = None,
             options: Optional[PlayOptions] = None):
        """
        Resume, or start a script.

        Call forms:
        -----------
        play()                  resume the current playhead
        play("walk")            play a named script with default options
        play("walk", options)   named script with options
        play([entries], opts)   inline script
        play(options)           options.script, or the current script

        An unknown name falls back to the "default" script. With no
        fallback either, the playhead is forced to run=0/play=False and
        nothing starts.
        """
        if script is None and options is None:
            playhead = self.playhead
            if not playhead.play:
                if playhead.run == 0:
                    playhead.run = 1
                playhead.play = True
        else:
            if isinstance(script, PlayOptions):
                options = script
                script = None

            resolved = self._resolve_script(script, options)
            if resolved is None:
                self.playhead.run = 0
                self.playhead.play = False
                return

            self.playhead = build_playhead(resolved, options)

        if self.playhead.run != 0 and self.playhead.play and self.start_loop:
            self.start_loop()

        if self.playhead.on_play:
            self.playhead.on_play()

    def _resolve_script(self, script, options: Optional[PlayOptions]
                        ) -> Optional[List[SpriteFrame]]:
        resolved = None

        if isinstance(script, str):
            try:
                resolved = self.model.script(script)
                self.logger.debug('playing animation "%s"', script)
            except AnimationNotFound as e:
                self.logger.warning("%s", e)
        elif script is not None:
            resolved = self.model.build_script(script)
        elif options is not None and options.script is not None:
            resolved = self.model.build_script(options.script)
        else:
            resolved = self.playhead.script

        if resolved is None:
            if self.model.has_script(DEFAULT_SCRIPT):
                self.logger.debug('playing animation "%s"', DEFAULT_SCRIPT)
                resolved = self.model.script(DEFAULT_SCRIPT)
        return resolved

    def stop(self):
        self.playhead.play = False
        if self.playhead.on_stop:
            self.playhead.on_stop()

    # =========================================================================
    # STEPPING
    # =========================================================================

    def next(self):
        playhead = self.playhead
        playhead.current_frame += 1

        if playhead.current_frame >= len(playhead.script):
            playhead.current_frame = 0
            self._count_pass()

        self._advance_done()

    def previous(self):
        playhead = self.playhead
        playhead.current_frame -= 1

        if playhead.current_frame < 0:
            playhead.current_frame = len(playhead.script) - 1
            self._count_pass()

        self._advance_done()

    def _count_pass(self):
        # -1 (infinite) and 0 (exhausted) are never decremented
        if self.playhead.run > 0:
            self.playhead.run -= 1

    def _advance_done(self):
        playhead = self.playhead
        if playhead.play and playhead.run == 0:
            self.stop()
            return

        frame = playhead.current
        if frame is None:
            self.logger.warning("script is empty, nothing to draw")
            return
        self.draw_frame(frame)

    def go_to(self, frame_number: int):
        """Jump to a script position; any integer wraps into the script"""
        playhead = self.playhead
        if not playhead.script:
            self.logger.warning("cannot go to frame %s: script is empty", frame_number)
            return

        # Python's % is floored: -1 -> len - 1, len -> 0
        playhead.current_frame = int(frame_number) % len(playhead.script)
        frame = playhead.current
        self.logger.debug("frame: %d, index: %s", playhead.current_frame, frame.index)
        self.draw_frame(frame)

    def reverse(self):
        self.playhead.reversed = not self.playhead.reversed

    def show_sprite(self, index: int):
        """Stop and show one catalog frame (by catalog index)"""
        self.playhead.play = False
        try:
            frame = self.model.frame_by_index(index)
        except FrameNotFound as e:
            self.logger.warning("%s", e)
            return
        self.draw_frame(frame)

    # =========================================================================
    # TEMPO / STATE
    # =========================================================================

    def set_tempo(self, tempo: float):
        self.playhead.tempo = tempo

    def get_tempo(self) -> float:
        return self.playhead.tempo

    def is_playing(self) -> bool:
        return self.playhead.play

    def is_reversed(self) -> bool:
        return self.playhead.reversed

    def current_sprite(self) -> Optional[int]:
        return self.playhead.current_sprite

    # =========================================================================
    # DRAWING
    # =========================================================================

    def draw_frame(self, frame: SpriteFrame):
        """
        Show a frame and schedule the next advance.

        The surface is only touched when the frame's catalog index differs
        from the one already shown. on_frame fires either way.
        """
        playhead = self.playhead
        self.logger.debug("frame %s", frame)

        delay = frame.delay if frame.delay is not None else playhead.delay
        playhead.next_delay = delay / playhead.tempo

        if frame.index != playhead.current_sprite:
            playhead.current_sprite = frame.index
            self.painter.paint(frame)

        if playhead.on_frame:
            playhead.on_frame(playhead.current_frame)
