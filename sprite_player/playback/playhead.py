"""
Playhead: the live playback state

=============================================================================
REPLACE, DON'T MERGE
=============================================================================

play(script, options) builds a brand-new Playhead. Nothing carries over
from the previous one. The new value is layered in a fixed order, later
layers winning:

    1. PLAYHEAD_DEFAULTS       (delay=50, tempo=1, run=-1, ...)
    2. the selected script
    3. the caller's PlayOptions (only fields that were given)
    4. derived fields           (current_frame: -1, or len(script) reversed)

Between play() calls the controller mutates the playhead in place
(next, previous, go_to, stop, reverse, set_tempo).

=============================================================================
RUN COUNTER
=============================================================================

    run = -1   loop forever (never decremented)
    run = 0    exhausted
    run = N    N more full passes; decremented once per wraparound

=============================================================================
"""

from dataclasses import dataclass, field, fields, replace
from typing import Callable, List, Optional

from ..sheet.frames import ScriptEntry, SpriteFrame

Callback = Optional[Callable[[], None]]


@dataclass
class Playhead:
    play: bool = True
    delay: float = 50                 # default ms per frame
    tempo: float = 1                  # 2 = double speed, .5 = half speed
    run: int = -1
    reversed: bool = False
    script: List[SpriteFrame] = field(default_factory=list)
    last_time: float = 0              # tick time of the last advance
    next_delay: float = 0             # ms until the next advance is allowed
    current_sprite: Optional[int] = None   # catalog index on the surface
    current_frame: int = -1           # position in script
    on_play: Callback = None
    on_stop: Callback = None
    on_frame: Optional[Callable[[int], None]] = None
    on_out_of_view: Callback = None

    def frame_at(self, position: int) -> Optional[SpriteFrame]:
        if 0 <= position < len(self.script):
            return self.script[position]
        return None

    @property
    def current(self) -> Optional[SpriteFrame]:
        return self.frame_at(self.current_frame)


PLAYHEAD_DEFAULTS = Playhead()


@dataclass
class PlayOptions:
    """
    Caller options for play(). None means "not given": the default from
    PLAYHEAD_DEFAULTS applies, never the previous playhead's value.

    script may be a resolved script or raw entries (see SpriteSheetModel).
    """
    play: Optional[bool] = None
    delay: Optional[float] = None
    tempo: Optional[float] = None
    run: Optional[int] = None
    reversed: Optional[bool] = None
    script: Optional[List[ScriptEntry]] = None
    on_play: Callback = None
    on_stop: Callback = None
    on_frame: Optional[Callable[[int], None]] = None
    on_out_of_view: Callback = None

    def given(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)
                if getattr(self, f.name) is not None}


def build_playhead(script: List[SpriteFrame],
                   options: Optional[PlayOptions] = None) -> Playhead:
    """Layer defaults < script < options < derived fields into a new Playhead"""
    given = options.given() if options else {}
    # The resolved script always wins over raw entries in options
    given.pop('script', None)

    playhead = replace(PLAYHEAD_DEFAULTS, script=list(script), **given)
    playhead.current_frame = len(playhead.script) if playhead.reversed else -1
    return playhead
