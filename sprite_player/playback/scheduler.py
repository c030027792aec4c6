"""
Render scheduler: the timing-gated animation loop

=============================================================================
HOST-DRIVEN TIMING
=============================================================================

The scheduler never sleeps and never owns a clock. A host (the GLFW
viewer, a test) calls FrameHost.pump(time) once per rendered frame; every
callback requested since the previous pump runs with that timestamp (ms).
This is the same "request animation frame" contract a browser gives:

    tick(t) -> request_frame(tick) -> ... host renders ... -> tick(t')

=============================================================================
THROTTLE vs VISIBILITY
=============================================================================

Each tick asks two separate questions:

    1. Is it time?        t - last_time >= next_delay
    2. Should we render?  surface rendered AND in viewport

Only when both hold does the playhead advance. When it is time but the
surface is hidden, on_out_of_view fires and NOTHING advances: the run
budget is kept for when the surface shows up again.

This is a minimum interval, not a fixed frame rate: at 60 Hz a 50 ms
delay advances on the first tick at or after 50 ms, i.e. every 3rd tick.

=============================================================================
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from .controller import PlayheadController

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameHost:
    """
    Animation-frame callback queue.

    Callbacks requested while a pump is running are NOT run by that pump;
    they wait for the next one, so a callback that re-requests itself runs
    once per host frame.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock
        self.time = 0.0
        self._next_handle = 0
        self._pending: Dict[int, FrameCallback] = {}

    def now(self) -> float:
        """Current host time in ms"""
        if self.clock is not None:
            return self.clock()
        return self.time

    def request_frame(self, callback: FrameCallback) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel_frame(self, handle: int):
        self._pending.pop(handle, None)

    def pump(self, time: Optional[float] = None) -> int:
        """Run every pending callback with `time`; returns how many ran"""
        self.time = self.now() if time is None else time
        batch: List[Tuple[int, FrameCallback]] = list(self._pending.items())
        self._pending.clear()
        for _, callback in batch:
            callback(self.time)
        return len(batch)

    @property
    def pending(self) -> int:
        return len(self._pending)


class Visibility:
    """Visibility oracle. Always visible unless a host says otherwise."""

    def is_rendered(self) -> bool:
        return True

    def in_viewport(self) -> bool:
        return True


class RenderScheduler:
    """Ticks a PlayheadController from host frames, one loop at a time"""

    def __init__(self, controller: PlayheadController, host: FrameHost,
                 visibility: Optional[Visibility] = None,
                 is_ready: Optional[Callable[[], bool]] = None,
                 logger: logging.Logger = logger):
        self.controller = controller
        self.host = host
        self.visibility = visibility or Visibility()
        self.is_ready = is_ready or (lambda: True)
        self.logger = logger
        self._handle: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self):
        """
        Advance now and keep the loop going.

        With no loop scheduled this is an immediate tick. With one already
        pending, the step runs now (a freshly built playhead is always due)
        and the pending tick carries on; no second loop is started.
        """
        if self._handle is None:
            self.tick(self.host.now())
        elif self.is_ready():
            self._step(self.host.now())

    def cancel(self):
        if self._handle is not None:
            self.host.cancel_frame(self._handle)
            self._handle = None

    def tick(self, time: float):
        # Reschedule first: the loop continues unless cancelled below
        handle = self.host.request_frame(self.tick)
        self._handle = handle

        if not self.is_ready():
            return

        self._step(time)

        if not self.controller.playhead.play:
            self.host.cancel_frame(handle)
            self._handle = None

    def _step(self, time: float):
        playhead = self.controller.playhead
        if time - playhead.last_time >= playhead.next_delay:
            self.render(time)

    def render(self, time: float):
        playhead = self.controller.playhead

        if self.visibility.is_rendered() and self.visibility.in_viewport():
            if playhead.run != 0:
                if playhead.reversed:
                    self.controller.previous()
                else:
                    self.controller.next()

                self.logger.debug("run: %s, frame: %s", playhead.run, playhead.current_frame)
                playhead.last_time = time
        elif playhead.on_out_of_view:
            playhead.on_out_of_view()
