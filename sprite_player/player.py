"""
SpritePlayer: one animated sprite sheet on one surface

=============================================================================
THE LOAD GATE
=============================================================================

Construction starts the asset load in the background and creates ONE
asyncio.Event, set exactly once when the load completes. Every playback
control is a coroutine that waits on it first:

    player = SpritePlayer(SheetOptions(url="hero.json", width=64, height=64))
    await player.play("walk")      # suspends until hero.json/png are in

Waiting yields to the event loop, it never blocks a thread. Once the gate
is open each control runs to completion without further awaits.

If the load fails the error is logged and the gate stays closed: every
control waits forever. There is no timeout.

There is no locking past the gate. When two controls are awaited at once
the one that runs last wins.

=============================================================================
USAGE EXAMPLE
=============================================================================

```python
host = FrameHost(clock=lambda: glfw.get_time() * 1000)
player = SpritePlayer(options, surface=surface, host=host)

player.add_script("wave", [4, 5, {"index": 6, "delay": 200}, 5])
await player.play("wave", PlayOptions(run=3, tempo=1.5))

# host loop
while running:
    host.pump()
    ...
```

=============================================================================
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Union

from .errors import LoadFailure
from .playback.controller import PlayheadController
from .playback.playhead import PlayOptions
from .playback.scheduler import FrameHost, RenderScheduler, Visibility
from .renderer.painter import FramePainter
from .renderer.surface import ImageSurface, Surface
from .sheet.frames import ScriptEntry
from .sheet.loader import LoadedSheet, load_sheet
from .sheet.model import ALL_SCRIPT, SpriteSheetModel

logger = logging.getLogger(__name__)


@dataclass
class SheetOptions:
    """
    Sprite sheet configuration.

    url:          path to the JSON manifest
    image_url:    sheet image path, overrides the manifest's meta.image
    width/height: size of the surface to create when none is given
    start_sprite: catalog index (0-based) to show as soon as the sheet is loaded
    fill_canvas:  scale frames to fit the surface (False = native size)
    animations:   named scripts, built once the sheet is loaded
    on_loaded:    called once after the sheet is loaded
    """
    url: Optional[str] = None
    image_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    start_sprite: Optional[int] = None
    fill_canvas: bool = True
    animations: Dict[str, List[ScriptEntry]] = field(default_factory=dict)
    on_loaded: Optional[Callable[[], None]] = None


Loader = Callable[[SheetOptions], LoadedSheet]


def default_loader(options: SheetOptions) -> LoadedSheet:
    return load_sheet(options.url, options.image_url)


class SpritePlayer:
    """
    Plays scripted frame sequences of one sprite sheet on one surface.

    Must be constructed while an asyncio event loop is running (the
    asset load is scheduled on it).
    """

    def __init__(self, options: SheetOptions, surface: Optional[Surface] = None,
                 host: Optional[FrameHost] = None,
                 visibility: Optional[Visibility] = None,
                 loader: Loader = default_loader,
                 logger: logging.Logger = logger):
        self.options = options
        self.logger = logger

        # -----------------------------------------------------------------
        # SURFACE
        # -----------------------------------------------------------------
        # A surface we create is ours to clear on destroy(); a caller's
        # surface is left as it is.
        if surface is None:
            if not options.width or not options.height:
                raise ValueError("no surface given and no width/height to create one")
            surface = ImageSurface(options.width, options.height)
            self.created_surface = True
        else:
            self.created_surface = False
        self.surface = surface

        # -----------------------------------------------------------------
        # COMPONENTS
        # -----------------------------------------------------------------
        self.host = host or FrameHost()
        self.model = SpriteSheetModel(logger=logger)
        self.painter = FramePainter(surface, options.fill_canvas, logger=logger)
        self.controller = PlayheadController(
            self.model, self.painter, start_loop=self._start_loop, logger=logger
        )
        self.scheduler = RenderScheduler(
            self.controller, self.host, visibility,
            is_ready=self.is_loaded, logger=logger
        )

        # -----------------------------------------------------------------
        # LOAD GATE
        # -----------------------------------------------------------------
        self._loaded = asyncio.Event()
        self._loader = loader
        self._load_task = asyncio.get_running_loop().create_task(self._load())

    # =========================================================================
    # LOADING
    # =========================================================================

    async def _load(self):
        try:
            sheet = await asyncio.to_thread(self._loader, self.options)
            # Malformed frames or script entries surface here as
            # ValueError/TypeError
            self.model.populate(sheet.manifest, self.options.animations)
        except (LoadFailure, ValueError, TypeError) as e:
            self.logger.error("sprite sheet load failed: %s", e)
            return

        self.painter.image = sheet.image
        self.controller.reset_playhead(self.model.script(ALL_SCRIPT))
        self._loaded.set()

        start = self.options.start_sprite
        if start is not None and 0 <= start < len(self.model.frames):
            self.controller.draw_frame(self.model.frame_by_index(start))

        if self.options.on_loaded:
            self.options.on_loaded()

    def is_loaded(self) -> bool:
        return self._loaded.is_set()

    async def wait_loaded(self):
        await self._loaded.wait()

    def _start_loop(self):
        self.scheduler.start()

    # =========================================================================
    # SCRIPTS
    # =========================================================================

    def add_script(self, name: str, script: Sequence[ScriptEntry]):
        """Register a named script (resolved now, or once the sheet loads)"""
        self.model.add_script(name, script)

    # =========================================================================
    # PLAYBACK CONTROLS
    # =========================================================================

    async def play(self, script: Union[str, Sequence[ScriptEntry], PlayOptions, None] = None,
                   options: Optional[PlayOptions] = None):
        """See PlayheadController.play for the call forms"""
        await self._loaded.wait()
        self.controller.play(script, options)

    async def stop(self):
        await self._loaded.wait()
        self.controller.stop()

    async def next(self):
        await self._loaded.wait()
        self.controller.next()

    async def previous(self):
        await self._loaded.wait()
        self.controller.previous()

    async def go_to(self, frame_number: int):
        await self._loaded.wait()
        self.controller.go_to(frame_number)

    async def reset(self):
        await self._loaded.wait()
        self.controller.go_to(0)

    async def reverse(self):
        await self._loaded.wait()
        self.controller.reverse()

    async def set_tempo(self, tempo: float):
        await self._loaded.wait()
        self.controller.set_tempo(tempo)

    async def show_sprite(self, index: int):
        await self._loaded.wait()
        self.controller.show_sprite(index)

    # =========================================================================
    # STATE
    # =========================================================================

    def current_sprite(self) -> Optional[int]:
        return self.controller.current_sprite()

    def is_playing(self) -> bool:
        return self.controller.is_playing()

    def is_reversed(self) -> bool:
        return self.controller.is_reversed()

    def get_tempo(self) -> float:
        return self.controller.get_tempo()

    def destroy(self):
        """
        Stop playing for good.

        A pending load is cancelled. The loop is not preempted: its next
        tick sees play = False and ends it. A surface the player created
        is cleared.
        """
        if not self._load_task.done():
            self._load_task.cancel()
        self.controller.playhead.play = False
        if self.created_surface:
            self.surface.clear(0, 0, self.surface.width, self.surface.height)
