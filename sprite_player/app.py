"""
Sprite Player - Viewer Application (GLFW Version)

The window is the host of the animation loop: every iteration pumps the
FrameHost with glfw's clock (ms), then presents the player surface.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Set

import glfw
from OpenGL.GL import GL_TRUE

from .player import SheetOptions, SpritePlayer
from .playback.playhead import PlayOptions
from .playback.scheduler import FrameHost, Visibility
from .renderer.opengl_renderer import OpenGLRenderer
from .renderer.surface import ImageSurface

logger = logging.getLogger(__name__)

DEFAULT_SURFACE_SIZE = 256
TEMPO_STEP = 1.25


class WindowVisibility(Visibility):
    """A window counts as rendered when shown and not minimized"""

    def __init__(self, window):
        self.window = window

    def is_rendered(self) -> bool:
        return (bool(glfw.get_window_attrib(self.window, glfw.VISIBLE))
                and not glfw.get_window_attrib(self.window, glfw.ICONIFIED))

    def in_viewport(self) -> bool:
        width, height = glfw.get_framebuffer_size(self.window)
        return width > 0 and height > 0


class SpriteViewer:
    """Main sprite player application - GLFW version"""

    def __init__(self, options: SheetOptions, script: Optional[str] = None,
                 play_options: Optional[PlayOptions] = None,
                 logger: logging.Logger = logger):
        self.options = options
        self.script = script
        self.play_options = play_options
        self.logger = logger
        self.screen_width = 640
        self.screen_height = 640

        # Initialize GLFW
        if not glfw.init():
            raise RuntimeError("Could not initialize GLFW")

        # Request OpenGL 3.3 Core
        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
        glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
        glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, GL_TRUE)
        glfw.window_hint(glfw.RESIZABLE, GL_TRUE)

        # Create window
        self.title = f"Sprite Player - {Path(options.url).name}"
        self.window = glfw.create_window(
            self.screen_width, self.screen_height, self.title, None, None
        )
        if not self.window:
            glfw.terminate()
            raise RuntimeError("Could not create GLFW window")

        glfw.make_context_current(self.window)
        glfw.swap_interval(1)  # VSync

        glfw.set_key_callback(self.window, self._key_callback)
        glfw.set_framebuffer_size_callback(self.window, self._resize_callback)

        width, height = glfw.get_framebuffer_size(self.window)
        self.renderer = OpenGLRenderer(width, height, logger=logger)

        # The player draws into this; the renderer shows it
        self.surface = ImageSurface(options.width or DEFAULT_SURFACE_SIZE,
                                    options.height or DEFAULT_SURFACE_SIZE)
        self.host = FrameHost(clock=lambda: glfw.get_time() * 1000.0)
        self.visibility = WindowVisibility(self.window)
        self.player: Optional[SpritePlayer] = None

        # Keep references so pending controls aren't garbage collected
        self._tasks: Set[asyncio.Task] = set()
        self.running = True

        self.logger.info("Space: Play/Stop | Left/Right: Step | R: Reverse | "
                         "Up/Down: Tempo | Home: First frame | ESC/Q: Quit")

    # === GLFW Callbacks ===

    def _key_callback(self, window, key, scancode, action, mods):
        if action == glfw.PRESS:
            self._handle_key_action(key)

    def _handle_key_action(self, key):
        """Map single key presses to playback controls"""
        player = self.player
        if key in (glfw.KEY_ESCAPE, glfw.KEY_Q):
            self.running = False
        elif player is None:
            return
        elif key == glfw.KEY_SPACE:
            if player.is_playing():
                self._spawn(player.stop())
            else:
                self._spawn(player.play())
        elif key == glfw.KEY_RIGHT:
            self._spawn(player.next())
        elif key == glfw.KEY_LEFT:
            self._spawn(player.previous())
        elif key == glfw.KEY_R:
            self._spawn(player.reverse())
        elif key == glfw.KEY_UP:
            self._spawn(player.set_tempo(player.get_tempo() * TEMPO_STEP))
        elif key == glfw.KEY_DOWN:
            self._spawn(player.set_tempo(player.get_tempo() / TEMPO_STEP))
        elif key == glfw.KEY_HOME:
            self._spawn(player.reset())

    def _resize_callback(self, window, width, height):
        self.renderer.resize(width, height)

    def _spawn(self, coro):
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # === Main loop ===

    def _update_title(self):
        player = self.player
        if player is None or not player.is_loaded():
            return
        state = "playing" if player.is_playing() else "stopped"
        glfw.set_window_title(
            self.window,
            f"{self.title} [{state}, sprite {player.current_sprite()}, "
            f"tempo {player.get_tempo():.2f}]"
        )

    async def run(self):
        """Main application loop"""
        self.player = SpritePlayer(
            self.options, surface=self.surface, host=self.host,
            visibility=self.visibility, logger=self.logger
        )
        self._spawn(self.player.play(self.script, self.play_options))

        frame_count = 0
        try:
            while self.running and not glfw.window_should_close(self.window):
                glfw.poll_events()
                self.host.pump()

                self.renderer.begin_frame()
                self.renderer.present(self.surface)
                glfw.swap_buffers(self.window)

                frame_count += 1
                if frame_count % 30 == 0:
                    self._update_title()

                # Let the asset load and pending controls run
                await asyncio.sleep(0)
        finally:
            self.player.destroy()
            for task in list(self._tasks):
                task.cancel()
            glfw.terminate()
