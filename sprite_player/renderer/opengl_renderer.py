"""
OpenGL renderer for the sprite player viewer (GLFW version)

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

The player never talks to OpenGL. It draws into an ImageSurface; this
renderer shows that surface in the window:

    SpritePlayer --draws--> ImageSurface --upload--> Texture --> window

1. begin_frame()          clear the window
2. present(surface)       re-upload if the surface changed, draw one quad
                          letterboxed into the window (same fit rule as
                          fill-canvas mode)
3. (GLFW swaps buffers externally)

=============================================================================
PROJECTION
=============================================================================

Orthographic, in window pixels, Y pointing DOWN:

    (0,0) ----------> x = screen_width
      |
      v
    y = screen_height

=============================================================================
"""

from typing import Optional, Tuple

import numpy as np
from OpenGL.GL import *
from OpenGL.GL.shaders import compileProgram, compileShader

from .geometry import fill_size
from .sprite_batch import SpriteBatch
from .surface import ImageSurface
from .texture import Texture
from ..shaders.sources import VERTEX_SHADER, FRAGMENT_SHADER

BACKGROUND = (0.15, 0.15, 0.15, 1.0)


class OpenGLRenderer:
    """
    Presents an ImageSurface in a GLFW window.

    The OpenGL context must exist before this class is instantiated
    (GLFW creates it).
    """

    def __init__(self, screen_width: int, screen_height: int, logger=None):
        self.screen_width = screen_width
        self.screen_height = screen_height

        self._init_shaders()
        self.batch = SpriteBatch()
        self._init_state()

        self.texture: Optional[Texture] = None
        self._texture_version = -1

        if logger:
            logger.info("OpenGL Renderer: %s", glGetString(GL_VERSION).decode())

    # =========================================================================
    # INITIALIZATION METHODS
    # =========================================================================

    def _init_shaders(self):
        self.shader_program = compileProgram(
            compileShader(VERTEX_SHADER, GL_VERTEX_SHADER),
            compileShader(FRAGMENT_SHADER, GL_FRAGMENT_SHADER)
        )
        # Cached once, looking uniforms up by name every frame is wasteful
        self.proj_loc = glGetUniformLocation(self.shader_program, "u_projection")
        self.tex_loc = glGetUniformLocation(self.shader_program, "u_surface")

    def _init_state(self):
        self.projection = np.eye(4, dtype=np.float32)
        self.update_projection()

        # Standard alpha blending for transparent sprite pixels
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glDisable(GL_DEPTH_TEST)
        glDisable(GL_CULL_FACE)

    def _ortho_matrix(self, left: float, right: float, bottom: float,
                      top: float, near: float, far: float) -> np.ndarray:
        """Orthographic projection: [left,right]x[bottom,top] -> [-1,1]"""
        mat = np.zeros((4, 4), dtype=np.float32)
        mat[0, 0] = 2.0 / (right - left)
        mat[1, 1] = 2.0 / (top - bottom)
        mat[2, 2] = -2.0 / (far - near)
        mat[3, 3] = 1.0
        mat[0, 3] = -(right + left) / (right - left)
        mat[1, 3] = -(top + bottom) / (top - bottom)
        mat[2, 3] = -(far + near) / (far - near)
        return mat

    def update_projection(self):
        self.projection = self._ortho_matrix(
            0, self.screen_width,           # X range: 0 to width
            self.screen_height, 0,          # Y range: height to 0 (Y-down!)
            -1, 1
        )

    # =========================================================================
    # DRAWING
    # =========================================================================

    def begin_frame(self):
        glClearColor(*BACKGROUND)
        glClear(GL_COLOR_BUFFER_BIT)

    def sync_texture(self, surface: ImageSurface) -> Texture:
        """Upload the surface pixels if they changed since the last upload"""
        if self.texture is None or (self.texture.width, self.texture.height) != surface.image.size:
            self.texture = Texture.from_pil(surface.image)
            self._texture_version = surface.version
        elif surface.version != self._texture_version:
            self.texture.update(surface.image)
            self._texture_version = surface.version
        return self.texture

    def surface_rect(self, surface: ImageSurface) -> Tuple[float, float, float, float]:
        """Window rectangle the surface is letterboxed into"""
        x, y, w, h, _ = fill_size(surface.width, surface.height,
                                  self.screen_width, self.screen_height)
        return x, y, w, h

    def present(self, surface: ImageSurface):
        texture = self.sync_texture(surface)
        x, y, w, h = self.surface_rect(surface)

        glUseProgram(self.shader_program)
        glUniformMatrix4fv(self.proj_loc, 1, GL_FALSE, self.projection.T)
        glUniform1i(self.tex_loc, 0)

        self.batch.begin(texture)
        self.batch.add_sprite(x, y, w, h)
        self.batch.flush()

        glUseProgram(0)

    # =========================================================================
    # WINDOW MANAGEMENT
    # =========================================================================

    def resize(self, width: int, height: int):
        # Minimized windows report a 0x0 framebuffer
        if width <= 0 or height <= 0:
            return
        self.screen_width = width
        self.screen_height = height
        glViewport(0, 0, width, height)
        self.update_projection()
