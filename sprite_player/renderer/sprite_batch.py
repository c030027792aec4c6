"""
Sprite batching for the viewer

=============================================================================
WHY A BATCH FOR A HANDFUL OF QUADS?
=============================================================================

The viewer draws very little (the player surface, scaled into the
window), but it draws it every frame. Keeping the vertex array on the CPU
in a preallocated numpy buffer and uploading it with one
glBufferSubData per flush keeps the per-frame cost flat, and lets the
viewer add more quads later (several surfaces, a backdrop) without
touching the GL setup.

=============================================================================
VERTEX LAYOUT
=============================================================================

Each vertex is 8 floats (32 bytes):

    Offset (bytes):  0    8    16
                     |    |    |
    Data:           [x,y][u,v][r   ,g   ,b   ,a  ]
    Attribute:        0    1           2

Each quad is 4 vertices and 6 indices (two triangles):

    0-------1
    |     / |      0, 1, 2  and  0, 2, 3
    |   /   |
    3-------2

=============================================================================
"""

import ctypes
from typing import Optional, Tuple

import numpy as np
from OpenGL.GL import *

from .texture import Texture


class SpriteBatch:
    """Accumulates textured quads and draws them in a single call"""

    FLOATS_PER_VERTEX = 8
    VERTICES_PER_SPRITE = 4
    INDICES_PER_SPRITE = 6

    def __init__(self, max_sprites: int = 64):
        self.max_sprites = max_sprites
        self.sprite_count = 0

        self.vertices = np.zeros(
            max_sprites * self.VERTICES_PER_SPRITE * self.FLOATS_PER_VERTEX,
            dtype=np.float32
        )
        self.indices = self._create_indices(max_sprites)
        self.current_texture: Optional[Texture] = None

        self._setup_buffers()

    def _create_indices(self, max_sprites: int) -> np.ndarray:
        """Index buffer 0,1,2,0,2,3 per quad, generated once"""
        base = np.arange(max_sprites, dtype=np.uint32)[:, None] * 4
        pattern = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)
        return (base + pattern).ravel()

    def _setup_buffers(self):
        self.vao = glGenVertexArrays(1)
        self.vbo = glGenBuffers(1)
        self.ebo = glGenBuffers(1)

        glBindVertexArray(self.vao)

        glBindBuffer(GL_ARRAY_BUFFER, self.vbo)
        glBufferData(GL_ARRAY_BUFFER, self.vertices.nbytes, None, GL_DYNAMIC_DRAW)

        stride = self.FLOATS_PER_VERTEX * 4

        # Position (x, y)
        glEnableVertexAttribArray(0)
        glVertexAttribPointer(0, 2, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(0))

        # Texture coords (u, v)
        glEnableVertexAttribArray(1)
        glVertexAttribPointer(1, 2, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(8))

        # Color (r, g, b, a)
        glEnableVertexAttribArray(2)
        glVertexAttribPointer(2, 4, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(16))

        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self.ebo)
        glBufferData(GL_ELEMENT_ARRAY_BUFFER, self.indices.nbytes,
                     self.indices, GL_STATIC_DRAW)

        glBindVertexArray(0)

    def begin(self, texture: Texture):
        """Start a batch; every quad until flush() uses this texture"""
        self.sprite_count = 0
        self.current_texture = texture

    def add_sprite(self, x: float, y: float, width: float, height: float,
                   color: Tuple[float, float, float, float] = (1, 1, 1, 1)) -> bool:
        """
        Add a quad covering the whole texture.

        V is flipped (1 at the top edge) because the texture rows were
        flipped on upload.

        Returns False when the batch is full.
        """
        if self.sprite_count >= self.max_sprites:
            return False

        idx = self.sprite_count * self.VERTICES_PER_SPRITE * self.FLOATS_PER_VERTEX
        r, g, b, a = color

        self.vertices[idx:idx + 32] = [
            x, y,                   0.0, 1.0, r, g, b, a,
            x + width, y,           1.0, 1.0, r, g, b, a,
            x + width, y + height,  1.0, 0.0, r, g, b, a,
            x, y + height,          0.0, 0.0, r, g, b, a,
        ]

        self.sprite_count += 1
        return True

    def flush(self):
        if self.sprite_count == 0:
            return

        if self.current_texture:
            self.current_texture.bind(0)

        count = self.sprite_count * self.VERTICES_PER_SPRITE * self.FLOATS_PER_VERTEX
        glBindBuffer(GL_ARRAY_BUFFER, self.vbo)
        glBufferSubData(GL_ARRAY_BUFFER, 0, count * 4, self.vertices[:count])

        glBindVertexArray(self.vao)
        glDrawElements(
            GL_TRIANGLES,
            self.sprite_count * self.INDICES_PER_SPRITE,
            GL_UNSIGNED_INT,
            None
        )
        glBindVertexArray(0)

        self.sprite_count = 0
