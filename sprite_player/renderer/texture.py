"""
OpenGL texture for the player surface (GLFW version - uses PIL)

=============================================================================
ONE TEXTURE, MANY UPDATES
=============================================================================

The player draws frames into a PIL image (ImageSurface). The viewer shows
that image through a single texture of the same size:

    ImageSurface.version changes  ->  Texture.update(surface.image)
                                       (glTexSubImage2D, same storage)

The texture storage is allocated once with glTexImage2D. Updates reuse
it, which is much cheaper than creating a new texture per frame.

=============================================================================
COORDINATE SYSTEMS
=============================================================================

PIL images have their origin at the TOP-left, OpenGL textures at the
BOTTOM-left. Pixel rows are flipped on upload and the SpriteBatch flips
the V coordinate back, so the image appears right-side up.

=============================================================================
"""

from OpenGL.GL import *
from PIL import Image


class Texture:
    """
    OpenGL texture wrapper with nearest-neighbour filtering.

    GL_NEAREST keeps pixel art crisp when the window is larger than the
    surface. GL_CLAMP_TO_EDGE stops the edges from wrapping around.
    """

    def __init__(self, width: int, height: int, data: bytes):
        self.width = width
        self.height = height

        self.id = glGenTextures(1)
        glBindTexture(GL_TEXTURE_2D, self.id)

        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_NEAREST)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_NEAREST)

        glTexImage2D(
            GL_TEXTURE_2D,      # Target
            0,                  # Mipmap level (0 = base)
            GL_RGBA,            # Internal format (GPU storage)
            width, height,      # Dimensions
            0,                  # Border (must be 0)
            GL_RGBA,            # Input format
            GL_UNSIGNED_BYTE,   # Input data type
            data                # Pixel data
        )

        glBindTexture(GL_TEXTURE_2D, 0)

    @staticmethod
    def _pixels(image: Image.Image) -> bytes:
        """RGBA bytes, rows flipped for OpenGL"""
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        return image.transpose(Image.Transpose.FLIP_TOP_BOTTOM).tobytes()

    @classmethod
    def from_pil(cls, image: Image.Image) -> 'Texture':
        """Create a texture with the size and contents of a PIL image"""
        return cls(image.width, image.height, cls._pixels(image))

    def update(self, image: Image.Image):
        """
        Replace the texture contents with a same-sized image.

        Raises:
        -------
        ValueError : image size differs from the texture's
        """
        if image.size != (self.width, self.height):
            raise ValueError(
                f"image {image.size} does not match texture {(self.width, self.height)}"
            )
        glBindTexture(GL_TEXTURE_2D, self.id)
        glTexSubImage2D(
            GL_TEXTURE_2D, 0,
            0, 0, self.width, self.height,
            GL_RGBA, GL_UNSIGNED_BYTE,
            self._pixels(image)
        )
        glBindTexture(GL_TEXTURE_2D, 0)

    def bind(self, slot: int = 0):
        glActiveTexture(GL_TEXTURE0 + slot)
        glBindTexture(GL_TEXTURE_2D, self.id)

    def __del__(self):
        """
        Free the GPU texture.

        The GL context may already be gone at interpreter shutdown, in
        which case the driver has released the texture and the call fails.
        """
        if hasattr(self, 'id'):
            try:
                glDeleteTextures([self.id])
            except Exception:
                pass
