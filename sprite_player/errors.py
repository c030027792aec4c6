"""
Error kinds raised inside the player.

None of these escape the playback controls of SpritePlayer: the loader's
LoadFailure is logged and leaves the load gate closed, AnimationNotFound
falls back to the "default" script, FrameNotFound is logged and the entry
is kept without geometry.
"""


class SpritePlayerError(Exception):
    """Base class for sprite player errors"""


class LoadFailure(SpritePlayerError):
    """Manifest fetch/parse or image decode failed"""


class AnimationNotFound(SpritePlayerError, KeyError):
    """A named script was requested but never registered"""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f'animation "{self.name}" not found'


class FrameNotFound(SpritePlayerError, LookupError):
    """A script entry or sprite index matched no catalog frame"""

    def __init__(self, entry):
        super().__init__(entry)
        self.entry = entry

    def __str__(self):
        return f"frame not found: {self.entry!r}"
