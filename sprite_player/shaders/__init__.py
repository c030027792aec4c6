"""GLSL shader sources"""

from .sources import VERTEX_SHADER, FRAGMENT_SHADER

__all__ = [
    "VERTEX_SHADER",
    "FRAGMENT_SHADER",
]
