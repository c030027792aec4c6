"""
Sprite sheet frame data (TexturePacker / Aseprite JSON)

=============================================================================
WHAT IS A PACKED SPRITE SHEET?
=============================================================================

A packer (TexturePacker, Aseprite, free-tex-packer, ...) takes many small
sprite images and packs them into ONE big image. Alongside the image it
writes a JSON manifest telling us where every sprite ended up:

    {
      "frames": {
        "walk_01.png": {
          "frame":            {"x": 2,  "y": 2,  "w": 28, "h": 30},
          "trimmed":          true,
          "spriteSourceSize": {"x": 2,  "y": 1,  "w": 28, "h": 30},
          "sourceSize":       {"w": 32, "h": 32}
        },
        ...
      },
      "meta": {"image": "walk.png", "size": {"w": 256, "h": 128}}
    }

"frames" is either a name-keyed mapping (TexturePacker "JSON Hash") or a
list with a "filename" per entry (TexturePacker "JSON Array", Aseprite).
Either way, catalog order gives every frame its index.

=============================================================================
TRIMMING
=============================================================================

Packers cut away transparent padding to save space. A 32x32 sprite with
2 transparent columns on the left is stored as 28x30 pixels:

    sourceSize (32x32)             frame (28x30) in the sheet
    +--------------------+         +-----------------+
    |  . . . . . . . . . |         |#################|
    |  . +-------------+ |         |#################|
    |  . |#############| |  --->   |#################|
    |  . |#############| |         +-----------------+
    +--------------------+
       ^ spriteSourceSize.x = 2

spriteSourceSize.x/y is where the trimmed pixels sat inside the original
bounding box. The geometry resolver uses it to put the sprite back where
it belongs at draw time.

=============================================================================
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Rect:
    """Packed rectangle inside the sheet image"""
    x: float
    y: float
    w: float
    h: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Rect':
        return cls(x=data.get('x', 0), y=data.get('y', 0),
                   w=data.get('w', 0), h=data.get('h', 0))


@dataclass(frozen=True)
class Size:
    w: float
    h: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Size':
        return cls(w=data.get('w', 0), h=data.get('h', 0))


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Point':
        return cls(x=data.get('x', 0), y=data.get('y', 0))


@dataclass(frozen=True)
class SpriteFrame:
    """
    One catalog entry of the sprite sheet.

    Frames are immutable: scripts hold overlaid COPIES (see
    SpriteSheetModel.add_script), never the catalog objects themselves
    modified in place.

    ==========================================================================
    ATTRIBUTES
    ==========================================================================

    index:              Position in the catalog (unique)
    name:               Frame name (filename in the manifest), optional
    frame:              Packed rectangle inside the sheet image
    source_size:        Size of the sprite before trimming
    sprite_source_size: Trim origin inside the untrimmed box
    trimmed:            Whether the packer removed padding
    delay:              Per-frame delay in ms (None = playhead default)
    top/left/bottom/right:
                        Position overrides supplied by a script author.
                        Carried along for on_frame consumers, the
                        engine itself never moves the surface.

    A frame with frame/source_size = None has no geometry: it comes from
    a script entry that matched nothing in the catalog. An empty
    source_size (0 wide or 0 high) has nothing to scale either and counts
    as no geometry too.

    ==========================================================================
    """
    index: Optional[int]
    name: Optional[str] = None
    frame: Optional[Rect] = None
    source_size: Optional[Size] = None
    sprite_source_size: Optional[Point] = None
    trimmed: bool = False
    delay: Optional[float] = None
    top: Optional[float] = None
    left: Optional[float] = None
    bottom: Optional[float] = None
    right: Optional[float] = None

    @property
    def has_geometry(self) -> bool:
        return (self.frame is not None and self.source_size is not None
                and self.source_size.w > 0 and self.source_size.h > 0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int,
                  name: Optional[str] = None) -> 'SpriteFrame':
        """
        Parse one manifest frame.

        Untrimmed frames from some exporters omit sourceSize; the packed
        rect size is used then. Aseprite writes per-frame "duration" (ms)
        which becomes the frame delay.

        Raises:
        -------
        ValueError : the frame or one of its rects is not a JSON object
        """
        if not isinstance(data, dict):
            raise ValueError(f"frame {index}: expected an object, got {type(data).__name__}")

        rect = Rect.from_dict(_object_field(data, 'frame', index) or {})

        source = _object_field(data, 'sourceSize', index)
        if source is not None:
            source_size = Size.from_dict(source)
        else:
            source_size = Size(rect.w, rect.h)

        trim = _object_field(data, 'spriteSourceSize', index)

        delay = data.get('delay')
        if delay is None:
            delay = data.get('duration')

        return cls(
            index=index,
            name=name if name is not None else data.get('filename'),
            frame=rect,
            source_size=source_size,
            sprite_source_size=Point.from_dict(trim) if trim else None,
            trimmed=bool(data.get('trimmed', False)),
            delay=delay,
        )


def _object_field(data: Dict[str, Any], key: str, index: int) -> Optional[Dict[str, Any]]:
    """data[key] as a dict, None when absent; anything else (null included) is malformed"""
    if key not in data:
        return None
    value = data[key]
    if not isinstance(value, dict):
        raise ValueError(f"frame {index}: '{key}' must be an object, got {value!r}")
    return value


# =============================================================================
# SCRIPT ENTRIES
# =============================================================================

# A script entry is what a script author writes to pick a frame:
#   3                                   -> catalog index 3
#   "walk_01.png"                       -> frame named walk_01.png
#   {"index": 3, "delay": 120}          -> index 3, shown for 120 ms
#   {"name": "walk_01.png", "top": 10}  -> by name, with a position override
#   SpriteFrame(...)                    -> an already resolved frame
ScriptEntry = Union[int, str, Dict[str, Any], SpriteFrame]

FRAME_FIELDS = tuple(f.name for f in fields(SpriteFrame))

# Manifest spelling -> field name
_ENTRY_ALIASES = {
    'sourceSize': 'source_size',
    'spriteSourceSize': 'sprite_source_size',
    'duration': 'delay',
    'filename': 'name',
}

_GEOMETRY_TYPES = {
    'frame': Rect,
    'source_size': Size,
    'sprite_source_size': Point,
}


def entry_overrides(entry: ScriptEntry) -> Dict[str, Any]:
    """
    Normalize a script entry to the SpriteFrame fields it sets.

    Fields the entry leaves out (or sets to None) are not overrides, so
    they keep the value of the catalog frame the entry resolves to.
    """
    if isinstance(entry, SpriteFrame):
        values = {name: getattr(entry, name) for name in FRAME_FIELDS}
    elif isinstance(entry, bool):
        raise TypeError(f"invalid script entry: {entry!r}")
    elif isinstance(entry, int):
        values = {'index': entry}
    elif isinstance(entry, str):
        values = {'name': entry}
    elif isinstance(entry, dict):
        values = {}
        for key, value in entry.items():
            key = _ENTRY_ALIASES.get(key, key)
            if key in _GEOMETRY_TYPES and isinstance(value, dict):
                value = _GEOMETRY_TYPES[key].from_dict(value)
            values[key] = value
    else:
        raise TypeError(f"invalid script entry: {entry!r}")

    return {key: value for key, value in values.items()
            if key in FRAME_FIELDS and value is not None}


# =============================================================================
# MANIFEST PARSING
# =============================================================================

def parse_frames(data: Union[List[Dict[str, Any]], Dict[str, Dict[str, Any]]]
                 ) -> List[SpriteFrame]:
    """
    Build the frame catalog from the manifest "frames" value.

    Array form: names come from each entry's "filename".
    Mapping form: names are the mapping keys, in document order.
    """
    frames = []
    if isinstance(data, list):
        for i, element in enumerate(data):
            frames.append(SpriteFrame.from_dict(element, i))
    elif isinstance(data, dict):
        for i, (key, element) in enumerate(data.items()):
            frames.append(SpriteFrame.from_dict(element, i, key))
    else:
        raise ValueError(f"unsupported frames value: {type(data).__name__}")
    return frames


def parse_frame_tags(meta: Dict[str, Any]) -> Dict[str, List[int]]:
    """
    Turn Aseprite frame tags into named animations (lists of indices).

    ==========================================================================
    DIRECTIONS
    ==========================================================================

    Tag {"name": "walk", "from": 2, "to": 4, "direction": ...}:

        forward          -> 2, 3, 4
        reverse          -> 4, 3, 2
        pingpong         -> 2, 3, 4, 3
        pingpong_reverse -> 4, 3, 2, 3

    The ping-pong forms drop the turning frames on the way back so the
    loop does not show the ends twice in a row.

    ==========================================================================
    """
    animations = {}
    for tag in meta.get('frameTags', []) or []:
        if not isinstance(tag, dict):
            raise ValueError(f"frame tag must be an object, got {tag!r}")
        name = tag.get('name')
        if not name:
            continue
        start = int(tag.get('from', 0))
        end = int(tag.get('to', start))
        indices = list(range(start, end + 1))
        direction = tag.get('direction', 'forward')

        if direction == 'reverse':
            indices.reverse()
        elif direction in ('pingpong', 'pingpong_reverse'):
            if direction == 'pingpong_reverse':
                indices.reverse()
            indices = indices + indices[-2:0:-1]

        animations[name] = indices
    return animations
