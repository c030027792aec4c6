"""
Sprite sheet model: frame catalog and named animation scripts

=============================================================================
SCRIPTS
=============================================================================

A script is an ordered list of frames to show, built from entries that
point into the catalog:

    catalog:  [f0 idle] [f1 walk1] [f2 walk2] [f3 walk3] [f4 jump]

    add_script("walk", [1, 2, {"index": 3, "delay": 120}, 2])

    "walk":   [f1] [f2] [f3 + delay=120] [f2]

Each entry is resolved to a catalog frame (by index or by name, first
match wins) and the entry's own fields are laid on top of a COPY of that
frame. The catalog itself is never modified.

The script "all" is always the whole catalog in index order. It is the
animation the player starts with once the sheet is loaded.

=============================================================================
LIFECYCLE
=============================================================================

Scripts can be added before the sheet has loaded. Their raw entries are
kept and every declared script is (re)built by auto_script() once the
catalog exists.

=============================================================================
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

from ..errors import AnimationNotFound, FrameNotFound
from .frames import ScriptEntry, SpriteFrame, entry_overrides, parse_frame_tags, parse_frames

logger = logging.getLogger(__name__)

ALL_SCRIPT = 'all'


class SpriteSheetModel:
    """Owns the frame catalog and the named scripts of one sprite sheet"""

    def __init__(self, logger: logging.Logger = logger):
        self.logger = logger
        self.loaded = False
        self.meta: Dict[str, Any] = {}
        self.sheet_width = 0
        self.sheet_height = 0
        self.frames: List[SpriteFrame] = []
        self.scripts: Dict[str, List[SpriteFrame]] = {}
        # name -> raw entries as declared, rebuilt by auto_script()
        self.sources: Dict[str, List[ScriptEntry]] = {}

    # =========================================================================
    # LOADING
    # =========================================================================

    def populate(self, manifest: Dict[str, Any],
                 animations: Optional[Dict[str, List[ScriptEntry]]] = None):
        """
        Fill the catalog from a parsed manifest and build every script.

        Declared animations, lowest precedence first:
        1. Aseprite meta.frameTags
        2. TexturePacker top-level "animations"
        3. scripts added with add_script() so far
        4. animations passed here (SheetOptions.animations)
        """
        meta = manifest.get('meta') or {}
        size = meta.get('size') or {}

        self.meta = meta
        self.sheet_width = size.get('w', 0)
        self.sheet_height = size.get('h', 0)
        self.frames = parse_frames(manifest.get('frames', []))

        declared: Dict[str, List[ScriptEntry]] = {}
        declared.update(parse_frame_tags(meta))
        declared.update(manifest.get('animations') or {})
        declared.update(self.sources)
        declared.update(animations or {})
        self.sources = declared

        self.loaded = True
        self.auto_script()

        self.logger.debug("catalog: %d frames, scripts: %s",
                          len(self.frames), ", ".join(self.scripts))

    def auto_script(self):
        """Build every declared script, then "all" from the full catalog"""
        for name, entries in list(self.sources.items()):
            self.add_script(name, entries)
        # Always the full catalog, even over a user-declared "all"
        self.scripts[ALL_SCRIPT] = list(self.frames)

    # =========================================================================
    # SCRIPT BUILDING
    # =========================================================================

    def find_frame(self, entry: ScriptEntry) -> SpriteFrame:
        """
        Resolve a script entry to its catalog frame.

        Raises:
        -------
        FrameNotFound : no frame has the entry's index or name
        """
        overrides = entry_overrides(entry)
        index = overrides.get('index')
        name = overrides.get('name')

        for frame in self.frames:
            if index is not None and frame.index == index:
                return frame
            if name is not None and frame.name == name:
                return frame
        raise FrameNotFound(entry)

    def build_script(self, entries: Iterable[ScriptEntry]) -> List[SpriteFrame]:
        """
        Resolve entries into an ordered script without storing it.

        Unmatched entries are logged and kept as frames without geometry;
        they are not dropped and not repaired.
        """
        script = []
        for entry in entries:
            overrides = entry_overrides(entry)
            try:
                frame = replace(self.find_frame(entry), **overrides)
            except FrameNotFound as e:
                self.logger.warning("%s", e)
                frame = SpriteFrame(**{'index': None, **overrides})
            self.logger.debug("script frame: %s", frame)
            script.append(frame)
        return script

    def add_script(self, name: str, entries: Iterable[ScriptEntry]) -> List[SpriteFrame]:
        """Resolve and store a named script (deferred until the sheet loads)"""
        entries = list(entries)
        self.sources[name] = entries
        if not self.loaded:
            self.logger.debug('script "%s" stored until the sheet is loaded', name)
            return []

        script = self.build_script(entries)
        self.scripts[name] = script
        return script

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def script(self, name: str) -> List[SpriteFrame]:
        try:
            return self.scripts[name]
        except KeyError:
            raise AnimationNotFound(name) from None

    def has_script(self, name: str) -> bool:
        return name in self.scripts

    def frame_by_index(self, index: int) -> SpriteFrame:
        for frame in self.frames:
            if frame.index == index:
                return frame
        raise FrameNotFound(index)
