"""
Sprite sheet asset loading: JSON manifest + sheet image (PIL).

The loader is a plain blocking function. SpritePlayer runs it in a worker
thread so the host loop keeps ticking while files are read and decoded.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from PIL import Image, UnidentifiedImageError

from ..errors import LoadFailure

logger = logging.getLogger(__name__)


@dataclass
class LoadedSheet:
    """Everything the asset load produces"""
    manifest: Dict[str, Any]
    image: Image.Image
    image_path: Optional[Path] = None

    @property
    def meta(self) -> Dict[str, Any]:
        return self.manifest.get('meta') or {}


def resolve_image_path(manifest_path: Union[str, Path], image: str) -> Path:
    """
    Locate the sheet image named in meta.image.

    Relative names are relative to the manifest's folder, which is
    where packers write the image next to its JSON.
    """
    image_path = Path(image)
    if image_path.is_absolute():
        return image_path
    return Path(manifest_path).parent / image_path


def load_sheet(url: Union[str, Path], image_url: Optional[Union[str, Path]] = None,
               logger: Optional[logging.Logger] = logger) -> LoadedSheet:
    """
    Load a sprite sheet manifest and decode its image.

    Parameters:
    -----------
    url : str or Path
        Path to the JSON manifest
    image_url : str or Path, optional
        Explicit image path, overrides meta.image

    Returns:
    --------
    LoadedSheet : parsed manifest and RGBA image

    Raises:
    -------
    LoadFailure : manifest missing or malformed, image missing or undecodable
    """
    if not url:
        raise LoadFailure("spritesheet url is not set")

    manifest_path = Path(url)

    # -----------------------------------------------------------------
    # MANIFEST
    # -----------------------------------------------------------------
    try:
        with open(manifest_path, 'r', encoding='utf-8') as f:
            manifest = json.load(f)
    except (OSError, ValueError) as e:
        raise LoadFailure(f"cannot read manifest {manifest_path}: {e}") from e

    if not isinstance(manifest, dict):
        raise LoadFailure(f"manifest {manifest_path} is not a JSON object")

    meta = manifest.get('meta')
    if not isinstance(meta, dict):
        raise LoadFailure(f"manifest {manifest_path} has no meta section")
    if 'frames' not in manifest:
        raise LoadFailure(f"manifest {manifest_path} has no frames")

    if logger:
        logger.debug("json loaded: %s", manifest_path)

    # -----------------------------------------------------------------
    # IMAGE
    # -----------------------------------------------------------------
    if image_url:
        image_path = Path(image_url)
    elif isinstance(meta.get('image'), str):
        image_path = resolve_image_path(manifest_path, meta['image'])
    else:
        raise LoadFailure(f"manifest {manifest_path} names no image")

    try:
        # convert() forces the decode, so a truncated file fails here
        # and not on the first draw
        image = Image.open(image_path).convert('RGBA')
    except (OSError, UnidentifiedImageError) as e:
        raise LoadFailure(f"cannot decode image {image_path}: {e}") from e

    if logger:
        logger.debug("image loaded: %s (%dx%d)", image_path, image.width, image.height)

    return LoadedSheet(manifest=manifest, image=image, image_path=image_path)
