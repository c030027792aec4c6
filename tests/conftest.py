"""Shared fixtures: a small in-memory sprite sheet."""

from __future__ import annotations

import json

import pytest
from PIL import Image

from sprite_player.sheet.loader import LoadedSheet

FRAME_SIZE = 16
FRAME_COUNT = 6

# One solid colour per frame so tests can tell frames apart on a surface
COLORS = [
    (255, 0, 0, 255),
    (0, 255, 0, 255),
    (0, 0, 255, 255),
    (255, 255, 0, 255),
    (0, 255, 255, 255),
    (255, 0, 255, 255),
]


def make_sheet_image() -> Image.Image:
    image = Image.new("RGBA", (FRAME_SIZE * FRAME_COUNT, FRAME_SIZE), (0, 0, 0, 0))
    for i, color in enumerate(COLORS):
        image.paste(color, (i * FRAME_SIZE, 0, (i + 1) * FRAME_SIZE, FRAME_SIZE))
    return image


def make_manifest() -> dict:
    return {
        "frames": [
            {
                "filename": f"hero_{i}.png",
                "frame": {"x": i * FRAME_SIZE, "y": 0, "w": FRAME_SIZE, "h": FRAME_SIZE},
                "trimmed": False,
                "spriteSourceSize": {"x": 0, "y": 0, "w": FRAME_SIZE, "h": FRAME_SIZE},
                "sourceSize": {"w": FRAME_SIZE, "h": FRAME_SIZE},
            }
            for i in range(FRAME_COUNT)
        ],
        "meta": {
            "image": "hero.png",
            "size": {"w": FRAME_SIZE * FRAME_COUNT, "h": FRAME_SIZE},
        },
    }


@pytest.fixture
def manifest() -> dict:
    return make_manifest()


@pytest.fixture
def sheet_image() -> Image.Image:
    return make_sheet_image()


@pytest.fixture
def loaded_sheet(manifest, sheet_image) -> LoadedSheet:
    return LoadedSheet(manifest=manifest, image=sheet_image)


@pytest.fixture
def sheet_files(tmp_path, manifest, sheet_image):
    """hero.json + hero.png written to a temp folder; returns the json path"""
    sheet_image.save(tmp_path / "hero.png")
    json_path = tmp_path / "hero.json"
    json_path.write_text(json.dumps(manifest), encoding="utf-8")
    return json_path
