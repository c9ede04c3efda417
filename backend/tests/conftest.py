"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from imagefactory.engine.catalog import DirectoryCatalog, PieceLibrary
from imagefactory.engine.compositor import Layout


CANVAS = 300
PIECE_COUNT = 6

# Piece rect for a 300x300 canvas: (W/4, H/16, 150, 250) → x 75..225, y 19..269
INSIDE_PIECE = (150, 150)
OUTSIDE_PIECE = (10, 10)
OUTSIDE_CORNER = (290, 290)


def solid(color: tuple[int, int, int, int], size: tuple[int, int] = (32, 32)) -> Image.Image:
    return Image.new("RGBA", size, color)


def write_assets(root: Path, n_masks: int = 3, n_pieces: int = PIECE_COUNT) -> tuple[Path, Path]:
    """Opaque solid masks and opaque solid pieces under ``root``."""
    textures = root / "Textures"
    pieces = root / "pieces"
    textures.mkdir(parents=True, exist_ok=True)
    pieces.mkdir(parents=True, exist_ok=True)
    for i in range(n_masks):
        solid((200, 40 * i, 30, 255)).save(textures / f"mask_{i:02d}.png")
    for n in range(1, n_pieces + 1):
        solid((20 * n, 20 * n, 20 * n, 255), (60, 100)).save(pieces / f"{n}.png")
    return textures, pieces


@pytest.fixture
def asset_dirs(tmp_path: Path) -> tuple[Path, Path]:
    return write_assets(tmp_path)


@pytest.fixture
def catalog(asset_dirs: tuple[Path, Path]) -> DirectoryCatalog:
    return DirectoryCatalog(asset_dirs[0], [".png"])


@pytest.fixture
def pieces(asset_dirs: tuple[Path, Path]) -> PieceLibrary:
    return PieceLibrary(asset_dirs[1], PIECE_COUNT)


@pytest.fixture
def layout() -> Layout:
    return Layout(
        width=CANVAS,
        height=CANVAS,
        mask_rect=(0.0, 0.0, 500.0, 500.0),
        piece_rect=(CANVAS / 4, CANVAS / 16, 150.0, 250.0),
    )


class FixedSampler:
    """Stands in for NormalSampler with a scripted sequence of values."""

    def __init__(self, values: list[float], max_attempts: int = 10) -> None:
        self._values = iter(values)
        self.max_attempts = max_attempts

    def sample(self) -> float:
        return next(self._values)


def scripted(values: list[float]):
    """Uniform random source that replays ``values`` and counts draws."""
    it = iter(values)

    def source() -> float:
        source.calls += 1
        return next(it)

    source.calls = 0
    return source
