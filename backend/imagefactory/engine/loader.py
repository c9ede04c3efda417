"""Image loading — decode asset files into RGBA Pillow images off the event loop."""

from __future__ import annotations

import asyncio
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from imagefactory.errors import AssetLoadError


def load_image_sync(path: Path | str) -> Image.Image:
    """Open and fully decode an image as RGBA."""
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGBA")
    except FileNotFoundError as e:
        raise AssetLoadError(f"asset not found: {path}") from e
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise AssetLoadError(f"cannot decode asset {path}: {e}") from e


async def load_image(path: Path | str) -> Image.Image:
    """Decode in the default executor; file I/O is the only suspending step."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_image_sync, path)
