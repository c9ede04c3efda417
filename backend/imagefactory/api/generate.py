"""Image generation endpoints.

GET  /new                — generate, upload, return the cid as plain text
POST /api/generate       — same, with a JSON body describing the random choices
GET  /api/preview        — generate without uploading; returns the PNG
GET  /api/image/latest   — last image written to disk
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, PlainTextResponse, Response

from imagefactory.config import Settings
from imagefactory.dependencies import get_generator, get_settings, get_storage
from imagefactory.engine.generator import GeneratedImage, ImageGenerator
from imagefactory.models.responses import GenerateResponse
from imagefactory.storage.client import BlobStorageClient
from imagefactory.storage.local import write_latest

logger = logging.getLogger(__name__)

router = APIRouter()
root_router = APIRouter()


async def _generate_and_store(
    generator: ImageGenerator,
    storage: BlobStorageClient | None,
    settings: Settings,
) -> tuple[GeneratedImage, str]:
    """Generate, persist the latest file, and upload when a client is given."""
    image = await generator.generate_image()
    if settings.output_path:
        await write_latest(image.png, settings.output_path)
    cid = ""
    if storage is not None:
        cid = await storage.store(image.png)
    return image, cid


async def _bounded(coro, settings: Settings):
    try:
        return await asyncio.wait_for(coro, timeout=settings.request_timeout_s)
    except asyncio.TimeoutError as e:
        logger.warning("Image request exceeded %.1fs", settings.request_timeout_s)
        raise HTTPException(
            status_code=504,
            detail=f"image generation timed out after {settings.request_timeout_s}s",
        ) from e


@root_router.get("/new", response_class=PlainTextResponse)
async def new_image(
    generator: ImageGenerator = Depends(get_generator),
    storage: BlobStorageClient = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> PlainTextResponse:
    _, cid = await _bounded(_generate_and_store(generator, storage, settings), settings)
    return PlainTextResponse(cid)


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    generator: ImageGenerator = Depends(get_generator),
    storage: BlobStorageClient = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> GenerateResponse:
    start = time.perf_counter()
    image, cid = await _bounded(_generate_and_store(generator, storage, settings), settings)
    elapsed = (time.perf_counter() - start) * 1000

    return GenerateResponse(
        cid=cid,
        mask=image.mask,
        piece=image.piece,
        colors=list(image.colors),
        width=image.width,
        height=image.height,
        processing_time_ms=round(elapsed, 1),
        timings_ms=image.timings_ms,
    )


@router.get("/preview")
async def preview(
    generator: ImageGenerator = Depends(get_generator),
    settings: Settings = Depends(get_settings),
) -> Response:
    image, _ = await _bounded(_generate_and_store(generator, None, settings), settings)
    return Response(
        content=image.png,
        media_type="image/png",
        headers={"Cache-Control": "no-store"},
    )


@router.get("/image/latest")
async def latest_image(settings: Settings = Depends(get_settings)) -> FileResponse:
    path = Path(settings.output_path) if settings.output_path else None
    if path is None or not path.is_file():
        raise HTTPException(status_code=404, detail="no image generated yet")
    return FileResponse(path, media_type="image/png", headers={"Cache-Control": "no-store"})
