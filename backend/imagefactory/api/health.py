"""Health check endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from imagefactory import __version__
from imagefactory.config import Settings
from imagefactory.dependencies import get_settings
from imagefactory.engine.generator import ImageGenerator
from imagefactory.errors import ImageFactoryError
from imagefactory.models.responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    # Invalid config and unreadable mask dirs both report "degraded", not 500
    try:
        masks = len(ImageGenerator.from_settings(settings).catalog.list())
    except ImageFactoryError as e:
        logger.warning("Health check degraded (%s): %s", e.kind, e)
        return HealthResponse(status="degraded", version=__version__, masks_available=0)
    return HealthResponse(
        status="ok" if masks else "degraded",
        version=__version__,
        masks_available=masks,
    )
