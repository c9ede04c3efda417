"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from imagefactory import __version__
from imagefactory.config import settings
from imagefactory.errors import ImageFactoryError, InvalidIndex, StorageError

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.imagefactory_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def _status_for(exc: ImageFactoryError) -> int:
    if isinstance(exc, StorageError):
        return 502
    if isinstance(exc, InvalidIndex):
        return 503
    return 500


async def _image_factory_error(request: Request, exc: ImageFactoryError) -> JSONResponse:
    status = _status_for(exc)
    logger.warning("%s %s failed (%s): %s", request.method, request.url.path, exc.kind, exc)
    return JSONResponse(status_code=status, content={"detail": f"{exc.kind}: {exc}"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="ImageFactory",
        description="Procedural piece images — biased random masks, gradients, blob storage upload",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ImageFactoryError, _image_factory_error)

    from imagefactory.api.generate import root_router
    from imagefactory.api.router import api_router

    app.include_router(api_router)
    app.include_router(root_router)

    return app


app = create_app()
