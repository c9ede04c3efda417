"""FastAPI dependency injection."""

from __future__ import annotations

from imagefactory.config import Settings, settings
from imagefactory.engine.generator import ImageGenerator
from imagefactory.storage.client import BlobStorageClient


def get_settings() -> Settings:
    return settings


def get_generator() -> ImageGenerator:
    return ImageGenerator.from_settings(get_settings())


def get_storage() -> BlobStorageClient:
    s = get_settings()
    return BlobStorageClient(s.storage_endpoint, s.storage_token, timeout=s.storage_timeout_s)
