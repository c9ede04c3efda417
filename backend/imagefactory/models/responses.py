"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    masks_available: int = 0


class GenerateResponse(BaseModel):
    cid: str
    mask: str = ""
    piece: int = 0
    colors: list[str] = Field(default_factory=list)
    width: int = 0
    height: int = 0
    processing_time_ms: float = 0.0
    timings_ms: dict[str, float] = Field(default_factory=dict)
