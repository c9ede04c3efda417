"""ImageGenerator — one random piece image per call.

Flow: list masks → pick mask (normal-biased) → pick piece (uniform) → load
both → sample two gradient colors → composite → PNG bytes.
"""

from __future__ import annotations

import asyncio
import logging
import random
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol

from PIL import Image

from imagefactory.config import Settings
from imagefactory.engine.catalog import DirectoryCatalog, PieceLibrary
from imagefactory.engine.compositor import BlendRule, Layout, compose
from imagefactory.engine.loader import load_image
from imagefactory.engine.sampler import NormalSampler, sample_color, with_alpha
from imagefactory.engine.selector import (
    IndexPolicy,
    parse_index_policy,
    select_mask,
    select_piece,
)
from imagefactory.errors import ConfigurationError

logger = logging.getLogger(__name__)

_ALPHA_RE = re.compile(r"[0-9a-fA-F]{2}")


class MaskCatalog(Protocol):
    def list(self) -> list[str]: ...

    def resolve(self, identifier: str) -> Path: ...


@dataclass
class GeneratedImage:
    """PNG bytes plus the random choices that produced them."""

    png: bytes
    mask: str = ""
    piece: int = 0
    colors: tuple[str, str] = ("", "")
    width: int = 0
    height: int = 0
    timings_ms: dict[str, float] = field(default_factory=dict)


class ImageGenerator:
    """Produces a fresh composite on every ``generate_image()`` call.

    Holds no per-request state, so one instance is safe to share between
    concurrent requests.
    """

    def __init__(
        self,
        catalog: MaskCatalog,
        pieces: PieceLibrary,
        layout: Layout | None = None,
        sampler: NormalSampler | None = None,
        uniform: Callable[[], float] | None = None,
        gradient_alpha: str = "aa",
        index_policy: IndexPolicy = IndexPolicy.CLAMP,
        overlay_rule: BlendRule = BlendRule.SOURCE_ATOP,
    ) -> None:
        if not _ALPHA_RE.fullmatch(gradient_alpha):
            raise ConfigurationError(f"gradient alpha must be 2 hex digits, got {gradient_alpha!r}")
        if pieces.count < 1:
            raise ConfigurationError(f"piece count must be >= 1, got {pieces.count}")
        self.layout = layout or Layout()
        if self.layout.width <= 0 or self.layout.height <= 0:
            raise ConfigurationError(
                f"canvas size must be positive, got {self.layout.width}x{self.layout.height}"
            )
        self.catalog = catalog
        self.pieces = pieces
        self.sampler = sampler or NormalSampler()
        self.uniform = uniform or random.random
        self.gradient_alpha = gradient_alpha.lower()
        self.index_policy = index_policy
        self.overlay_rule = overlay_rule

    @classmethod
    def from_settings(cls, settings: Settings) -> ImageGenerator:
        layout = Layout(
            width=settings.canvas_width,
            height=settings.canvas_height,
            mask_rect=settings.mask_rect,
            piece_rect=settings.resolved_piece_rect(),
        )
        return cls(
            catalog=DirectoryCatalog(settings.textures_dir, settings.mask_extensions),
            pieces=PieceLibrary(settings.pieces_dir, settings.piece_count),
            layout=layout,
            sampler=NormalSampler(max_attempts=settings.sampler_max_attempts),
            gradient_alpha=settings.gradient_alpha,
            index_policy=parse_index_policy(settings.mask_index_policy),
        )

    def sample_colors(self) -> tuple[str, str]:
        """Two independent gradient stop colors, alpha suffix already applied."""
        return (
            with_alpha(sample_color(self.sampler), self.gradient_alpha),
            with_alpha(sample_color(self.sampler), self.gradient_alpha),
        )

    def render_png(self, mask: Image.Image, piece: Image.Image, colors: tuple[str, str]) -> bytes:
        """CPU-bound composite + encode; run off the event loop."""
        return compose(mask, piece, self.layout, colors, self.overlay_rule)

    async def generate_image(self) -> GeneratedImage:
        start = time.perf_counter()

        mask_id = select_mask(self.catalog.list(), self.sampler, self.index_policy)
        piece_no = select_piece(self.pieces.count, self.uniform)
        logger.debug("Selected mask=%s piece=%d", mask_id, piece_no)

        mask_img, piece_img = await asyncio.gather(
            load_image(self.catalog.resolve(mask_id)),
            load_image(self.pieces.resolve(piece_no)),
        )
        t_load = time.perf_counter()

        colors = self.sample_colors()
        loop = asyncio.get_running_loop()
        png = await loop.run_in_executor(None, self.render_png, mask_img, piece_img, colors)
        t_done = time.perf_counter()

        timings = {
            "load_ms": round((t_load - start) * 1000, 1),
            "compose_ms": round((t_done - t_load) * 1000, 1),
        }
        logger.info(
            "Generated image mask=%s piece=%d colors=%s in %.0fms",
            mask_id,
            piece_no,
            ",".join(colors),
            (t_done - start) * 1000,
        )
        return GeneratedImage(
            png=png,
            mask=mask_id,
            piece=piece_no,
            colors=colors,
            width=self.layout.width,
            height=self.layout.height,
            timings_ms=timings,
        )
