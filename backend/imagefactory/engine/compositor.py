"""Compositor — Porter-Duff blending on premultiplied RGBA canvases.

A canvas is an ``(H, W, 4)`` float64 array with premultiplied alpha in
[0, 1]. Every drawing step builds a full-canvas source layer and blends it
with an explicit ``BlendRule``; there is no implicit "current mode" state.

The piece image is produced in three steps:

1. mask drawn ``SOURCE_OVER`` into ``mask_rect``
2. piece drawn ``DESTINATION_IN`` into ``piece_rect`` (keeps mask pixels only
   where the piece has coverage; everything else is cleared)
3. a corner-to-corner two-stop gradient filled ``SOURCE_ATOP`` (tints the
   existing pixels without adding coverage)
"""

from __future__ import annotations

import enum
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageColor

from imagefactory.errors import ConfigurationError, EncodingError

logger = logging.getLogger(__name__)

Rect = tuple[float, float, float, float]  # (x, y, w, h) in canvas pixels
Canvas = NDArray[np.float64]


class BlendRule(str, enum.Enum):
    SOURCE_OVER = "source-over"
    SOURCE_IN = "source-in"
    SOURCE_ATOP = "source-atop"
    DESTINATION_OVER = "destination-over"
    DESTINATION_IN = "destination-in"
    DESTINATION_ATOP = "destination-atop"


def _factors(rule: BlendRule, a_s: Canvas, a_d: Canvas) -> tuple[Canvas | float, Canvas | float]:
    """Porter-Duff (Fa, Fb): out = src * Fa + dst * Fb (premultiplied)."""
    if rule is BlendRule.SOURCE_OVER:
        return 1.0, 1.0 - a_s
    if rule is BlendRule.SOURCE_IN:
        return a_d, 0.0
    if rule is BlendRule.SOURCE_ATOP:
        return a_d, 1.0 - a_s
    if rule is BlendRule.DESTINATION_OVER:
        return 1.0 - a_d, 1.0
    if rule is BlendRule.DESTINATION_IN:
        return 0.0, a_s
    if rule is BlendRule.DESTINATION_ATOP:
        return 1.0 - a_d, a_s
    raise ValueError(f"unsupported blend rule: {rule}")


@dataclass(frozen=True)
class Layout:
    """Fixed geometry of one composite."""

    width: int = 300
    height: int = 300
    mask_rect: Rect = (0.0, 0.0, 500.0, 500.0)
    piece_rect: Rect = (75.0, 18.75, 150.0, 250.0)

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


def new_canvas(width: int, height: int) -> Canvas:
    """Fully transparent canvas."""
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"canvas size must be positive, got {width}x{height}")
    return np.zeros((height, width, 4), dtype=np.float64)


def to_premultiplied(img: Image.Image) -> Canvas:
    arr = np.asarray(img.convert("RGBA"), dtype=np.float64) / 255.0
    arr[..., :3] *= arr[..., 3:4]
    return arr


def composite(canvas: Canvas, layer: Canvas, rule: BlendRule) -> Canvas:
    """Blend ``layer`` onto ``canvas`` in place and return the canvas."""
    if layer.shape != canvas.shape:
        raise ValueError(f"layer shape {layer.shape} != canvas shape {canvas.shape}")
    fa, fb = _factors(rule, layer[..., 3:4], canvas[..., 3:4])
    np.clip(layer * fa + canvas * fb, 0.0, 1.0, out=canvas)
    return canvas


def place_image(img: Image.Image, rect: Rect, width: int, height: int) -> Canvas:
    """Scale ``img`` into ``rect`` on an otherwise transparent canvas-sized layer."""
    x, y, w, h = rect
    target = (max(1, round(w)), max(1, round(h)))
    scaled = img.convert("RGBA").resize(target, Image.Resampling.BILINEAR)
    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    # paste clips anything outside the layer bounds
    layer.paste(scaled, (round(x), round(y)))
    return to_premultiplied(layer)


def draw_image(canvas: Canvas, img: Image.Image, rect: Rect, rule: BlendRule) -> Canvas:
    height, width = canvas.shape[:2]
    return composite(canvas, place_image(img, rect, width, height), rule)


def parse_color(color: str) -> tuple[float, float, float, float]:
    """``#rrggbb`` or ``#rrggbbaa`` → straight RGBA floats in [0, 1]."""
    try:
        rgba = ImageColor.getcolor(color, "RGBA")
    except ValueError as e:
        raise ConfigurationError(f"invalid color {color!r}") from e
    return tuple(c / 255.0 for c in rgba)  # type: ignore[return-value]


def linear_gradient(
    width: int,
    height: int,
    start: tuple[float, float],
    end: tuple[float, float],
    stops: Sequence[tuple[float, str]],
) -> Canvas:
    """Premultiplied layer filled with a linear gradient from ``start`` to ``end``.

    Pixels are sampled at their centers. Positions before the first stop or
    after the last take the nearest stop's color. A zero-length gradient
    paints nothing.
    """
    layer = new_canvas(width, height)
    if not stops:
        return layer
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    denom = dx * dx + dy * dy
    if denom == 0:
        return layer

    ordered = sorted(stops, key=lambda s: s[0])
    offsets = np.array([s[0] for s in ordered], dtype=np.float64)
    colors = np.array([parse_color(s[1]) for s in ordered], dtype=np.float64)
    colors[:, :3] *= colors[:, 3:4]

    xs = np.arange(width, dtype=np.float64) + 0.5
    ys = np.arange(height, dtype=np.float64) + 0.5
    gx, gy = np.meshgrid(xs, ys)
    t = np.clip(((gx - start[0]) * dx + (gy - start[1]) * dy) / denom, 0.0, 1.0)

    for c in range(4):
        layer[..., c] = np.interp(t, offsets, colors[:, c])
    return layer


def fill_gradient(
    canvas: Canvas,
    stops: Sequence[tuple[float, str]],
    rule: BlendRule,
) -> Canvas:
    """Fill the whole canvas with a top-left → bottom-right gradient."""
    height, width = canvas.shape[:2]
    layer = linear_gradient(width, height, (0.0, 0.0), (float(width), float(height)), stops)
    return composite(canvas, layer, rule)


def to_image(canvas: Canvas) -> Image.Image:
    """Un-premultiply and quantize to an 8-bit RGBA image."""
    alpha = canvas[..., 3:4]
    rgb = np.divide(canvas[..., :3], alpha, out=np.zeros_like(canvas[..., :3]), where=alpha > 0)
    straight = np.concatenate([rgb, alpha], axis=-1)
    return Image.fromarray(np.round(np.clip(straight, 0.0, 1.0) * 255.0).astype(np.uint8))


def encode_png(canvas: Canvas) -> bytes:
    try:
        buf = io.BytesIO()
        to_image(canvas).save(buf, format="PNG")
    except (OSError, ValueError, TypeError) as e:
        raise EncodingError(f"PNG encoding failed: {e}") from e
    return buf.getvalue()


def render(
    mask: Image.Image,
    piece: Image.Image,
    layout: Layout,
    colors: tuple[str, str],
    overlay_rule: BlendRule = BlendRule.SOURCE_ATOP,
) -> Canvas:
    """Run the three drawing steps and return the canvas."""
    canvas = new_canvas(layout.width, layout.height)
    draw_image(canvas, mask, layout.mask_rect, BlendRule.SOURCE_OVER)
    draw_image(canvas, piece, layout.piece_rect, BlendRule.DESTINATION_IN)
    fill_gradient(canvas, [(0.0, colors[0]), (1.0, colors[1])], overlay_rule)
    return canvas


def compose(
    mask: Image.Image,
    piece: Image.Image,
    layout: Layout,
    colors: tuple[str, str],
    overlay_rule: BlendRule = BlendRule.SOURCE_ATOP,
) -> bytes:
    """Composite mask, piece and gradient, then encode as PNG."""
    canvas = render(mask, piece, layout, colors, overlay_rule)
    png = encode_png(canvas)
    logger.debug("Composited %dx%d image (%d bytes)", layout.width, layout.height, len(png))
    return png
