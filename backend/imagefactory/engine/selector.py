"""Mask and piece selection.

Masks are picked with the normal sampler (biased toward the middle of the
catalog); pieces are picked uniformly.
"""

from __future__ import annotations

import enum
import logging
import math
import random
from collections.abc import Sequence
from typing import Callable

from imagefactory.engine.sampler import NormalSampler
from imagefactory.errors import ConfigurationError, InvalidIndex

logger = logging.getLogger(__name__)


class IndexPolicy(str, enum.Enum):
    """What to do when ``floor(sample * (n + 1))`` lands on ``n``."""

    CLAMP = "clamp"
    RESAMPLE = "resample"
    STRICT = "strict"


def parse_index_policy(name: str) -> IndexPolicy:
    try:
        return IndexPolicy(name.lower())
    except ValueError as e:
        valid = ", ".join(p.value for p in IndexPolicy)
        raise ConfigurationError(f"unknown mask index policy {name!r} (expected {valid})") from e


def mask_index(sample: float, count: int) -> int:
    """Raw catalog index for a [0, 1] sample. May equal ``count``."""
    return math.floor(sample * (count + 1))


def select_mask(
    catalog: Sequence[str],
    sampler: NormalSampler,
    policy: IndexPolicy = IndexPolicy.CLAMP,
) -> str:
    """Pick one mask identifier from a non-empty catalog."""
    n = len(catalog)
    if n == 0:
        raise InvalidIndex("mask catalog is empty")

    attempts = 0
    while True:
        attempts += 1
        idx = mask_index(sampler.sample(), n)
        if idx < n:
            return catalog[idx]
        if policy is IndexPolicy.CLAMP:
            logger.info("Mask index %d out of range for %d masks, clamped", idx, n)
            return catalog[n - 1]
        if policy is IndexPolicy.STRICT or attempts >= sampler.max_attempts:
            raise InvalidIndex(f"mask index {idx} out of range for {n} masks")
        logger.debug("Mask index %d out of range, resampling", idx)


def select_piece(count: int, uniform: Callable[[], float] | None = None) -> int:
    """Uniform piece number in [1, count].

    ``uniform`` returns floats in [0, 1); it is flipped to (0, 1] so the
    ceiling never yields 0.
    """
    if count < 1:
        raise ConfigurationError(f"piece count must be >= 1, got {count}")
    draw = 1.0 - (uniform or random.random)()
    return min(count, max(1, math.ceil(draw * count)))
