"""Normal-distribution sampler — Box–Muller draws rescaled into [0, 1].

Values cluster around 0.5 (sigma 0.1) and are used both as color channel
intensities and as fractional indices into a list, which biases both toward
the middle of their range.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Callable

from imagefactory.errors import SamplingExhausted

logger = logging.getLogger(__name__)

# z / 10 + 0.5 → mean 0.5, sigma 0.1
_MEAN = 0.5
_SCALE = 10.0

_DEFAULT_MAX_ATTEMPTS = 10_000

# Channel range is floor(value * 255), so 1.0 maps to 0xff.
_CHANNEL_MAX = 255


class NormalSampler:
    """Box–Muller sampler truncated to [0, 1] by bounded rejection.

    ``random_source`` must return floats in [0, 1); it is injectable so tests
    can force boundary draws.
    """

    def __init__(
        self,
        random_source: Callable[[], float] | None = None,
        max_attempts: int = _DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.random_source = random_source or random.random
        self.max_attempts = max_attempts

    def sample(self) -> float:
        """Return one value in [0, 1] drawn from N(0.5, 0.1)."""
        for _ in range(self.max_attempts):
            u = self._open_uniform()
            v = self._open_uniform()
            z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
            value = z / _SCALE + _MEAN
            if 0.0 <= value <= 1.0:
                return value
        raise SamplingExhausted(
            f"no in-range normal draw after {self.max_attempts} attempts"
        )

    def _open_uniform(self) -> float:
        """Draw from (0, 1); zero is redrawn (at most ``max_attempts`` times) so log(u) stays finite."""
        for _ in range(self.max_attempts):
            x = self.random_source()
            if x != 0.0:
                return x
        raise SamplingExhausted(
            f"uniform source returned 0 until the {self.max_attempts}-attempt cap"
        )


def channel_hex(value: float) -> str:
    """Map a [0, 1] sample to a zero-padded lowercase 2-digit hex channel."""
    return f"{math.floor(value * _CHANNEL_MAX):02x}"


def sample_color(sampler: NormalSampler) -> str:
    """Return a ``#rrggbb`` color with three independent mid-biased channels."""
    color = "#" + "".join(channel_hex(sampler.sample()) for _ in range(3))
    logger.debug("Sampled color %s", color)
    return color


def with_alpha(color: str, alpha: str) -> str:
    """Append a 2-hex-digit alpha suffix to a ``#rrggbb`` color."""
    return color + alpha
