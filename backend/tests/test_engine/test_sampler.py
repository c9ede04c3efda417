"""Tests for the Box–Muller normal sampler and color sampling."""

from __future__ import annotations

import itertools
import random
import re

import numpy as np
import pytest

from imagefactory.engine.sampler import NormalSampler, channel_hex, sample_color, with_alpha
from imagefactory.errors import SamplingExhausted
from tests.conftest import scripted

_HEX_COLOR = re.compile(r"^#[0-9a-f]{6}$")


@pytest.fixture
def draws() -> np.ndarray:
    sampler = NormalSampler(random.Random(20240101).random)
    return np.array([sampler.sample() for _ in range(20_000)])


class TestRange:
    def test_always_in_unit_interval(self, draws):
        assert draws.min() >= 0.0
        assert draws.max() <= 1.0

    def test_default_source_in_unit_interval(self):
        sampler = NormalSampler()
        for _ in range(10_000):
            assert 0.0 <= sampler.sample() <= 1.0


class TestDistribution:
    def test_mean_near_half(self, draws):
        assert abs(draws.mean() - 0.5) < 0.005

    def test_sigma_near_tenth(self, draws):
        assert abs(draws.std() - 0.1) < 0.005

    def test_symmetric_about_half(self, draws):
        below = np.mean(draws < 0.5)
        assert abs(below - 0.5) < 0.02

    def test_unimodal(self, draws):
        counts, _ = np.histogram(draws, bins=10, range=(0.0, 1.0))
        peak = int(np.argmax(counts))
        assert peak in (4, 5)
        # Counts rise to the peak and fall after it
        assert all(np.diff(counts[: peak + 1]) >= 0)
        assert all(np.diff(counts[peak:]) <= 0)


class TestBoundaries:
    def test_zero_uniform_is_redrawn(self):
        # u = 0 → redraw u = 0.3; v = 0.25 → cos(pi/2) ≈ 0 → value ≈ 0.5
        source = scripted([0.0, 0.3, 0.25])
        value = NormalSampler(source).sample()
        assert value == pytest.approx(0.5)
        assert source.calls == 3

    def test_zero_v_is_redrawn(self):
        source = scripted([0.3, 0.0, 0.25])
        assert NormalSampler(source).sample() == pytest.approx(0.5)
        assert source.calls == 3

    def test_out_of_range_draw_is_resampled(self):
        # u = 1e-7, v ≈ 0 → z ≈ 5.68 → value ≈ 1.07, rejected
        source = scripted([1e-7, 1e-9, 0.3, 0.25])
        value = NormalSampler(source).sample()
        assert value == pytest.approx(0.5)
        assert source.calls == 4

    def test_exhausted_on_constant_zero(self):
        sampler = NormalSampler(lambda: 0.0, max_attempts=50)
        with pytest.raises(SamplingExhausted):
            sampler.sample()

    def test_exhausted_on_persistent_out_of_range(self):
        source = itertools.cycle([1e-7, 1e-9]).__next__
        with pytest.raises(SamplingExhausted):
            NormalSampler(source, max_attempts=100).sample()

    def test_cap_counts_pair_attempts_not_draws(self):
        # Nine rejected (u, v) pairs (18 draws), then an in-range pair
        values = [1e-7, 1e-9] * 9 + [0.3, 0.25]
        assert NormalSampler(scripted(values), max_attempts=10).sample() == pytest.approx(0.5)
        with pytest.raises(SamplingExhausted):
            NormalSampler(scripted(values), max_attempts=9).sample()

    def test_rejects_non_positive_cap(self):
        with pytest.raises(ValueError):
            NormalSampler(max_attempts=0)


class TestColor:
    def test_format(self):
        sampler = NormalSampler(random.Random(7).random)
        for _ in range(2_000):
            assert _HEX_COLOR.match(sample_color(sampler))

    def test_channel_hex_is_zero_padded(self):
        assert channel_hex(0.0) == "00"
        assert channel_hex(0.02) == "05"
        assert channel_hex(0.5) == "7f"
        assert channel_hex(1.0) == "ff"

    def test_channels_cluster_mid_brightness(self):
        sampler = NormalSampler(random.Random(99).random)
        values = [
            int(c[i : i + 2], 16)
            for c in (sample_color(sampler) for _ in range(3_000))
            for i in (1, 3, 5)
        ]
        assert abs(np.mean(values) - 127) < 3

    def test_channels_independent(self):
        sampler = NormalSampler(random.Random(5).random)
        colors = [sample_color(sampler) for _ in range(3_000)]
        r = np.array([int(c[1:3], 16) for c in colors])
        g = np.array([int(c[3:5], 16) for c in colors])
        assert abs(np.corrcoef(r, g)[0, 1]) < 0.1

    def test_alpha_appended_to_color(self):
        assert with_alpha("#123456", "aa") == "#123456aa"
