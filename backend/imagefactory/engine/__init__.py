"""Procedural image engine — biased sampling and canvas compositing."""

from imagefactory.engine.compositor import BlendRule, Layout, compose
from imagefactory.engine.generator import GeneratedImage, ImageGenerator
from imagefactory.engine.sampler import NormalSampler, sample_color
from imagefactory.engine.selector import IndexPolicy, select_mask, select_piece

__all__ = [
    "BlendRule",
    "Layout",
    "compose",
    "GeneratedImage",
    "ImageGenerator",
    "NormalSampler",
    "sample_color",
    "IndexPolicy",
    "select_mask",
    "select_piece",
]
