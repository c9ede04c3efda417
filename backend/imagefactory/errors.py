"""Error kinds raised by the image pipeline.

All of them surface to the HTTP adapter as a failed request; the only
retrying done inside the core is the bounded resample loop of the sampler.
"""

from __future__ import annotations


class ImageFactoryError(Exception):
    """Base class for every pipeline failure."""

    kind = "image_factory_error"


class ConfigurationError(ImageFactoryError):
    kind = "configuration_error"


class SamplingExhausted(ImageFactoryError):
    """The normal sampler hit its retry cap without an in-range draw."""

    kind = "sampling_exhausted"


class InvalidIndex(ImageFactoryError):
    """A catalog index fell outside the catalog (or the catalog is empty)."""

    kind = "invalid_index"


class AssetLoadError(ImageFactoryError):
    """A mask or piece file is missing or cannot be decoded."""

    kind = "asset_load_error"


class EncodingError(ImageFactoryError):
    kind = "encoding_error"


class StorageError(ImageFactoryError):
    """Raised by the blob storage client; never retried by the core."""

    kind = "storage_error"
