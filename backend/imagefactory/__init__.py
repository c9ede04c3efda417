"""ImageFactory — procedural piece images composited on demand and pushed to blob storage."""

__version__ = "0.1.0"
