"""Asset discovery — mask catalog and numbered piece library.

The mask directory is listed on every call; nothing is cached, so masks
dropped into the directory are picked up by the next request.
"""

from __future__ import annotations

import logging
from pathlib import Path

from imagefactory.errors import AssetLoadError

logger = logging.getLogger(__name__)


class DirectoryCatalog:
    """Read-only listing of mask image identifiers (file names) in a directory."""

    def __init__(self, directory: Path | str, extensions: list[str] | None = None) -> None:
        self.directory = Path(directory)
        self.extensions = {e.lower() for e in extensions} if extensions else None

    def list(self) -> list[str]:
        """Sorted file names currently in the directory."""
        try:
            entries = sorted(self.directory.iterdir())
        except OSError as e:
            raise AssetLoadError(f"cannot list mask directory {self.directory}: {e}") from e
        names = [
            p.name
            for p in entries
            if p.is_file() and (self.extensions is None or p.suffix.lower() in self.extensions)
        ]
        logger.debug("Mask catalog %s: %d entries", self.directory, len(names))
        return names

    def resolve(self, identifier: str) -> Path:
        return self.directory / identifier


class PieceLibrary:
    """Pieces are stored as ``<n>.png`` for n in [1, count]."""

    def __init__(self, directory: Path | str, count: int = 6) -> None:
        self.directory = Path(directory)
        self.count = count

    def resolve(self, number: int) -> Path:
        return self.directory / f"{number}.png"
