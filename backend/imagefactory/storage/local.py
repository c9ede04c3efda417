"""Single-file persistence of the most recently generated image."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def write_latest_sync(data: bytes, path: Path | str) -> Path:
    """Atomically replace ``path`` with ``data``; concurrent writers never interleave."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, target)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %d bytes to %s", len(data), target)
    return target


async def write_latest(data: bytes, path: Path | str) -> Path:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, write_latest_sync, data, path)
