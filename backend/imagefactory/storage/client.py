"""Blob storage client — uploads encoded images and returns their content identifier.

Speaks the NFT.Storage-style ``POST /upload`` API: raw bytes in, JSON
``{"ok": true, "value": {"cid": "..."}}`` out. No retries.
"""

from __future__ import annotations

import logging

import httpx

from imagefactory.errors import StorageError

logger = logging.getLogger(__name__)


class BlobStorageClient:
    def __init__(
        self,
        endpoint: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.token = token
        self.timeout = timeout
        self._transport = transport

    async def store(self, data: bytes, content_type: str = "image/png") -> str:
        """Upload ``data`` and return its content identifier."""
        if not self.token:
            raise StorageError("storage token not configured — set STORAGE_TOKEN in .env")

        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": content_type,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint, content=data, headers=headers)
        except httpx.HTTPError as e:
            raise StorageError(f"upload to {self.endpoint} failed: {e}") from e

        if response.is_error:
            raise StorageError(
                f"upload rejected with HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise StorageError("storage response is not JSON") from e

        if not isinstance(body, dict) or not body.get("ok"):
            message = body.get("error") if isinstance(body, dict) else body
            raise StorageError(f"storage service reported failure: {message}")

        cid = (body.get("value") or {}).get("cid")
        if not cid:
            raise StorageError("storage response has no cid")

        logger.info("Stored %d bytes as %s", len(data), cid)
        return str(cid)
