"""Tests for the blob storage client (no network — httpx.MockTransport)."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from imagefactory.errors import StorageError
from imagefactory.storage.client import BlobStorageClient

ENDPOINT = "https://storage.test/upload"
CID = "bafkreigh2akiscaildcqabsyg3dfr6chu3fgpregiymsck7e7aqa4s52zy"


def _client(handler, token: str = "secret") -> BlobStorageClient:
    return BlobStorageClient(ENDPOINT, token, timeout=5.0, transport=httpx.MockTransport(handler))


def _store(client: BlobStorageClient, data: bytes = b"\x89PNG...") -> str:
    return asyncio.run(client.store(data))


def test_store_returns_cid():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["type"] = request.headers["Content-Type"]
        seen["body"] = request.content
        return httpx.Response(200, json={"ok": True, "value": {"cid": CID}})

    assert _store(_client(handler), b"png-bytes") == CID
    assert seen == {"auth": "Bearer secret", "type": "image/png", "body": b"png-bytes"}


def test_missing_token():
    with pytest.raises(StorageError, match="token"):
        _store(_client(lambda r: httpx.Response(200), token=""))


def test_http_error_status():
    def handler(request):
        return httpx.Response(401, json={"ok": False, "error": {"message": "bad token"}})

    with pytest.raises(StorageError, match="401"):
        _store(_client(handler))


def test_service_reports_failure():
    def handler(request):
        return httpx.Response(200, json={"ok": False, "error": {"message": "quota"}})

    with pytest.raises(StorageError, match="quota"):
        _store(_client(handler))


def test_response_without_cid():
    def handler(request):
        return httpx.Response(200, json={"ok": True, "value": {}})

    with pytest.raises(StorageError, match="no cid"):
        _store(_client(handler))


def test_non_json_response():
    def handler(request):
        return httpx.Response(200, content=b"<html>oops</html>")

    with pytest.raises(StorageError, match="not JSON"):
        _store(_client(handler))


def test_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(StorageError, match="failed"):
        _store(_client(handler))


def test_not_retried():
    calls = []

    def handler(request):
        calls.append(request.url)
        return httpx.Response(503)

    with pytest.raises(StorageError):
        _store(_client(handler))
    assert len(calls) == 1
