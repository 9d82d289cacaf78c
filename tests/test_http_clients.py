"""Tests for HTTP-based adapters."""

import asyncio

import httpx
import pytest

from renovation_preview.adapters.http_image_client import HttpxImageClient


def test_image_client_fetches_absolute_url() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == "https://images.test/a.png"
        return httpx.Response(200, content=b"png-bytes")

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxImageClient(base_url="http://app.test", http_client=async_client)

    assert asyncio.run(client.fetch_bytes("https://images.test/a.png")) == b"png-bytes"


def test_image_client_resolves_relative_url() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, content=b"ok")

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxImageClient(base_url="http://app.test/", http_client=async_client)

    asyncio.run(client.fetch_bytes("/uploads/photo.jpg"))

    assert seen == ["http://app.test/uploads/photo.jpg"]
    assert client.resolve_url("uploads/a.png") == "http://app.test/uploads/a.png"


def test_image_client_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxImageClient(base_url="http://app.test", http_client=async_client)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.fetch_bytes("/missing.png"))


def test_image_client_close() -> None:
    client = HttpxImageClient.create("http://app.test", timeout=5.0)

    asyncio.run(client.close())

    assert client.http_client.is_closed
    assert client.timeout == 5.0
