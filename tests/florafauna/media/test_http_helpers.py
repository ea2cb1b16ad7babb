"""Tests for the shared HTTP helpers."""

import httpx
import pytest

from florafauna.config.models import HttpConfig
from florafauna.media.http import create_http_client, download_bytes


@pytest.mark.asyncio
async def test_create_http_client_applies_config():
    """Should bound requests and identify the library."""
    client = create_http_client(HttpConfig(timeout_seconds=5.0, user_agent="TestAgent/1.0"))
    try:
        assert client.timeout.read == 5.0
        assert client.headers["User-Agent"] == "TestAgent/1.0"
        assert client.follow_redirects is True
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_download_bytes(mock_http_client, make_response):
    """Should return the response body."""
    mock_http_client.get.return_value = make_response(content=b"\x89PNG")

    assert await download_bytes(mock_http_client, "https://img.example/fox.png") == b"\x89PNG"


@pytest.mark.asyncio
async def test_download_bytes_http_error(mock_http_client, make_response):
    """Should return None on an error status."""
    mock_http_client.get.return_value = make_response(status_code=404)

    assert await download_bytes(mock_http_client, "https://img.example/missing.png") is None


@pytest.mark.asyncio
async def test_download_bytes_transport_error(mock_http_client):
    """Should return None when the connection fails."""
    mock_http_client.get.side_effect = httpx.ConnectError("refused")

    assert await download_bytes(mock_http_client, "https://img.example/fox.png") is None
