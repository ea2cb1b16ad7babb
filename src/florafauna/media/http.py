"""Shared HTTP client construction and download helpers."""

import logging

import httpx

from florafauna.config.models import HttpConfig

logger = logging.getLogger(__name__)

# Transport failures plus the errors a malformed JSON payload produces when indexed
FETCH_ERRORS: tuple[type[Exception], ...] = (
    httpx.HTTPError,
    ValueError,
    KeyError,
    IndexError,
    TypeError,
    AttributeError,
)


def create_http_client(config: HttpConfig) -> httpx.AsyncClient:
    """Create the async client used for every outbound lookup.

    Each request is bounded by ``config.timeout_seconds``; there are no retries.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout_seconds),
        headers={"User-Agent": config.user_agent},
        follow_redirects=True,
    )


async def download_bytes(client: httpx.AsyncClient, url: str) -> bytes | None:
    """Download a resource, returning None on any transport failure."""
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Download failed for %s: %s", url, e)
        return None
    return response.content
