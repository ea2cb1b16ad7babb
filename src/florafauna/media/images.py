"""Species image resolution.

Providers are tried in a fixed priority order: the encyclopedia's page
image API first, then the citizen-science taxa API. The first non-empty
image URL wins. Every provider attempt is isolated, so a failure in one
never prevents trying the next.
"""

import logging
from typing import Any, Protocol

import httpx

from florafauna.config.models import ArchiveConfig, SourcesConfig
from florafauna.media.http import FETCH_ERRORS
from florafauna.species.models import SpeciesRecord

logger = logging.getLogger(__name__)


class ImageProvider(Protocol):
    """A single source of species image URLs."""

    name: str

    async def find_image(self, client: httpx.AsyncClient, title: str) -> str | None:
        """Return an image URL for the given search title, or None."""
        ...


class WikipediaImageProvider:
    """Page thumbnail lookup through the MediaWiki ``pageimages`` API."""

    name = "wikipedia"

    def __init__(self, api_url: str, thumbnail_size: int = 1200):
        self.api_url = api_url
        self.thumbnail_size = thumbnail_size

    async def find_image(self, client: httpx.AsyncClient, title: str) -> str | None:
        """Return the lead image thumbnail for the page titled ``title``."""
        response = await client.get(
            self.api_url,
            params={
                "action": "query",
                "titles": title,
                "prop": "pageimages",
                "format": "json",
                "pithumbsize": self.thumbnail_size,
            },
        )
        response.raise_for_status()
        pages: dict[str, Any] = response.json()["query"]["pages"]
        if not pages:
            return None
        page_id = next(iter(pages))
        if page_id == "-1":
            return None
        thumbnail = pages[page_id].get("thumbnail") or {}
        return thumbnail.get("source") or None


class INaturalistImageProvider:
    """Default taxon photo lookup through the iNaturalist taxa API."""

    name = "inaturalist"

    def __init__(self, api_url: str):
        self.api_url = api_url

    async def find_image(self, client: httpx.AsyncClient, title: str) -> str | None:
        """Return the best-ranked taxon's default photo URL."""
        response = await client.get(self.api_url, params={"q": title})
        response.raise_for_status()
        results = response.json().get("results") or []
        if not results:
            return None
        photo = results[0].get("default_photo") or {}
        return photo.get("large_url") or photo.get("medium_url") or None


class ImageResolver:
    """Resolve a best-effort image URL for a species record."""

    def __init__(self, client: httpx.AsyncClient, providers: list[ImageProvider]):
        self.client = client
        self.providers = providers

    @classmethod
    def from_config(
        cls, client: httpx.AsyncClient, sources: SourcesConfig, archive: ArchiveConfig
    ) -> "ImageResolver":
        """Build a resolver with the standard provider order."""
        return cls(
            client,
            [
                WikipediaImageProvider(sources.wikipedia_api_url, archive.thumbnail_size),
                INaturalistImageProvider(sources.inaturalist_api_url),
            ],
        )

    async def resolve_image(self, record: SpeciesRecord) -> str | None:
        """Return the first image URL any provider finds, or None.

        Args:
            record: Species record; its canonical name is the lookup key

        Returns:
            Image URL, or None when no provider has an image or all fail
        """
        title = record.search_title
        if not title:
            return None

        for provider in self.providers:
            try:
                url = await provider.find_image(self.client, title)
            except FETCH_ERRORS as e:
                logger.warning(
                    "Image lookup via %s failed for %s: %s", provider.name, record.canonical_name, e
                )
                continue
            if url:
                logger.debug("Image for %s found via %s", record.canonical_name, provider.name)
                return url

        logger.info("No image available for %s", record.canonical_name)
        return None
