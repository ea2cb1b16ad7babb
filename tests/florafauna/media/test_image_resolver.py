"""Tests for species image resolution."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from florafauna.config.models import ArchiveConfig, SourcesConfig
from florafauna.media.images import (
    ImageResolver,
    INaturalistImageProvider,
    WikipediaImageProvider,
)
from florafauna.species.models import SpeciesRecord

WIKI_API = "https://en.wikipedia.org/w/api.php"
INAT_API = "https://api.inaturalist.org/v1/taxa"


def wiki_payload(source: str | None) -> dict:
    """Build a pageimages response for one page."""
    page = {"pageid": 42, "title": "Vulpes vulpes"}
    if source:
        page["thumbnail"] = {"source": source, "width": 1200, "height": 800}
    return {"query": {"pages": {"42": page}}}


class TestWikipediaImageProvider:
    """Test the encyclopedia page image lookup."""

    @pytest.mark.asyncio
    async def test_returns_thumbnail_source(self, mock_http_client, make_response):
        """Should return the page thumbnail URL."""
        mock_http_client.get.return_value = make_response(
            wiki_payload("https://upload.wikimedia.org/fox.jpg")
        )
        provider = WikipediaImageProvider(WIKI_API, thumbnail_size=800)

        url = await provider.find_image(mock_http_client, "Vulpes vulpes")

        assert url == "https://upload.wikimedia.org/fox.jpg"
        params = mock_http_client.get.call_args.kwargs["params"]
        assert params["titles"] == "Vulpes vulpes"
        assert params["prop"] == "pageimages"
        assert params["pithumbsize"] == 800

    @pytest.mark.asyncio
    async def test_missing_page(self, mock_http_client, make_response):
        """Should return None for the missing-page marker."""
        mock_http_client.get.return_value = make_response(
            {"query": {"pages": {"-1": {"missing": ""}}}}
        )

        url = await WikipediaImageProvider(WIKI_API).find_image(mock_http_client, "Nope")

        assert url is None

    @pytest.mark.asyncio
    async def test_page_without_thumbnail(self, mock_http_client, make_response):
        """Should return None when the page has no lead image."""
        mock_http_client.get.return_value = make_response(wiki_payload(None))

        assert await WikipediaImageProvider(WIKI_API).find_image(mock_http_client, "X") is None


class TestINaturalistImageProvider:
    """Test the taxa photo lookup."""

    @pytest.mark.asyncio
    async def test_prefers_large_photo(self, mock_http_client, make_response):
        """Should return the large URL of the first result."""
        mock_http_client.get.return_value = make_response(
            {
                "results": [
                    {
                        "default_photo": {
                            "medium_url": "https://inat.example/medium.jpg",
                            "large_url": "https://inat.example/large.jpg",
                        }
                    },
                    {"default_photo": {"large_url": "https://inat.example/other.jpg"}},
                ]
            }
        )

        url = await INaturalistImageProvider(INAT_API).find_image(mock_http_client, "Vulpes")

        assert url == "https://inat.example/large.jpg"
        assert mock_http_client.get.call_args.kwargs["params"] == {"q": "Vulpes"}

    @pytest.mark.asyncio
    async def test_falls_back_to_medium_photo(self, mock_http_client, make_response):
        """Should use the medium URL when no large one exists."""
        mock_http_client.get.return_value = make_response(
            {"results": [{"default_photo": {"medium_url": "https://inat.example/medium.jpg"}}]}
        )

        url = await INaturalistImageProvider(INAT_API).find_image(mock_http_client, "Vulpes")

        assert url == "https://inat.example/medium.jpg"

    @pytest.mark.asyncio
    async def test_no_results(self, mock_http_client, make_response):
        """Should return None for an empty result list."""
        mock_http_client.get.return_value = make_response({"results": []})

        assert await INaturalistImageProvider(INAT_API).find_image(mock_http_client, "X") is None


class TestImageResolver:
    """Test provider ordering and failure isolation."""

    @pytest.fixture
    def providers(self):
        """Provide two mocked providers in priority order."""
        first = MagicMock(spec=WikipediaImageProvider)
        first.name = "wikipedia"
        first.find_image = AsyncMock()
        second = MagicMock(spec=INaturalistImageProvider)
        second.name = "inaturalist"
        second.find_image = AsyncMock()
        return first, second

    @pytest.mark.asyncio
    async def test_first_provider_wins(self, mock_http_client, providers, red_fox):
        """Should not consult later providers once one returns a URL."""
        first, second = providers
        first.find_image.return_value = "https://a.example/fox.jpg"
        resolver = ImageResolver(mock_http_client, [first, second])

        assert await resolver.resolve_image(red_fox) == "https://a.example/fox.jpg"
        second.find_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_through_on_empty_result(self, mock_http_client, providers, red_fox):
        """Should try the next provider when one finds nothing."""
        first, second = providers
        first.find_image.return_value = None
        second.find_image.return_value = "https://b.example/fox.jpg"
        resolver = ImageResolver(mock_http_client, [first, second])

        assert await resolver.resolve_image(red_fox) == "https://b.example/fox.jpg"

    @pytest.mark.asyncio
    async def test_falls_through_on_failure(self, mock_http_client, providers, red_fox):
        """Should isolate a failing provider from the next one."""
        first, second = providers
        first.find_image.side_effect = httpx.ConnectTimeout("timed out")
        second.find_image.return_value = "https://b.example/fox.jpg"
        resolver = ImageResolver(mock_http_client, [first, second])

        assert await resolver.resolve_image(red_fox) == "https://b.example/fox.jpg"

    @pytest.mark.asyncio
    async def test_malformed_payload_is_absorbed(self, mock_http_client, make_response, red_fox):
        """Should treat unexpected JSON shapes as no image."""
        mock_http_client.get.return_value = make_response({"unexpected": True})
        resolver = ImageResolver.from_config(mock_http_client, SourcesConfig(), ArchiveConfig())

        assert await resolver.resolve_image(red_fox) is None
        assert mock_http_client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_uses_search_title(self, mock_http_client, providers):
        """Should query by the canonical name without qualifiers."""
        first, second = providers
        first.find_image.return_value = "https://a.example/wattle.jpg"
        resolver = ImageResolver(mock_http_client, [first, second])

        await resolver.resolve_image(SpeciesRecord(canonical_name="Acacia dealbata (wattle)"))

        first.find_image.assert_awaited_once_with(mock_http_client, "Acacia dealbata")
