"""Offline encyclopedia article fetching.

One ``action=parse`` request per species returns the article body as an
HTML fragment. The fragment is made safe to open from disk by making
its links absolute: root-relative ``/wiki/...`` links point back at the
online encyclopedia and protocol-relative ``//...`` resources get an
explicit ``https:`` scheme. Nothing else in the markup is touched.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx
from jinja2 import Environment

from florafauna.config.models import SourcesConfig
from florafauna.media.http import FETCH_ERRORS
from florafauna.templating import create_environment

logger = logging.getLogger(__name__)

ARTICLE_TEMPLATE = "article.html.j2"

_WIKI_HREF = re.compile(r"""(\bhref=)(["'])/wiki/""")
_RESOURCE_ATTR = re.compile(
    r"""\b(src|srcset|href|data-src|data-srcset|poster|resource)=(["'])(.*?)\2""", re.DOTALL
)
_PROTOCOL_RELATIVE = re.compile(r"(^\s*|,\s*)//(?=[^/\s])")
_CSS_URL = re.compile(r"""(url\(\s*["']?)//(?=[^/\s])""")


@dataclass(frozen=True)
class OfflineArticle:
    """Self-contained article document for one species."""

    title: str
    source_url: str
    text: str  # Complete standalone HTML document


def article_url(base_url: str, title: str) -> str:
    """Build the canonical online URL for an article title."""
    return f"{base_url}/wiki/{quote(title.replace(' ', '_'))}"


def rewrite_links(fragment: str, base_url: str) -> str:
    """Make an article fragment's links usable from a local file.

    Args:
        fragment: Raw article HTML as returned by the parse API
        base_url: Scheme and host of the encyclopedia, e.g. ``https://en.wikipedia.org``

    Returns:
        The fragment with ``/wiki/`` links and ``//`` resources made absolute
    """
    rewritten = _WIKI_HREF.sub(lambda m: f"{m.group(1)}{m.group(2)}{base_url}/wiki/", fragment)

    def _absolutize(match: re.Match[str]) -> str:
        attribute, quote_char, value = match.groups()
        value = _PROTOCOL_RELATIVE.sub(r"\1https://", value)
        return f"{attribute}={quote_char}{value}{quote_char}"

    rewritten = _RESOURCE_ATTR.sub(_absolutize, rewritten)
    return _CSS_URL.sub(r"\1https://", rewritten)


def _extract_fragment(payload: dict[str, Any]) -> tuple[str, str] | None:
    """Pull (title, html) out of a parse API payload, or None on a lookup error."""
    if "error" in payload:
        logger.debug("Article lookup error: %s", payload["error"])
        return None
    parsed = payload.get("parse") or {}
    text = parsed.get("text")
    # formatversion=1 nests the markup under "*"
    if isinstance(text, dict):
        text = text.get("*")
    if not text:
        return None
    return parsed.get("title") or "", text


class ArticleFetcher:
    """Fetch encyclopedia articles and package them for offline reading."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str,
        base_url: str,
        environment: Environment | None = None,
    ):
        self.client = client
        self.api_url = api_url
        self.base_url = base_url.rstrip("/")
        self.environment = environment or create_environment()

    @classmethod
    def from_config(cls, client: httpx.AsyncClient, sources: SourcesConfig) -> "ArticleFetcher":
        """Build a fetcher for the configured encyclopedia."""
        return cls(client, sources.wikipedia_api_url, sources.wikipedia_base_url)

    async def fetch_offline_article(self, canonical_name: str) -> OfflineArticle | None:
        """Fetch and rewrite the article for a species.

        Args:
            canonical_name: Scientific name; any parenthetical qualifier is ignored

        Returns:
            The offline article, or None when the request fails, the page does
            not exist, or the response carries no HTML
        """
        title = canonical_name.split("(")[0].strip()
        if not title:
            return None

        try:
            response = await self.client.get(
                self.api_url,
                params={
                    "action": "parse",
                    "page": title,
                    "prop": "text",
                    "format": "json",
                    "formatversion": 2,
                    "redirects": 1,
                },
            )
            response.raise_for_status()
            extracted = _extract_fragment(response.json())
        except FETCH_ERRORS as e:
            logger.warning("Article fetch failed for %s: %s", canonical_name, e)
            return None

        if extracted is None:
            logger.info("No article available for %s", canonical_name)
            return None

        page_title, fragment = extracted
        page_title = page_title or title
        source_url = article_url(self.base_url, page_title)
        document = self.render_document(
            page_title, source_url, rewrite_links(fragment, self.base_url)
        )
        return OfflineArticle(title=page_title, source_url=source_url, text=document)

    def render_document(self, title: str, source_url: str, fragment: str) -> str:
        """Wrap a rewritten fragment in a standalone HTML document."""
        template = self.environment.get_template(ARTICLE_TEMPLATE)
        return template.render(title=title, source_url=source_url, fragment=fragment)
