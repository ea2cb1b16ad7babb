"""Static page rendering for offline archives.

Rendering is pure: the same record, image path and article flag always
produce byte-identical HTML.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from html import escape
from urllib.parse import quote

from jinja2 import Environment

from florafauna.config.models import SourcesConfig
from florafauna.species.models import SpeciesRecord
from florafauna.templating import create_environment

DETAIL_TEMPLATE = "detail.html.j2"
INDEX_TEMPLATE = "index.html.j2"

OFFLINE_ARTICLE_FILE = "wikipedia.html"
LIBRARY_INDEX_HREF = "../index.html"

FALLBACK_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<p><a href="{library_href}">&larr; Back to library</a></p>
<h1>{title}</h1>
<p><i>{canonical_name}</i></p>
<p>Details for this species could not be rendered.</p>
</body>
</html>
"""


@dataclass(frozen=True)
class IndexEntry:
    """One line of the library index."""

    folder_key: str
    display_name: str


@dataclass(frozen=True)
class ExternalLinks:
    """Outbound links shown on a detail page."""

    biodiversity: str
    wikipedia: str
    inaturalist: str


class PageRenderer:
    """Render species detail pages and the library index."""

    def __init__(
        self, sources: SourcesConfig | None = None, environment: Environment | None = None
    ):
        self.sources = sources or SourcesConfig()
        self.environment = environment or create_environment()

    def external_links(self, record: SpeciesRecord, has_offline_article: bool) -> ExternalLinks:
        """Build the three outbound links for a record.

        The encyclopedia link targets the local article copy when one exists.
        """
        name = record.canonical_name
        if has_offline_article:
            wikipedia = f"./{OFFLINE_ARTICLE_FILE}"
        else:
            wikipedia = f"{self.sources.wikipedia_base_url}/wiki/{quote(name, safe='')}"
        return ExternalLinks(
            biodiversity=f"{self.sources.biodiversity_base_url}/{name.replace(' ', '_')}",
            wikipedia=wikipedia,
            inaturalist=f"{self.sources.inaturalist_search_url}?q={quote(name, safe='')}",
        )

    def render_detail_page(
        self,
        record: SpeciesRecord,
        local_image_path: str | None,
        has_offline_article: bool,
        *,
        library_href: str = LIBRARY_INDEX_HREF,
    ) -> str:
        """Render the detail page for one species.

        Args:
            record: Species to render
            local_image_path: Image ``src`` relative to the page, or None for a placeholder
            has_offline_article: Whether ``wikipedia.html`` sits beside the page
            library_href: Target of the "back to library" link

        Returns:
            Complete HTML document
        """
        template = self.environment.get_template(DETAIL_TEMPLATE)
        return template.render(
            record=record,
            image_path=local_image_path,
            has_offline_article=has_offline_article,
            links=self.external_links(record, has_offline_article),
            library_href=library_href,
        )

    def render_index_page(self, library_name: str, entries: Sequence[IndexEntry]) -> str:
        """Render the library index listing every entry in order."""
        template = self.environment.get_template(INDEX_TEMPLATE)
        return template.render(library_name=library_name, entries=entries)

    def render_fallback_page(
        self, record: SpeciesRecord, *, library_href: str = LIBRARY_INDEX_HREF
    ) -> str:
        """Render a minimal detail page without templates.

        Used when the full page cannot be rendered so the record's folder
        still holds an ``index.html``.
        """
        name = escape(record.display_name)
        return FALLBACK_PAGE.format(
            title=name,
            canonical_name=escape(record.canonical_name),
            library_href=escape(library_href),
        )
