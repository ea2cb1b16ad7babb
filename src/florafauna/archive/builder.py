"""Offline archive builder.

For every record, in store order, the builder:

1. creates a folder named by the record's folder key, replacing any
   folder an earlier record left under the same key,
2. resolves and downloads an image into ``image.<ext>``,
3. fetches the offline encyclopedia article into ``wikipedia.html``,
4. renders ``index.html`` pointing at whichever of those exist,
5. appends the record to the library index,
6. reports progress.

Sub-step failures only remove the affected artifact; a record is never
dropped from the index. After the last record the library index is
written at the archive root and the tree is serialized once.
"""

import asyncio
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath
from urllib.parse import unquote, urlsplit

import httpx

from florafauna.archive.exceptions import ArchiveBuildCancelledError
from florafauna.archive.renderer import OFFLINE_ARTICLE_FILE, IndexEntry, PageRenderer
from florafauna.archive.serializer import serialize_archive
from florafauna.archive.tree import ArchiveDirectory, folder_key
from florafauna.config.models import LibraryConfig
from florafauna.media.articles import ArticleFetcher
from florafauna.media.http import download_bytes
from florafauna.media.images import ImageResolver
from florafauna.species.models import SpeciesRecord

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

PAGE_FILE = "index.html"
IMAGE_STEM = "image"
MAX_EXTENSION_LENGTH = 5


@dataclass
class BuildProgress:
    """Records completed out of records to process."""

    total: int
    completed: int = 0

    @property
    def percent(self) -> int:
        """Completion percentage, rounded half up.

        Only a finished build reports 100; an empty build is finished.
        """
        if self.total <= 0:
            return 100
        percent = math.floor(100 * self.completed / self.total + 0.5)
        if self.completed < self.total:
            return min(percent, 99)
        return percent

    def advance(self) -> int:
        """Count one more finished record and return the new percentage."""
        self.completed = min(self.completed + 1, self.total)
        return self.percent


def image_extension(url: str, default: str = "jpg") -> str:
    """Return the file extension of an image URL's path, or ``default``.

    >>> image_extension("https://example.org/thumb/320px-Vulpes.jpg?x=1")
    'jpg'
    """
    suffix = PurePosixPath(unquote(urlsplit(url).path)).suffix.lstrip(".")
    if suffix and suffix.isalnum() and len(suffix) <= MAX_EXTENSION_LENGTH:
        return suffix
    return default


class ArchiveBuilder:
    """Build the offline library archive for a sequence of records.

    One builder owns one tree per build; builds on the same instance must
    not overlap.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        image_resolver: ImageResolver,
        article_fetcher: ArticleFetcher,
        renderer: PageRenderer,
        config: LibraryConfig,
    ):
        self.client = client
        self.image_resolver = image_resolver
        self.article_fetcher = article_fetcher
        self.renderer = renderer
        self.config = config

    @classmethod
    def from_config(cls, client: httpx.AsyncClient, config: LibraryConfig) -> "ArchiveBuilder":
        """Wire a builder with the standard image, article and page collaborators."""
        return cls(
            client,
            ImageResolver.from_config(client, config.sources, config.archive),
            ArticleFetcher.from_config(client, config.sources),
            PageRenderer(config.sources),
            config,
        )

    async def build_archive(
        self,
        records: Sequence[SpeciesRecord],
        on_progress: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> bytes:
        """Build the tree for ``records`` and serialize it into one ZIP.

        Args:
            records: Records in the order they should appear in the library index
            on_progress: Called with an integer percent after every record
            cancel_event: When set, the build stops before starting the next record

        Returns:
            ZIP container bytes

        Raises:
            ArchiveSerializationError: If the container cannot be written
            ArchiveBuildCancelledError: If ``cancel_event`` was set mid-build
        """
        root = await self.build_tree(records, on_progress, cancel_event)
        return serialize_archive(root)

    async def build_tree(
        self,
        records: Sequence[SpeciesRecord],
        on_progress: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> ArchiveDirectory:
        """Build the in-memory archive tree without serializing it."""
        root = ArchiveDirectory(self.config.archive.root_dir_name)
        progress = BuildProgress(total=len(records))
        entries: list[IndexEntry] = []

        logger.info("Starting archive build for %d records", progress.total)

        for record in records:
            if cancel_event is not None and cancel_event.is_set():
                self._write_library_index(root, entries)
                logger.warning(
                    "Archive build cancelled after %d/%d records",
                    progress.completed,
                    progress.total,
                )
                raise ArchiveBuildCancelledError(root, progress)

            entries.append(await self._build_record(root, record))
            percent = progress.advance()
            if on_progress is not None:
                on_progress(percent)

        self._write_library_index(root, entries)
        if not records and on_progress is not None:
            on_progress(progress.percent)

        logger.info("Archive build finished: %d records", progress.completed)
        return root

    async def _build_record(self, root: ArchiveDirectory, record: SpeciesRecord) -> IndexEntry:
        """Write one record's folder and return its library index entry."""
        key = folder_key(record.display_name)
        if key in root.children:
            logger.warning("Folder %s already exists; %s replaces it", key, record.canonical_name)
        directory = root.replace_directory(key)

        try:
            image_path = await self._attach_image(directory, record)
            has_article = await self._attach_article(directory, record)
            directory.write(
                PAGE_FILE, self.renderer.render_detail_page(record, image_path, has_article)
            )
        except Exception as e:
            logger.error("Failed to build archive pages for %s: %s", record.canonical_name, e)
            directory.write(PAGE_FILE, self.renderer.render_fallback_page(record))

        return IndexEntry(folder_key=key, display_name=record.display_name)

    async def _attach_image(self, directory: ArchiveDirectory, record: SpeciesRecord) -> str | None:
        """Resolve and store the record's image; return its relative file name."""
        try:
            url = await self.image_resolver.resolve_image(record)
            if not url:
                return None
            content = await download_bytes(self.client, url)
            if content is None:
                return None
            file_name = (
                f"{IMAGE_STEM}.{image_extension(url, self.config.archive.default_image_extension)}"
            )
            directory.write(file_name, content)
            return file_name
        except Exception as e:
            logger.warning("Image unavailable for %s: %s", record.canonical_name, e)
            return None

    async def _attach_article(self, directory: ArchiveDirectory, record: SpeciesRecord) -> bool:
        """Fetch and store the offline article; return whether one was written."""
        try:
            article = await self.article_fetcher.fetch_offline_article(record.canonical_name)
            if article is None:
                return False
            directory.write(OFFLINE_ARTICLE_FILE, article.text)
            return True
        except Exception as e:
            logger.warning("Offline article unavailable for %s: %s", record.canonical_name, e)
            return False

    def _write_library_index(self, root: ArchiveDirectory, entries: list[IndexEntry]) -> None:
        root.write(PAGE_FILE, self.renderer.render_index_page(self.config.library_name, entries))
