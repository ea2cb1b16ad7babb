"""External media lookups: species images and offline encyclopedia articles."""

from florafauna.media.articles import ArticleFetcher, OfflineArticle
from florafauna.media.http import create_http_client, download_bytes
from florafauna.media.images import (
    ImageProvider,
    ImageResolver,
    INaturalistImageProvider,
    WikipediaImageProvider,
)

__all__ = [
    "ArticleFetcher",
    "INaturalistImageProvider",
    "ImageProvider",
    "ImageResolver",
    "OfflineArticle",
    "WikipediaImageProvider",
    "create_http_client",
    "download_bytes",
]
