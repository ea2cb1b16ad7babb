"""Offline archive package.

This package builds the downloadable offline library:
- ArchiveDirectory / ArchiveFile: In-memory archive tree
- PageRenderer: Species detail and library index pages
- ArchiveBuilder: Per-record orchestration with progress reporting
- serialize_archive: ZIP container output
- ArchiveJobManager: Background builds for the web interface
"""

from florafauna.archive.builder import ArchiveBuilder, BuildProgress, image_extension
from florafauna.archive.exceptions import (
    ArchiveBuildCancelledError,
    ArchiveBuildInProgressError,
    ArchiveError,
    ArchiveSerializationError,
)
from florafauna.archive.jobs import ArchiveJobManager, JobState, JobStatus
from florafauna.archive.renderer import IndexEntry, PageRenderer
from florafauna.archive.serializer import serialize_archive
from florafauna.archive.tree import ArchiveDirectory, ArchiveFile, folder_key

__all__ = [
    "ArchiveBuildCancelledError",
    "ArchiveBuildInProgressError",
    "ArchiveBuilder",
    "ArchiveDirectory",
    "ArchiveError",
    "ArchiveFile",
    "ArchiveJobManager",
    "ArchiveSerializationError",
    "BuildProgress",
    "IndexEntry",
    "JobState",
    "JobStatus",
    "PageRenderer",
    "folder_key",
    "image_extension",
    "serialize_archive",
]
