"""Archive build errors.

Only serialization failures are fatal to a build; everything that goes
wrong while processing an individual record is logged and absorbed.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from florafauna.archive.builder import BuildProgress
    from florafauna.archive.tree import ArchiveDirectory


class ArchiveError(Exception):
    """Base class for archive errors."""


class ArchiveSerializationError(ArchiveError):
    """The in-memory tree could not be written as a container."""


class ArchiveBuildCancelledError(ArchiveError):
    """A build stopped before processing every record.

    The partially built tree is still complete up to the last finished
    record (its root index lists exactly those records) and can be serialized.
    """

    def __init__(self, root: "ArchiveDirectory", progress: "BuildProgress"):
        super().__init__(f"Archive build cancelled after {progress.completed}/{progress.total}")
        self.root = root
        self.progress = progress


class ArchiveBuildInProgressError(ArchiveError):
    """A build was requested while another one is still running."""
