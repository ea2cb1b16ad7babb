"""Background archive builds for the web interface.

The manager runs at most one build at a time and exposes what the UI
needs: a percent stream while running and the finished container once
ready.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from florafauna.archive.builder import ArchiveBuilder
from florafauna.archive.exceptions import ArchiveBuildCancelledError, ArchiveBuildInProgressError
from florafauna.species.models import SpeciesRecord

logger = logging.getLogger(__name__)


class JobState(StrEnum):
    """Lifecycle of the archive build job."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class JobStatus:
    """Snapshot of the job for status polling."""

    state: JobState
    percent: int
    completed: int
    total: int
    ready: bool
    error: str | None = None

    @property
    def label(self) -> str:
        """Button label for the current state."""
        if self.state is JobState.RUNNING:
            return f"Building... {self.percent}%"
        if self.state is JobState.COMPLETED:
            return "Save Offline Library"
        if self.state is JobState.FAILED:
            return "Build Failed - Retry"
        return "Download Offline Library"


class ArchiveJobManager:
    """Run archive builds in the background and hold the finished container."""

    def __init__(self, builder_factory: Callable[[], ArchiveBuilder], file_name: str):
        self.builder_factory = builder_factory
        self.file_name = file_name
        self._state = JobState.IDLE
        self._percent = 0
        self._completed = 0
        self._total = 0
        self._error: str | None = None
        self._result: bytes | None = None
        self._task: asyncio.Task[None] | None = None
        self._cancel_event: asyncio.Event | None = None

    @property
    def is_running(self) -> bool:
        """Whether a build is in progress."""
        return self._state is JobState.RUNNING

    def status(self) -> JobStatus:
        """Return the current job snapshot."""
        return JobStatus(
            state=self._state,
            percent=self._percent,
            completed=self._completed,
            total=self._total,
            ready=self._result is not None,
            error=self._error,
        )

    def result(self) -> bytes | None:
        """Return the finished container, if any."""
        return self._result

    def start(self, records: Sequence[SpeciesRecord]) -> JobStatus:
        """Start a new build, discarding any previous result.

        Raises:
            ArchiveBuildInProgressError: If a build is already running
        """
        if self.is_running:
            raise ArchiveBuildInProgressError("An archive build is already running")

        self._state = JobState.RUNNING
        self._percent = 0
        self._completed = 0
        self._total = len(records)
        self._error = None
        self._result = None
        self._cancel_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(list(records), self._cancel_event))
        logger.info("Queued archive build for %d records", self._total)
        return self.status()

    def cancel(self) -> bool:
        """Ask the running build to stop before its next record."""
        if not self.is_running or self._cancel_event is None:
            return False
        self._cancel_event.set()
        return True

    async def wait(self) -> JobStatus:
        """Wait for the current build, if any, to finish."""
        if self._task is not None:
            await asyncio.shield(self._task)
        return self.status()

    async def shutdown(self) -> None:
        """Stop any running build."""
        if self._task is None or self._task.done():
            return
        self.cancel()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    def _on_progress(self, percent: int) -> None:
        self._completed = min(self._completed + 1, self._total)
        self._percent = max(self._percent, percent)

    async def _run(self, records: list[SpeciesRecord], cancel_event: asyncio.Event) -> None:
        builder = self.builder_factory()
        try:
            self._result = await builder.build_archive(records, self._on_progress, cancel_event)
            self._state = JobState.COMPLETED
            logger.info("Archive ready: %d bytes", len(self._result))
        except ArchiveBuildCancelledError:
            self._state = JobState.CANCELLED
        except Exception as e:
            logger.error("Archive build failed: %s", e)
            self._error = str(e)
            self._state = JobState.FAILED
