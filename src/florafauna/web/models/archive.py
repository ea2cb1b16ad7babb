"""Archive build API contract models."""

from pydantic import BaseModel, Field

from florafauna.archive.jobs import JobStatus


class ArchiveStatusResponse(BaseModel):
    """Response model for archive build status."""

    state: str = Field(..., description="idle, running, completed, failed or cancelled")
    percent: int = Field(..., ge=0, le=100, description="Build progress percentage")
    completed: int = Field(..., description="Records processed so far")
    total: int = Field(..., description="Records in the build")
    ready: bool = Field(..., description="Whether the archive can be downloaded")
    label: str = Field(..., description="Button label for the current state")
    error: str | None = None

    @classmethod
    def from_status(cls, status: JobStatus) -> "ArchiveStatusResponse":
        """Convert a job snapshot into the API response."""
        return cls(
            state=status.state.value,
            percent=status.percent,
            completed=status.completed,
            total=status.total,
            ready=status.ready,
            label=status.label,
            error=status.error,
        )


class ArchiveActionResponse(BaseModel):
    """Response model for archive actions."""

    success: bool
    message: str | None = None
    error: str | None = None
