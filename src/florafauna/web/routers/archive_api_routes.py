"""Archive API routes for building and downloading the offline library."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Response

from florafauna.archive.exceptions import ArchiveBuildInProgressError
from florafauna.archive.jobs import ArchiveJobManager
from florafauna.species.store import SpeciesStore
from florafauna.web.core.container import Container
from florafauna.web.models.archive import ArchiveActionResponse, ArchiveStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/archive")


@router.post("/build", status_code=202)
@inject
async def start_archive_build(
    store: Annotated[SpeciesStore, Depends(Provide[Container.species_store])],
    job_manager: Annotated[ArchiveJobManager, Depends(Provide[Container.archive_job_manager])],
) -> ArchiveStatusResponse:
    """Start building the offline library in the background.

    Returns 409 while another build is running.
    """
    try:
        status = job_manager.start(store.records)
    except ArchiveBuildInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return ArchiveStatusResponse.from_status(status)


@router.get("/status")
@inject
async def get_archive_status(
    job_manager: Annotated[ArchiveJobManager, Depends(Provide[Container.archive_job_manager])],
) -> ArchiveStatusResponse:
    """Get the current build state and progress."""
    return ArchiveStatusResponse.from_status(job_manager.status())


@router.post("/cancel")
@inject
async def cancel_archive_build(
    job_manager: Annotated[ArchiveJobManager, Depends(Provide[Container.archive_job_manager])],
) -> ArchiveActionResponse:
    """Stop the running build before its next record."""
    if job_manager.cancel():
        return ArchiveActionResponse(success=True, message="Cancellation requested")
    return ArchiveActionResponse(success=False, error="No archive build is running")


@router.get("/download")
@inject
async def download_archive(
    job_manager: Annotated[ArchiveJobManager, Depends(Provide[Container.archive_job_manager])],
) -> Response:
    """Download the finished offline library."""
    data = job_manager.result()
    if data is None:
        raise HTTPException(status_code=404, detail="No offline library has been built yet")

    return Response(
        content=data,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{job_manager.file_name}"'},
    )
