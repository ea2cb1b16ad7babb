"""Species view routes for the library list and detail pages."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from florafauna.archive.jobs import ArchiveJobManager
from florafauna.archive.renderer import PageRenderer
from florafauna.config import LibraryConfig
from florafauna.media.images import ImageResolver
from florafauna.species.store import SpeciesStore
from florafauna.web.core.container import Container

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
@inject
async def get_species_list(
    request: Request,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[LibraryConfig, Depends(Provide[Container.config])],
    store: Annotated[SpeciesStore, Depends(Provide[Container.species_store])],
    job_manager: Annotated[ArchiveJobManager, Depends(Provide[Container.archive_job_manager])],
) -> HTMLResponse:
    """Render the species list with the offline library button."""
    return templates.TemplateResponse(
        request,
        "species_list.html.j2",
        {
            "library_name": config.library_name,
            "records": store.records,
            "status": job_manager.status(),
        },
    )


@router.get("/species/{canonical_name}", response_class=HTMLResponse)
@inject
async def get_species_detail(
    canonical_name: str,
    store: Annotated[SpeciesStore, Depends(Provide[Container.species_store])],
    renderer: Annotated[PageRenderer, Depends(Provide[Container.page_renderer])],
    image_resolver: Annotated[ImageResolver, Depends(Provide[Container.image_resolver])],
) -> HTMLResponse:
    """Render the live detail page for one species.

    The page is the same one written into the offline archive, except that
    the image is hot-linked and the encyclopedia link points online.
    """
    record = store.get(canonical_name)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Unknown species: {canonical_name}")

    image_url = await image_resolver.resolve_image(record)
    html = renderer.render_detail_page(record, image_url, False, library_href="/")
    return HTMLResponse(html)
