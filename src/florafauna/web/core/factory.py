"""Application factory for creating the FastAPI application with dependency injection."""

from fastapi import FastAPI

from florafauna.web.core.container import Container
from florafauna.web.core.lifespan import lifespan
from florafauna.web.routers import archive_api_routes, species_view_routes


def create_app() -> FastAPI:
    """Create FastAPI application with dependency injection.

    Returns:
        FastAPI: The configured application instance.
    """
    container = Container()

    app = FastAPI(
        lifespan=lifespan,
        title="Flora & Fauna Library API",
        description="Species reference browser and offline archive builder",
        version="1.0.0",
    )
    app.container = container  # type: ignore[attr-defined]

    container.wire(
        modules=[
            "florafauna.web.routers.archive_api_routes",
            "florafauna.web.routers.species_view_routes",
        ]
    )

    # === API Routes ===
    app.include_router(archive_api_routes.router, prefix="/api", tags=["Archive API"])

    # === View Routes (excluded from API documentation) ===
    app.include_router(
        species_view_routes.router,
        tags=["Species Views"],
        include_in_schema=False,
    )

    return app
