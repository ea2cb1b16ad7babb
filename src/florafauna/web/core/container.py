"""Dependency injection container for the Flora & Fauna web application."""

import logging

import httpx
from dependency_injector import containers, providers
from fastapi.templating import Jinja2Templates
from jinja2 import StrictUndefined

from florafauna.archive.builder import ArchiveBuilder
from florafauna.archive.jobs import ArchiveJobManager
from florafauna.archive.renderer import PageRenderer
from florafauna.config import LibraryConfig
from florafauna.media.articles import ArticleFetcher
from florafauna.media.http import create_http_client
from florafauna.media.images import ImageResolver
from florafauna.species.parser import SpeciesDatasetError
from florafauna.species.store import SpeciesStore
from florafauna.system.path_resolver import PathResolver
from florafauna.web.core.config import get_config

logger = logging.getLogger(__name__)


def create_jinja2_templates(resolver: PathResolver) -> Jinja2Templates:
    """Create Jinja2Templates with strict undefined handling.

    Configures Jinja2 to raise errors on undefined variables,
    making missing template context obvious during development.
    """
    templates = Jinja2Templates(directory=str(resolver.get_templates_dir()))
    templates.env.undefined = StrictUndefined
    return templates


def load_species_store(path_resolver: PathResolver, config: LibraryConfig) -> SpeciesStore:
    """Load the configured dataset, serving an empty library if it is unavailable."""
    dataset_path = path_resolver.get_dataset_path(config.dataset_path)
    try:
        return SpeciesStore.from_path(dataset_path)
    except SpeciesDatasetError as e:
        logger.error("Species dataset unavailable: %s", e)
        return SpeciesStore()


def create_client(config: LibraryConfig) -> httpx.AsyncClient:
    """Create the shared outbound HTTP client."""
    return create_http_client(config.http)


class Container(containers.DeclarativeContainer):
    """Application dependency injection container.

    Services are singletons apart from the archive builder, which is
    created fresh for every build.
    """

    path_resolver = providers.Singleton(PathResolver)

    config = providers.Singleton(
        get_config,
        path_resolver=path_resolver,
    )

    templates = providers.Singleton(
        create_jinja2_templates,
        resolver=path_resolver,
    )

    http_client = providers.Singleton(
        create_client,
        config=config,
    )

    species_store = providers.Singleton(
        load_species_store,
        path_resolver=path_resolver,
        config=config,
    )

    image_resolver = providers.Singleton(
        ImageResolver.from_config,
        client=http_client,
        sources=config.provided.sources,
        archive=config.provided.archive,
    )

    article_fetcher = providers.Singleton(
        ArticleFetcher.from_config,
        client=http_client,
        sources=config.provided.sources,
    )

    page_renderer = providers.Singleton(
        PageRenderer,
        sources=config.provided.sources,
    )

    archive_builder = providers.Factory(
        ArchiveBuilder,
        client=http_client,
        image_resolver=image_resolver,
        article_fetcher=article_fetcher,
        renderer=page_renderer,
        config=config,
    )

    archive_job_manager = providers.Singleton(
        ArchiveJobManager,
        builder_factory=archive_builder.provider,
        file_name=config.provided.archive.file_name,
    )
