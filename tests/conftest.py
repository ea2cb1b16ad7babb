from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from dependency_injector import providers

from florafauna.archive.jobs import ArchiveJobManager, JobState, JobStatus
from florafauna.config.models import LibraryConfig
from florafauna.media.images import ImageResolver
from florafauna.species.models import SpeciesRecord
from florafauna.species.parser import parse_species_csv
from florafauna.species.store import SpeciesStore
from florafauna.system.path_resolver import PathResolver
from florafauna.web.core.container import Container
from florafauna.web.core.factory import create_app

SPECIES_CSV = """\
Species Name,Vernacular Name,Scientific Name Authorship,Taxon Rank,Kingdom,Phylum,Class,Order,Family,Genus,Number of Records,Victoria Conservation Status,Western Australia Conservation Status Priority 4,Migratory Agreement
Vulpes vulpes,Red Fox,"(Linnaeus, 1758)",species,Animalia,Chordata,Mammalia,Carnivora,Canidae,Vulpes,1520,,,
Eucalyptus regnans,Mountain Ash,F.Muell.,species,Plantae,Charophyta,Equisetopsida,Myrtales,Myrtaceae,Eucalyptus,87,Vulnerable,,Y
Unknown sp.,,,,,,,,,,,,,
"""  # noqa: E501


@pytest.fixture
def path_resolver(tmp_path: Path) -> PathResolver:
    """Provide a PathResolver whose writable paths live under a temp directory.

    Templates stay on the real package paths; config, dataset and exports are
    redirected so tests never touch the user's data directory.
    """
    resolver = PathResolver()

    temp_data_dir = tmp_path / "data"
    temp_data_dir.mkdir(parents=True)
    temp_config_dir = tmp_path / "config"
    temp_config_dir.mkdir(parents=True)

    resolver.data_dir = temp_data_dir
    resolver.get_data_dir = lambda: temp_data_dir
    resolver.get_config_path = lambda: temp_config_dir / "florafauna.yaml"
    resolver.get_exports_dir = lambda: temp_data_dir / "exports"
    return resolver


@pytest.fixture
def test_config() -> LibraryConfig:
    """Provide a default LibraryConfig."""
    return LibraryConfig()


@pytest.fixture
def species_csv() -> str:
    """Provide a small species-list CSV export."""
    return SPECIES_CSV


@pytest.fixture
def species_csv_path(tmp_path: Path, species_csv: str) -> Path:
    """Write the sample CSV to disk and return its path."""
    path = tmp_path / "species.csv"
    path.write_text(species_csv, encoding="utf-8")
    return path


@pytest.fixture
def species_records(species_csv: str) -> list[SpeciesRecord]:
    """Provide the parsed sample records (Red Fox, Mountain Ash, Unknown sp.)."""
    return parse_species_csv(species_csv)


@pytest.fixture
def red_fox() -> SpeciesRecord:
    """Provide a fully populated record."""
    return SpeciesRecord(
        canonical_name="Vulpes vulpes",
        common_name="Red Fox",
        authorship="(Linnaeus, 1758)",
        taxon_rank="species",
        kingdom="Animalia",
        phylum="Chordata",
        class_name="Mammalia",
        order="Carnivora",
        family="Canidae",
        genus="Vulpes",
        record_count="1520",
    )


@pytest.fixture
def make_response():
    """Provide a factory for mocked httpx responses."""

    def _make_response(
        json_data: Any = None, content: bytes = b"", status_code: int = 200
    ) -> MagicMock:
        response = MagicMock(spec=httpx.Response)
        response.status_code = status_code
        response.content = content
        response.json.return_value = json_data
        if status_code >= 400:
            response.raise_for_status.side_effect = httpx.HTTPStatusError(
                f"HTTP {status_code}",
                request=httpx.Request("GET", "https://example.org"),
                response=MagicMock(spec=httpx.Response),
            )
        return response

    return _make_response


@pytest.fixture
def mock_http_client() -> MagicMock:
    """Provide an httpx.AsyncClient mock whose ``get`` is awaitable."""
    client = MagicMock(spec=httpx.AsyncClient)
    client.get = AsyncMock()
    return client


@pytest.fixture
def job_manager() -> MagicMock:
    """Provide an idle archive job manager mock."""
    manager = MagicMock(spec=ArchiveJobManager)
    manager.file_name = "flora_fauna_library.zip"
    manager.status.return_value = JobStatus(
        state=JobState.IDLE, percent=0, completed=0, total=0, ready=False
    )
    manager.result.return_value = None
    return manager


@pytest.fixture
def image_resolver() -> MagicMock:
    """Provide an image resolver mock that finds no image."""
    resolver = MagicMock(spec=ImageResolver)
    resolver.resolve_image = AsyncMock(return_value=None)
    return resolver


@pytest.fixture
def app_with_temp_data(path_resolver, test_config, species_records, job_manager, image_resolver):
    """Create the FastAPI app with isolated paths and mocked outbound services.

    Container providers are overridden at class level BEFORE the app is
    created, then reset afterwards.
    """
    Container.path_resolver.override(providers.Singleton(lambda: path_resolver))
    Container.config.override(providers.Singleton(lambda: test_config))
    Container.species_store.override(
        providers.Singleton(lambda: SpeciesStore(species_records))
    )
    Container.image_resolver.override(providers.Singleton(lambda: image_resolver))
    Container.archive_job_manager.override(providers.Singleton(lambda: job_manager))

    app = create_app()

    yield app

    Container.path_resolver.reset_override()
    Container.config.reset_override()
    Container.species_store.reset_override()
    Container.image_resolver.reset_override()
    Container.archive_job_manager.reset_override()
