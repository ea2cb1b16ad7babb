"""CLI command for building the offline species library archive."""

import asyncio
import sys
from pathlib import Path

import click

from florafauna.archive.builder import ArchiveBuilder
from florafauna.archive.exceptions import ArchiveSerializationError
from florafauna.config import ConfigManager, LibraryConfig
from florafauna.media.http import create_http_client
from florafauna.species.models import SpeciesRecord
from florafauna.species.parser import SpeciesDatasetError
from florafauna.species.store import SpeciesStore
from florafauna.system.path_resolver import PathResolver
from florafauna.system.structlog_configurator import configure_structlog


@click.command()
@click.option(
    "--dataset",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Species CSV file (default: configured dataset path)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Where to write the ZIP archive (default: exports directory)",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    help="Only archive the first N species",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured log level",
)
def build_archive(
    dataset: Path | None,
    output: Path | None,
    limit: int | None,
    log_level: str | None,
) -> None:
    """Build the offline species library archive.

    Every species gets a folder with its detail page, image and an offline
    Wikipedia copy when those can be fetched.

    Examples:
        # Archive the configured dataset
        build-archive

        # Archive the first 20 species of a specific file
        build-archive --dataset species.csv --limit 20 -o library.zip
    """
    path_resolver = PathResolver()
    config = ConfigManager(path_resolver).load()
    if log_level:
        config.logging.level = log_level.upper()
    configure_structlog(config)

    dataset_path = dataset or path_resolver.get_dataset_path(config.dataset_path)
    try:
        store = SpeciesStore.from_path(dataset_path)
    except SpeciesDatasetError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    records = list(store)[:limit] if limit else list(store)
    output_path = output or path_resolver.get_exports_dir() / config.archive.file_name

    click.echo(f"Building offline library for {len(records)} species...")
    try:
        data = asyncio.run(_build_archive_async(config, records))
    except ArchiveSerializationError as e:
        click.echo()
        click.echo(click.style(f"Archive build failed: {e}", fg="red"), err=True)
        sys.exit(1)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    click.echo()
    click.echo(click.style(f"Saved {output_path} ({len(data):,} bytes)", fg="green"))


async def _build_archive_async(config: LibraryConfig, records: list[SpeciesRecord]) -> bytes:
    """Async implementation of the archive build."""

    def _report(percent: int) -> None:
        click.echo(f"\rProgress: {percent:3d}%", nl=False)

    async with create_http_client(config.http) as client:
        builder = ArchiveBuilder.from_config(client, config)
        return await builder.build_archive(records, on_progress=_report)


def main() -> None:
    """Entry point for the build-archive command."""
    build_archive()


if __name__ == "__main__":
    main()
