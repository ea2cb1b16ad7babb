"""In-memory species record store."""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from florafauna.species.models import SpeciesRecord
from florafauna.species.parser import SpeciesDatasetError, parse_species_csv

logger = logging.getLogger(__name__)


class SpeciesStore:
    """Ordered, read-only collection of species records.

    Iteration order is dataset order and is stable for the lifetime of the
    store. Canonical names are not checked for uniqueness; ``get`` returns
    the first record with a given name.
    """

    def __init__(self, records: Iterable[SpeciesRecord] = ()):
        self._records: tuple[SpeciesRecord, ...] = tuple(records)
        self._by_name: dict[str, SpeciesRecord] = {}
        for record in self._records:
            self._by_name.setdefault(record.canonical_name, record)

    @classmethod
    def from_path(cls, path: Path) -> "SpeciesStore":
        """Load a store from a CSV file.

        Raises:
            SpeciesDatasetError: If the file is missing or not a species list
        """
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as e:
            raise SpeciesDatasetError(f"Cannot read species dataset {path}: {e}") from e

        store = cls(parse_species_csv(text))
        logger.info("Loaded %d species records from %s", len(store), path)
        return store

    def __iter__(self) -> Iterator[SpeciesRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> SpeciesRecord:
        return self._records[index]

    @property
    def records(self) -> tuple[SpeciesRecord, ...]:
        """Return all records in dataset order."""
        return self._records

    def get(self, canonical_name: str) -> SpeciesRecord | None:
        """Look up a record by canonical name."""
        return self._by_name.get(canonical_name)
