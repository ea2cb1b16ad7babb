"""Species dataset parsing.

Rows come from a species-list CSV export whose header labels are
free text ("Species Name", "Victoria Conservation Status", ...). Labels
are normalized to camel-form keys, the fixed identifying and taxonomic
columns are lifted onto ``SpeciesRecord`` fields, and every remaining
column is kept in ``extras`` and classified into ``Listing`` entries.
"""

import csv
import io
import logging
import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from florafauna.species.models import Listing, ListingKind, SpeciesRecord

logger = logging.getLogger(__name__)

# camel-form header key -> SpeciesRecord field
CORE_FIELDS = {
    "speciesName": "canonical_name",
    "vernacularName": "common_name",
    "scientificNameAuthorship": "authorship",
    "taxonRank": "taxon_rank",
    "kingdom": "kingdom",
    "phylum": "phylum",
    "class": "class_name",
    "order": "order",
    "family": "family",
    "genus": "genus",
    "numberOfRecords": "record_count",
}

STATUS_MARKERS = ("status", "threatened")
MENTION_MARKERS = ("agreement", "taxa", "wons", "pests", "list")

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9 ]")
_WORD_START = re.compile(r"^\w|[A-Z]|\b\w")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_STATUS_BOILERPLATE = re.compile(r"Conservation Status|status|:|Priority", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


class SpeciesDatasetError(Exception):
    """Raised when a dataset cannot be read as a species list."""


def to_camel_case(label: str) -> str:
    """Convert a free-text header label to a camel-form key.

    Non-alphanumeric characters are dropped, the first character is
    lower-cased and every later word start is upper-cased.

    >>> to_camel_case("Species Name")
    'speciesName'
    """
    cleaned = _NON_ALNUM.sub("", label)

    def _case(match: re.Match[str]) -> str:
        text = match.group(0)
        return text.lower() if match.start() == 0 else text.upper()

    return _WHITESPACE.sub("", _WORD_START.sub(_case, cleaned))


def split_camel_words(key: str) -> str:
    """Split a camel-form key back into space separated words."""
    return _CAMEL_BOUNDARY.sub(" ", key)


def _finish_label(words: str) -> str:
    words = _WHITESPACE.sub(" ", words).strip()
    return words[:1].upper() + words[1:]


def status_label(key: str) -> str:
    """Build the display label for a conservation status field.

    >>> status_label("westernAustraliaConservationStatusPriority4")
    'Western Australia 4'
    """
    label = _finish_label(_STATUS_BOILERPLATE.sub("", split_camel_words(key)))
    return re.sub(r"\bEpbc\b", "EPBC", label, flags=re.IGNORECASE)


def mention_label(key: str) -> str:
    """Build the display label for a special-mention field."""
    return _finish_label(split_camel_words(key))


def classify_field(key: str) -> ListingKind | None:
    """Classify a field name as a status, a mention, or neither."""
    lowered = key.lower()
    if any(marker in lowered for marker in STATUS_MARKERS):
        return ListingKind.STATUS
    if any(marker in lowered for marker in MENTION_MARKERS):
        return ListingKind.MENTION
    return None


def build_listings(extras: Mapping[str, str]) -> tuple[Listing, ...]:
    """Derive listings from the non-core fields of a row, in column order."""
    listings = []
    for key, value in extras.items():
        if not value:
            continue
        kind = classify_field(key)
        if kind is None:
            continue
        label = status_label(key) if kind is ListingKind.STATUS else mention_label(key)
        listings.append(Listing(kind=kind, key=key, label=label, value=value))
    return tuple(listings)


def normalize_row(row: Mapping[str, str]) -> SpeciesRecord:
    """Build a SpeciesRecord from a camel-keyed row.

    Raises:
        ValueError: If the row has no canonical name
    """
    core: dict[str, str] = {}
    extras: dict[str, str] = {}
    for key, raw_value in row.items():
        value = (raw_value or "").strip()
        if key in CORE_FIELDS:
            core[CORE_FIELDS[key]] = value
        else:
            extras[key] = value

    return SpeciesRecord(
        canonical_name=core.pop("canonical_name", ""),
        extras=MappingProxyType(extras),
        listings=build_listings(extras),
        **core,
    )


def parse_species_rows(rows: Iterable[list[str]]) -> list[SpeciesRecord]:
    """Parse already tokenized CSV rows, the first being the header."""
    iterator = iter(rows)
    try:
        header = next(iterator)
    except StopIteration:
        return []

    keys = [to_camel_case(label.strip()) for label in header]
    if "speciesName" not in keys:
        raise SpeciesDatasetError("Dataset header has no 'Species Name' column")

    records = []
    for line_number, values in enumerate(iterator, start=2):
        if not any(value.strip() for value in values):
            continue
        padded = values + [""] * (len(keys) - len(values))
        row = dict(zip(keys, padded, strict=False))
        try:
            records.append(normalize_row(row))
        except ValueError:
            logger.warning("Skipping row %d without a species name", line_number)
    return records


def parse_species_csv(text: str) -> list[SpeciesRecord]:
    """Parse a species-list CSV document into records, preserving row order.

    Args:
        text: Full CSV text including the header row

    Returns:
        Records in file order; empty if the document has no data rows

    Raises:
        SpeciesDatasetError: If the header lacks the species name column
    """
    return parse_species_rows(csv.reader(io.StringIO(text.strip())))
