"""Species record models.

A record is built once from a dataset row. The open-ended tail of
regional conservation and listing columns is classified at that point
into ``Listing`` entries so that renderers only ever read a fixed,
precomputed list.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


class ListingKind(StrEnum):
    """How a listing column is presented."""

    STATUS = "status"  # Conservation or threatened-species status
    MENTION = "mention"  # Agreements, migratory taxa, weed/pest lists


@dataclass(frozen=True)
class Listing:
    """A single non-empty regional status or special mention."""

    kind: ListingKind
    key: str  # Original camel-form field name, e.g. "victoriaConservationStatus"
    label: str  # Human label, e.g. "Victoria"
    value: str

    @property
    def display_value(self) -> str:
        """Return the value as shown to readers ("Y" flags read as "Yes")."""
        if self.kind is ListingKind.MENTION and self.value == "Y":
            return "Yes"
        return self.value


@dataclass(frozen=True)
class SpeciesRecord:
    """Immutable attribute set for one species.

    ``canonical_name`` is the scientific name: the lookup key for external
    services and the basis for archive folder naming. It is never empty.
    """

    canonical_name: str
    common_name: str = ""
    authorship: str = ""
    taxon_rank: str = ""
    kingdom: str = ""
    phylum: str = ""
    class_name: str = ""
    order: str = ""
    family: str = ""
    genus: str = ""
    record_count: str = ""
    extras: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    listings: tuple[Listing, ...] = ()

    def __post_init__(self) -> None:
        """Enforce the non-empty canonical name."""
        if not self.canonical_name or not self.canonical_name.strip():
            raise ValueError("SpeciesRecord requires a non-empty canonical_name")

    @property
    def display_name(self) -> str:
        """Common name if present, else canonical name."""
        return self.common_name or self.canonical_name

    @property
    def search_title(self) -> str:
        """Canonical name without any parenthetical qualifier."""
        return self.canonical_name.split("(")[0].strip()

    @property
    def taxonomy(self) -> list[tuple[str, str]]:
        """Return the six displayed ranks as (label, value) pairs in rank order."""
        return [
            ("Kingdom", self.kingdom),
            ("Phylum", self.phylum),
            ("Class", self.class_name),
            ("Order", self.order),
            ("Family", self.family),
            ("Genus", self.genus),
        ]

    @property
    def statuses(self) -> list[Listing]:
        """Return conservation status listings."""
        return [listing for listing in self.listings if listing.kind is ListingKind.STATUS]

    @property
    def mentions(self) -> list[Listing]:
        """Return special-mention listings."""
        return [listing for listing in self.listings if listing.kind is ListingKind.MENTION]

    def __str__(self) -> str:
        """Return string representation for debugging."""
        if self.common_name:
            return f"{self.common_name} ({self.canonical_name})"
        return self.canonical_name
