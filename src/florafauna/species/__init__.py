"""Species domain package.

This package contains all species-related functionality:
- SpeciesRecord / Listing: Immutable record models
- parse_species_csv: Dataset parsing and listing classification
- SpeciesStore: Ordered record store
"""

from florafauna.species.models import Listing, ListingKind, SpeciesRecord
from florafauna.species.parser import SpeciesDatasetError, parse_species_csv
from florafauna.species.store import SpeciesStore

__all__ = [
    "Listing",
    "ListingKind",
    "SpeciesDatasetError",
    "SpeciesRecord",
    "SpeciesStore",
    "parse_species_csv",
]
