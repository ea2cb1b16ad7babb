"""Configuration models for the Flora & Fauna library.

This module contains all configuration-related Pydantic models used throughout the application.
"""

import re

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = JSON unless stderr is a terminal
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "florafauna"})


class HttpConfig(BaseModel):
    """Outbound HTTP client settings shared by all external lookups."""

    timeout_seconds: float = 30.0  # Upper bound for any single request
    user_agent: str = "FloraFaunaLibrary/1.0 (offline archive builder)"

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Reject timeouts that would disable the bound entirely."""
        if v <= 0:
            raise ValueError(f"Invalid timeout '{v}'. Must be greater than zero.")
        return v


class ArchiveConfig(BaseModel):
    """Offline archive layout settings."""

    root_dir_name: str = "Flora_Fauna_Library"  # Top-level directory inside the container
    file_name: str = "flora_fauna_library.zip"  # Save-as name offered to the user
    default_image_extension: str = "jpg"  # Used when an image URL has no usable suffix
    thumbnail_size: int = 1200  # Requested width of encyclopedia thumbnails

    @field_validator("default_image_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Validate the fallback image extension."""
        if not re.match(r"^[a-zA-Z0-9]+$", v):
            raise ValueError(
                f"Invalid image extension '{v}'. Must contain only letters and numbers."
            )
        return v.lower()


class SourcesConfig(BaseModel):
    """External service endpoints."""

    wikipedia_api_url: str = "https://en.wikipedia.org/w/api.php"
    wikipedia_base_url: str = "https://en.wikipedia.org"
    inaturalist_api_url: str = "https://api.inaturalist.org/v1/taxa"
    inaturalist_search_url: str = "https://www.inaturalist.org/taxa/search"
    biodiversity_base_url: str = "https://biodiversity.org.au/afd/taxa"


class LibraryConfig(BaseModel):
    """Configuration settings for the Flora & Fauna library."""

    config_version: str = "1.0.0"

    library_name: str = "Flora & Fauna Interactive Library"
    dataset_path: str = ""  # Empty = resolved by PathResolver

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
