"""Configuration loading and saving."""

import logging
import shutil
from typing import Any

import yaml
from pydantic import ValidationError

from florafauna.config.models import LibraryConfig
from florafauna.system.path_resolver import PathResolver

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading, saving, and validation."""

    CURRENT_VERSION = "1.0.0"

    def __init__(self, path_resolver: PathResolver | None = None):
        """Initialize ConfigManager.

        Args:
            path_resolver: Optional PathResolver instance. If None, creates a new one.
        """
        self.path_resolver = path_resolver or PathResolver()
        self.config_path = self.path_resolver.get_config_path()

    def load(self) -> LibraryConfig:
        """Load configuration, creating a defaults file on first run.

        Returns:
            LibraryConfig: Loaded and validated configuration

        Raises:
            ValueError: If the file contents fail validation
        """
        self._ensure_config_exists()
        raw_config = self._read_yaml()
        return self._create_config_object(raw_config)

    def save(self, config: LibraryConfig) -> None:
        """Save configuration to file with backup.

        Args:
            config: Configuration to save
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            backup_path = self.config_path.with_suffix(".yaml.backup")
            try:
                shutil.copy2(self.config_path, backup_path)
            except PermissionError:
                logger.warning("Could not create backup at %s", backup_path)

        config_yaml = yaml.dump(config.model_dump(), default_flow_style=False, sort_keys=False)
        self.config_path.write_text(config_yaml)
        logger.info("Configuration saved successfully to %s", self.config_path)

    def _ensure_config_exists(self) -> None:
        """Write a defaults file if none exists yet."""
        if self.config_path.exists():
            return
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        defaults = LibraryConfig(config_version=self.CURRENT_VERSION).model_dump()
        self.config_path.write_text(yaml.dump(defaults, default_flow_style=False, sort_keys=False))

    def _read_yaml(self) -> dict[str, Any]:
        """Read YAML config file.

        Returns:
            dict: Raw configuration dictionary
        """
        return yaml.safe_load(self.config_path.read_text()) or {}

    def _create_config_object(self, raw_config: dict[str, Any]) -> LibraryConfig:
        """Create LibraryConfig object from dictionary.

        Args:
            raw_config: Configuration dictionary

        Returns:
            LibraryConfig: Typed configuration object
        """
        expected_fields = set(LibraryConfig.model_fields.keys())
        filtered_config = {k: v for k, v in raw_config.items() if k in expected_fields}

        unexpected_fields = set(raw_config.keys()) - expected_fields
        if unexpected_fields:
            logger.warning("Filtered out unexpected config fields: %s", unexpected_fields)

        try:
            return LibraryConfig(**filtered_config)
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}") from e
