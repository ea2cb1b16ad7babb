import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class PathResolver:
    """Central authority for all file path resolution in the library.

    Uses environment variables for configuration with sensible defaults.
    """

    def __init__(self) -> None:
        """Initialize PathResolver with environment-based configuration."""
        self.app_dir = Path(os.getenv("FLORAFAUNA_APP", str(PACKAGE_DIR)))
        self.data_dir = Path(os.getenv("FLORAFAUNA_DATA", str(Path.home() / ".florafauna")))

    def get_config_path(self) -> Path:
        """Get the path to the main configuration file.

        Checks FLORAFAUNA_CONFIG environment variable first, then falls back to default.
        """
        config_path = os.getenv("FLORAFAUNA_CONFIG")
        if config_path:
            return Path(config_path)
        return self.data_dir / "config" / "florafauna.yaml"

    def get_data_dir(self) -> Path:
        """Get the data directory path."""
        return self.data_dir

    def get_dataset_path(self, configured: str = "") -> Path:
        """Get the path to the species CSV dataset.

        Precedence: explicit configuration, FLORAFAUNA_DATASET, then the data directory.
        """
        if configured:
            return Path(configured)
        dataset_path = os.getenv("FLORAFAUNA_DATASET")
        if dataset_path:
            return Path(dataset_path)
        return self.data_dir / "species.csv"

    def get_exports_dir(self) -> Path:
        """Get the directory where built archives are written by default."""
        return self.data_dir / "exports"

    def get_templates_dir(self) -> Path:
        """Get the directory for web HTML templates."""
        return self.app_dir / "web" / "templates"
