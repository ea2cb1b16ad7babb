"""Configuration loading for the web application."""

from florafauna.config import ConfigManager, LibraryConfig
from florafauna.system.path_resolver import PathResolver


def get_config(path_resolver: PathResolver | None = None) -> LibraryConfig:
    """Load library configuration.

    Args:
        path_resolver: Optional PathResolver instance to use. If not provided,
                      creates a new PathResolver instance.

    Returns:
        LibraryConfig: The loaded and validated configuration.
    """
    if path_resolver is None:
        path_resolver = PathResolver()
    return ConfigManager(path_resolver).load()
