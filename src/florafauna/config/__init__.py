"""Flora & Fauna configuration package.

This package provides centralized configuration management with:
- Pydantic models for every configurable section
- YAML parsing and serialization
- Defaults file creation on first run
"""

from .manager import ConfigManager
from .models import LibraryConfig

__all__ = [
    "ConfigManager",
    "LibraryConfig",
]
