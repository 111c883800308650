"""Biodiversity Hub configuration package.

Pydantic models for the YAML configuration file and the manager that loads,
validates and saves it.
"""

from .manager import ConfigManager
from .models import BiohubConfig

__all__ = [
    "BiohubConfig",
    "ConfigManager",
]
