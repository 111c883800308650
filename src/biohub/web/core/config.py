"""Configuration loading for the web application."""

from biohub.config import BiohubConfig, ConfigManager
from biohub.system.path_resolver import PathResolver


def get_config(path_resolver: PathResolver | None = None) -> BiohubConfig:
    """Load Biodiversity Hub configuration.

    Args:
        path_resolver: Optional PathResolver instance to use. If not provided,
                      creates a new PathResolver instance.

    Returns:
        BiohubConfig: The loaded and validated configuration.
    """
    if path_resolver is None:
        path_resolver = PathResolver()
    return ConfigManager(path_resolver).load()
