import os
from pathlib import Path


class PathResolver:
    """Central authority for all file path resolution in Biodiversity Hub.

    Uses environment variables for configuration with sensible defaults.
    """

    def __init__(self) -> None:
        """Initialize PathResolver with environment-based configuration."""
        self.app_dir = Path(os.getenv("BIOHUB_APP", "/opt/biohub"))
        self.data_dir = Path(os.getenv("BIOHUB_DATA", "/var/lib/biohub"))

    def get_biohub_config_path(self) -> Path:
        """Get the path to the main configuration file.

        Checks BIOHUB_CONFIG environment variable first, then falls back to default.
        """
        config_path = os.getenv("BIOHUB_CONFIG")
        if config_path:
            return Path(config_path)
        return self.data_dir / "config" / "biohub.yaml"

    def get_data_dir(self) -> Path:
        """Get the data directory path."""
        return self.data_dir

    def get_datasets_dir(self) -> Path:
        """Get the directory holding the species-speed CSV files."""
        return self.data_dir / "datasets"

    def get_templates_dir(self) -> Path:
        """Get the directory of the web page templates shipped with the package."""
        return Path(__file__).resolve().parent.parent / "web" / "templates"

