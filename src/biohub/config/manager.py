"""Configuration loading and saving."""

import logging
import shutil
from typing import Any

import yaml
from pydantic import ValidationError

from biohub.config.models import BiohubConfig
from biohub.system.path_resolver import PathResolver

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading and saving."""

    CURRENT_VERSION = "1.0.0"

    def __init__(self, path_resolver: PathResolver | None = None):
        """Initialize ConfigManager.

        Args:
            path_resolver: Optional PathResolver instance. If None, creates a new one.
        """
        self.path_resolver = path_resolver or PathResolver()
        self.config_path = self.path_resolver.get_biohub_config_path()

    def load(self) -> BiohubConfig:
        """Load and validate the configuration, writing defaults on first run.

        Returns:
            BiohubConfig: Loaded and validated configuration

        Raises:
            ValueError: If the file does not validate
        """
        self._ensure_config_exists()
        raw_config = self._read_yaml()
        raw_config.setdefault("config_version", self.CURRENT_VERSION)
        return self._create_config_object(raw_config)

    def save(self, config: BiohubConfig) -> None:
        """Save configuration to file with backup.

        Args:
            config: Configuration to save

        Raises:
            PermissionError: If config file cannot be written
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

    def reload(self) -> BiohubConfig:
        """Reload configuration from disk."""
        return self.load()

    def _ensure_config_exists(self) -> None:
        if self.config_path.exists():
            return
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        defaults = BiohubConfig(config_version=self.CURRENT_VERSION).model_dump()
        self.config_path.write_text(yaml.dump(defaults, default_flow_style=False, sort_keys=False))
        logger.info("Created default configuration at %s", self.config_path)

    def _read_yaml(self) -> dict[str, Any]:
        raw = yaml.safe_load(self.config_path.read_text()) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Configuration at {self.config_path} is not a mapping")
        return raw

    def _create_config_object(self, raw_config: dict[str, Any]) -> BiohubConfig:
        """Create BiohubConfig object from dictionary.

        Unknown top-level keys are dropped with a warning rather than failing the load.
        """
        expected_fields = set(BiohubConfig.model_fields.keys())
        filtered_config = {k: v for k, v in raw_config.items() if k in expected_fields}

        unexpected_fields = set(raw_config.keys()) - expected_fields
        if unexpected_fields:
            logger.warning("Filtered out unexpected config fields: %s", sorted(unexpected_fields))

        try:
            return BiohubConfig(**filtered_config)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
            raise ValueError(f"Configuration validation failed: {', '.join(errors)}") from e
