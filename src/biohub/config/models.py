"""Configuration models for Biodiversity Hub.

This module contains all configuration-related Pydantic models used throughout the application.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from biohub.analytics.records import DatasetId


def _default_dataset_files() -> dict[str, str]:
    return {dataset.value: dataset.default_filename for dataset in DatasetId}


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = auto-detect based on environment
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "biodiversity-hub"})
    # Substrings of known-noisy third-party messages to drop at the handlers
    suppressed_messages: list[str] = Field(default_factory=list)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level '{v}'.")
        return level


class SpeciesSpeedConfig(BaseModel):
    """Where the species-speed datasets come from and how wide charts are drawn."""

    source: Literal["file", "http"] = "file"
    base_url: str = "http://localhost:3000/data"  # Used when source is "http"
    datasets_dir: str | None = None  # None = <data dir>/datasets
    dataset_files: dict[str, str] = Field(default_factory=_default_dataset_files)
    container_width: float | None = None  # None = each chart's minimum width
    request_timeout: float | None = None  # Seconds; None = wait indefinitely

    @field_validator("dataset_files")
    @classmethod
    def validate_dataset_files(cls, v: dict[str, str]) -> dict[str, str]:
        """Fill in missing datasets and reject unknown dataset ids."""
        known = {dataset.value for dataset in DatasetId}
        unknown = set(v) - known
        if unknown:
            raise ValueError(f"Unknown dataset ids: {', '.join(sorted(unknown))}")
        return {**_default_dataset_files(), **v}

    @field_validator("container_width", "request_timeout")
    @classmethod
    def validate_positive(cls, v: float | None) -> float | None:
        """Widths and timeouts must be positive when given."""
        if v is not None and v <= 0:
            raise ValueError(f"Must be positive, got {v}")
        return v


class BiohubConfig(BaseModel):
    """Configuration settings for the Biodiversity Hub application."""

    # Version tracking
    config_version: str = "1.0.0"  # Configuration schema version

    # Basic Settings
    site_name: str = "Biodiversity Hub"

    # Logging settings
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Species speed charts
    species_speed: SpeciesSpeedConfig = Field(default_factory=SpeciesSpeedConfig)
