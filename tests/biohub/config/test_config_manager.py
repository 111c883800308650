"""Tests for ConfigManager."""

import logging

import pytest
import yaml

from biohub.config import BiohubConfig, ConfigManager
from biohub.config.models import SpeciesSpeedConfig


class TestConfigManager:
    """Test ConfigManager functionality."""

    def test_load_config_creates_default_if_missing(self, path_resolver):
        """Should write and return defaults when no config file exists."""
        config_path = path_resolver.get_biohub_config_path()
        assert not config_path.exists()

        config = ConfigManager(path_resolver).load()

        assert isinstance(config, BiohubConfig)
        assert config.config_version == "1.0.0"
        assert config.site_name == "Biodiversity Hub"
        assert config.species_speed.source == "file"
        assert config_path.exists()

    def test_load_config_with_existing_file(self, path_resolver):
        """Should load values from an existing file."""
        config_path = path_resolver.get_biohub_config_path()
        config_path.write_text(
            yaml.dump(
                {
                    "site_name": "Test Hub",
                    "logging": {"level": "debug", "suppressed_messages": ["noisy"]},
                    "species_speed": {
                        "source": "http",
                        "base_url": "https://hub.example/data",
                        "container_width": 1024,
                    },
                }
            )
        )

        config = ConfigManager(path_resolver).load()

        assert config.site_name == "Test Hub"
        assert config.logging.level == "DEBUG"
        assert config.logging.suppressed_messages == ["noisy"]
        assert config.species_speed.source == "http"
        assert config.species_speed.container_width == 1024
        assert config.species_speed.request_timeout is None

    def test_unknown_fields_are_filtered(self, path_resolver, caplog):
        """Should drop unexpected top-level keys with a warning."""
        path_resolver.get_biohub_config_path().write_text(
            yaml.dump({"site_name": "Hub", "latitude": 45.0})
        )

        with caplog.at_level(logging.WARNING, logger="biohub.config.manager"):
            config = ConfigManager(path_resolver).load()

        assert config.site_name == "Hub"
        assert "latitude" in caplog.text

    @pytest.mark.parametrize(
        "species_speed,message",
        [
            pytest.param({"source": "ftp"}, "species_speed.source", id="unknown-source"),
            pytest.param({"container_width": -5}, "container_width", id="negative-width"),
            pytest.param({"request_timeout": 0}, "request_timeout", id="zero-timeout"),
            pytest.param(
                {"dataset_files": {"speed-vs-height": "height.csv"}},
                "Unknown dataset ids",
                id="unknown-dataset",
            ),
        ],
    )
    def test_invalid_config_raises_value_error(self, path_resolver, species_speed, message):
        """Should report validation failures as ValueError."""
        path_resolver.get_biohub_config_path().write_text(
            yaml.dump({"species_speed": species_speed})
        )

        with pytest.raises(ValueError, match=message):
            ConfigManager(path_resolver).load()

    def test_non_mapping_file_raises_value_error(self, path_resolver):
        """Should refuse a YAML document that is not a mapping."""
        path_resolver.get_biohub_config_path().write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="not a mapping"):
            ConfigManager(path_resolver).load()

    def test_save_creates_backup(self, path_resolver):
        """Should keep the previous file as .yaml.backup when saving."""
        manager = ConfigManager(path_resolver)
        config = manager.load()
        config.site_name = "Renamed Hub"

        manager.save(config)

        backup = path_resolver.get_biohub_config_path().with_suffix(".yaml.backup")
        assert backup.exists()
        assert yaml.safe_load(backup.read_text())["site_name"] == "Biodiversity Hub"
        assert manager.reload().site_name == "Renamed Hub"


class TestSpeciesSpeedConfig:
    """Test the species speed settings model."""

    def test_partial_dataset_files_keep_defaults(self):
        """Should fill in default file names for datasets not overridden."""
        config = SpeciesSpeedConfig(dataset_files={"speed-vs-diet": "diet.csv"})

        assert config.dataset_files == {
            "speed-vs-diet": "diet.csv",
            "speed-vs-weight": "speed vs weight.csv",
            "speed-vs-endangerment": "speed vs endangerment.csv",
        }
