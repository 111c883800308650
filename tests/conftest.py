from pathlib import Path

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from biohub.analytics.records import DatasetId
from biohub.config import BiohubConfig, ConfigManager
from biohub.system.path_resolver import PathResolver
from biohub.web.core.container import Container
from biohub.web.core.factory import create_app

DIET_CSV = """name,speed,diet
Cheetah,110,carnivore
Lion,80,Carnivore
Zebra,64,herbivore
Elephant,40, herbivore
Brown Bear,56,omnivore
Ghost,,carnivore
Rock,12,mineral
"""

WEIGHT_CSV = """name,speed,body_mass
Cheetah,110,50
Elephant,40,5000
Mouse,13,0.02
House Cat,48,4
Broken Scale,30,-1
Typo,abc,3
"""

ENDANGERMENT_CSV = """name,speed,endangerment
Cheetah,110,Vulnerable
Lion,80,Vulnerable
Zebra,64,Least Concern
Tiger,65,Endangered
Lowercase,30,endangered
"""

DATASET_CSV = {
    DatasetId.DIET: DIET_CSV,
    DatasetId.WEIGHT: WEIGHT_CSV,
    DatasetId.ENDANGERMENT: ENDANGERMENT_CSV,
}


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """Get the absolute path to the repository root."""
    return Path(__file__).parent.parent.resolve()


@pytest.fixture
def path_resolver(tmp_path: Path, repo_root: Path) -> PathResolver:
    """Provide a PathResolver whose writable paths live under ``tmp_path``.

    Templates keep pointing at the real package so page rendering can be tested.
    """
    resolver = PathResolver()
    resolver.app_dir = repo_root
    resolver.data_dir = tmp_path / "data"
    resolver.data_dir.mkdir(parents=True)

    config_dir = tmp_path / "config"
    config_dir.mkdir(parents=True)
    resolver.get_biohub_config_path = lambda: config_dir / "biohub.yaml"
    resolver.get_templates_dir = lambda: repo_root / "src" / "biohub" / "web" / "templates"
    return resolver


@pytest.fixture
def datasets_dir(path_resolver: PathResolver) -> Path:
    """Write the three sample datasets where the file source looks for them."""
    directory = path_resolver.get_datasets_dir()
    directory.mkdir(parents=True, exist_ok=True)
    for dataset, text in DATASET_CSV.items():
        (directory / dataset.default_filename).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def test_config(path_resolver: PathResolver) -> BiohubConfig:
    """Should load test configuration from the test config file."""
    return ConfigManager(path_resolver).load()


@pytest.fixture
def app(path_resolver: PathResolver, test_config: BiohubConfig, datasets_dir: Path):
    """FastAPI app wired to temporary paths and the sample datasets."""
    Container.path_resolver.override(providers.Singleton(lambda: path_resolver))
    Container.config.override(providers.Singleton(lambda: test_config))
    try:
        yield create_app()
    finally:
        Container.path_resolver.reset_override()
        Container.config.reset_override()


@pytest.fixture
def client(app):
    """Test client for the app; entering it runs the lifespan."""
    with TestClient(app) as test_client:
        yield test_client
