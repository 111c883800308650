"""Dependency injection container for the Biodiversity Hub application."""

from pathlib import Path

from dependency_injector import containers, providers
from fastapi.templating import Jinja2Templates
from jinja2 import StrictUndefined

from biohub.analytics.orchestrator import SpeedChartsOrchestrator
from biohub.config import BiohubConfig
from biohub.datasets.sources import CsvFileSource, HttpCsvSource, RowSource
from biohub.rendering.svg import SvgSurface
from biohub.system.path_resolver import PathResolver
from biohub.web.core.config import get_config


def create_jinja2_templates(resolver: PathResolver) -> Jinja2Templates:
    """Create Jinja2Templates with dynamic path from resolver and strict undefined handling.

    Undefined template variables raise errors instead of rendering as empty strings.
    """
    templates = Jinja2Templates(directory=str(resolver.get_templates_dir()))
    templates.env.undefined = StrictUndefined
    return templates


def create_row_source(config: BiohubConfig, resolver: PathResolver) -> RowSource:
    """Build the dataset source selected by ``species_speed.source``."""
    settings = config.species_speed
    if settings.source == "http":
        return HttpCsvSource(
            settings.base_url,
            filenames=settings.dataset_files,
            timeout=settings.request_timeout,
        )
    if settings.datasets_dir:
        directory = Path(settings.datasets_dir)
    else:
        directory = resolver.get_datasets_dir()
    return CsvFileSource(directory, filenames=settings.dataset_files)


class Container(containers.DeclarativeContainer):
    """Application dependency injection container.

    Infrastructure is shared as singletons; each page load gets its own
    orchestrator and SVG surface so concurrent requests never share chart state.
    """

    path_resolver = providers.Singleton(PathResolver)

    config = providers.Singleton(
        get_config,
        path_resolver=path_resolver,
    )

    templates = providers.Singleton(
        create_jinja2_templates,
        resolver=path_resolver,
    )

    row_source = providers.Singleton(
        create_row_source,
        config=config,
        resolver=path_resolver,
    )

    chart_surface = providers.Factory(SvgSurface)

    chart_orchestrator = providers.Factory(
        SpeedChartsOrchestrator,
        source=row_source,
        surface=chart_surface,
        container_width=config.provided.species_speed.container_width,
    )
