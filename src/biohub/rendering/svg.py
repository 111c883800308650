"""SVG materialisation of chart draw specs using Jinja2 templates."""

import logging

from jinja2 import Environment, PackageLoader, StrictUndefined
from markupsafe import Markup

from biohub.analytics.geometry import ChartSpec
from biohub.rendering.surfaces import ChartCollector

logger = logging.getLogger(__name__)


def create_svg_environment() -> Environment:
    """Jinja2 environment for the chart templates, with autoescaping on."""
    return Environment(
        loader=PackageLoader("biohub.rendering", "templates"),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


class SvgSurface(ChartCollector):
    """Renders each drawn spec to inline SVG markup.

    Charts without data render as their placeholder paragraph instead of an
    empty coordinate system.
    """

    def __init__(self, environment: Environment | None = None):
        super().__init__()
        self.environment = environment or create_svg_environment()
        self.markup: dict[str, Markup] = {}

    def render(self, spec: ChartSpec) -> Markup:
        template = self.environment.get_template("chart.svg.j2")
        return Markup(template.render(spec=spec))

    def draw(self, spec: ChartSpec) -> None:
        super().draw(spec)
        self.markup[spec.chart_id] = self.render(spec)
        logger.debug("Rendered chart %s", spec.chart_id)
