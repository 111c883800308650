"""View routes for the species speed page."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from biohub.analytics.orchestrator import SpeedChartsOrchestrator
from biohub.config import BiohubConfig
from biohub.web.core.container import Container
from biohub.web.routers.species_speed_api_routes import CHART_ORDER

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/species-speed", response_class=HTMLResponse)
@inject
async def view_species_speed(
    request: Request,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[BiohubConfig, Depends(Provide[Container.config])],
    orchestrator: Annotated[
        SpeedChartsOrchestrator, Depends(Provide[Container.chart_orchestrator])
    ],
) -> HTMLResponse:
    """Render the species speed page with inline SVG charts."""
    async with orchestrator:
        surface = orchestrator.surface
        charts = [
            {"chart_id": chart_id, "markup": surface.markup[chart_id]}  # type: ignore[attr-defined]
            for chart_id in CHART_ORDER
            if chart_id in surface.markup  # type: ignore[attr-defined]
        ]
        return templates.TemplateResponse(
            request,
            "species_speed.html.j2",
            {
                "site_name": config.site_name,
                "page_name": "Species Speed",
                "error": orchestrator.error,
                "insights": orchestrator.insights,
                "charts": charts,
            },
        )
