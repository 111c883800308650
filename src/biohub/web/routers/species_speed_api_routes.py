"""API routes for the species speed charts."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException

from biohub.analytics.orchestrator import SpeedChartsOrchestrator
from biohub.analytics.records import DatasetId
from biohub.web.core.container import Container
from biohub.web.models.species_speed import SpeciesSpeedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/species-speed")

CHART_ORDER = [dataset.value for dataset in DatasetId]


async def load_species_speed(orchestrator: SpeedChartsOrchestrator) -> SpeciesSpeedResponse:
    """Run one load cycle and collect its outcome."""
    async with orchestrator:
        return SpeciesSpeedResponse(
            status=orchestrator.state,
            error=orchestrator.error,
            insights=orchestrator.insights,
            dropped_rows={
                dataset.value: count for dataset, count in orchestrator.dropped_rows.items()
            },
            charts=orchestrator.surface.ordered(CHART_ORDER),  # type: ignore[attr-defined]
        )


@router.get("", response_model=SpeciesSpeedResponse)
@inject
async def get_species_speed(
    orchestrator: Annotated[
        SpeedChartsOrchestrator, Depends(Provide[Container.chart_orchestrator])
    ],
) -> SpeciesSpeedResponse:
    """Load the three datasets and return chart specs, insights and load status.

    A dataset that fails to load is reported in ``error`` and drawn as a
    placeholder; the other charts are still returned.
    """
    try:
        return await load_species_speed(orchestrator)
    except Exception as e:
        logger.error("Error loading species speed charts: %s", e)
        raise HTTPException(
            status_code=500, detail=f"Error loading species speed charts: {e}"
        ) from e
