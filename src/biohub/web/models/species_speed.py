"""Species speed API response models."""

from pydantic import BaseModel, Field

from biohub.analytics.geometry import ChartSpec
from biohub.analytics.orchestrator import LoadState


class SpeciesSpeedResponse(BaseModel):
    """Result of one load cycle of the species speed charts."""

    status: LoadState = Field(..., description="Load state after the cycle (ready/failed)")
    error: str | None = Field(None, description="Latest dataset load error, if any")
    insights: list[str] = Field(default_factory=list, description="Plain-text findings")
    dropped_rows: dict[str, int] = Field(
        default_factory=dict, description="Invalid rows dropped per dataset"
    )
    charts: list[ChartSpec] = Field(
        default_factory=list, description="Draw specs in diet, weight, endangerment order"
    )
