"""Load, parse and draw cycle for the species-speed charts."""

import asyncio
from enum import Enum
from typing import Protocol

import structlog

from biohub.analytics.charts import CHART_BUILDERS
from biohub.analytics.geometry import ChartSpec
from biohub.analytics.insights import synthesize_insights
from biohub.analytics.parser import DECODERS, RowDecoder
from biohub.analytics.records import (
    DatasetId,
    DietRecord,
    EndangermentRecord,
    SpeedRecord,
    WeightRecord,
)
from biohub.datasets.sources import RowSource

logger = structlog.get_logger(__name__)

ERROR_PREFIX = "Could not load chart data"


class LoadState(str, Enum):
    """Lifecycle of a load cycle."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ChartSurface(Protocol):
    """Receives finished draw specs; never computes scales itself."""

    def draw(self, spec: ChartSpec) -> None: ...


class SpeedChartsOrchestrator:
    """Owns the three datasets and redraws each chart when its records change.

    ``refresh()`` fetches the three datasets concurrently. Each dataset is
    handled on its own: a failed fetch sets the shared error message but does
    not keep the other charts from drawing. Completions that arrive after
    ``close()``, or after a newer ``refresh()`` started, are discarded.
    """

    def __init__(
        self,
        source: RowSource,
        surface: ChartSurface,
        container_width: float | None = None,
    ):
        self.source = source
        self.surface = surface
        self.container_width = container_width
        self.state = LoadState.IDLE
        self.error: str | None = None
        self.records: dict[DatasetId, tuple[SpeedRecord, ...]] = {
            dataset: () for dataset in DatasetId
        }
        self.dropped_rows: dict[DatasetId, int] = {dataset: 0 for dataset in DatasetId}
        self._drawn: set[DatasetId] = set()
        self._generation = 0
        self._closed = False

    async def __aenter__(self) -> "SpeedChartsOrchestrator":
        await self.refresh()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def diet_records(self) -> tuple[DietRecord, ...]:
        return self.records[DatasetId.DIET]  # type: ignore[return-value]

    @property
    def weight_records(self) -> tuple[WeightRecord, ...]:
        return self.records[DatasetId.WEIGHT]  # type: ignore[return-value]

    @property
    def endangerment_records(self) -> tuple[EndangermentRecord, ...]:
        return self.records[DatasetId.ENDANGERMENT]  # type: ignore[return-value]

    @property
    def insights(self) -> list[str]:
        """Findings for the records currently held."""
        return synthesize_insights(
            self.diet_records, self.weight_records, self.endangerment_records
        )

    def close(self) -> None:
        """Tear down; any fetch still in flight will be ignored when it lands."""
        self._closed = True

    async def refresh(self) -> LoadState:
        """Run one load cycle and return the resulting state."""
        if self._closed:
            raise RuntimeError("Cannot refresh a closed chart orchestrator")

        self._generation += 1
        generation = self._generation
        self.state = LoadState.LOADING
        logger.debug("Loading species speed datasets", generation=generation)

        outcomes = await asyncio.gather(
            *(self._load(dataset, generation) for dataset in DatasetId)
        )
        if self._is_stale(generation):
            return self.state

        if all(outcomes):
            self.state = LoadState.READY
            self.error = None
        else:
            self.state = LoadState.FAILED
        logger.info(
            "Species speed datasets loaded",
            state=self.state.value,
            records={dataset.value: len(self.records[dataset]) for dataset in DatasetId},
            dropped_rows={dataset.value: count for dataset, count in self.dropped_rows.items()},
        )
        return self.state

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    async def _load(self, dataset: DatasetId, generation: int) -> bool:
        decoder = RowDecoder(DECODERS[dataset])
        try:
            records = await self.source.fetch(dataset.value, transform=decoder)
        except Exception as e:
            if self._is_stale(generation):
                return False
            logger.exception("Dataset load failed", dataset=dataset.value)
            self.error = f"{ERROR_PREFIX}: {str(e) or type(e).__name__}"
            if dataset not in self._drawn:
                self._draw(dataset)
            return False

        if self._is_stale(generation):
            logger.debug("Discarding stale dataset", dataset=dataset.value)
            return False

        self.dropped_rows[dataset] = decoder.rejected
        if decoder.rejected:
            logger.debug(
                "Dropped invalid rows", dataset=dataset.value, dropped=decoder.rejected
            )
        self._commit(dataset, tuple(records))
        return True

    def _commit(self, dataset: DatasetId, records: tuple[SpeedRecord, ...]) -> None:
        if records == self.records[dataset] and dataset in self._drawn:
            return
        self.records[dataset] = records
        self._draw(dataset)

    def _draw(self, dataset: DatasetId) -> None:
        builder = CHART_BUILDERS[dataset]
        spec = builder(self.records[dataset], self.container_width)  # type: ignore[arg-type]
        self.surface.draw(spec)
        self._drawn.add(dataset)
