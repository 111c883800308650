"""Chart surfaces that receive draw specs from the orchestrator."""

from biohub.analytics.geometry import ChartSpec


class ChartCollector:
    """Keeps the latest spec per chart and counts how often each was drawn."""

    def __init__(self) -> None:
        self.specs: dict[str, ChartSpec] = {}
        self.draw_counts: dict[str, int] = {}

    def draw(self, spec: ChartSpec) -> None:
        self.specs[spec.chart_id] = spec
        self.draw_counts[spec.chart_id] = self.draw_counts.get(spec.chart_id, 0) + 1

    def ordered(self, chart_ids: list[str]) -> list[ChartSpec]:
        """Specs for ``chart_ids`` that have been drawn, in that order."""
        return [self.specs[chart_id] for chart_id in chart_ids if chart_id in self.specs]
