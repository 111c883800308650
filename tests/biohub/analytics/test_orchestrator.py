"""Tests for the species-speed chart orchestrator."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from biohub.analytics.orchestrator import LoadState, SpeedChartsOrchestrator
from biohub.analytics.records import DatasetId
from biohub.datasets.sources import DatasetFetchError
from biohub.rendering.surfaces import ChartCollector

DIET_ROWS = [
    {"name": "Cheetah", "speed": "110", "diet": "carnivore"},
    {"name": "Zebra", "speed": "64", "diet": "herbivore"},
    {"name": "Ghost", "speed": "", "diet": "carnivore"},
]
WEIGHT_ROWS = [
    {"name": "Cheetah", "speed": "110", "body_mass": "50"},
    {"name": "Elephant", "speed": "40", "body_mass": "5000"},
]
ENDANGERMENT_ROWS = [
    {"name": "Cheetah", "speed": "110", "endangerment": "Vulnerable"},
    {"name": "Zebra", "speed": "64", "endangerment": "Least Concern"},
]


class FakeSource:
    """In-memory row source that can fail per dataset or hold fetches open."""

    def __init__(self):
        self.rows = {
            DatasetId.DIET.value: list(DIET_ROWS),
            DatasetId.WEIGHT.value: list(WEIGHT_ROWS),
            DatasetId.ENDANGERMENT.value: list(ENDANGERMENT_ROWS),
        }
        self.failures: dict[str, Exception] = {}
        self.gate: asyncio.Event | None = None
        self.calls = 0

    async def fetch(self, resource_id, transform=None):
        self.calls += 1
        gate = self.gate
        rows = self.rows[resource_id]
        failure = self.failures.get(resource_id)
        if gate is not None:
            await gate.wait()
        if failure is not None:
            raise failure
        if transform is None:
            return list(rows)
        return [result for row in rows if (result := transform(row)) is not None]


@pytest.fixture
def source():
    """Provide a fake source serving three small datasets."""
    return FakeSource()


@pytest.fixture
def surface():
    """Provide a surface that records every draw."""
    return ChartCollector()


@pytest.fixture
def orchestrator(source, surface):
    """Create an orchestrator over the fake source."""
    return SpeedChartsOrchestrator(source, surface)


async def wait_for_calls(source, count):
    while source.calls < count:
        await asyncio.sleep(0)


class TestRefresh:
    """Test a complete load cycle."""

    @pytest.mark.asyncio
    async def test_successful_cycle(self, orchestrator, surface):
        """Should become ready and draw each chart once."""
        assert orchestrator.state is LoadState.IDLE

        state = await orchestrator.refresh()

        assert state is LoadState.READY
        assert orchestrator.error is None
        assert surface.draw_counts == {
            "speed-vs-diet": 1,
            "speed-vs-weight": 1,
            "speed-vs-endangerment": 1,
        }
        assert not any(spec.is_placeholder for spec in surface.specs.values())

    @pytest.mark.asyncio
    async def test_records_and_dropped_rows(self, orchestrator):
        """Should keep only valid records and count the rest."""
        await orchestrator.refresh()

        assert [record.name for record in orchestrator.diet_records] == ["Cheetah", "Zebra"]
        assert len(orchestrator.weight_records) == 2
        assert len(orchestrator.endangerment_records) == 2
        assert orchestrator.dropped_rows[DatasetId.DIET] == 1
        assert orchestrator.dropped_rows[DatasetId.WEIGHT] == 0

    @pytest.mark.asyncio
    async def test_insights_follow_records(self, orchestrator):
        """Should derive insights from the loaded records."""
        assert orchestrator.insights == []

        await orchestrator.refresh()

        assert [insight.split(":")[0] for insight in orchestrator.insights] == [
            "Diet",
            "Weight",
            "Endangerment",
        ]

    @pytest.mark.asyncio
    async def test_fetches_request_row_transform(self, surface):
        """Should pass a per-row transform to the source for every dataset."""
        source = MagicMock()
        source.fetch = AsyncMock(return_value=[])

        await SpeedChartsOrchestrator(source, surface).refresh()

        calls = source.fetch.await_args_list
        assert sorted(call.args[0] for call in calls) == sorted(d.value for d in DatasetId)
        assert all(call.kwargs["transform"] is not None for call in calls)


class TestFailures:
    """Test per-dataset failure handling."""

    @pytest.mark.asyncio
    async def test_one_failure_does_not_block_other_charts(self, orchestrator, source, surface):
        """Should draw the healthy charts and a placeholder for the failed one."""
        source.failures["speed-vs-weight"] = DatasetFetchError("speed-vs-weight", "file missing")

        state = await orchestrator.refresh()

        assert state is LoadState.FAILED
        assert orchestrator.error == "Could not load chart data: speed-vs-weight: file missing"
        assert surface.specs["speed-vs-weight"].is_placeholder
        assert not surface.specs["speed-vs-diet"].is_placeholder
        assert not surface.specs["speed-vs-endangerment"].is_placeholder

    @pytest.mark.asyncio
    async def test_error_without_message_uses_exception_type(self, orchestrator, source):
        """Should still give the user a readable reason."""
        source.failures["speed-vs-diet"] = RuntimeError()

        await orchestrator.refresh()

        assert orchestrator.error == "Could not load chart data: RuntimeError"

    @pytest.mark.asyncio
    async def test_successful_retry_clears_error(self, orchestrator, source, surface):
        """Should clear the error and draw the recovered chart."""
        source.failures["speed-vs-weight"] = DatasetFetchError("speed-vs-weight", "timeout")
        await orchestrator.refresh()

        source.failures.clear()
        state = await orchestrator.refresh()

        assert state is LoadState.READY
        assert orchestrator.error is None
        assert not surface.specs["speed-vs-weight"].is_placeholder
        assert surface.draw_counts["speed-vs-weight"] == 2

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_records(self, orchestrator, source, surface):
        """Should leave an already drawn chart untouched when its reload fails."""
        await orchestrator.refresh()
        source.failures["speed-vs-diet"] = DatasetFetchError("speed-vs-diet", "gone")

        await orchestrator.refresh()

        assert len(orchestrator.diet_records) == 2
        assert surface.draw_counts["speed-vs-diet"] == 1
        assert not surface.specs["speed-vs-diet"].is_placeholder


class TestRedraws:
    """Test that charts redraw only when their own records change."""

    @pytest.mark.asyncio
    async def test_unchanged_records_are_not_redrawn(self, orchestrator, surface):
        """Should skip drawing when a reload yields the same records."""
        await orchestrator.refresh()
        await orchestrator.refresh()

        assert set(surface.draw_counts.values()) == {1}

    @pytest.mark.asyncio
    async def test_only_changed_chart_is_redrawn(self, orchestrator, source, surface):
        """Should redraw the diet chart alone when only diet rows change."""
        await orchestrator.refresh()
        source.rows["speed-vs-diet"].append({"name": "Lion", "speed": "80", "diet": "carnivore"})

        await orchestrator.refresh()

        assert surface.draw_counts == {
            "speed-vs-diet": 2,
            "speed-vs-weight": 1,
            "speed-vs-endangerment": 1,
        }

    @pytest.mark.asyncio
    async def test_empty_dataset_draws_placeholder(self, orchestrator, source, surface):
        """Should draw the placeholder when every row is invalid."""
        source.rows["speed-vs-endangerment"] = [
            {"name": "Tiger", "speed": "65", "endangerment": "endangered"}
        ]

        state = await orchestrator.refresh()

        assert state is LoadState.READY
        spec = surface.specs["speed-vs-endangerment"]
        assert spec.placeholder == "No valid speed vs endangerment data available."


class TestTeardown:
    """Test that late completions are ignored."""

    @pytest.mark.asyncio
    async def test_completion_after_close_is_discarded(self, orchestrator, source, surface):
        """Should neither store records nor draw after close()."""
        source.gate = asyncio.Event()
        task = asyncio.create_task(orchestrator.refresh())
        await wait_for_calls(source, 3)

        orchestrator.close()
        source.gate.set()
        await task

        assert surface.draw_counts == {}
        assert orchestrator.diet_records == ()
        assert orchestrator.error is None

    @pytest.mark.asyncio
    async def test_failure_after_close_is_discarded(self, orchestrator, source):
        """Should not report errors that arrive after close()."""
        source.gate = asyncio.Event()
        source.failures["speed-vs-diet"] = DatasetFetchError("speed-vs-diet", "late")
        task = asyncio.create_task(orchestrator.refresh())
        await wait_for_calls(source, 3)

        orchestrator.close()
        source.gate.set()
        await task

        assert orchestrator.error is None

    @pytest.mark.asyncio
    async def test_superseded_cycle_is_discarded(self, orchestrator, source, surface):
        """Should keep the newer cycle's results when an older one finishes last."""
        source.gate = asyncio.Event()
        first = asyncio.create_task(orchestrator.refresh())
        await wait_for_calls(source, 3)

        gate = source.gate
        source.gate = None
        source.rows["speed-vs-diet"] = [{"name": "Wolf", "speed": "60", "diet": "carnivore"}]
        await orchestrator.refresh()

        gate.set()
        await first

        assert [record.name for record in orchestrator.diet_records] == ["Wolf"]
        assert orchestrator.state is LoadState.READY

    @pytest.mark.asyncio
    async def test_context_manager_loads_and_closes(self, source, surface):
        """Should refresh on entry and refuse further refreshes after exit."""
        async with SpeedChartsOrchestrator(source, surface) as orchestrator:
            assert orchestrator.state is LoadState.READY

        with pytest.raises(RuntimeError, match="closed"):
            await orchestrator.refresh()
