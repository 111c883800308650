"""Tests for grouped speed statistics."""

import pytest

from biohub.analytics.aggregation import group_speeds, summarize_diets, summarize_statuses
from biohub.analytics.records import (
    Diet,
    DietRecord,
    DietSummary,
    EndangermentRecord,
    EndangermentStatus,
)


def diet(name, speed, kind):
    return DietRecord(name=name, speed=speed, diet=kind)


def status(name, speed, kind):
    return EndangermentRecord(name=name, speed=speed, status=kind)


class TestSummarizeDiets:
    """Test mean speed per diet."""

    def test_means_and_counts(self):
        """Should average speeds per diet and count members."""
        records = [
            diet("Cheetah", 110, Diet.CARNIVORE),
            diet("Lion", 80, Diet.CARNIVORE),
            diet("Zebra", 64, Diet.HERBIVORE),
        ]

        assert summarize_diets(records) == [
            DietSummary(diet=Diet.HERBIVORE, average_speed=64.0, count=1),
            DietSummary(diet=Diet.CARNIVORE, average_speed=95.0, count=2),
        ]

    def test_output_order_ignores_input_order(self):
        """Should emit present diets in herbivore, omnivore, carnivore order."""
        records = [
            diet("Lion", 80, Diet.CARNIVORE),
            diet("Bear", 56, Diet.OMNIVORE),
            diet("Zebra", 64, Diet.HERBIVORE),
        ]

        for ordering in (records, records[::-1], [records[1], records[0], records[2]]):
            assert [summary.diet for summary in summarize_diets(ordering)] == [
                Diet.HERBIVORE,
                Diet.OMNIVORE,
                Diet.CARNIVORE,
            ]

    def test_absent_diets_are_omitted(self):
        """Should not emit zero-count groups."""
        summaries = summarize_diets([diet("Bear", 56, Diet.OMNIVORE)])

        assert [summary.diet for summary in summaries] == [Diet.OMNIVORE]

    def test_empty_input(self):
        """Should return no summaries for no records."""
        assert summarize_diets([]) == []


class TestSummarizeStatuses:
    """Test mean speed per conservation status."""

    def test_severity_order(self):
        """Should emit statuses in severity order regardless of input order."""
        records = [
            status("Rhino", 55, EndangermentStatus.CRITICALLY_ENDANGERED),
            status("Zebra", 64, EndangermentStatus.LEAST_CONCERN),
            status("Tiger", 65, EndangermentStatus.ENDANGERED),
            status("Cheetah", 110, EndangermentStatus.VULNERABLE),
        ]

        assert [summary.status for summary in summarize_statuses(records)] == [
            EndangermentStatus.LEAST_CONCERN,
            EndangermentStatus.VULNERABLE,
            EndangermentStatus.ENDANGERED,
            EndangermentStatus.CRITICALLY_ENDANGERED,
        ]

    def test_scrambled_input_comes_out_in_severity_order(self):
        """Should never use input or alphabetical order."""
        records = [
            status("Dodo", 0, EndangermentStatus.EXTINCT),
            status("Zebra", 64, EndangermentStatus.LEAST_CONCERN),
            status("Cheetah", 110, EndangermentStatus.VULNERABLE),
        ]

        assert [summary.status.value for summary in summarize_statuses(records)] == [
            "Least Concern",
            "Vulnerable",
            "Extinct",
        ]

    def test_counts_sum_to_input(self):
        """Should account for every record exactly once."""
        records = [
            status("A", 10, EndangermentStatus.EXTINCT),
            status("B", 20, EndangermentStatus.EXTINCT),
            status("C", 30, EndangermentStatus.NOT_EVALUATED),
        ]

        summaries = summarize_statuses(records)

        assert sum(summary.count for summary in summaries) == len(records)
        assert summaries[0].status is EndangermentStatus.NOT_EVALUATED
        assert summaries[1].average_speed == pytest.approx(15.0)


class TestGroupSpeeds:
    """Test the generic grouping helper."""

    def test_accepts_one_shot_iterables(self):
        """Should work on generators as well as sequences."""
        records = (diet(name, speed, Diet.HERBIVORE) for name, speed in [("a", 1), ("b", 3)])

        assert group_speeds(records, lambda r: r.diet, list(Diet)) == [(Diet.HERBIVORE, 2.0, 2)]
