"""Grouped speed statistics over validated records."""

from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import TypeVar

from biohub.analytics.records import (
    DIET_ORDER,
    ENDANGERMENT_ORDER,
    DietRecord,
    DietSummary,
    EndangermentRecord,
    EndangermentSummary,
)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


def group_speeds(
    records: Iterable[T], key: Callable[[T], K], order: Sequence[K]
) -> list[tuple[K, float, int]]:
    """Summarise speeds per group as ``(key, average_speed, count)``.

    Groups are emitted in ``order`` and only when they have at least one member,
    so input order never leaks into the result.
    """
    totals: dict[K, list[float]] = {}
    for record in records:
        bucket = totals.setdefault(key(record), [0.0, 0])
        bucket[0] += record.speed  # type: ignore[attr-defined]
        bucket[1] += 1

    return [
        (group, totals[group][0] / totals[group][1], int(totals[group][1]))
        for group in order
        if group in totals
    ]


def summarize_diets(records: Iterable[DietRecord]) -> list[DietSummary]:
    """Mean speed per diet, in herbivore, omnivore, carnivore order."""
    return [
        DietSummary(diet=diet, average_speed=average, count=count)
        for diet, average, count in group_speeds(records, lambda r: r.diet, DIET_ORDER)
    ]


def summarize_statuses(records: Iterable[EndangermentRecord]) -> list[EndangermentSummary]:
    """Mean speed per conservation status, in severity order."""
    return [
        EndangermentSummary(status=status, average_speed=average, count=count)
        for status, average, count in group_speeds(
            records, lambda r: r.status, ENDANGERMENT_ORDER
        )
    ]
