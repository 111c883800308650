"""Plain-text findings derived from the species-speed records.

Each dataset contributes at most one sentence, and only when it has enough
groups or samples to compare. The sentences are computed from the validated
records, never from drawn geometry.
"""

from collections.abc import Sequence
from typing import TypeVar

import numpy as np

from biohub.analytics.aggregation import summarize_diets, summarize_statuses
from biohub.analytics.records import (
    DietRecord,
    DietSummary,
    EndangermentRecord,
    EndangermentSummary,
    WeightRecord,
)
from biohub.analytics.scales import to_fixed

S = TypeVar("S", DietSummary, EndangermentSummary)

TREND_THRESHOLD = 0.2
MIN_STATUS_SAMPLES = 5


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float | None:
    """Pearson correlation coefficient, or ``None`` when it is undefined.

    Undefined means fewer than two pairs, sequences of different length, or a
    variable without any variance.
    """
    if len(x) != len(y) or len(x) < 2:
        return None

    x_values = np.asarray(x, dtype=float)
    y_values = np.asarray(y, dtype=float)
    # Constant inputs can leave rounding noise after centring
    if np.ptp(x_values) == 0 or np.ptp(y_values) == 0:
        return None

    centered_x = x_values - x_values.mean()
    centered_y = y_values - y_values.mean()
    covariance = float(np.dot(centered_x, centered_y))
    x_variance = float(np.dot(centered_x, centered_x))
    y_variance = float(np.dot(centered_y, centered_y))
    if not x_variance or not y_variance:
        return None
    return covariance / float(np.sqrt(x_variance * y_variance))


def trend_label(correlation: float | None) -> str:
    """Describe a mass-speed correlation in words."""
    if correlation is None:
        return "no measurable mass-speed trend"
    if correlation > TREND_THRESHOLD:
        return "a weak positive mass-speed trend"
    if correlation < -TREND_THRESHOLD:
        return "a weak negative mass-speed trend"
    return "a very weak mass-speed trend"


def _fastest_and_slowest(summaries: Sequence[S]) -> tuple[S, S]:
    # Stable sort: on equal means the earlier group in canonical order wins
    ranked = sorted(summaries, key=lambda s: s.average_speed, reverse=True)
    return ranked[0], ranked[-1]


def diet_insight(records: Sequence[DietRecord]) -> str | None:
    """Compare the fastest and slowest diets, if at least two are present."""
    summaries = summarize_diets(records)
    if len(summaries) < 2:
        return None

    fastest, slowest = _fastest_and_slowest(summaries)
    gap = fastest.average_speed - slowest.average_speed
    return (
        f"Diet: {fastest.diet.value} species average "
        f"{to_fixed(fastest.average_speed, 1)} km/h (n={fastest.count}), which is "
        f"{to_fixed(gap, 1)} km/h faster than {slowest.diet.value} "
        f"species ({to_fixed(slowest.average_speed, 1)} km/h, n={slowest.count})."
    )


def weight_insight(records: Sequence[WeightRecord]) -> str | None:
    """Summarise the body-mass range, the mass-speed trend and the fastest animal."""
    if len(records) < 2:
        return None

    # Left-to-right reductions: on ties the first record encountered is kept
    fastest = lightest = heaviest = records[0]
    for record in records[1:]:
        if record.speed > fastest.speed:
            fastest = record
        if record.body_mass < lightest.body_mass:
            lightest = record
        if record.body_mass > heaviest.body_mass:
            heaviest = record

    correlation = pearson_correlation(
        np.log10([record.body_mass for record in records]).tolist(),
        [record.speed for record in records],
    )
    correlation_text = (
        "" if correlation is None else f" (r={to_fixed(correlation, 2)} on log mass)"
    )

    return (
        f"Weight: body mass spans from "
        f"{to_fixed(lightest.body_mass, 2)} kg ({lightest.name}) "
        f"to {to_fixed(heaviest.body_mass, 0)} kg ({heaviest.name}), with "
        f"{trend_label(correlation)}{correlation_text}; the fastest species in this view "
        f"is {fastest.name} at {to_fixed(fastest.speed, 1)} km/h."
    )


def _statuses_to_compare(summaries: list[EndangermentSummary]) -> list[EndangermentSummary]:
    # Keep tiny categories from dominating when enough well-sampled ones exist
    well_sampled = [summary for summary in summaries if summary.count >= MIN_STATUS_SAMPLES]
    return well_sampled if len(well_sampled) >= 2 else summaries


def endangerment_insight(records: Sequence[EndangermentRecord]) -> str | None:
    """Compare the fastest and slowest conservation statuses."""
    summaries = _statuses_to_compare(summarize_statuses(records))
    if len(summaries) < 2:
        return None

    fastest, slowest = _fastest_and_slowest(summaries)
    gap = fastest.average_speed - slowest.average_speed
    return (
        f"Endangerment: {fastest.status.value} species average "
        f"{to_fixed(fastest.average_speed, 1)} km/h (n={fastest.count}), compared with "
        f"{to_fixed(slowest.average_speed, 1)} km/h for {slowest.status.value} species "
        f"(n={slowest.count}), a {to_fixed(gap, 1)} km/h gap."
    )


def synthesize_insights(
    diet_records: Sequence[DietRecord],
    weight_records: Sequence[WeightRecord],
    endangerment_records: Sequence[EndangermentRecord],
) -> list[str]:
    """Zero to three findings, in diet, weight, endangerment order."""
    candidates = (
        diet_insight(diet_records),
        weight_insight(weight_records),
        endangerment_insight(endangerment_records),
    )
    return [insight for insight in candidates if insight is not None]
