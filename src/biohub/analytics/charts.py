"""Projection of species-speed records into chart draw specifications.

Three builders, one per dataset:

- ``build_diet_chart``: mean-speed bars per diet with every animal jittered
  over its bar
- ``build_weight_chart``: speed against body mass on a logarithmic x axis
- ``build_endangerment_chart``: mean-speed bars per conservation status in
  severity order

Each builder is a pure function of its records and the available width, so
drawing the same records twice yields identical specs.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from biohub.analytics.aggregation import summarize_diets, summarize_statuses
from biohub.analytics.geometry import (
    Axis,
    AxisTick,
    ChartSpec,
    Circle,
    LegendItem,
    Line,
    Margin,
    Rect,
    Text,
)
from biohub.analytics.records import (
    DIET_ORDER,
    ENDANGERMENT_ORDER,
    DatasetId,
    DietRecord,
    EndangermentRecord,
    WeightRecord,
)
from biohub.analytics.scales import BandScale, LinearScale, LogScale, to_fixed

DIET_COLORS = {
    diet: color for diet, color in zip(DIET_ORDER, ("#16a34a", "#2563eb", "#ef4444"), strict=True)
}

# Lower concern tones to higher concern tones, indexed by severity position
ENDANGERMENT_COLORS = {
    status: color
    for status, color in zip(
        ENDANGERMENT_ORDER,
        (
            "#94a3b8",
            "#60a5fa",
            "#22c55e",
            "#84cc16",
            "#eab308",
            "#f97316",
            "#ef4444",
            "#be123c",
            "#7f1d1d",
        ),
        strict=True,
    )
}

WEIGHT_POINT_COLOR = "#0ea5e9"
SPEED_TICKS = 7
GRID_TICKS = 6
MASS_TICKS = 8
TICK_SIZE = 6
TICK_PADDING = 3
X_LABEL_ANGLE = -28
JITTER_WIDTH_RATIO = 0.62


@dataclass(frozen=True)
class ChartLayout:
    """Fixed frame of one chart type."""

    min_width: float
    height: float
    margin: Margin
    title: str
    x_title: str
    y_title: str
    title_y: float
    x_title_offset: float

    def frame(self, container_width: float | None) -> tuple[float, float, float]:
        """Return ``(width, inner_width, inner_height)`` for a container."""
        width = chart_width(container_width, self.min_width)
        inner_width = width - self.margin.left - self.margin.right
        inner_height = self.height - self.margin.top - self.margin.bottom
        return width, inner_width, inner_height


DIET_LAYOUT = ChartLayout(
    min_width=760,
    height=420,
    margin=Margin(top=60, right=180, bottom=80, left=70),
    title="Speed vs Diet",
    x_title="Diet",
    y_title="Speed (km/h)",
    title_y=28,
    x_title_offset=16,
)

WEIGHT_LAYOUT = ChartLayout(
    min_width=760,
    height=430,
    margin=Margin(top=58, right=34, bottom=82, left=76),
    title="Speed vs Weight",
    x_title="Body Mass (kg, log scale)",
    y_title="Speed (km/h)",
    title_y=30,
    x_title_offset=20,
)

ENDANGERMENT_LAYOUT = ChartLayout(
    min_width=860,
    height=460,
    margin=Margin(top=64, right=36, bottom=130, left=76),
    title="Speed vs Endangerment",
    x_title="Endangerment Status",
    y_title="Average Speed (km/h)",
    title_y=30,
    x_title_offset=18,
)


def chart_width(container_width: float | None, min_width: float) -> float:
    """Use the container width, but never less than a readable minimum."""
    return max(container_width or 0, min_width)


def deterministic_jitter(index: int, spread: float) -> float:
    """Offset in ``[-spread / 2, spread / 2)`` derived only from ``index``.

    Uses the sine hash of the web charts so points land on the same
    random-looking positions on every draw.
    """
    seed = math.sin((index + 1) * 12.9898) * 43758.5453
    fractional = seed - math.floor(seed)
    return (fractional - 0.5) * spread


def speed_scale(max_value: float, headroom: float, inner_height: float) -> LinearScale:
    """Niced ``[0, max * headroom]`` speed axis, never narrower than ``[0, 1]``."""
    y_max = max(max_value * headroom, 1)
    return LinearScale((0, y_max), (inner_height, 0)).nice()


def weight_mass_domain(records: Sequence[WeightRecord]) -> tuple[float, float]:
    """Log-safe body-mass domain before rounding to powers of ten.

    The lower bound is floored at 0.1 kg; a single distinct mass widens the
    upper bound tenfold so the scale never collapses.
    """
    masses = [record.body_mass for record in records]
    min_mass = max(min(masses), 0.1)
    max_mass = max(masses)
    return min_mass, max_mass if max_mass > min_mass else min_mass * 10


def _bar(
    x: float, bandwidth: float, y_scale: LinearScale, value: float, margin: Margin, **style
) -> Rect:
    top = y_scale(value)
    base = y_scale(0)
    return Rect(
        x=margin.left + x,
        y=margin.top + min(top, base),
        width=bandwidth,
        height=abs(base - top),
        **style,
    )


def _bottom_axis(
    positions: Sequence[tuple[float | str, float, str]],
    layout: ChartLayout,
    inner_width: float,
    inner_height: float,
    rotate_labels: bool = False,
) -> Axis:
    margin = layout.margin
    y0 = margin.top + inner_height
    ticks = []
    for value, x, label in positions:
        x_abs = margin.left + x
        if rotate_labels:
            text = Text(
                x=x_abs - 7,
                y=y0 + TICK_SIZE + TICK_PADDING + 2,
                text=label,
                anchor="end",
                rotate=X_LABEL_ANGLE,
            )
        else:
            text = Text(
                x=x_abs, y=y0 + TICK_SIZE + TICK_PADDING + 8, text=label, anchor="middle"
            )
        mark = Line(x1=x_abs, y1=y0, x2=x_abs, y2=y0 + TICK_SIZE)
        ticks.append(AxisTick(value=value, mark=mark, label=text))
    return Axis(
        orient="bottom",
        domain_line=Line(x1=margin.left, y1=y0, x2=margin.left + inner_width, y2=y0),
        ticks=ticks,
        title=Text(
            x=margin.left + inner_width / 2,
            y=layout.height - layout.x_title_offset,
            text=layout.x_title,
            anchor="middle",
            font_size=12,
        ),
    )


def _left_axis(y_scale: LinearScale, layout: ChartLayout, inner_height: float) -> Axis:
    margin = layout.margin
    x0 = margin.left
    fmt = y_scale.tick_format(SPEED_TICKS)
    ticks = []
    for value in y_scale.ticks(SPEED_TICKS):
        y_abs = margin.top + y_scale(value)
        ticks.append(
            AxisTick(
                value=value,
                mark=Line(x1=x0 - TICK_SIZE, y1=y_abs, x2=x0, y2=y_abs),
                label=Text(
                    x=x0 - TICK_SIZE - TICK_PADDING, y=y_abs + 3.5, text=fmt(value), anchor="end"
                ),
            )
        )
    return Axis(
        orient="left",
        domain_line=Line(x1=x0, y1=margin.top, x2=x0, y2=margin.top + inner_height),
        ticks=ticks,
        title=Text(
            x=18,
            y=margin.top + inner_height / 2,
            text=layout.y_title,
            anchor="middle",
            font_size=12,
            rotate=-90,
        ),
    )


def _title(layout: ChartLayout) -> Text:
    return Text(
        x=layout.margin.left,
        y=layout.title_y,
        text=layout.title,
        font_size=16,
        font_weight=700,
    )


def _band_positions(scale: BandScale, keys: Sequence) -> list[tuple[str, float, str]]:
    return [(key.value, scale.center(key), key.value) for key in keys]


def build_diet_chart(
    records: Sequence[DietRecord], container_width: float | None = None
) -> ChartSpec:
    """Bars of mean speed per diet, with each animal drawn as a jittered point."""
    if not records:
        return ChartSpec.empty(DatasetId.DIET.value, DatasetId.DIET.placeholder_text)

    layout = DIET_LAYOUT
    margin = layout.margin
    width, inner_width, inner_height = layout.frame(container_width)
    summaries = summarize_diets(records)
    counts = {summary.diet: summary.count for summary in summaries}

    x = BandScale(DIET_ORDER, (0, inner_width), padding=0.25)
    y = speed_scale(max(record.speed for record in records), 1.1, inner_height)
    spread = x.bandwidth * JITTER_WIDTH_RATIO

    bars = [
        _bar(
            x(summary.diet) or 0.0,
            x.bandwidth,
            y,
            summary.average_speed,
            margin,
            fill=DIET_COLORS[summary.diet],
            fill_opacity=0.55,
            rx=6,
            css_class="mean-speed",
        )
        for summary in summaries
    ]
    points = [
        Circle(
            cx=margin.left + x.center(record.diet) + deterministic_jitter(index, spread),
            cy=margin.top + y(record.speed),
            r=2.75,
            fill=DIET_COLORS[record.diet],
            fill_opacity=0.35,
            css_class="samples",
        )
        for index, record in enumerate(records)
    ]
    mean_labels = [
        Text(
            x=margin.left + x.center(summary.diet),
            y=margin.top + y(summary.average_speed) - 8,
            text=f"{to_fixed(summary.average_speed, 1)} km/h",
            anchor="middle",
            css_class="mean-label",
        )
        for summary in summaries
    ]
    count_labels = [
        Text(
            x=margin.left + x.center(diet),
            y=margin.top + inner_height + 34,
            text=f"n={counts.get(diet, 0)}",
            anchor="middle",
            font_size=10,
            css_class="sample-count",
        )
        for diet in DIET_ORDER
    ]
    legend_x = margin.left + inner_width + 12
    legend_y = margin.top - 6
    legend = [
        LegendItem(
            swatch=Rect(
                x=legend_x,
                y=legend_y + index * 24,
                width=12,
                height=12,
                rx=2,
                fill=DIET_COLORS[diet],
            ),
            label=Text(x=legend_x + 18, y=legend_y + index * 24 + 10, text=diet.value.capitalize()),
        )
        for index, diet in enumerate(DIET_ORDER)
    ]

    return ChartSpec(
        chart_id=DatasetId.DIET.value,
        title=layout.title,
        width=width,
        height=layout.height,
        margin=margin,
        x_axis=_bottom_axis(_band_positions(x, DIET_ORDER), layout, inner_width, inner_height),
        y_axis=_left_axis(y, layout, inner_height),
        bars=bars,
        points=points,
        labels=[_title(layout), *mean_labels, *count_labels],
        legend=legend,
    )


def build_weight_chart(
    records: Sequence[WeightRecord], container_width: float | None = None
) -> ChartSpec:
    """Scatter of speed against log-scaled body mass with horizontal gridlines."""
    if not records:
        return ChartSpec.empty(DatasetId.WEIGHT.value, DatasetId.WEIGHT.placeholder_text)

    layout = WEIGHT_LAYOUT
    margin = layout.margin
    width, inner_width, inner_height = layout.frame(container_width)

    x = LogScale(weight_mass_domain(records), (0, inner_width)).nice()
    y = speed_scale(max(record.speed for record in records), 1.1, inner_height)

    gridlines = [
        Line(
            x1=margin.left,
            y1=margin.top + y(value),
            x2=margin.left + inner_width,
            y2=margin.top + y(value),
            opacity=0.15,
            css_class="grid",
        )
        for value in y.ticks(GRID_TICKS)
    ]
    points = [
        Circle(
            cx=margin.left + x(record.body_mass),
            cy=margin.top + y(record.speed),
            r=3.5,
            fill=WEIGHT_POINT_COLOR,
            fill_opacity=0.6,
            title=(
                f"{record.name}: {to_fixed(record.speed, 1)} km/h, "
                f"{to_fixed(record.body_mass, 1)} kg"
            ),
            css_class="point",
        )
        for record in records
    ]
    mass_format = x.tick_format(MASS_TICKS)
    mass_ticks = [(value, x(value), mass_format(value)) for value in x.ticks(MASS_TICKS)]

    return ChartSpec(
        chart_id=DatasetId.WEIGHT.value,
        title=layout.title,
        width=width,
        height=layout.height,
        margin=margin,
        x_axis=_bottom_axis(mass_ticks, layout, inner_width, inner_height),
        y_axis=_left_axis(y, layout, inner_height),
        gridlines=gridlines,
        points=points,
        labels=[_title(layout)],
    )


def build_endangerment_chart(
    records: Sequence[EndangermentRecord], container_width: float | None = None
) -> ChartSpec:
    """Bars of mean speed per conservation status, ordered by severity."""
    summaries = summarize_statuses(records)
    if not summaries:
        return ChartSpec.empty(
            DatasetId.ENDANGERMENT.value, DatasetId.ENDANGERMENT.placeholder_text
        )

    layout = ENDANGERMENT_LAYOUT
    margin = layout.margin
    width, inner_width, inner_height = layout.frame(container_width)
    statuses = [summary.status for summary in summaries]

    x = BandScale(statuses, (0, inner_width), padding=0.2)
    y = speed_scale(max(summary.average_speed for summary in summaries), 1.12, inner_height)

    bars = [
        _bar(
            x(summary.status) or 0.0,
            x.bandwidth,
            y,
            summary.average_speed,
            margin,
            fill=ENDANGERMENT_COLORS[summary.status],
            fill_opacity=0.8,
            rx=5,
            css_class="endangerment-bar",
        )
        for summary in summaries
    ]
    value_labels = [
        Text(
            x=margin.left + x.center(summary.status),
            y=margin.top + y(summary.average_speed) - 8,
            text=f"{to_fixed(summary.average_speed, 1)} (n={summary.count})",
            anchor="middle",
            font_size=10.5,
            css_class="endangerment-value",
        )
        for summary in summaries
    ]

    return ChartSpec(
        chart_id=DatasetId.ENDANGERMENT.value,
        title=layout.title,
        width=width,
        height=layout.height,
        margin=margin,
        x_axis=_bottom_axis(
            _band_positions(x, statuses), layout, inner_width, inner_height, rotate_labels=True
        ),
        y_axis=_left_axis(y, layout, inner_height),
        bars=bars,
        labels=[_title(layout), *value_labels],
    )


CHART_BUILDERS = {
    DatasetId.DIET: build_diet_chart,
    DatasetId.WEIGHT: build_weight_chart,
    DatasetId.ENDANGERMENT: build_endangerment_chart,
}
