"""Draw specifications handed to chart surfaces.

A ``ChartSpec`` is fully resolved: every coordinate is an absolute pixel
position inside the chart's ``width`` x ``height`` frame, so a surface only
materialises primitives and never computes scales or aggregates itself.
"""

from typing import Literal

from pydantic import BaseModel, Field


class Margin(BaseModel):
    """Padding between the chart frame and the plotting area."""

    top: float
    right: float
    bottom: float
    left: float


class Rect(BaseModel):
    """Filled rectangle (bars, legend swatches)."""

    x: float
    y: float
    width: float
    height: float
    fill: str
    fill_opacity: float = 1.0
    rx: float = 0.0
    css_class: str = ""


class Circle(BaseModel):
    """Point mark with an optional hover title."""

    cx: float
    cy: float
    r: float
    fill: str
    fill_opacity: float = 1.0
    title: str | None = None
    css_class: str = ""


class Line(BaseModel):
    """Straight stroke (gridlines, axis domains, tick marks)."""

    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = "currentColor"
    opacity: float = 1.0
    css_class: str = ""


class Text(BaseModel):
    """Positioned text; ``rotate`` turns it around its own anchor point."""

    x: float
    y: float
    text: str
    anchor: Literal["start", "middle", "end"] = "start"
    font_size: float = 11
    font_weight: int | None = None
    rotate: float | None = None
    fill: str = "currentColor"
    css_class: str = ""


class AxisTick(BaseModel):
    """One tick: the mark on the axis line and its label."""

    value: float | str
    mark: Line
    label: Text


class Axis(BaseModel):
    """Axis line, ticks and title for one side of the plotting area."""

    orient: Literal["bottom", "left"]
    domain_line: Line
    ticks: list[AxisTick] = Field(default_factory=list)
    title: Text


class LegendItem(BaseModel):
    """Colour swatch with its label."""

    swatch: Rect
    label: Text


class ChartSpec(BaseModel):
    """Everything needed to draw one chart, or its placeholder text."""

    chart_id: str
    title: str = ""
    width: float = 0
    height: float = 0
    margin: Margin | None = None
    placeholder: str | None = None
    x_axis: Axis | None = None
    y_axis: Axis | None = None
    gridlines: list[Line] = Field(default_factory=list)
    bars: list[Rect] = Field(default_factory=list)
    points: list[Circle] = Field(default_factory=list)
    labels: list[Text] = Field(default_factory=list)
    legend: list[LegendItem] = Field(default_factory=list)

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None

    @classmethod
    def empty(cls, chart_id: str, placeholder: str) -> "ChartSpec":
        """Spec for a dataset without valid rows; no coordinate system at all."""
        return cls(chart_id=chart_id, placeholder=placeholder)
