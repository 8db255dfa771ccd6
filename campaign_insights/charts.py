"""Pixel geometry for line and bar charts.

The x axis is the ordered union of every series' labels; the y axis is a
linear scale over all values, starting at zero unless a value is negative.
The output is render-ready: label positions, tick positions and texts, grid
lines, SVG-style path strings for lines and rectangles for bars.
"""
import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from campaign_insights.config import CHART_HEIGHT, CHART_PADDING, CHART_WIDTH
from campaign_insights.formatting import fmt_number, palette_color


TICK_RATIOS = (0.0, 0.25, 0.5, 0.75, 1.0)
NEGATIVE_HEADROOM = 1.1
BAR_GROUP_RATIO = 0.6
MAX_BAR_GROUP_WIDTH = 48.0


@dataclass(frozen=True)
class ChartDatum:
    label: str
    value: float
    color: Optional[str] = None


@dataclass(frozen=True)
class ChartSeries:
    name: str
    data: Tuple[ChartDatum, ...]
    color: Optional[str] = None

    @classmethod
    def from_pairs(
        cls,
        name: str,
        pairs: Iterable[Union[ChartDatum, Tuple[str, float]]],
        color: Optional[str] = None,
    ) -> "ChartSeries":
        data = tuple(p if isinstance(p, ChartDatum) else ChartDatum(str(p[0]), float(p[1])) for p in pairs)
        return cls(name=name, data=data, color=color)


@dataclass(frozen=True)
class ChartScale:
    labels: Tuple[str, ...]
    label_index: Mapping[str, int]
    min_value: float
    max_value: float
    y_axis_min: float
    y_range: float
    width: float
    height: float
    padding: float

    @property
    def inner_width(self) -> float:
        return self.width - 2 * self.padding

    @property
    def inner_height(self) -> float:
        return self.height - 2 * self.padding

    def x(self, index: int) -> float:
        # A lone label sits on the left edge instead of dividing by zero.
        if len(self.labels) <= 1:
            return self.padding
        return self.padding + (index / (len(self.labels) - 1)) * self.inner_width

    def y(self, value: float) -> float:
        return self.padding + ((self.max_value - value) / (self.y_range or 1)) * self.inner_height

    def position(self, label: str, value: float) -> Optional[Tuple[float, float]]:
        index = self.label_index.get(label)
        if index is None:
            return None
        return self.x(index), self.y(value)


@dataclass(frozen=True)
class Tick:
    ratio: float
    position: float
    label: str


@dataclass(frozen=True)
class AxisLabel:
    label: str
    x: float


@dataclass(frozen=True)
class GridLine:
    y: float
    x1: float
    x2: float


@dataclass(frozen=True)
class ChartPoint:
    label: str
    value: float
    x: float
    y: float
    formatted: str


@dataclass(frozen=True)
class SeriesGeometry:
    name: str
    color: str
    points: Tuple[ChartPoint, ...]
    path: str


@dataclass(frozen=True)
class BarGeometry:
    series: str
    label: str
    value: float
    x: float
    y: float
    width: float
    height: float
    color: str
    formatted: str


@dataclass(frozen=True)
class ChartGeometry:
    title: str
    kind: str
    width: float
    height: float
    padding: float
    scale: Optional[ChartScale] = None
    x_labels: Tuple[AxisLabel, ...] = ()
    x_ticks: Tuple[Tick, ...] = ()
    y_ticks: Tuple[Tick, ...] = ()
    gridlines: Tuple[GridLine, ...] = ()
    series: Tuple[SeriesGeometry, ...] = ()
    bars: Tuple[BarGeometry, ...] = ()

    @property
    def empty(self) -> bool:
        return self.scale is None


# ---------------------------
# Scale
# ---------------------------
def union_labels(series: Sequence[ChartSeries]) -> Tuple[str, ...]:
    seen = {}
    for s in series:
        for datum in s.data:
            seen.setdefault(datum.label, None)
    return tuple(seen)


def build_scale(
    series: Sequence[ChartSeries],
    width: float = CHART_WIDTH,
    height: float = CHART_HEIGHT,
    padding: float = CHART_PADDING,
) -> Optional[ChartScale]:
    values = np.array([d.value for s in series for d in s.data], dtype=float)
    if values.size == 0:
        return None
    labels = union_labels(series)
    max_value = float(values.max())
    min_value = float(values.min())
    y_axis_min = 0.0 if min_value >= 0 else min_value * NEGATIVE_HEADROOM
    return ChartScale(
        labels=labels,
        label_index={label: i for i, label in enumerate(labels)},
        min_value=min_value,
        max_value=max_value,
        y_axis_min=y_axis_min,
        y_range=max_value - y_axis_min,
        width=float(width),
        height=float(height),
        padding=float(padding),
    )


def y_ticks(scale: ChartScale, format_value: Callable[[float], str] = fmt_number) -> Tuple[Tick, ...]:
    return tuple(
        Tick(
            ratio=r,
            position=scale.padding + (1 - r) * scale.inner_height,
            label=format_value(scale.y_axis_min + r * scale.y_range),
        )
        for r in TICK_RATIOS
    )


def x_ticks(scale: ChartScale) -> Tuple[Tick, ...]:
    # Each tick snaps to the nearest label, so its text and position always agree.
    span = len(scale.labels) - 1
    ticks = []
    for r in TICK_RATIOS:
        index = int(math.floor(r * span + 0.5))
        ticks.append(Tick(ratio=r, position=scale.x(index), label=scale.labels[index]))
    return tuple(ticks)


def gridlines(scale: ChartScale) -> Tuple[GridLine, ...]:
    return tuple(
        GridLine(y=scale.padding + r * scale.inner_height, x1=scale.padding, x2=scale.width - scale.padding)
        for r in TICK_RATIOS
    )


# ---------------------------
# Lines
# ---------------------------
def series_points(
    scale: ChartScale, series: ChartSeries, format_value: Callable[[float], str] = fmt_number
) -> Tuple[ChartPoint, ...]:
    points = []
    for datum in series.data:
        pos = scale.position(datum.label, datum.value)
        if pos is None:
            continue
        points.append(ChartPoint(datum.label, datum.value, pos[0], pos[1], format_value(datum.value)))
    return tuple(points)


def line_path(points: Sequence[ChartPoint]) -> str:
    return " ".join(f"{'M' if i == 0 else 'L'} {p.x:.2f} {p.y:.2f}" for i, p in enumerate(points))


def _empty_geometry(title: str, kind: str, width: float, height: float, padding: float) -> ChartGeometry:
    return ChartGeometry(title=title, kind=kind, width=float(width), height=float(height), padding=float(padding))


def _axes(scale: ChartScale, format_value: Callable[[float], str]) -> dict:
    return dict(
        x_labels=tuple(AxisLabel(label, scale.x(i)) for i, label in enumerate(scale.labels)),
        x_ticks=x_ticks(scale),
        y_ticks=y_ticks(scale, format_value),
        gridlines=gridlines(scale),
    )


def build_line_chart(
    title: str,
    series: Sequence[ChartSeries],
    width: float = CHART_WIDTH,
    height: float = CHART_HEIGHT,
    padding: float = CHART_PADDING,
    format_value: Optional[Callable[[float], str]] = None,
) -> ChartGeometry:
    fmt = format_value or fmt_number
    scale = build_scale(series, width, height, padding)
    if scale is None:
        return _empty_geometry(title, "line", width, height, padding)

    lines: List[SeriesGeometry] = []
    for index, s in enumerate(series):
        points = series_points(scale, s, fmt)
        lines.append(
            SeriesGeometry(name=s.name, color=palette_color(index, s.color), points=points, path=line_path(points))
        )
    return ChartGeometry(
        title=title,
        kind="line",
        width=scale.width,
        height=scale.height,
        padding=scale.padding,
        scale=scale,
        series=tuple(lines),
        **_axes(scale, fmt),
    )


# ---------------------------
# Bars
# ---------------------------
def _baseline(scale: ChartScale) -> float:
    # Bars grow from zero, clamped into the plotted value range.
    return min(max(0.0, scale.y_axis_min), scale.max_value)


def build_bar_chart(
    title: str,
    series: Sequence[ChartSeries],
    width: float = CHART_WIDTH,
    height: float = CHART_HEIGHT,
    padding: float = CHART_PADDING,
    format_value: Optional[Callable[[float], str]] = None,
) -> ChartGeometry:
    fmt = format_value or fmt_number
    scale = build_scale(series, width, height, padding)
    if scale is None:
        return _empty_geometry(title, "bar", width, height, padding)

    slot = scale.inner_width / (len(scale.labels) - 1) if len(scale.labels) > 1 else scale.inner_width
    group_width = min(slot * BAR_GROUP_RATIO, MAX_BAR_GROUP_WIDTH)
    bar_width = group_width / len(series)
    y_base = scale.y(_baseline(scale))
    single = len(series) == 1

    bars: List[BarGeometry] = []
    legend: List[SeriesGeometry] = []
    for s_index, s in enumerate(series):
        for d_index, datum in enumerate(s.data):
            pos = scale.position(datum.label, datum.value)
            if pos is None:
                continue
            x, y_value = pos
            color = datum.color or s.color or palette_color(d_index if single else s_index)
            bars.append(
                BarGeometry(
                    series=s.name,
                    label=datum.label,
                    value=datum.value,
                    x=x - group_width / 2 + s_index * bar_width,
                    y=min(y_value, y_base),
                    width=bar_width,
                    height=abs(y_base - y_value),
                    color=color,
                    formatted=fmt(datum.value),
                )
            )
        legend.append(
            SeriesGeometry(name=s.name, color=palette_color(s_index, s.color), points=series_points(scale, s, fmt), path="")
        )
    return ChartGeometry(
        title=title,
        kind="bar",
        width=scale.width,
        height=scale.height,
        padding=scale.padding,
        scale=scale,
        series=tuple(legend),
        bars=tuple(bars),
        **_axes(scale, fmt),
    )
