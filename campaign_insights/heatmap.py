"""Value-scaled markers for the regional heat map.

Values are min/max normalised and mapped onto a circle radius in metres so the
smallest region stays visible and the largest stays bounded. Drawing the
basemap and placing the circles is left to the map library; this module only
produces per-point coordinates, radius, color and texts.
"""
import html
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from campaign_insights.config import DEFAULT_MAP_ZOOM
from campaign_insights.formatting import fmt_number, palette_color
from campaign_insights.geo import DEFAULT_COORDINATE, Coordinate, is_known_region


BASE_RADIUS_M = 10_000
RADIUS_SPAN_M = 150_000
BOUNDS_PADDING = 0.1

TABLE_COLS = ["color", "region", "country", "value", "formatted"]


@dataclass(frozen=True)
class HeatPoint:
    region: str
    country: str
    value: float
    lat: float
    lng: float
    color: Optional[str] = None


@dataclass(frozen=True)
class HeatMarker:
    region: str
    country: str
    value: float
    lat: float
    lng: float
    radius: float
    color: str
    label: str
    formatted: str
    popup_text: str
    popup_html: str
    tooltip_text: str


@dataclass(frozen=True)
class HeatGeometry:
    title: str
    markers: Tuple[HeatMarker, ...]
    table: pd.DataFrame
    min_value: float
    max_value: float
    center: Coordinate
    zoom: int
    bounds: Optional[Tuple[Coordinate, Coordinate]]

    @property
    def empty(self) -> bool:
        return not self.markers


def normalize_value(value: float, min_value: float, max_value: float) -> float:
    if max_value == min_value:
        return 0.5
    return (value - min_value) / (max_value - min_value)


def marker_radius(t: float) -> float:
    return BASE_RADIUS_M + t * RADIUS_SPAN_M


def _fit_bounds(markers: Sequence[HeatMarker]) -> Optional[Tuple[Coordinate, Coordinate]]:
    # Only markers with a real coordinate count; fallback placements would stretch the view.
    known = [m for m in markers if is_known_region(m.region)]
    if not known:
        return None
    lats = np.array([m.lat for m in known])
    lngs = np.array([m.lng for m in known])
    lat_pad = (lats.max() - lats.min()) * BOUNDS_PADDING
    lng_pad = (lngs.max() - lngs.min()) * BOUNDS_PADDING
    return (
        Coordinate(float(lats.min() - lat_pad), float(lngs.min() - lng_pad)),
        Coordinate(float(lats.max() + lat_pad), float(lngs.max() + lng_pad)),
    )


def build_heat_geometry(
    title: str,
    points: Sequence[HeatPoint],
    format_value: Optional[Callable[[float], str]] = None,
) -> HeatGeometry:
    fmt = format_value or fmt_number
    if not points:
        return HeatGeometry(
            title=title,
            markers=(),
            table=pd.DataFrame(columns=TABLE_COLS),
            min_value=0.0,
            max_value=0.0,
            center=DEFAULT_COORDINATE,
            zoom=DEFAULT_MAP_ZOOM,
            bounds=None,
        )

    values = np.array([p.value for p in points], dtype=float)
    min_value = float(values.min())
    max_value = float(values.max())

    markers = []
    for index, point in enumerate(points):
        formatted = fmt(point.value)
        markers.append(
            HeatMarker(
                region=point.region,
                country=point.country,
                value=point.value,
                lat=point.lat,
                lng=point.lng,
                radius=marker_radius(normalize_value(point.value, min_value, max_value)),
                color=palette_color(index, point.color),
                label=point.region,
                formatted=formatted,
                popup_text=f"{point.region}\n{point.country}\n{formatted}",
                popup_html="<br/>".join(html.escape(part) for part in (point.region, point.country, formatted)),
                tooltip_text=f"{point.region}: {formatted}",
            )
        )

    table = pd.DataFrame(
        [
            {"color": m.color, "region": m.region, "country": m.country, "value": m.value, "formatted": m.formatted}
            for m in markers
        ],
        columns=TABLE_COLS,
    )
    table = table.sort_values("value", ascending=False, kind="stable").reset_index(drop=True)

    bounds = _fit_bounds(markers)
    if bounds is None:
        center = DEFAULT_COORDINATE
    else:
        center = Coordinate((bounds[0].lat + bounds[1].lat) / 2, (bounds[0].lng + bounds[1].lng) / 2)

    return HeatGeometry(
        title=title,
        markers=tuple(markers),
        table=table,
        min_value=min_value,
        max_value=max_value,
        center=center,
        zoom=DEFAULT_MAP_ZOOM,
        bounds=bounds,
    )
