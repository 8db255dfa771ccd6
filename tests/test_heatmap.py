import pytest

from campaign_insights.formatting import PALETTE
from campaign_insights.geo import DEFAULT_COORDINATE, REGION_COORDINATES
from campaign_insights.heatmap import (
    BASE_RADIUS_M,
    RADIUS_SPAN_M,
    HeatPoint,
    build_heat_geometry,
    normalize_value,
)


def point(region, value, country="UAE"):
    coords = REGION_COORDINATES.get(region, DEFAULT_COORDINATE)
    return HeatPoint(region, country, value, coords.lat, coords.lng)


def test_radius_scales_with_value():
    geom = build_heat_geometry("Revenue", [point("Dubai", 10), point("Sharjah", 50), point("Abu Dhabi", 100)])
    radii = [m.radius for m in geom.markers]
    assert radii[0] == BASE_RADIUS_M
    assert radii[2] == BASE_RADIUS_M + RADIUS_SPAN_M
    assert radii[0] < radii[1] < radii[2]
    assert geom.min_value == 10
    assert geom.max_value == 100


def test_equal_values_use_midpoint_radius():
    geom = build_heat_geometry("Spend", [point("Dubai", 5), point("Doha", 5)])
    assert [m.radius for m in geom.markers] == [85_000, 85_000]


def test_normalize_value_bounds():
    assert normalize_value(0, 0, 10) == 0
    assert normalize_value(10, 0, 10) == 1
    assert normalize_value(3, 3, 3) == 0.5


def test_marker_texts_and_colors():
    geom = build_heat_geometry(
        "Revenue", [point("Dubai", 1200), point("Riyadh", 300, "Saudi Arabia")], format_value=lambda v: f"${v:,.0f}"
    )
    dubai, riyadh = geom.markers
    assert dubai.popup_text == "Dubai\nUAE\n$1,200"
    assert dubai.tooltip_text == "Dubai: $1,200"
    assert riyadh.label == "Riyadh"
    assert [m.color for m in geom.markers] == [PALETTE[0], PALETTE[1]]


def test_table_sorted_descending_and_keeps_colors():
    geom = build_heat_geometry("Revenue", [point("Dubai", 10), point("Doha", 100), point("Muscat", 50)])
    table = geom.table
    assert table["region"].tolist() == ["Doha", "Muscat", "Dubai"]
    assert table.loc[0, "color"] == PALETTE[1]
    assert table.loc[2, "color"] == PALETTE[0]


def test_bounds_cover_known_regions_with_padding():
    geom = build_heat_geometry("Revenue", [point("Dubai", 1), point("Abu Dhabi", 2), point("Atlantis", 3)])
    south_west, north_east = geom.bounds
    lat_pad = (25.2048 - 24.4539) * 0.1
    assert south_west.lat == pytest.approx(24.4539 - lat_pad)
    assert north_east.lat == pytest.approx(25.2048 + lat_pad)
    assert geom.center.lat == pytest.approx((24.4539 + 25.2048) / 2)
    # Atlantis is drawn at the fallback point but does not widen the view.
    assert geom.markers[2].lat == DEFAULT_COORDINATE.lat


def test_only_unknown_regions_use_default_view():
    geom = build_heat_geometry("Revenue", [point("Atlantis", 3)])
    assert geom.bounds is None
    assert geom.center == DEFAULT_COORDINATE
    assert geom.zoom == 7


def test_empty_points():
    geom = build_heat_geometry("Revenue", [])
    assert geom.empty
    assert geom.table.empty
    assert geom.center == DEFAULT_COORDINATE


def test_popup_html_escapes_dataset_text():
    geom = build_heat_geometry("Revenue", [HeatPoint("<b>Dubai</b>", "A & B", 10, 25.2, 55.3)])
    marker = geom.markers[0]
    assert marker.popup_html == "&lt;b&gt;Dubai&lt;/b&gt;<br/>A &amp; B<br/>10"
    assert marker.popup_text == "<b>Dubai</b>\nA & B\n10"
