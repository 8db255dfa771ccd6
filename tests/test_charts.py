import pytest

from campaign_insights.charts import (
    ChartDatum,
    ChartSeries,
    build_bar_chart,
    build_line_chart,
    build_scale,
    union_labels,
)
from campaign_insights.formatting import PALETTE


def line(name, pairs, color=None):
    return ChartSeries.from_pairs(name, pairs, color=color)


def test_union_labels_preserves_first_seen_order():
    series = [line("a", [("x", 1), ("y", 2)]), line("b", [("z", 3), ("x", 4)])]
    assert union_labels(series) == ("x", "y", "z")


def test_line_chart_positions_and_path():
    geom = build_line_chart(
        "Revenue", [line("rev", [("a", 0), ("b", 50), ("c", 100)])], width=600, height=300, padding=50
    )
    points = geom.series[0].points
    assert [(p.x, p.y) for p in points] == [(50.0, 250.0), (300.0, 150.0), (550.0, 50.0)]
    assert geom.series[0].path == "M 50.00 250.00 L 300.00 150.00 L 550.00 50.00"
    assert [lbl.x for lbl in geom.x_labels] == [50.0, 300.0, 550.0]


def test_y_axis_starts_at_zero_for_positive_values():
    scale = build_scale([line("s", [("a", 20), ("b", 80)])], width=600, height=300, padding=50)
    assert scale.y_axis_min == 0
    assert scale.y_range == 80
    assert scale.y(0) == pytest.approx(250.0)


def test_negative_minimum_gets_headroom():
    scale = build_scale([line("s", [("a", -10), ("b", 20)])], width=600, height=300, padding=50)
    assert scale.y_axis_min == pytest.approx(-11.0)
    assert scale.y(scale.y_axis_min) == pytest.approx(250.0)
    assert scale.y(20) == pytest.approx(50.0)


def test_single_label_sits_on_left_edge():
    geom = build_line_chart("One", [line("s", [("only", 5)])], width=400, height=200, padding=30)
    point = geom.series[0].points[0]
    assert point.x == 30.0
    assert point.y == 30.0
    assert all(t.position == 30.0 and t.label == "only" for t in geom.x_ticks)


def test_equal_values_do_not_divide_by_zero():
    geom = build_line_chart("Flat", [line("s", [("a", 0), ("b", 0)])], width=400, height=200, padding=20)
    assert [p.y for p in geom.series[0].points] == [20.0, 20.0]


def test_fixed_quantile_ticks():
    geom = build_line_chart(
        "Ticks", [line("s", [("a", 0), ("b", 50), ("c", 100)])], width=600, height=300, padding=50,
        format_value=lambda v: f"{v:.0f}",
    )
    assert [t.ratio for t in geom.y_ticks] == [0.0, 0.25, 0.5, 0.75, 1.0]
    assert [t.label for t in geom.y_ticks] == ["0", "25", "50", "75", "100"]
    assert [t.position for t in geom.y_ticks] == [250.0, 200.0, 150.0, 100.0, 50.0]
    assert [g.y for g in geom.gridlines] == [50.0, 100.0, 150.0, 200.0, 250.0]


def test_x_ticks_sit_on_the_label_they_name():
    geom = build_line_chart(
        "Ticks", [line("s", [("a", 0), ("b", 50), ("c", 100)])], width=600, height=300, padding=50
    )
    label_x = {lbl.label: lbl.x for lbl in geom.x_labels}
    assert [t.label for t in geom.x_ticks] == ["a", "b", "b", "c", "c"]
    assert [t.position for t in geom.x_ticks] == [50.0, 300.0, 300.0, 550.0, 550.0]
    assert all(t.position == label_x[t.label] for t in geom.x_ticks)


def test_x_ticks_on_evenly_divisible_labels():
    pairs = [(label, i) for i, label in enumerate("abcdefghi")]
    geom = build_line_chart("Ticks", [line("s", pairs)], width=600, height=300, padding=50)
    assert [t.label for t in geom.x_ticks] == ["a", "c", "e", "g", "i"]
    assert [t.position for t in geom.x_ticks] == [50.0, 175.0, 300.0, 425.0, 550.0]


def test_series_missing_labels_are_absent_not_zero_filled():
    geom = build_line_chart(
        "Gaps",
        [line("full", [("a", 1), ("b", 2), ("c", 3)]), line("partial", [("c", 3)])],
        width=600, height=300, padding=50,
    )
    partial = geom.series[1]
    assert len(partial.points) == 1
    assert partial.points[0].x == 550.0
    assert partial.path == "M 550.00 50.00"


def test_palette_colors_cycle_unless_given():
    series = [line(f"s{i}", [("a", i)]) for i in range(11)]
    series[1] = line("custom", [("a", 1)], color="#000000")
    geom = build_line_chart("Colors", series)
    colors = [s.color for s in geom.series]
    assert colors[0] == PALETTE[0]
    assert colors[1] == "#000000"
    assert colors[10] == PALETTE[0]


def test_empty_chart():
    assert build_line_chart("Nothing", []).empty
    geom = build_bar_chart("Nothing", [ChartSeries("s", ())])
    assert geom.empty
    assert geom.bars == ()


def test_bar_chart_geometry():
    geom = build_bar_chart(
        "Bars", [line("s", [("a", 10), ("b", -5)])], width=600, height=300, padding=50
    )
    scale = geom.scale
    zero = scale.y(0)
    up, down = geom.bars
    assert up.y == pytest.approx(scale.y(10))
    assert up.height == pytest.approx(zero - scale.y(10))
    assert down.y == pytest.approx(zero)
    assert down.height == pytest.approx(scale.y(-5) - zero)
    assert up.x + up.width / 2 == pytest.approx(50.0)
    assert [b.color for b in geom.bars] == [PALETTE[0], PALETTE[1]]


def test_bar_colors_from_datum():
    series = ChartSeries("s", (ChartDatum("a", 1, "#111111"), ChartDatum("b", 2)), color="#222222")
    geom = build_bar_chart("Bars", [series])
    assert [b.color for b in geom.bars] == ["#111111", "#222222"]
