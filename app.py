from typing import Optional

import pandas as pd
import plotly.graph_objects as go
import pydeck as pdk
from pydeck.data_utils import compute_view

import streamlit as st

from campaign_insights.aggregations import (
    AggregateRefresher,
    AggregateSnapshot,
    DemographicSummary,
    DeviceSummary,
    DeviceTotals,
    RegionalSummary,
    WeeklySummary,
)
from campaign_insights.charts import ChartGeometry, ChartSeries, ChartDatum, build_bar_chart, build_line_chart
from campaign_insights.config import (
    CHART_HEIGHT,
    CHART_PADDING,
    CHART_WIDTH,
    DATA_FILE,
    FETCH_TIMEOUT,
    GRID_COLOR,
    HEADING_COLOR,
    MAP_HEIGHT,
    MUTED_COLOR,
    PANEL_COLOR,
    TEXT_COLOR,
    configure_logging,
)
from campaign_insights.data_source import DataLoadError, require_marketing_data
from campaign_insights.formatting import fmt_compact_money, fmt_int, fmt_money, fmt_pct, humanize_number
from campaign_insights.heatmap import HeatGeometry, build_heat_geometry
from campaign_insights.models import MarketingData


# ---------------------------
# Page / Theme Configuration
# ---------------------------
st.set_page_config(
    page_title="Campaign Insights Dashboard",
    layout="wide",
    page_icon="📈",
    initial_sidebar_state="collapsed",
)

st.markdown(
    f"""
    <style>
    :root {{
        --text: {TEXT_COLOR};
        --heading: {HEADING_COLOR};
        --muted: {MUTED_COLOR};
        --panel: {PANEL_COLOR};
        --app-bg: linear-gradient(180deg, #1C2C57 0%, #162443 45%, #0F1B33 100%);
    }}
    .stApp {{ background: var(--app-bg); }}
    .block-container {{padding-top: 2rem; padding-bottom: 2rem;}}
    h1, h2, h3 {{ color: var(--heading) !important; font-weight: 900 !important; }}
    .metric-card {{ background: var(--panel); padding: 16px; border-radius: 14px; border: 1px solid rgba(148,163,184,0.25); box-shadow: 0 2px 12px rgba(0,0,0,0.25); margin-bottom: 12px; }}
    .kpi-label {{ font-size: 0.9rem; color: var(--muted); margin-bottom: 6px; letter-spacing: .2px; }}
    .kpi-value {{ font-size: 1.6rem; font-weight: 800; color: var(--heading); }}
    .compare-value {{ font-size: 1.6rem; font-weight: 800; text-align: center; }}
    .compare-label {{ font-size: 0.85rem; color: var(--muted); text-align: center; }}
    .stPlotlyChart, .stPlotlyChart > div {{ background: transparent !important; }}
    </style>
    """,
    unsafe_allow_html=True,
)


def apply_plot_style(fig: go.Figure, height: int | None = None) -> go.Figure:
    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=TEXT_COLOR),
        margin=dict(l=10, r=10, t=40, b=10),
    )
    if height:
        fig.update_layout(height=height)
    fig.update_xaxes(showgrid=False, zeroline=False)
    fig.update_yaxes(showgrid=False, zeroline=False)
    return fig


def kpi_card(label: str, value: str) -> None:
    st.markdown(
        f"<div class='metric-card'><div class='kpi-label'>{label}</div>"
        f"<div class='kpi-value'>{value}</div></div>",
        unsafe_allow_html=True,
    )


def _hex_to_rgb(color: str) -> list:
    c = color.lstrip("#")
    return [int(c[i:i + 2], 16) for i in (0, 2, 4)]


# ---------------------------
# Data Loading (cached once per server; the dataset is immutable)
# ---------------------------
@st.cache_resource(show_spinner=False)
def load_dataset(path: str = DATA_FILE, timeout: float = FETCH_TIMEOUT) -> MarketingData:
    # Raises on failure; Streamlit does not cache exceptions, so the next rerun retries.
    return require_marketing_data(path, timeout)


def current_snapshot(data: MarketingData) -> Optional[AggregateSnapshot]:
    refresher = st.session_state.setdefault("aggregate_refresher", AggregateRefresher())
    return refresher.snapshot_for(data)


# ---------------------------
# Charts
# ---------------------------
def chart_figure(geom: ChartGeometry) -> go.Figure:
    """Draw precomputed chart geometry on a pixel-space plotly canvas (y grows downward)."""
    fig = go.Figure()
    if geom.kind == "bar":
        for s in geom.series:
            bars = [b for b in geom.bars if b.series == s.name]
            fig.add_trace(
                go.Bar(
                    x=[b.x + b.width / 2 for b in bars],
                    y=[b.height for b in bars],
                    base=[b.y for b in bars],
                    width=[b.width for b in bars],
                    marker_color=[b.color for b in bars],
                    name=s.name,
                    customdata=[[b.label, b.formatted] for b in bars],
                    hovertemplate="%{customdata[0]}: %{customdata[1]}<extra></extra>",
                )
            )
    else:
        for s in geom.series:
            fig.add_trace(
                go.Scatter(
                    x=[p.x for p in s.points],
                    y=[p.y for p in s.points],
                    mode="lines+markers",
                    name=s.name,
                    line=dict(color=s.color, width=2),
                    marker=dict(color=s.color, size=8),
                    customdata=[[p.label, p.formatted] for p in s.points],
                    hovertemplate="%{customdata[0]}: %{customdata[1]}<extra>%{fullData.name}</extra>",
                )
            )
    for line in geom.gridlines:
        fig.add_shape(
            type="line", x0=line.x1, x1=line.x2, y0=line.y, y1=line.y,
            line=dict(color=GRID_COLOR, width=1), layer="below",
        )
    fig.update_xaxes(
        range=[0, geom.width],
        tickmode="array",
        tickvals=[lbl.x for lbl in geom.x_labels],
        ticktext=[lbl.label for lbl in geom.x_labels],
        tickangle=90,
    )
    fig.update_yaxes(
        range=[geom.height, 0],
        tickmode="array",
        tickvals=[t.position for t in geom.y_ticks],
        ticktext=[t.label for t in geom.y_ticks],
    )
    fig.update_layout(
        title=dict(text=geom.title, x=0.0, xanchor="left", font=dict(size=16, color=HEADING_COLOR)),
        showlegend=len(geom.series) > 1,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        barmode="overlay",
    )
    return apply_plot_style(fig, height=int(geom.height) + 120)


def render_chart(geom: ChartGeometry) -> None:
    if geom.empty:
        st.markdown(f"**{geom.title}**")
        st.info("No data available")
        return
    st.plotly_chart(chart_figure(geom), width='stretch', config={"displayModeBar": False})


# ---------------------------
# Heat map
# ---------------------------
def heat_deck(geom: HeatGeometry) -> pdk.Deck:
    markers = pd.DataFrame(
        [
            {
                "region": m.label,
                "lat": m.lat,
                "lng": m.lng,
                "radius": m.radius,
                "color": _hex_to_rgb(m.color) + [153],
                "popup": m.popup_html,
            }
            for m in geom.markers
        ]
    )
    if geom.bounds is not None and geom.bounds[0] != geom.bounds[1]:
        low, high = geom.bounds
        view = compute_view([[low.lng, low.lat], [high.lng, high.lat]], view_proportion=1)
    else:
        view = pdk.ViewState(latitude=geom.center.lat, longitude=geom.center.lng, zoom=geom.zoom)

    circles = pdk.Layer(
        "ScatterplotLayer",
        data=markers,
        get_position=["lng", "lat"],
        get_radius="radius",
        get_fill_color="color",
        get_line_color="color",
        stroked=True,
        pickable=True,
    )
    labels = pdk.Layer(
        "TextLayer",
        data=markers,
        get_position=["lng", "lat"],
        get_text="region",
        get_size=14,
        get_color=[31, 41, 55],
        background=True,
    )
    return pdk.Deck(
        layers=[circles, labels],
        initial_view_state=view,
        map_style="light",
        tooltip={"html": "{popup}"},
    )


def style_heat_table(table: pd.DataFrame):
    view = table[["color", "region", "country", "formatted"]].rename(
        columns={"color": "Color", "region": "Region", "country": "Country", "formatted": "Value"}
    )
    return view.style.map(lambda c: f"background-color: {c}; color: {c};", subset=["Color"])


def render_heat_map(geom: HeatGeometry) -> None:
    st.markdown(f"### {geom.title}")
    if geom.empty:
        st.info("No data available")
        return
    st.pydeck_chart(heat_deck(geom), height=MAP_HEIGHT)
    st.dataframe(style_heat_table(geom.table), width='stretch', hide_index=True)


# ---------------------------
# Views
# ---------------------------
def style_gender_table(df: pd.DataFrame):
    view = df.rename(
        columns={
            "age_group": "Age Group",
            "impressions": "Impressions",
            "clicks": "Clicks",
            "conversions": "Conversions",
            "ctr": "CTR",
            "conversion_rate": "Conversion Rate",
        }
    )
    return view.style.format(
        {
            "Impressions": "{:,}",
            "Clicks": "{:,}",
            "Conversions": "{:,}",
            "CTR": "{:.2f}%",
            "Conversion Rate": "{:.2f}%",
        }
    )


def demographic_view(demo: DemographicSummary) -> None:
    cols = st.columns(3)
    cards = [
        ("Total Clicks by Males", fmt_int(demo.male_clicks)),
        ("Total Spend by Males", fmt_money(demo.male_spend)),
        ("Total Revenue by Males", fmt_money(demo.male_revenue)),
        ("Total Clicks by Females", fmt_int(demo.female_clicks)),
        ("Total Spend by Females", fmt_money(demo.female_spend)),
        ("Total Revenue by Females", fmt_money(demo.female_revenue)),
    ]
    for i, (label, value) in enumerate(cards):
        with cols[i % 3]:
            kpi_card(label, value)

    ages = demo.age_groups
    left, right = st.columns(2)
    with left:
        spend = ChartSeries(
            "Spend",
            tuple(ChartDatum(a, v, "#3B82F6") for a, v in zip(ages["age_group"], ages["spend"])),
        )
        render_chart(build_bar_chart("Total Spend by Age Group", [spend], CHART_WIDTH, CHART_HEIGHT, CHART_PADDING, fmt_money))
    with right:
        revenue = ChartSeries(
            "Revenue",
            tuple(ChartDatum(a, v, "#10B981") for a, v in zip(ages["age_group"], ages["revenue"])),
        )
        render_chart(build_bar_chart("Total Revenue by Age Group", [revenue], CHART_WIDTH, CHART_HEIGHT, CHART_PADDING, fmt_money))

    for title, table, empty_message in [
        ("Campaign Performance by Male Age Groups", demo.male_table, "No male demographic data available"),
        ("Campaign Performance by Female Age Groups", demo.female_table, "No female demographic data available"),
    ]:
        st.markdown(f"### {title}")
        if table.empty:
            st.info(empty_message)
        else:
            st.dataframe(style_gender_table(table), width='stretch')


def _device_cards(title: str, device: Optional[DeviceTotals]) -> None:
    st.markdown(f"### {title}")
    if device is None:
        st.info("No data available")
        return
    cards = [
        ("Impressions", humanize_number(device.impressions)),
        ("Clicks", fmt_int(device.clicks)),
        ("Conversions", fmt_int(device.conversions)),
        ("Spend", fmt_compact_money(device.spend)),
        ("Revenue", fmt_compact_money(device.revenue)),
        ("Traffic %", fmt_pct(device.percentage_of_traffic, 1)),
        ("CTR", fmt_pct(device.ctr)),
        ("Conversion Rate", fmt_pct(device.conversion_rate)),
    ]
    cols = st.columns(2)
    for i, (label, value) in enumerate(cards):
        with cols[i % 2]:
            kpi_card(label, value)


def device_view(devices: DeviceSummary) -> None:
    st.subheader("Device Performance Overview")
    left, right = st.columns(2)
    with left:
        _device_cards("Mobile Performance", devices.mobile)
    with right:
        _device_cards("Desktop Performance", devices.desktop)

    st.subheader("Performance Comparison")
    cols = st.columns(3)
    comparisons = [
        ("clicks", "Mobile vs Desktop Clicks", "#60A5FA"),
        ("conversions", "Mobile vs Desktop Conversions", "#34D399"),
        ("revenue", "Mobile vs Desktop Revenue", "#A78BFA"),
    ]
    for col, (metric, label, color) in zip(cols, comparisons):
        with col:
            st.markdown(
                f"<div class='metric-card'><div class='compare-value' style='color:{color}'>"
                f"{fmt_pct(devices.mobile_vs_desktop(metric), 1)}</div>"
                f"<div class='compare-label'>{label}</div></div>",
                unsafe_allow_html=True,
            )


def region_view(regions: RegionalSummary) -> None:
    render_heat_map(build_heat_geometry("Revenue by Region", regions.revenue_points, fmt_money))
    render_heat_map(build_heat_geometry("Spend by Region", regions.spend_points, fmt_money))


def weekly_view(weekly: WeeklySummary) -> None:
    revenue = ChartSeries.from_pairs("Revenue", weekly.revenue_series(), color="#10B981")
    spend = ChartSeries.from_pairs("Spend", weekly.spend_series(), color="#3B82F6")
    render_chart(build_line_chart("Revenue by Week", [revenue], CHART_WIDTH, CHART_HEIGHT, CHART_PADDING, fmt_money))
    render_chart(build_line_chart("Spend by Week", [spend], CHART_WIDTH, CHART_HEIGHT, CHART_PADDING, fmt_money))


# ---------------------------
# Main App
# ---------------------------
def main():
    configure_logging()
    st.title("Campaign Insights Dashboard")

    try:
        with st.spinner("Loading..."):
            data = load_dataset()
    except DataLoadError as exc:
        st.error(f"Error loading data: {exc}")
        st.stop()

    snapshot = current_snapshot(data)
    st.caption(f"{len(data.campaigns)} campaigns loaded from {DATA_FILE}")

    demo_tab, device_tab, region_tab, weekly_tab = st.tabs(
        ["Demographic View", "Device View", "Region View", "Weekly View"]
    )
    with demo_tab:
        demographic_view(snapshot.demographics)
    with device_tab:
        device_view(snapshot.devices)
    with region_tab:
        region_view(snapshot.regions)
    with weekly_tab:
        weekly_view(snapshot.weekly)


if __name__ == "__main__":
    main()
