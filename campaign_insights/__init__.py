"""Campaign rollups and chart/map geometry for the marketing dashboard."""
from campaign_insights.aggregations import (
    AggregateRefresher,
    AggregateSnapshot,
    aggregate_demographics,
    aggregate_devices,
    aggregate_regions,
    aggregate_weekly,
    recompute_aggregates,
)
from campaign_insights.charts import ChartSeries, build_bar_chart, build_line_chart
from campaign_insights.data_source import (
    DataLoadError,
    LoadResult,
    fetch_marketing_data,
    load_marketing_data,
    require_marketing_data,
)
from campaign_insights.heatmap import HeatPoint, build_heat_geometry
from campaign_insights.metrics import conversion_rate, ctr
from campaign_insights.models import MarketingData

__version__ = "0.1.0"

__all__ = [
    "AggregateRefresher",
    "AggregateSnapshot",
    "ChartSeries",
    "DataLoadError",
    "HeatPoint",
    "LoadResult",
    "MarketingData",
    "aggregate_demographics",
    "aggregate_devices",
    "aggregate_regions",
    "aggregate_weekly",
    "build_bar_chart",
    "build_heat_geometry",
    "build_line_chart",
    "conversion_rate",
    "ctr",
    "fetch_marketing_data",
    "load_marketing_data",
    "recompute_aggregates",
    "require_marketing_data",
]
