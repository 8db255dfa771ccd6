"""Per-dimension rollups over the full campaign dataset.

Each aggregator takes every campaign and returns a fresh summary; counters
for a grouping key are summed across all campaigns. Empty input yields the
additive identity (zero totals, frames with no rows but the full column set).
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from campaign_insights.allocation import allocate, allocate_frame
from campaign_insights.geo import is_known_region, resolve_coordinates
from campaign_insights.heatmap import HeatPoint
from campaign_insights.metrics import conversion_rate, ctr, safe_divide
from campaign_insights.models import Campaign, DeviceClass, Gender, MarketingData, device_key


logger = logging.getLogger(__name__)

AGE_GROUP_COLS = ["age_group", "clicks", "click_share", "spend", "revenue"]
GENDER_TABLE_COLS = ["age_group", "impressions", "clicks", "conversions", "ctr", "conversion_rate"]
DEVICE_COLS = [
    "device_key",
    "device",
    "device_class",
    "impressions",
    "clicks",
    "conversions",
    "spend",
    "revenue",
    "percentage_of_traffic",
    "ctr",
    "conversion_rate",
]
REGION_COLS = ["region", "country", "spend", "revenue", "lat", "lng", "resolved"]
WEEK_COLS = ["week_key", "week_start", "week_end", "label", "spend", "revenue"]


# ---------------------------
# Helpers
# ---------------------------
def _empty(columns: List[str]) -> pd.DataFrame:
    return pd.DataFrame({c: pd.Series(dtype="object") for c in columns})


def _with_rates(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df["ctr"] = [ctr(c, i) for c, i in zip(df["clicks"], df["impressions"])]
    df["conversion_rate"] = [conversion_rate(v, c) for v, c in zip(df["conversions"], df["clicks"])]
    return df


def _by_clicks_desc(df: pd.DataFrame) -> pd.DataFrame:
    # Stable sort: ties keep first-seen key order.
    return df.sort_values("clicks", ascending=False, kind="stable").reset_index(drop=True)


def _campaign_totals(campaigns: Sequence[Campaign]) -> Tuple[float, float]:
    total_spend = float(sum(c.spend for c in campaigns))
    total_revenue = float(sum(c.revenue for c in campaigns))
    return total_spend, total_revenue


# ---------------------------
# Demographics (gender x age group)
# ---------------------------
@dataclass(frozen=True)
class DemographicSummary:
    total_clicks: int
    total_spend: float
    total_revenue: float
    male_clicks: int
    female_clicks: int
    male_spend: float
    female_spend: float
    male_revenue: float
    female_revenue: float
    age_groups: pd.DataFrame
    male_table: pd.DataFrame
    female_table: pd.DataFrame


def _demographic_rows(campaigns: Sequence[Campaign]) -> pd.DataFrame:
    rows = [
        {
            "gender": demo.gender_class.value,
            "age_group": demo.age_group,
            "impressions": demo.performance.impressions,
            "clicks": demo.performance.clicks,
            "conversions": demo.performance.conversions,
        }
        for campaign in campaigns
        for demo in campaign.demographic_breakdown
    ]
    return pd.DataFrame(rows, columns=["gender", "age_group", "impressions", "clicks", "conversions"])


def _gender_table(demo: pd.DataFrame, gender: Gender) -> pd.DataFrame:
    subset = demo[demo["gender"] == gender.value]
    if subset.empty:
        return _empty(GENDER_TABLE_COLS)
    table = subset.groupby("age_group", sort=False, as_index=False).agg(
        impressions=("impressions", "sum"),
        clicks=("clicks", "sum"),
        conversions=("conversions", "sum"),
    )
    return _by_clicks_desc(_with_rates(table))[GENDER_TABLE_COLS]


def aggregate_demographics(campaigns: Sequence[Campaign]) -> DemographicSummary:
    total_spend, total_revenue = _campaign_totals(campaigns)
    demo = _demographic_rows(campaigns)

    total_clicks = int(demo["clicks"].sum()) if not demo.empty else 0
    male_clicks = int(demo.loc[demo["gender"] == Gender.MALE.value, "clicks"].sum()) if not demo.empty else 0
    female_clicks = int(demo.loc[demo["gender"] == Gender.FEMALE.value, "clicks"].sum()) if not demo.empty else 0

    male = allocate(male_clicks, total_clicks, total_spend, total_revenue)
    female = allocate(female_clicks, total_clicks, total_spend, total_revenue)

    if demo.empty:
        age_groups = _empty(AGE_GROUP_COLS)
    else:
        # Every gender counts toward the age-group totals, including unrecognised labels.
        clicks_by_age = demo.groupby("age_group", sort=False, as_index=False).agg(clicks=("clicks", "sum"))
        age_groups = _by_clicks_desc(allocate_frame(clicks_by_age, total_clicks, total_spend, total_revenue))
        age_groups = age_groups[AGE_GROUP_COLS]

    return DemographicSummary(
        total_clicks=total_clicks,
        total_spend=total_spend,
        total_revenue=total_revenue,
        male_clicks=male_clicks,
        female_clicks=female_clicks,
        male_spend=male.spend,
        female_spend=female.spend,
        male_revenue=male.revenue,
        female_revenue=female.revenue,
        age_groups=age_groups,
        male_table=_gender_table(demo, Gender.MALE),
        female_table=_gender_table(demo, Gender.FEMALE),
    )


# ---------------------------
# Devices
# ---------------------------
@dataclass(frozen=True)
class DeviceTotals:
    device: str
    device_class: DeviceClass
    impressions: int
    clicks: int
    conversions: int
    spend: float
    revenue: float
    percentage_of_traffic: float
    ctr: float
    conversion_rate: float


@dataclass(frozen=True)
class DeviceSummary:
    devices: pd.DataFrame

    def _first(self, device_class: DeviceClass) -> Optional[DeviceTotals]:
        match = self.devices[self.devices["device_class"] == device_class]
        if match.empty:
            return None
        row = match.iloc[0]
        return DeviceTotals(
            device=str(row["device"]),
            device_class=device_class,
            impressions=int(row["impressions"]),
            clicks=int(row["clicks"]),
            conversions=int(row["conversions"]),
            spend=float(row["spend"]),
            revenue=float(row["revenue"]),
            percentage_of_traffic=float(row["percentage_of_traffic"]),
            ctr=float(row["ctr"]),
            conversion_rate=float(row["conversion_rate"]),
        )

    @property
    def mobile(self) -> Optional[DeviceTotals]:
        return self._first(DeviceClass.MOBILE)

    @property
    def desktop(self) -> Optional[DeviceTotals]:
        return self._first(DeviceClass.DESKTOP)

    def mobile_vs_desktop(self, metric: str) -> float:
        """Mobile value as a percentage of the desktop value for ``metric``."""
        mobile, desktop = self.mobile, self.desktop
        if mobile is None or desktop is None:
            return 0.0
        return safe_divide(getattr(mobile, metric), getattr(desktop, metric)) * 100


def _device_rows(campaigns: Sequence[Campaign]) -> pd.DataFrame:
    rows = [
        {
            "device_key": device_key(d.device),
            "device": d.device,
            "device_class": d.device_class,
            "impressions": d.impressions,
            "clicks": d.clicks,
            "conversions": d.conversions,
            "spend": d.spend,
            "revenue": d.revenue,
            "percentage_of_traffic": d.percentage_of_traffic,
        }
        for campaign in campaigns
        for d in campaign.device_performance
    ]
    return pd.DataFrame(
        rows,
        columns=[
            "device_key",
            "device",
            "device_class",
            "impressions",
            "clicks",
            "conversions",
            "spend",
            "revenue",
            "percentage_of_traffic",
        ],
    )


def aggregate_devices(campaigns: Sequence[Campaign]) -> DeviceSummary:
    rows = _device_rows(campaigns)
    if rows.empty:
        return DeviceSummary(devices=_empty(DEVICE_COLS))

    devices = rows.groupby("device_key", sort=False, as_index=False).agg(
        device=("device", "first"),
        device_class=("device_class", "first"),
        impressions=("impressions", "sum"),
        clicks=("clicks", "sum"),
        conversions=("conversions", "sum"),
        spend=("spend", "sum"),
        revenue=("revenue", "sum"),
        # Not a weighted mean: the last campaign reporting the device wins.
        percentage_of_traffic=("percentage_of_traffic", "last"),
    )
    devices = _by_clicks_desc(_with_rates(devices))
    return DeviceSummary(devices=devices[DEVICE_COLS])


# ---------------------------
# Regions
# ---------------------------
@dataclass(frozen=True)
class RegionalSummary:
    regions: pd.DataFrame

    def heat_points(self, metric: str = "revenue") -> List[HeatPoint]:
        return [
            HeatPoint(
                region=row.region,
                country=row.country,
                value=float(getattr(row, metric)),
                lat=float(row.lat),
                lng=float(row.lng),
            )
            for row in self.regions.itertuples(index=False)
        ]

    @property
    def revenue_points(self) -> List[HeatPoint]:
        return self.heat_points("revenue")

    @property
    def spend_points(self) -> List[HeatPoint]:
        return self.heat_points("spend")


def aggregate_regions(campaigns: Sequence[Campaign]) -> RegionalSummary:
    rows = pd.DataFrame(
        [
            {"region": r.region, "country": r.country, "spend": r.spend, "revenue": r.revenue}
            for campaign in campaigns
            for r in campaign.regional_performance
        ],
        columns=["region", "country", "spend", "revenue"],
    )
    if rows.empty:
        return RegionalSummary(regions=_empty(REGION_COLS))

    # First-seen order is kept: this feeds the map, not a ranked table.
    regions = rows.groupby("region", sort=False, as_index=False).agg(
        country=("country", "first"),
        spend=("spend", "sum"),
        revenue=("revenue", "sum"),
    )
    coords = [resolve_coordinates(r) for r in regions["region"]]
    regions["lat"] = [c.lat for c in coords]
    regions["lng"] = [c.lng for c in coords]
    regions["resolved"] = [is_known_region(r) for r in regions["region"]]
    unresolved = regions.loc[~regions["resolved"], "region"].tolist()
    if unresolved:
        logger.info("Regions without coordinates placed at default: %s", ", ".join(unresolved))
    return RegionalSummary(regions=regions[REGION_COLS])


# ---------------------------
# Weekly
# ---------------------------
@dataclass(frozen=True)
class WeeklySummary:
    weeks: pd.DataFrame

    def series(self, metric: str) -> List[Tuple[str, float]]:
        return [(label, float(value)) for label, value in zip(self.weeks["label"], self.weeks[metric])]

    def spend_series(self) -> List[Tuple[str, float]]:
        return self.series("spend")

    def revenue_series(self) -> List[Tuple[str, float]]:
        return self.series("revenue")


def aggregate_weekly(campaigns: Sequence[Campaign]) -> WeeklySummary:
    rows = pd.DataFrame(
        [
            {
                "week_key": w.week_key,
                "week_start": w.week_start,
                "week_end": w.week_end,
                "spend": w.spend,
                "revenue": w.revenue,
            }
            for campaign in campaigns
            for w in campaign.weekly_performance
        ],
        columns=["week_key", "week_start", "week_end", "spend", "revenue"],
    )
    if rows.empty:
        return WeeklySummary(weeks=_empty(WEEK_COLS))

    weeks = rows.groupby("week_key", sort=False, as_index=False).agg(
        week_start=("week_start", "first"),
        week_end=("week_end", "first"),
        spend=("spend", "sum"),
        revenue=("revenue", "sum"),
    )
    weeks["label"] = weeks["week_start"]
    weeks["_start"] = pd.to_datetime(weeks["week_start"], errors="coerce", format="ISO8601")
    weeks = weeks.sort_values("_start", kind="stable", na_position="last").reset_index(drop=True)
    return WeeklySummary(weeks=weeks[WEEK_COLS])


# ---------------------------
# Snapshot
# ---------------------------
@dataclass(frozen=True)
class AggregateSnapshot:
    demographics: DemographicSummary
    devices: DeviceSummary
    regions: RegionalSummary
    weekly: WeeklySummary


def recompute_aggregates(data: Optional[MarketingData]) -> Optional[AggregateSnapshot]:
    if data is None:
        return None
    campaigns = data.campaigns
    logger.info("Recomputing aggregates for %d campaigns", len(campaigns))
    return AggregateSnapshot(
        demographics=aggregate_demographics(campaigns),
        devices=aggregate_devices(campaigns),
        regions=aggregate_regions(campaigns),
        weekly=aggregate_weekly(campaigns),
    )


class AggregateRefresher:
    """Holds the snapshot for the current dataset; recomputes only when the dataset object changes."""

    def __init__(self):
        self._data: Optional[MarketingData] = None
        self._snapshot: Optional[AggregateSnapshot] = None

    def snapshot_for(self, data: Optional[MarketingData]) -> Optional[AggregateSnapshot]:
        if data is not self._data or (data is not None and self._snapshot is None):
            self._data = data
            self._snapshot = recompute_aggregates(data)
        return self._snapshot
