"""Click-share allocation of campaign-level spend and revenue.

Demographic sub-records carry no spend or revenue of their own, so the
dataset-wide totals are split across groups in proportion to each group's
share of all clicks in the dataset. The split is dataset-wide rather than
per-campaign; it assumes spend follows clicks, which is an approximation.
"""
from dataclasses import dataclass

import pandas as pd

from campaign_insights.metrics import safe_divide


@dataclass(frozen=True)
class Allocation:
    click_share: float
    spend: float
    revenue: float


def click_share(group_clicks: float, total_clicks: float) -> float:
    return safe_divide(group_clicks, total_clicks) if total_clicks > 0 else 0.0


def allocate(group_clicks: float, total_clicks: float, total_spend: float, total_revenue: float) -> Allocation:
    share = click_share(group_clicks, total_clicks)
    return Allocation(click_share=share, spend=total_spend * share, revenue=total_revenue * share)


def allocate_frame(
    frame: pd.DataFrame,
    total_clicks: float,
    total_spend: float,
    total_revenue: float,
    clicks_col: str = "clicks",
) -> pd.DataFrame:
    """Return a copy of ``frame`` with ``click_share``, ``spend`` and ``revenue`` columns."""
    out = frame.copy()
    shares = [click_share(c, total_clicks) for c in out[clicks_col]]
    out["click_share"] = pd.Series(shares, index=out.index, dtype="float64")
    out["spend"] = out["click_share"] * float(total_spend)
    out["revenue"] = out["click_share"] * float(total_revenue)
    return out
