"""Derived-rate formulas shared by every rollup.

All helpers are total: a zero or missing denominator yields ``0.0`` rather
than ``NaN`` so the result can always be rendered as a percentage string.
"""
import pandas as pd


def safe_divide(numerator: float, denominator: float) -> float:
    if denominator is None or denominator == 0 or pd.isna(denominator):
        return 0.0
    return float(numerator) / float(denominator)


def ctr(clicks: float, impressions: float) -> float:
    """Click-through rate as a percentage: clicks / impressions * 100."""
    if impressions is None or pd.isna(impressions) or impressions <= 0:
        return 0.0
    return float(clicks) / float(impressions) * 100


def conversion_rate(conversions: float, clicks: float) -> float:
    """Conversion rate as a percentage: conversions / clicks * 100."""
    if clicks is None or pd.isna(clicks) or clicks <= 0:
        return 0.0
    return float(conversions) / float(clicks) * 100
