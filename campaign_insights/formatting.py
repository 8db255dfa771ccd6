from typing import Optional

import pandas as pd


# Fixed series/marker palette, cycled by index when no explicit color is given.
PALETTE = (
    "#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6",
    "#06B6D4", "#84CC16", "#F97316", "#EC4899", "#6366F1",
)


def palette_color(index: int, color: Optional[str] = None) -> str:
    return color or PALETTE[index % len(PALETTE)]


def humanize_number(x: float, decimals: int = 1) -> str:
    try:
        n = float(x)
    except (TypeError, ValueError):
        return "–"
    if pd.isna(n):
        return "–"
    abs_n = abs(n)
    if abs_n >= 1_000_000_000:
        return f"{n/1_000_000_000:.{decimals}f}B"
    if abs_n >= 1_000_000:
        return f"{n/1_000_000:.{decimals}f}M"
    if abs_n >= 1_000:
        return f"{n/1_000:.{decimals}f}k"
    return f"{n:,.0f}"


def fmt_number(x: float) -> str:
    """Thousands separators with at most three decimals, trailing zeros dropped."""
    if pd.isna(x):
        return "–"
    text = f"{float(x):,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def fmt_money(x: float) -> str:
    if pd.isna(x):
        return "–"
    return "$" + fmt_number(round(float(x), 2))


def fmt_compact_money(x: float) -> str:
    if pd.isna(x):
        return "–"
    return "$" + humanize_number(x, decimals=2)


def fmt_int(x: float) -> str:
    if pd.isna(x):
        return "–"
    return f"{int(round(float(x))):,}"


def fmt_pct(x: float, digits: int = 2) -> str:
    # Rates are already expressed as percentages (0-100).
    if pd.isna(x):
        return "–"
    return f"{float(x):.{digits}f}%"
