"""Typed records for the raw marketing dataset.

The dataset arrives as nested JSON. ``MarketingData.from_dict`` turns it into
frozen dataclasses, coercing malformed numbers to zero instead of failing, and
normalises the free-text gender and device labels into canonical variants.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Tuple


def _to_float(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = (
            value.strip()
            .replace(",", "")
            .replace("$", "")
            .replace("%", "")
        )
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def _to_int(value: Any) -> int:
    number = _to_float(value)
    return 0 if math.isinf(number) else int(number)


def _to_str(value: Any) -> str:
    return "" if value is None else str(value)


def _records(row: Mapping[str, Any], key: str) -> Sequence[Mapping[str, Any]]:
    items = row.get(key)
    if not isinstance(items, (list, tuple)):
        return []
    return [item for item in items if isinstance(item, Mapping)]


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, label: Optional[str]) -> "Gender":
        key = _to_str(label).strip().lower()
        if key == cls.MALE.value:
            return cls.MALE
        if key == cls.FEMALE.value:
            return cls.FEMALE
        return cls.UNKNOWN


class DeviceClass(str, Enum):
    MOBILE = "mobile"
    DESKTOP = "desktop"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, label: Optional[str]) -> "DeviceClass":
        key = device_key(label)
        if key == cls.MOBILE.value:
            return cls.MOBILE
        if key == cls.DESKTOP.value:
            return cls.DESKTOP
        return cls.UNKNOWN


def device_key(label: Optional[str]) -> str:
    """Case-insensitive grouping key for a device label."""
    return _to_str(label).lower()


@dataclass(frozen=True)
class PerformanceCounters:
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "PerformanceCounters":
        return cls(
            impressions=_to_int(row.get("impressions")),
            clicks=_to_int(row.get("clicks")),
            conversions=_to_int(row.get("conversions")),
        )


@dataclass(frozen=True)
class DemographicBreakdown:
    gender: str
    age_group: str
    performance: PerformanceCounters = field(default_factory=PerformanceCounters)

    @property
    def gender_class(self) -> Gender:
        return Gender.parse(self.gender)

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "DemographicBreakdown":
        performance = row.get("performance")
        return cls(
            gender=_to_str(row.get("gender")),
            age_group=_to_str(row.get("age_group")),
            performance=PerformanceCounters.from_dict(performance if isinstance(performance, Mapping) else {}),
        )


@dataclass(frozen=True)
class DevicePerformance:
    device: str
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0
    spend: float = 0.0
    revenue: float = 0.0
    percentage_of_traffic: float = 0.0

    @property
    def device_class(self) -> DeviceClass:
        return DeviceClass.parse(self.device)

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "DevicePerformance":
        return cls(
            device=_to_str(row.get("device")),
            impressions=_to_int(row.get("impressions")),
            clicks=_to_int(row.get("clicks")),
            conversions=_to_int(row.get("conversions")),
            spend=_to_float(row.get("spend")),
            revenue=_to_float(row.get("revenue")),
            percentage_of_traffic=_to_float(row.get("percentage_of_traffic")),
        )


@dataclass(frozen=True)
class RegionalPerformance:
    region: str
    country: str = ""
    spend: float = 0.0
    revenue: float = 0.0

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "RegionalPerformance":
        return cls(
            region=_to_str(row.get("region")),
            country=_to_str(row.get("country")),
            spend=_to_float(row.get("spend")),
            revenue=_to_float(row.get("revenue")),
        )


@dataclass(frozen=True)
class WeeklyPerformance:
    week_start: str
    week_end: str
    spend: float = 0.0
    revenue: float = 0.0

    @property
    def week_key(self) -> str:
        return f"{self.week_start} to {self.week_end}"

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "WeeklyPerformance":
        return cls(
            week_start=_to_str(row.get("week_start")),
            week_end=_to_str(row.get("week_end")),
            spend=_to_float(row.get("spend")),
            revenue=_to_float(row.get("revenue")),
        )


@dataclass(frozen=True)
class Campaign:
    id: str = ""
    name: str = ""
    spend: float = 0.0
    revenue: float = 0.0
    demographic_breakdown: Tuple[DemographicBreakdown, ...] = ()
    device_performance: Tuple[DevicePerformance, ...] = ()
    regional_performance: Tuple[RegionalPerformance, ...] = ()
    weekly_performance: Tuple[WeeklyPerformance, ...] = ()

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "Campaign":
        return cls(
            id=_to_str(row.get("id")),
            name=_to_str(row.get("name")),
            spend=_to_float(row.get("spend")),
            revenue=_to_float(row.get("revenue")),
            demographic_breakdown=tuple(
                DemographicBreakdown.from_dict(r) for r in _records(row, "demographic_breakdown")
            ),
            device_performance=tuple(DevicePerformance.from_dict(r) for r in _records(row, "device_performance")),
            regional_performance=tuple(
                RegionalPerformance.from_dict(r) for r in _records(row, "regional_performance")
            ),
            weekly_performance=tuple(WeeklyPerformance.from_dict(r) for r in _records(row, "weekly_performance")),
        )


@dataclass(frozen=True)
class MarketingData:
    campaigns: Tuple[Campaign, ...] = ()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MarketingData":
        return cls(campaigns=tuple(Campaign.from_dict(r) for r in _records(payload, "campaigns")))
