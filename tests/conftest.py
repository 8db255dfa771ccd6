import pytest

from campaign_insights.models import (
    Campaign,
    DemographicBreakdown,
    DevicePerformance,
    MarketingData,
    PerformanceCounters,
    RegionalPerformance,
    WeeklyPerformance,
)


def demo(gender, age_group, impressions=0, clicks=0, conversions=0):
    return DemographicBreakdown(gender, age_group, PerformanceCounters(impressions, clicks, conversions))


def device(label, impressions=0, clicks=0, conversions=0, spend=0.0, revenue=0.0, traffic=0.0):
    return DevicePerformance(label, impressions, clicks, conversions, spend, revenue, traffic)


def campaign(spend=0.0, revenue=0.0, demographics=(), devices=(), regions=(), weeks=(), id=""):
    return Campaign(
        id=id,
        spend=spend,
        revenue=revenue,
        demographic_breakdown=tuple(demographics),
        device_performance=tuple(devices),
        regional_performance=tuple(regions),
        weekly_performance=tuple(weeks),
    )


@pytest.fixture
def campaigns():
    return (
        campaign(
            spend=1000.0,
            revenue=4000.0,
            id="a",
            demographics=[
                demo("Male", "18-24", 1000, 100, 10),
                demo("female", "18-24", 800, 60, 12),
                demo("MALE", "25-34", 500, 40, 4),
            ],
            devices=[
                device("Mobile", 100, 10, 1, 300.0, 900.0, 60.0),
                device("Desktop", 50, 5, 1, 200.0, 700.0, 40.0),
            ],
            regions=[
                RegionalPerformance("Dubai", "UAE", 300.0, 1200.0),
                RegionalPerformance("Atlantis", "Nowhere", 50.0, 100.0),
            ],
            weeks=[
                WeeklyPerformance("2024-01-08", "2024-01-14", 100.0, 400.0),
                WeeklyPerformance("2024-01-01", "2024-01-07", 50.0, 200.0),
            ],
        ),
        campaign(
            spend=500.0,
            revenue=1000.0,
            id="b",
            demographics=[
                demo("Female", "25-34", 700, 80, 8),
                demo("other", "35-44", 300, 20, 2),
            ],
            devices=[
                device("mobile", 200, 20, 3, 100.0, 300.0, 75.0),
                device("Tablet", 30, 1, 0, 10.0, 20.0, 5.0),
            ],
            regions=[
                RegionalPerformance("Riyadh", "Saudi Arabia", 120.0, 500.0),
                RegionalPerformance("Dubai", "United Arab Emirates", 80.0, 300.0),
            ],
            weeks=[
                WeeklyPerformance("2024-01-15", "2024-01-21", 70.0, 150.0),
                WeeklyPerformance("2024-01-08", "2024-01-14", 30.0, 100.0),
            ],
        ),
    )


@pytest.fixture
def marketing_data(campaigns):
    return MarketingData(campaigns=campaigns)
