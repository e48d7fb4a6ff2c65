"""Shared test fixtures for the community forecast engine and API tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from engine.community.models import ForecastPoint, HistoricalData

HOURS_PER_DAY = 24


def forecast_from_surplus(surplus_kw: Sequence[float]) -> list[ForecastPoint]:
    """24 points whose surplus equals *surplus_kw* hour by hour."""
    assert len(surplus_kw) == HOURS_PER_DAY
    points = []
    for hour, s in enumerate(surplus_kw):
        production = max(s, 0.0) + 1.0
        consumption = production - s
        points.append(
            ForecastPoint(
                hour=hour,
                production_kw=production,
                expected_consumption_kw=consumption,
                expected_surplus_kw=s,
            )
        )
    return points


# ======================================================================
# Historical data fixtures
# ======================================================================

@pytest.fixture
def typical_cel() -> HistoricalData:
    """Community defaults: 50 kWh/day produced, 100 kWh/day used, 30 kWp."""
    return HistoricalData(
        avg_daily_production_kwh=50.0,
        avg_daily_consumption_kwh=100.0,
        installed_capacity_kwp=30.0,
    )


@pytest.fixture
def sunny_cel() -> HistoricalData:
    """Large installation where the capacity cap binds at midday."""
    return HistoricalData(
        avg_daily_production_kwh=300.0,
        avg_daily_consumption_kwh=120.0,
        installed_capacity_kwp=30.0,
    )


# ======================================================================
# Forecast fixtures
# ======================================================================

@pytest.fixture
def make_forecast() -> Callable[[Sequence[float]], list[ForecastPoint]]:
    return forecast_from_surplus


@pytest.fixture
def two_run_forecast() -> list[ForecastPoint]:
    """Hours 2-5 at +2 kW (8 kWh) and hours 10-11 at +5 kW (10 kWh)."""
    surplus = [-1.0] * HOURS_PER_DAY
    for h in range(2, 6):
        surplus[h] = 2.0
    for h in (10, 11):
        surplus[h] = 5.0
    return forecast_from_surplus(surplus)


@pytest.fixture
def all_deficit_forecast() -> list[ForecastPoint]:
    return forecast_from_surplus([-0.5] * HOURS_PER_DAY)


@pytest.fixture
def zero_forecast() -> list[ForecastPoint]:
    return [
        ForecastPoint(hour=h, production_kw=0.0, expected_consumption_kw=0.0, expected_surplus_kw=0.0)
        for h in range(HOURS_PER_DAY)
    ]
