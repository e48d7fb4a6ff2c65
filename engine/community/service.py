"""Entry points used by the forecast, surplus and recommendation endpoints."""

from __future__ import annotations

from collections.abc import Sequence

from engine.community.errors import CommunityEngineError
from engine.community.models import (
    CommunityForecast,
    ForecastPoint,
    ForecastSummary,
    HistoricalData,
    OptimalWindow,
    Recommendation,
    SurplusStatus,
)
from engine.community.profile import synthesize
from engine.community.recommend import generate
from engine.community.surplus import evaluate
from engine.community.windows import find_optimal_windows, validate_forecast


def compute_forecast(organization_id: str, historical: HistoricalData) -> CommunityForecast:
    """Synthesize today's profile and its surplus windows."""
    points = synthesize(historical)
    windows = find_optimal_windows(points)
    return CommunityForecast(
        organization_id=organization_id,
        forecast=tuple(points),
        optimal_windows=tuple(windows),
        summary=summarize_forecast(points),
    )


def compute_current_surplus(production_kw: float, consumption_kw: float) -> SurplusStatus:
    return evaluate(production_kw, consumption_kw)


def compute_recommendations(
    member_id: str,
    current_surplus_kw: float,
    forecast: Sequence[ForecastPoint],
    windows: Sequence[OptimalWindow],
    current_hour: int,
) -> Recommendation:
    return generate(member_id, current_surplus_kw, forecast, windows, current_hour)


def forecast_at(forecast: Sequence[ForecastPoint], hour: int) -> ForecastPoint:
    """Point for *hour* in a validated forecast."""
    validate_forecast(forecast)
    if not 0 <= hour < len(forecast):
        raise CommunityEngineError(f"hour must be 0-23, got {hour}")
    return forecast[hour]


def summarize_forecast(forecast: Sequence[ForecastPoint]) -> ForecastSummary:
    return ForecastSummary(
        peak_production_kw=max(p.production_kw for p in forecast),
        peak_surplus_kw=max(max(p.expected_surplus_kw for p in forecast), 0.0),
        total_production_kwh=sum(p.production_kw for p in forecast),
        total_surplus_kwh=sum(max(p.expected_surplus_kw, 0.0) for p in forecast),
    )
