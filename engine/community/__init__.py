"""
Community energy forecast engine.

Synthesizes a daily production/consumption profile for a local energy
community, finds surplus windows, classifies the current surplus and
recommends when members should run flexible loads.  Pure computation:
no database, no web, no clock.
"""

from .errors import CommunityEngineError, InvalidHistoricalData, MalformedForecast
from .historical import aggregate_historical, seasonal_factor
from .models import (
    CommunityForecast,
    DeviceAdvice,
    ForecastPoint,
    ForecastSummary,
    HistoricalData,
    MonthlyAggregate,
    OptimalWindow,
    Recommendation,
    RecommendationItem,
    SurplusStatus,
)
from .profile import synthesize
from .recommend import generate
from .service import (
    compute_current_surplus,
    compute_forecast,
    compute_recommendations,
    forecast_at,
)
from .surplus import evaluate
from .windows import find_optimal_windows

__all__ = [
    # errors
    "CommunityEngineError",
    "InvalidHistoricalData",
    "MalformedForecast",
    # models
    "CommunityForecast",
    "DeviceAdvice",
    "ForecastPoint",
    "ForecastSummary",
    "HistoricalData",
    "MonthlyAggregate",
    "OptimalWindow",
    "Recommendation",
    "RecommendationItem",
    "SurplusStatus",
    # components
    "aggregate_historical",
    "seasonal_factor",
    "synthesize",
    "find_optimal_windows",
    "evaluate",
    "generate",
    # service
    "compute_forecast",
    "compute_current_surplus",
    "compute_recommendations",
    "forecast_at",
]
