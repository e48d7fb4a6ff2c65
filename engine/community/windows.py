"""Surplus window detection over a 24-hour community forecast.

Merges consecutive hours with positive surplus into windows and ranks them
by the energy they offer.  The day boundary is a hard break: a run ending at
23:00 never joins one starting at 00:00.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from engine.community.constants import HOURS_PER_DAY, SURPLUS_EPSILON_KW
from engine.community.errors import CommunityEngineError, MalformedForecast
from engine.community.models import ForecastPoint, OptimalWindow

logger = logging.getLogger(__name__)


def validate_forecast(forecast: Sequence[ForecastPoint]) -> None:
    """Raise MalformedForecast unless *forecast* holds hours 0..23 in order."""
    if len(forecast) != HOURS_PER_DAY:
        raise MalformedForecast(
            f"Forecast must have {HOURS_PER_DAY} hourly points, got {len(forecast)}"
        )
    for expected, point in enumerate(forecast):
        if point.hour != expected:
            raise MalformedForecast(
                f"Forecast point {expected} has hour {point.hour}; "
                "hours must be 0-23 ascending without gaps"
            )
        if not math.isfinite(point.expected_surplus_kw):
            raise MalformedForecast(f"Non-finite surplus at hour {point.hour}")


def find_optimal_windows(
    forecast: Sequence[ForecastPoint],
    min_surplus_kw: float = SURPLUS_EPSILON_KW,
) -> list[OptimalWindow]:
    """Find contiguous runs of hours with surplus above *min_surplus_kw*.

    Parameters
    ----------
    forecast : Sequence[ForecastPoint]
        24 hourly points, hour 0 first.
    min_surplus_kw : float
        Strict threshold; an hour qualifies when its surplus is greater.

    Returns
    -------
    list[OptimalWindow]
        Best window first: descending total surplus, ties broken by the
        earlier start hour.  Empty when no hour qualifies.
    """
    validate_forecast(forecast)
    if min_surplus_kw < 0 or not math.isfinite(min_surplus_kw):
        raise CommunityEngineError(f"min_surplus_kw must be >= 0, got {min_surplus_kw}")

    windows: list[OptimalWindow] = []
    run: list[ForecastPoint] = []

    for point in forecast:
        if point.expected_surplus_kw > min_surplus_kw:
            run.append(point)
        elif run:
            windows.append(_close_window(run))
            run = []
    if run:
        windows.append(_close_window(run))

    windows.sort(key=lambda w: (-w.total_surplus_kwh, w.start_hour))
    logger.debug("Found %d surplus window(s) above %.3f kW", len(windows), min_surplus_kw)
    return windows


def window_confidence(surplus_kw: Sequence[float]) -> float:
    """Score 0.5-0.95 for how steady a window's surplus is.

    A flat run scores 0.95; a coefficient of variation of 1 or more
    scores 0.5.
    """
    if not surplus_kw:
        return 0.0
    mean = sum(surplus_kw) / len(surplus_kw)
    if mean <= 0:
        return 0.5
    variance = sum((v - mean) ** 2 for v in surplus_kw) / len(surplus_kw)
    spread = min(math.sqrt(variance) / mean, 1.0)
    return round(0.95 - spread * 0.45, 2)


def _close_window(run: list[ForecastPoint]) -> OptimalWindow:
    values = [p.expected_surplus_kw for p in run]
    total = sum(values)  # 1 h steps: kW == kWh
    return OptimalWindow(
        start_hour=run[0].hour,
        end_hour=run[-1].hour,
        total_surplus_kwh=total,
        avg_surplus_kw=total / len(run),
        confidence=window_confidence(values),
    )
