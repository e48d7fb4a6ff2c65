"""Daily profile synthesis for a community.

Turns three historical scalars (average daily production, average daily
consumption, installed capacity) into 24 hourly forecast points using fixed
shape curves.  Output is fully deterministic: no noise, no clock.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray

from engine.community.constants import (
    DAY_BASE_WEIGHT,
    DAYLIGHT_END_HOUR,
    DAYLIGHT_START_HOUR,
    EVENING_PEAK_AMPLITUDE,
    EVENING_PEAK_HOUR,
    EVENING_PEAK_WIDTH_H,
    HOURS_PER_DAY,
    MORNING_PEAK_AMPLITUDE,
    MORNING_PEAK_HOUR,
    MORNING_PEAK_WIDTH_H,
    NIGHT_BASE_WEIGHT,
    NIGHT_HOURS,
)
from engine.community.errors import InvalidHistoricalData
from engine.community.models import ForecastPoint, HistoricalData

logger = logging.getLogger(__name__)

_HOURS = np.arange(HOURS_PER_DAY, dtype=np.float64)

# Relative slack when comparing energy against capacity * daylight hours.
_FEASIBILITY_RTOL = 1e-9


# ======================================================================
# Shape curves (weights sum to 1.0)
# ======================================================================


def production_shape() -> NDArray[np.float64]:
    """Half-sine bell over daylight hours, zero at night.

    Each hour is evaluated at its mid-point, so the curve is symmetric
    around solar noon and strictly positive on every daylight hour.

    Returns
    -------
    NDArray[np.float64]
        Shape ``(24,)`` non-negative weights summing to 1.
    """
    span = DAYLIGHT_END_HOUR - DAYLIGHT_START_HOUR
    phase = (_HOURS + 0.5 - DAYLIGHT_START_HOUR) / span
    daylight = (_HOURS >= DAYLIGHT_START_HOUR) & (_HOURS < DAYLIGHT_END_HOUR)
    weights = np.where(daylight, np.sin(np.pi * phase), 0.0)
    weights = np.clip(weights, 0.0, None)
    return weights / weights.sum()


def consumption_shape() -> NDArray[np.float64]:
    """Household load: base load plus morning and evening peaks.

    Returns
    -------
    NDArray[np.float64]
        Shape ``(24,)`` strictly positive weights summing to 1.
    """
    base = np.full(HOURS_PER_DAY, DAY_BASE_WEIGHT, dtype=np.float64)
    base[list(NIGHT_HOURS)] = NIGHT_BASE_WEIGHT

    morning = MORNING_PEAK_AMPLITUDE * _gaussian(MORNING_PEAK_HOUR, MORNING_PEAK_WIDTH_H)
    evening = EVENING_PEAK_AMPLITUDE * _gaussian(EVENING_PEAK_HOUR, EVENING_PEAK_WIDTH_H)

    weights = base + morning + evening
    return weights / weights.sum()


# ======================================================================
# Public API
# ======================================================================


def synthesize(historical: HistoricalData) -> list[ForecastPoint]:
    """Build today's 24-point production/consumption/surplus forecast.

    Parameters
    ----------
    historical : HistoricalData
        Pre-validated community aggregates.  Capacity must already be
        floored by the caller.

    Returns
    -------
    list[ForecastPoint]
        One point per hour 0-23, ascending.  Hourly production sums to
        ``avg_daily_production_kwh``, never exceeds installed capacity;
        hourly consumption sums to ``avg_daily_consumption_kwh``.

    Raises
    ------
    InvalidHistoricalData
        Negative or non-finite aggregates, non-positive capacity, or more
        daily production than the capacity can deliver over daylight hours.
    """
    validate_historical(historical)

    production = production_profile(
        historical.avg_daily_production_kwh,
        historical.installed_capacity_kwp,
    )
    consumption = consumption_shape() * historical.avg_daily_consumption_kwh
    surplus = production - consumption

    logger.debug(
        "Synthesized profile: %.2f kWh production, %.2f kWh consumption, peak %.2f kW",
        production.sum(),
        consumption.sum(),
        production.max(),
    )

    return [
        ForecastPoint(
            hour=h,
            production_kw=float(production[h]),
            expected_consumption_kw=float(consumption[h]),
            expected_surplus_kw=float(surplus[h]),
        )
        for h in range(HOURS_PER_DAY)
    ]


def production_profile(daily_kwh: float, capacity_kwp: float) -> NDArray[np.float64]:
    """Scale the production shape to *daily_kwh*, capped at *capacity_kwp*.

    Hours whose share would exceed capacity are clamped and their excess is
    redistributed over the remaining daylight hours in proportion to their
    shape weights, repeating until no hour is over capacity.
    """
    weights = production_shape()
    if daily_kwh == 0:
        return np.zeros(HOURS_PER_DAY, dtype=np.float64)

    max_kwh = capacity_kwp * np.count_nonzero(weights)
    if daily_kwh > max_kwh * (1 + _FEASIBILITY_RTOL):
        raise InvalidHistoricalData(
            f"{daily_kwh:.2f} kWh/day cannot be produced by {capacity_kwp:.2f} kWp "
            f"(at most {max_kwh:.2f} kWh over daylight hours)"
        )

    profile = np.zeros(HOURS_PER_DAY, dtype=np.float64)
    free = weights > 0
    remaining = daily_kwh

    while free.any():
        share = np.where(free, weights, 0.0)
        trial = remaining * share / share.sum()
        over = free & (trial > capacity_kwp)
        if not over.any():
            profile[free] = trial[free]
            break
        profile[over] = capacity_kwp
        remaining -= capacity_kwp * np.count_nonzero(over)
        free &= ~over

    return profile


def validate_historical(historical: HistoricalData) -> None:
    """Fail fast on aggregates the synthesizer cannot work with."""
    values = {
        "avg_daily_production_kwh": historical.avg_daily_production_kwh,
        "avg_daily_consumption_kwh": historical.avg_daily_consumption_kwh,
        "installed_capacity_kwp": historical.installed_capacity_kwp,
    }
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidHistoricalData(f"{name} must be finite, got {value}")
        if value < 0:
            raise InvalidHistoricalData(f"{name} must be >= 0, got {value}")
    if historical.installed_capacity_kwp <= 0:
        raise InvalidHistoricalData(
            f"installed_capacity_kwp must be > 0, got {historical.installed_capacity_kwp}"
        )


# ======================================================================
# Internal helpers
# ======================================================================


def _gaussian(centre: float, width: float) -> NDArray[np.float64]:
    return np.exp(-((_HOURS - centre) ** 2) / (2.0 * width**2))
