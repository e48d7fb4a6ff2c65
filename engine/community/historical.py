"""Reduce stored monthly totals to the scalars the synthesizer needs.

This is the single place where metered history and declared member capacity
are turned into a :class:`HistoricalData`; every endpoint goes through it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from engine.community.constants import (
    DAYLIGHT_HOURS,
    DAYS_PER_MONTH,
    DEFAULT_DAILY_CONSUMPTION_KWH,
    DEFAULT_DAILY_PRODUCTION_KWH,
    DEFAULT_INSTALLED_CAPACITY_KWP,
    MIN_INSTALLED_CAPACITY_KWP,
    SEASONAL_FACTORS,
    TYPICAL_YIELD_KWH_PER_KWP_DAY,
)
from engine.community.errors import CommunityEngineError, InvalidHistoricalData
from engine.community.models import HistoricalData, MonthlyAggregate

logger = logging.getLogger(__name__)


def seasonal_factor(month: int) -> float:
    """Swiss solar production factor for *month* (1-12), June = 1.0."""
    if not 1 <= month <= 12:
        raise CommunityEngineError(f"month must be 1-12, got {month}")
    return SEASONAL_FACTORS[month - 1]


def installed_capacity(member_capacities_kwp: Iterable[float | None]) -> float:
    """Sum declared member capacity, defaulting when nobody declared any."""
    total = 0.0
    for cap in member_capacities_kwp:
        if cap is None:
            continue
        if not math.isfinite(cap) or cap < 0:
            raise InvalidHistoricalData(f"Member capacity must be >= 0, got {cap}")
        total += cap
    if total == 0:
        return DEFAULT_INSTALLED_CAPACITY_KWP
    return max(total, MIN_INSTALLED_CAPACITY_KWP)


def aggregate_historical(
    monthly: Sequence[MonthlyAggregate],
    member_capacities_kwp: Iterable[float | None] = (),
    month: int | None = None,
) -> HistoricalData:
    """Average monthly totals into daily figures for one community.

    Parameters
    ----------
    monthly : Sequence[MonthlyAggregate]
        Stored monthly totals.  Empty means no history yet; typical CEL
        defaults are used instead.
    member_capacities_kwp : Iterable[float | None]
        Declared PV capacity per member; ``None`` means not declared.
    month : int, optional
        Month (1-12) the forecast is for.  When given, production is
        scaled by the seasonal factor, and a community without metered
        production gets an estimate from its capacity.

    Returns
    -------
    HistoricalData
        Validated aggregates with a capacity large enough to deliver the
        daily production over daylight hours.

    Raises
    ------
    InvalidHistoricalData
        Negative or non-finite totals or capacities.
    """
    capacity = installed_capacity(member_capacities_kwp)

    if not monthly:
        production = DEFAULT_DAILY_PRODUCTION_KWH
        consumption = DEFAULT_DAILY_CONSUMPTION_KWH
    else:
        total_production = 0.0
        total_consumption = 0.0
        for row in monthly:
            for name, value in (
                ("total_production_kwh", row.total_production_kwh),
                ("total_consumption_kwh", row.total_consumption_kwh),
            ):
                if not math.isfinite(value) or value < 0:
                    raise InvalidHistoricalData(f"{name} must be >= 0, got {value}")
            total_production += row.total_production_kwh
            total_consumption += row.total_consumption_kwh
        production = total_production / len(monthly) / DAYS_PER_MONTH
        consumption = total_consumption / len(monthly) / DAYS_PER_MONTH

    if month is not None:
        factor = seasonal_factor(month)
        if production > 0:
            production *= factor
        else:
            production = capacity * TYPICAL_YIELD_KWH_PER_KWP_DAY * factor

    min_capacity = production / DAYLIGHT_HOURS
    if capacity < min_capacity:
        logger.warning(
            "Declared capacity %.2f kWp cannot deliver %.2f kWh/day; using %.2f kWp",
            capacity,
            production,
            min_capacity,
        )
        capacity = min_capacity

    return HistoricalData(
        avg_daily_production_kwh=production,
        avg_daily_consumption_kwh=consumption,
        installed_capacity_kwp=capacity,
    )
