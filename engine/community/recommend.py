"""Ranked load-shifting recommendations for one community member.

The generator never reads the clock: the caller passes the current hour,
which keeps the output a pure function of its arguments.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from engine.community.constants import (
    EXCELLENT_SURPLUS_KW,
    GOOD_SURPLUS_KW,
    HOURS_PER_DAY,
    MODERATE_SURPLUS_KW,
    SOON_CUTOFF_HOURS,
    SURPLUS_EPSILON_KW,
)
from engine.community.devices import advise_devices, build_context
from engine.community.errors import CommunityEngineError
from engine.community.models import (
    ForecastPoint,
    OptimalWindow,
    Recommendation,
    RecommendationItem,
    Urgency,
)
from engine.community.windows import validate_forecast


def generate(
    member_id: str,
    current_surplus_kw: float,
    forecast: Sequence[ForecastPoint],
    windows: Sequence[OptimalWindow],
    current_hour: int,
    min_surplus_kw: float = SURPLUS_EPSILON_KW,
) -> Recommendation:
    """Recommend when *member_id* should run flexible loads today.

    Parameters
    ----------
    member_id : str
        Member the recommendation is for.
    current_surplus_kw : float
        Community surplus right now (signed).
    forecast : Sequence[ForecastPoint]
        Today's 24-point forecast.
    windows : Sequence[OptimalWindow]
        Surplus windows, best first.
    current_hour : int
        Local hour of day, 0-23.
    min_surplus_kw : float
        Surplus above which running loads right now is worthwhile.

    Returns
    -------
    Recommendation
        ``items`` is never empty.  The first item is the primary advice:
        run now, wait for the best upcoming window, or (fallback) no good
        time left today.
    """
    validate_forecast(forecast)
    if not 0 <= current_hour < HOURS_PER_DAY:
        raise CommunityEngineError(f"current_hour must be 0-23, got {current_hour}")
    if not math.isfinite(current_surplus_kw):
        raise CommunityEngineError(f"current_surplus_kw must be finite, got {current_surplus_kw}")

    upcoming = next_best_window(windows, current_hour)
    items: list[RecommendationItem] = []

    if current_surplus_kw > min_surplus_kw:
        items.append(
            RecommendationItem(
                action="start_now",
                window=None,
                urgency="now",
                confidence_kwh=current_surplus_kw,
            )
        )
        if upcoming:
            items.append(_window_item(upcoming, current_hour))
    elif upcoming:
        items.append(_window_item(upcoming, current_hour))
    else:
        items.append(
            RecommendationItem(
                action="no_action",
                window=None,
                urgency="later",
                confidence_kwh=0.0,
            )
        )

    ctx = build_context(current_surplus_kw, current_hour, forecast, windows)

    return Recommendation(
        member_id=member_id,
        current_surplus_kw=current_surplus_kw,
        items=tuple(items),
        summary=summarize(current_surplus_kw, ctx.next_window),
        devices=advise_devices(ctx),
    )


def next_best_window(
    windows: Sequence[OptimalWindow], current_hour: int
) -> OptimalWindow | None:
    """First window in ranking order that starts after *current_hour*."""
    for window in windows:
        if window.start_hour > current_hour:
            return window
    return None


def urgency_for(window: OptimalWindow, current_hour: int) -> Urgency:
    if window.start_hour - current_hour <= SOON_CUTOFF_HOURS:
        return "soon"
    return "later"


def summarize(surplus_kw: float, next_window: OptimalWindow | None) -> str:
    """One-line, human readable description of current conditions."""
    if surplus_kw >= EXCELLENT_SURPLUS_KW:
        return (
            f"Excellent conditions! {surplus_kw:.1f} kW surplus - "
            "ideal for EV charging and high-consumption tasks."
        )
    if surplus_kw >= GOOD_SURPLUS_KW:
        return f"Good conditions with {surplus_kw:.1f} kW surplus. Run appliances now."
    if surplus_kw >= MODERATE_SURPLUS_KW:
        return f"Moderate surplus of {surplus_kw:.1f} kW. Small appliances recommended."
    if surplus_kw > -MODERATE_SURPLUS_KW:
        if next_window:
            return f"Balanced. Better conditions expected at {next_window.start_hour:02d}:00."
        return "Balanced production and consumption."
    return (
        f"Grid consumption mode ({abs(surplus_kw):.1f} kW deficit). "
        "Delay high-consumption tasks if possible."
    )


def _window_item(window: OptimalWindow, current_hour: int) -> RecommendationItem:
    return RecommendationItem(
        action="delay",
        window=window,
        urgency=urgency_for(window, current_hour),
        confidence_kwh=window.total_surplus_kwh,
    )
