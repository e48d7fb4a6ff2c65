"""Per-device advice for a member's flexible loads.

Rule tables for EV chargers, home batteries, white goods, heat pumps and a
generic device, keyed on the current surplus and the community windows.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from engine.community.constants import (
    BATTERY_EVENING_HOUR,
    BATTERY_HOLD_FUTURE_KWH,
    BATTERY_MORNING_HOLD_HOUR,
    DEVICE_POWER_KW,
    EXCELLENT_SURPLUS_KW,
    GOOD_SURPLUS_KW,
    MODERATE_SURPLUS_KW,
)
from engine.community.models import DeviceAdvice, ForecastPoint, OptimalWindow

_APPLIANCE_NAMES = {
    "washing_machine": "washing machine",
    "dishwasher": "dishwasher",
}


@dataclass(frozen=True)
class DeviceContext:
    surplus_kw: float
    current_hour: int
    current_window: OptimalWindow | None
    next_window: OptimalWindow | None
    future_surplus_kwh: float


def build_context(
    surplus_kw: float,
    current_hour: int,
    forecast: Sequence[ForecastPoint],
    windows: Sequence[OptimalWindow],
) -> DeviceContext:
    current = next((w for w in windows if w.contains(current_hour)), None)
    upcoming = [w for w in windows if w.start_hour > current_hour]
    nxt = min(upcoming, key=lambda w: w.start_hour) if upcoming else None
    future = sum(
        max(0.0, p.expected_surplus_kw) for p in forecast if p.hour > current_hour
    )
    return DeviceContext(surplus_kw, current_hour, current, nxt, future)


def advise_devices(ctx: DeviceContext) -> dict[str, DeviceAdvice]:
    return {
        "ev_charger": ev_charger(ctx),
        "battery": battery(ctx),
        "washing_machine": appliance("washing_machine", ctx),
        "dishwasher": appliance("dishwasher", ctx),
        "heat_pump": heat_pump(ctx),
        "generic": generic(ctx),
    }


def _until_end(window: OptimalWindow | None) -> int | None:
    return window.end_hour + 1 if window else None


def ev_charger(ctx: DeviceContext) -> DeviceAdvice:
    power = DEVICE_POWER_KW["ev_charger"]
    s = ctx.surplus_kw

    if s >= EXCELLENT_SURPLUS_KW:
        return DeviceAdvice(
            action="start_charging",
            reason=f"{s:.1f} kW surplus - charge at full power",
            priority="high",
            max_power_kw=min(s, power),
            until_hour=_until_end(ctx.current_window),
        )
    if s >= GOOD_SURPLUS_KW:
        return DeviceAdvice(
            action="start_charging",
            reason=f"{s:.1f} kW surplus available",
            priority="medium",
            max_power_kw=min(s, power),
            until_hour=_until_end(ctx.current_window),
        )
    if s >= MODERATE_SURPLUS_KW:
        return DeviceAdvice(
            action="start_charging",
            reason="Low surplus - charge at reduced power",
            priority="low",
            max_power_kw=s,
        )
    if ctx.next_window:
        return DeviceAdvice(
            action="delay",
            reason=f"Wait for optimal window at {ctx.next_window.start_hour:02d}:00",
            priority="medium",
            until_hour=ctx.next_window.start_hour,
        )
    return DeviceAdvice(
        action="stop_charging",
        reason="No surplus - drawing from grid",
        priority="high",
    )


def battery(ctx: DeviceContext) -> DeviceAdvice:
    power = DEVICE_POWER_KW["battery"]
    s = ctx.surplus_kw

    if s >= GOOD_SURPLUS_KW:
        return DeviceAdvice(
            action="charge",
            reason=f"{s:.1f} kW surplus - charge battery",
            priority="high",
            max_power_kw=min(s, power),
            target_soc=80,
            until_hour=_until_end(ctx.current_window),
        )
    if s >= MODERATE_SURPLUS_KW:
        return DeviceAdvice(
            action="charge",
            reason="Moderate surplus - charge slowly",
            priority="medium",
            max_power_kw=s,
            target_soc=60,
        )
    if s < -MODERATE_SURPLUS_KW and ctx.current_hour >= BATTERY_EVENING_HOUR:
        return DeviceAdvice(
            action="discharge",
            reason="Evening deficit - use stored energy",
            priority="high",
        )
    if (
        ctx.future_surplus_kwh > BATTERY_HOLD_FUTURE_KWH
        and ctx.current_hour < BATTERY_MORNING_HOLD_HOUR
    ):
        return DeviceAdvice(
            action="hold",
            reason="Hold for expected solar production",
            priority="low",
        )
    return DeviceAdvice(
        action="hold",
        reason="Balanced - maintain current state",
        priority="low",
    )


def appliance(device: str, ctx: DeviceContext) -> DeviceAdvice:
    """Washing machine or dishwasher."""
    power = DEVICE_POWER_KW[device]
    name = _APPLIANCE_NAMES[device]
    s = ctx.surplus_kw
    nxt = ctx.next_window

    if s >= power:
        return DeviceAdvice(
            action="start_now",
            reason=f"Surplus covers {name} consumption",
            priority="high",
            until_hour=_until_end(ctx.current_window),
        )
    if s >= MODERATE_SURPLUS_KW:
        return DeviceAdvice(
            action="start_now",
            reason=f"Partial solar coverage ({s / power * 100:.0f}%)",
            priority="medium",
        )
    if nxt and nxt.avg_surplus_kw >= power:
        return DeviceAdvice(
            action="delay",
            reason=f"Schedule for {nxt.start_hour:02d}:00 ({nxt.avg_surplus_kw:.1f} kW surplus)",
            priority="medium",
            until_hour=nxt.start_hour,
        )
    if nxt:
        return DeviceAdvice(
            action="delay",
            reason=f"Wait for better conditions at {nxt.start_hour:02d}:00",
            priority="low",
            until_hour=nxt.start_hour,
        )
    return DeviceAdvice(
        action="delay",
        reason="No solar surplus - delay if possible",
        priority="low",
    )


def heat_pump(ctx: DeviceContext) -> DeviceAdvice:
    s = ctx.surplus_kw

    if s >= EXCELLENT_SURPLUS_KW:
        return DeviceAdvice(
            action="increase_power",
            reason="Large surplus - pre-heat/cool now",
            priority="high",
            max_power_kw=DEVICE_POWER_KW["heat_pump"],
            until_hour=_until_end(ctx.current_window),
        )
    if s >= GOOD_SURPLUS_KW:
        return DeviceAdvice(
            action="start_now",
            reason="Good surplus - run at normal power",
            priority="medium",
        )
    if s < -GOOD_SURPLUS_KW:
        return DeviceAdvice(
            action="reduce_power",
            reason="Large deficit - reduce if comfort allows",
            priority="medium",
        )
    return DeviceAdvice(
        action="no_action",
        reason="Maintain current operation",
        priority="low",
    )


def generic(ctx: DeviceContext) -> DeviceAdvice:
    s = ctx.surplus_kw

    if s >= GOOD_SURPLUS_KW:
        return DeviceAdvice(
            action="start_now",
            reason="Good surplus available",
            priority="medium",
            max_power_kw=s,
        )
    if s >= MODERATE_SURPLUS_KW:
        return DeviceAdvice(
            action="start_now",
            reason="Moderate surplus - ok to run low-power devices",
            priority="low",
            max_power_kw=s,
        )
    return DeviceAdvice(
        action="delay",
        reason="No surplus - delay non-essential consumption",
        priority="low",
    )
