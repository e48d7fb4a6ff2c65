"""Instantaneous surplus classification.

Status uses a small symmetric dead band around zero.  Severity bands are a
policy choice on the ratio ``|surplus| / max(consumption, floor)``:

======================  ==========
ratio                   severity
======================  ==========
balanced status         none
< 0.10                  low
0.10 - 0.40 inclusive   moderate
> 0.40                  high
======================  ==========

The advice tag ignores severity: a surplus above
``EXCELLENT_CHARGE_SURPLUS_KW`` is an excellent time to charge, any other
surplus a good one.
"""

from __future__ import annotations

import math

from engine.community.constants import (
    EXCELLENT_CHARGE_SURPLUS_KW,
    SEVERITY_CONSUMPTION_FLOOR_KW,
    SEVERITY_LOW_MAX_RATIO,
    SEVERITY_MODERATE_MAX_RATIO,
    SURPLUS_EPSILON_KW,
)
from engine.community.errors import CommunityEngineError
from engine.community.models import Severity, SurplusState, SurplusStatus

_ADVICE = {
    "surplus": "good_time_to_charge",
    "deficit": "delay_high_consumption",
    "balanced": "moderate_consumption_ok",
}


def evaluate(production_kw: float, consumption_kw: float) -> SurplusStatus:
    """Classify one (production, consumption) sample."""
    for name, value in (("production_kw", production_kw), ("consumption_kw", consumption_kw)):
        if not math.isfinite(value):
            raise CommunityEngineError(f"{name} must be finite, got {value}")
        if value < 0:
            raise CommunityEngineError(f"{name} must be >= 0, got {value}")

    surplus_kw = production_kw - consumption_kw
    status = classify_status(surplus_kw)
    severity: Severity = "none"
    if status != "balanced":
        severity = severity_for(surplus_kw, consumption_kw)

    return SurplusStatus(
        surplus_kw=surplus_kw,
        status=status,
        severity=severity,
        production_kw=production_kw,
        consumption_kw=consumption_kw,
        advice=advice_for(status, surplus_kw),
    )


def advice_for(status: SurplusState, surplus_kw: float) -> str:
    if status == "surplus" and surplus_kw > EXCELLENT_CHARGE_SURPLUS_KW:
        return "excellent_time_to_charge"
    return _ADVICE[status]


def classify_status(surplus_kw: float) -> SurplusState:
    if surplus_kw > SURPLUS_EPSILON_KW:
        return "surplus"
    if surplus_kw < -SURPLUS_EPSILON_KW:
        return "deficit"
    return "balanced"


def severity_for(surplus_kw: float, consumption_kw: float) -> Severity:
    """Severity band for a non-balanced sample."""
    ratio = abs(surplus_kw) / max(consumption_kw, SEVERITY_CONSUMPTION_FLOOR_KW)
    if ratio < SEVERITY_LOW_MAX_RATIO:
        return "low"
    if ratio <= SEVERITY_MODERATE_MAX_RATIO:
        return "moderate"
    return "high"
