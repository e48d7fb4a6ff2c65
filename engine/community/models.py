"""Value objects passed between the community engine components.

Every object is built fresh per request and is immutable.  ``to_dict``
methods produce the JSON-compatible payloads served by the API layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

SurplusState = Literal["surplus", "deficit", "balanced"]
Severity = Literal["none", "low", "moderate", "high"]
Urgency = Literal["now", "soon", "later"]
Priority = Literal["high", "medium", "low"]


def _r(value: float, digits: int = 3) -> float:
    return round(float(value), digits)


@dataclass(frozen=True)
class MonthlyAggregate:
    """One month of metered community totals."""
    total_production_kwh: float
    total_consumption_kwh: float
    year: int | None = None
    month: int | None = None   # 1-12


@dataclass(frozen=True)
class HistoricalData:
    avg_daily_production_kwh: float
    avg_daily_consumption_kwh: float
    installed_capacity_kwp: float


@dataclass(frozen=True)
class ForecastPoint:
    hour: int
    production_kw: float
    expected_consumption_kw: float
    expected_surplus_kw: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour,
            "production_kw": _r(self.production_kw),
            "expected_consumption_kw": _r(self.expected_consumption_kw),
            "expected_surplus_kw": _r(self.expected_surplus_kw),
        }


@dataclass(frozen=True)
class OptimalWindow:
    """Inclusive run of hours with positive forecast surplus."""
    start_hour: int
    end_hour: int
    total_surplus_kwh: float
    avg_surplus_kw: float
    confidence: float

    @property
    def hours(self) -> int:
        return self.end_hour - self.start_hour + 1

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour <= self.end_hour

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_hour": self.start_hour,
            "end_hour": self.end_hour,
            "start": f"{self.start_hour:02d}:00",
            "end": f"{self.end_hour + 1:02d}:00",
            "total_surplus_kwh": _r(self.total_surplus_kwh),
            "avg_surplus_kw": _r(self.avg_surplus_kw),
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class ForecastSummary:
    peak_production_kw: float
    peak_surplus_kw: float      # 0.0 when no hour has surplus
    total_production_kwh: float
    total_surplus_kwh: float    # positive hours only

    def to_dict(self) -> dict[str, Any]:
        return {
            "peak_production_kw": _r(self.peak_production_kw),
            "peak_surplus_kw": _r(self.peak_surplus_kw),
            "total_production_kwh": _r(self.total_production_kwh),
            "total_surplus_kwh": _r(self.total_surplus_kwh),
        }


@dataclass(frozen=True)
class CommunityForecast:
    organization_id: str
    forecast: tuple[ForecastPoint, ...]
    optimal_windows: tuple[OptimalWindow, ...]
    summary: ForecastSummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "organization_id": self.organization_id,
            "forecast": [p.to_dict() for p in self.forecast],
            "optimal_windows": [w.to_dict() for w in self.optimal_windows],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class SurplusStatus:
    surplus_kw: float
    status: SurplusState
    severity: Severity
    production_kw: float
    consumption_kw: float
    advice: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "surplus_kw": _r(self.surplus_kw),
            "status": self.status,
            "severity": self.severity,
            "production_kw": _r(self.production_kw),
            "consumption_kw": _r(self.consumption_kw),
            "advice": self.advice,
        }


@dataclass(frozen=True)
class RecommendationItem:
    action: str
    window: OptimalWindow | None
    urgency: Urgency
    confidence_kwh: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "window": self.window.to_dict() if self.window else None,
            "urgency": self.urgency,
            "confidence_kwh": _r(self.confidence_kwh),
        }


@dataclass(frozen=True)
class DeviceAdvice:
    action: str
    reason: str
    priority: Priority
    max_power_kw: float | None = None
    target_soc: int | None = None   # percent
    until_hour: int | None = None   # advice holds until this hour (exclusive)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "reason": self.reason,
            "priority": self.priority,
            "max_power_kw": None if self.max_power_kw is None else _r(self.max_power_kw, 1),
            "target_soc": self.target_soc,
            "until_hour": self.until_hour,
        }


@dataclass(frozen=True)
class Recommendation:
    member_id: str
    current_surplus_kw: float
    items: tuple[RecommendationItem, ...]
    summary: str
    devices: dict[str, DeviceAdvice] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "member_id": self.member_id,
            "current_surplus_kw": _r(self.current_surplus_kw),
            "items": [i.to_dict() for i in self.items],
            "summary": self.summary,
            "devices": {k: v.to_dict() for k, v in self.devices.items()},
        }
