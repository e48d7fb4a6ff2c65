import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ForecastPointResponse(BaseModel):
    hour: int = Field(ge=0, le=23)
    timestamp: datetime
    production_kw: float
    expected_consumption_kw: float
    expected_surplus_kw: float


class OptimalWindowResponse(BaseModel):
    start_hour: int
    end_hour: int
    start: str
    end: str
    total_surplus_kwh: float
    avg_surplus_kw: float
    confidence: float


class ForecastSummaryResponse(BaseModel):
    peak_production_kw: float
    peak_surplus_kw: float
    total_production_kwh: float
    total_surplus_kwh: float


class CommunityForecastResponse(BaseModel):
    organization_id: uuid.UUID
    generated_at: datetime
    forecast: list[ForecastPointResponse]
    optimal_windows: list[OptimalWindowResponse]
    summary: ForecastSummaryResponse


class SurplusStatusResponse(BaseModel):
    organization_id: uuid.UUID
    hour: int
    surplus_kw: float
    status: Literal["surplus", "deficit", "balanced"]
    severity: Literal["none", "low", "moderate", "high"]
    production_kw: float
    consumption_kw: float
    advice: str


class RecommendationItemResponse(BaseModel):
    action: str
    window: OptimalWindowResponse | None
    urgency: Literal["now", "soon", "later"]
    confidence_kwh: float


class DeviceAdviceResponse(BaseModel):
    action: str
    reason: str
    priority: Literal["high", "medium", "low"]
    max_power_kw: float | None = None
    target_soc: int | None = None
    until_hour: int | None = None


class MemberRecommendationsResponse(BaseModel):
    member_id: uuid.UUID
    current_surplus_kw: float
    items: list[RecommendationItemResponse] = Field(min_length=1)
    summary: str
    devices: dict[str, DeviceAdviceResponse]
    member_name: str
    organization: str
