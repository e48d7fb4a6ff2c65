from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import get_now
from app.models.database import get_db
from app.models.organization import Organization
from app.schemas.community import CommunityForecastResponse, SurplusStatusResponse
from app.services.historical_service import load_historical_data

from engine.community import compute_current_surplus, compute_forecast, forecast_at

router = APIRouter()


async def _get_organization(org_slug: str, db: AsyncSession) -> Organization:
    result = await db.execute(select(Organization).where(Organization.slug == org_slug))
    org = result.scalar_one_or_none()
    if not org:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found")
    return org


@router.get("/{org_slug}/forecast", response_model=CommunityForecastResponse)
async def get_forecast(
    org_slug: str,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Today's hourly forecast and surplus windows for a community."""
    org = await _get_organization(org_slug, db)
    historical = await load_historical_data(db, org.id, now.date())

    forecast = compute_forecast(str(org.id), historical)
    body = forecast.to_dict()

    # Local wall-clock hours of today
    top_of_hour = now.replace(minute=0, second=0, microsecond=0)
    for point in body["forecast"]:
        point["timestamp"] = top_of_hour.replace(hour=point["hour"])

    return CommunityForecastResponse(**body, generated_at=now)


@router.get("/{org_slug}/surplus", response_model=SurplusStatusResponse)
async def get_surplus(
    org_slug: str,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Surplus status for the current hour.

    Uses the forecast value for this hour as a stand-in for live metering.
    """
    org = await _get_organization(org_slug, db)
    historical = await load_historical_data(db, org.id, now.date())

    forecast = compute_forecast(str(org.id), historical)
    point = forecast_at(forecast.forecast, now.hour)
    surplus = compute_current_surplus(point.production_kw, point.expected_consumption_kw)

    return SurplusStatusResponse(
        organization_id=org.id,
        hour=now.hour,
        **surplus.to_dict(),
    )
