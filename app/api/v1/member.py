from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.clock import get_now
from app.models.database import get_db
from app.models.organization import OrganizationMember
from app.schemas.community import MemberRecommendationsResponse
from app.services.historical_service import load_historical_data

from engine.community import compute_forecast, compute_recommendations, forecast_at

router = APIRouter()


async def _get_member_by_api_key(api_key: str, db: AsyncSession) -> OrganizationMember:
    result = await db.execute(
        select(OrganizationMember)
        .where(OrganizationMember.api_key == api_key)
        .options(selectinload(OrganizationMember.organization))
    )
    member = result.scalar_one_or_none()
    if not member:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")
    return member


@router.get("/{api_key}/recommendations", response_model=MemberRecommendationsResponse)
async def get_recommendations(
    api_key: str,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """When the member behind *api_key* should run flexible loads today."""
    member = await _get_member_by_api_key(api_key, db)
    historical = await load_historical_data(db, member.organization_id, now.date())

    forecast = compute_forecast(str(member.organization_id), historical)
    current = forecast_at(forecast.forecast, now.hour)

    recommendation = compute_recommendations(
        member_id=str(member.id),
        current_surplus_kw=current.expected_surplus_kw,
        forecast=forecast.forecast,
        windows=forecast.optimal_windows,
        current_hour=now.hour,
    )

    return MemberRecommendationsResponse(
        **recommendation.to_dict(),
        member_name=member.display_name,
        organization=member.organization.name,
    )
