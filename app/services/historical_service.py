"""Load a community's stored history and reduce it for the forecast engine."""

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.aggregation import MonthlyAggregation
from app.models.organization import OrganizationMember
from engine.community import HistoricalData, MonthlyAggregate, aggregate_historical

logger = logging.getLogger(__name__)


async def load_historical_data(
    db: AsyncSession, organization_id: uuid.UUID, today: date
) -> HistoricalData:
    """Fetch monthly totals and member capacities, then aggregate once."""
    rows = await db.execute(
        select(MonthlyAggregation)
        .where(MonthlyAggregation.organization_id == organization_id)
        .order_by(MonthlyAggregation.year, MonthlyAggregation.month)
    )
    monthly = [
        MonthlyAggregate(
            total_production_kwh=row.total_production_kwh,
            total_consumption_kwh=row.total_consumption_kwh,
            year=row.year,
            month=row.month,
        )
        for row in rows.scalars()
    ]

    capacities = await db.execute(
        select(OrganizationMember.solar_capacity_kwp).where(
            OrganizationMember.organization_id == organization_id
        )
    )

    historical = aggregate_historical(
        monthly,
        member_capacities_kwp=list(capacities.scalars()),
        month=today.month,
    )
    logger.debug(
        "Historical data for %s: %d month(s), %.1f kWh/day production, %.1f kWp",
        organization_id,
        len(monthly),
        historical.avg_daily_production_kwh,
        historical.installed_capacity_kwp,
        extra={"organization_id": str(organization_id)},
    )
    return historical
