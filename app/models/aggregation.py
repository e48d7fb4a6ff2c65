import uuid

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.database import Base


class MonthlyAggregation(Base):
    """Metered community totals for one calendar month."""

    __tablename__ = "monthly_aggregations"
    __table_args__ = (UniqueConstraint("organization_id", "year", "month"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-12
    total_production_kwh: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_consumption_kwh: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    organization: Mapped["Organization"] = relationship(  # noqa: F821
        back_populates="monthly_aggregations"
    )
