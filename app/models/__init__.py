# Import all models so SQLAlchemy can resolve relationships
from app.models.database import Base  # noqa: F401
from app.models.organization import Organization, OrganizationMember  # noqa: F401
from app.models.aggregation import MonthlyAggregation  # noqa: F401
