"""Injected wall clock.

Endpoints take ``now`` through this dependency so the engine never reads
the clock itself and tests can pin the hour.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from app.config import settings


def get_now() -> datetime:
    return datetime.now(ZoneInfo(settings.timezone))
