"""Policy constants for the community forecast engine.

Curve shapes, thresholds and defaults live here so they can be tuned and
tested independently of the algorithms that use them.  None of these values
are derived from physics; they describe a typical Swiss residential CEL.
"""

from __future__ import annotations

HOURS_PER_DAY = 24

# ---------------------------------------------------------------------------
# Production curve (half-sine bell over daylight hours)
# ---------------------------------------------------------------------------
DAYLIGHT_START_HOUR = 6       # first hour with production
DAYLIGHT_END_HOUR = 19        # exclusive: hours 6..18 produce
SOLAR_NOON_HOUR = (DAYLIGHT_START_HOUR + DAYLIGHT_END_HOUR) / 2  # 12.5, centre of hour 12
DAYLIGHT_HOURS = DAYLIGHT_END_HOUR - DAYLIGHT_START_HOUR

# ---------------------------------------------------------------------------
# Consumption curve (base load + morning and evening Gaussian peaks)
# ---------------------------------------------------------------------------
NIGHT_HOURS = range(0, 6)
NIGHT_BASE_WEIGHT = 0.25
DAY_BASE_WEIGHT = 0.45

MORNING_PEAK_HOUR = 8.0
MORNING_PEAK_WIDTH_H = 1.2    # Gaussian sigma
MORNING_PEAK_AMPLITUDE = 0.6

EVENING_PEAK_HOUR = 19.5
EVENING_PEAK_WIDTH_H = 1.5
EVENING_PEAK_AMPLITUDE = 1.0

# ---------------------------------------------------------------------------
# Surplus classification
# ---------------------------------------------------------------------------
SURPLUS_EPSILON_KW = 0.001    # |surplus| at or below this is "balanced"
EXCELLENT_CHARGE_SURPLUS_KW = 3.0  # advice tag: above this is "excellent_time_to_charge"

# Severity = |surplus| / max(consumption, floor)
SEVERITY_CONSUMPTION_FLOOR_KW = 1.0
SEVERITY_LOW_MAX_RATIO = 0.10       # below -> low
SEVERITY_MODERATE_MAX_RATIO = 0.40  # up to and including -> moderate, above -> high

# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------
SOON_CUTOFF_HOURS = 3         # window starting within this many hours is "soon"

# Summary / device advice tiers (kW of surplus)
EXCELLENT_SURPLUS_KW = 5.0    # EV at full speed
GOOD_SURPLUS_KW = 2.0         # large appliances
MODERATE_SURPLUS_KW = 1.0     # small appliances

# Typical flexible-load ratings (kW)
DEVICE_POWER_KW = {
    "ev_charger": 7.4,
    "battery": 5.0,
    "washing_machine": 2.0,
    "dishwasher": 1.5,
    "heat_pump": 3.0,
    "generic": 1.0,
}

BATTERY_EVENING_HOUR = 17     # deficits from here on are covered from storage
BATTERY_MORNING_HOLD_HOUR = 10
BATTERY_HOLD_FUTURE_KWH = 5.0

# ---------------------------------------------------------------------------
# Historical aggregation
# ---------------------------------------------------------------------------
DAYS_PER_MONTH = 30
DEFAULT_DAILY_PRODUCTION_KWH = 50.0
DEFAULT_DAILY_CONSUMPTION_KWH = 100.0
DEFAULT_INSTALLED_CAPACITY_KWP = 30.0
MIN_INSTALLED_CAPACITY_KWP = 1.0
TYPICAL_YIELD_KWH_PER_KWP_DAY = 3.0   # Swiss summer yield

# Swiss seasonal production factors relative to June (index 0 = January).
SEASONAL_FACTORS = (
    0.25,  # Jan
    0.35,  # Feb
    0.50,  # Mar
    0.70,  # Apr
    0.85,  # May
    1.00,  # Jun
    0.95,  # Jul
    0.85,  # Aug
    0.65,  # Sep
    0.45,  # Oct
    0.30,  # Nov
    0.20,  # Dec
)
