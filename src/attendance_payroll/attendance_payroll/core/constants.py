"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time
from decimal import Decimal

DEFAULT_TIMEZONE = "Asia/Kolkata"

# Tenant value used by the admin portal before a company is selected.
RESERVED_TENANT = "main"

# Close-out clock times written on synthesized OUT punches.
MISSED_PUNCH_CLOSE_TIME = time(19, 0)
AUTO_CLOSE_TIME = time(23, 0)
DAILY_FLAG_RESET_TIME = time(0, 0)

EARTH_RADIUS_METERS = 6_371_000
DEFAULT_GEOFENCE_RADIUS_METERS = 100

DEFAULT_REQUIRED_HOURS = Decimal("8")
NOMINAL_SALARY_DIVISOR = Decimal("30")
PERMISSION_WORKDAY_MINUTES = 8 * 60

REPORT_MIN_YEAR = 2020
REPORT_MAX_YEAR = 2100

MONEY_QUANTUM = Decimal("0.01")

DEFAULT_ADVANCE_DESCRIPTION = "Advance Voucher"
DEFAULT_DEDUCTION_DESCRIPTION = "Partial deduction"
