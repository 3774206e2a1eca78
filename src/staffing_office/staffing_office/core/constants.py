"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

SECONDS_PER_DAY = 86400
HOURS_PER_DAY = 24

MONEY_QUANT = Decimal("0.01")
MIN_SHIFT_BLOCK_DAYS = Decimal("0.01")

DEFAULT_STATUS_UPDATE_WORKERS = 4

ADVANCE_SALARY_INFO = "Advance Salary"
NO_ASSIGNMENTS_INFO = "0 days | No valid assignments found"
