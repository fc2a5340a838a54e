"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_STANDARD_HOURS_PER_DAY = 8
STANDARD_HOURS_SETTING = "standard_hours"

CLOCK_RETRY_ATTEMPTS = 3
DEFAULT_PAYROLL_MAX_WORKERS = 4

MONEY_QUANTUM = Decimal("0.01")
