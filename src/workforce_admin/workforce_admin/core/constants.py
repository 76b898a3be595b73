"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 500
DEFAULT_PAY_PERIOD_DAYS = 7

DEFAULT_DEDUCTION_RATE = Decimal("0.10")
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")

MIN_PASSWORD_LENGTH = 6
