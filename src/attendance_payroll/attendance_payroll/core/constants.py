"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

MAX_OVERTIME_HOURS = Decimal("3.0")
MAX_REIMBURSEMENT_AMOUNT = Decimal("50000")

STANDARD_HOURS_PER_DAY = 8
DEFAULT_OVERTIME_MULTIPLIER = Decimal("2.0")

# Stored amounts and hours have two decimal places; rates four.
MONEY_QUANTUM = Decimal("0.01")
RATE_QUANTUM = Decimal("0.0001")

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200
