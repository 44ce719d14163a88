from __future__ import annotations

from decimal import Decimal

from ...core.constants import DEFAULT_OVERTIME_MULTIPLIER, STANDARD_HOURS_PER_DAY
from ...users.model import User
from .base import OvertimeRateCalculator


class StandardOvertimeRateCalculator(OvertimeRateCalculator):
    """Standard rule: salary / (working_days * hours_per_day) * multiplier.

    Periods without working days (or unpaid employees) pay no overtime.
    """

    def __init__(
        self,
        *,
        hours_per_day: int = STANDARD_HOURS_PER_DAY,
        multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER,
    ):
        self._hours_per_day = int(hours_per_day)
        self._multiplier = Decimal(str(multiplier))

    def hourly_rate(self, employee: User, *, working_days: int) -> Decimal:
        if working_days <= 0 or self._hours_per_day <= 0 or employee.salary <= 0:
            return Decimal("0")
        base_rate = employee.salary / Decimal(working_days * self._hours_per_day)
        return base_rate * self._multiplier


class FlatOvertimeRateCalculator(OvertimeRateCalculator):
    """Same hourly rate for everyone."""

    def __init__(self, rate: Decimal):
        self._rate = Decimal(str(rate))

    def hourly_rate(self, employee: User, *, working_days: int) -> Decimal:
        return self._rate
