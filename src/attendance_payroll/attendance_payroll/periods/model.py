from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import DateLike, count_working_days, is_within_range
from ..core.enums import PeriodState


@dataclass(frozen=True)
class AttendancePeriod:
    """Domain entity: a bounded, inclusive date range that collects submissions."""

    period_id: int
    name: str
    start_date: date
    end_date: date
    is_active: bool
    payroll_processed: bool
    created_by: int
    created_at: datetime
    description: Optional[str] = None

    @property
    def state(self) -> PeriodState:
        if self.is_active:
            return PeriodState.ACTIVE
        if self.payroll_processed:
            return PeriodState.PAYROLL_PROCESSED
        return PeriodState.CLOSED

    def contains(self, value: DateLike) -> bool:
        return is_within_range(value, self.start_date, self.end_date)

    @property
    def working_days(self) -> int:
        return count_working_days(self.start_date, self.end_date)
