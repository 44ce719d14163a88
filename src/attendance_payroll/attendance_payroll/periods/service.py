from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock, count_working_days
from ..common.validators import optional_text, page_window, require_non_empty
from ..core.exceptions import (
    ActivePeriodExists,
    InvalidRange,
    NoActivePeriod,
    PeriodNotFound,
    UniqueViolation,
    ValidationError,
)
from ..users.model import AuthContext
from .model import AttendancePeriod
from .repository import PeriodRepository

logger = logging.getLogger(__name__)


class PeriodService:
    """Lifecycle of attendance periods: create (active) -> close -> payroll processed.

    At most one period is active at a time. The service checks first for a
    friendly error, but the repository's unique constraint is what holds the
    invariant when two admins race.
    """

    def __init__(self, periods: PeriodRepository, *, clock: Clock | None = None):
        self._periods = periods
        self._clock = clock or SystemClock()

    def create_period(
        self,
        *,
        requester: AuthContext,
        name: str,
        start_date: date,
        end_date: date,
        description: Optional[str] = None,
    ) -> AttendancePeriod:
        requester.require_admin("create attendance periods")

        name = require_non_empty(name, "Period name")
        if not isinstance(start_date, date) or not isinstance(end_date, date):
            raise ValidationError("start_date and end_date are required")
        if start_date > end_date:
            raise InvalidRange("start_date must be on or before end_date")

        active = self._periods.get_active()
        if active:
            raise ActivePeriodExists(f"Period '{active.name}' is still active; close it first")

        try:
            period = self._periods.create_active(
                name=name,
                start_date=start_date,
                end_date=end_date,
                created_by=requester.user_id,
                created_at=self._clock.now(),
                description=optional_text(description),
            )
        except UniqueViolation:
            raise ActivePeriodExists("Another active period was created concurrently")

        logger.info(
            "Attendance period %s created (%s..%s) by user %s",
            period.period_id,
            period.start_date,
            period.end_date,
            requester.user_id,
        )
        return period

    def find_active_period(self) -> Optional[AttendancePeriod]:
        return self._periods.get_active()

    def get_active_period(self) -> AttendancePeriod:
        period = self._periods.get_active()
        if not period:
            raise NoActivePeriod("No active attendance period")
        return period

    def get_period(self, period_id: int) -> AttendancePeriod:
        period = self._periods.get_by_id(int(period_id))
        if not period:
            raise PeriodNotFound(f"Attendance period {period_id} not found")
        return period

    def close_period(self, period_id: int, *, requester: AuthContext) -> AttendancePeriod:
        requester.require_admin("close attendance periods")

        period = self.get_period(period_id)
        if not period.is_active:
            return period

        if self._periods.deactivate(period.period_id):
            logger.info("Attendance period %s closed by user %s", period.period_id, requester.user_id)
        return self.get_period(period.period_id)

    def list_periods(self, *, page: int = 1, limit: int = 20) -> Sequence[AttendancePeriod]:
        limit, offset = page_window(page, limit)
        return self._periods.list_recent(limit=limit, offset=offset)

    def working_days(self, period_id: int) -> int:
        period = self.get_period(period_id)
        return count_working_days(period.start_date, period.end_date)
