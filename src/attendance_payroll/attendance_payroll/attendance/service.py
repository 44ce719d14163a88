from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock, coerce_date
from ..common.validators import optional_text
from ..core.exceptions import AttendanceAlreadyExists, DomainError, UniqueViolation
from ..payroll.aggregation import AggregationService
from ..periods.service import PeriodService
from ..users.model import AuthContext
from .model import AttendanceRecord, UserAttendance
from .repository import AttendanceRepository
from .rules import AttendanceSubmission, validate_attendance

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        periods: PeriodService,
        aggregation: AggregationService,
        *,
        clock: Clock | None = None,
    ):
        self._attendance = attendance
        self._periods = periods
        self._aggregation = aggregation
        self._clock = clock or SystemClock()

    def submit_attendance(self, auth: AuthContext, attendance_date, notes: Optional[str] = None) -> AttendanceRecord:
        """Record the caller's attendance for one weekday of the active period."""

        auth.require_active()
        now = self._clock.now()
        day = coerce_date(attendance_date, "attendance_date")
        period = self._periods.find_active_period()

        submission = AttendanceSubmission(
            user_id=auth.user_id,
            attendance_date=day,
            now=now,
            period=period,
            already_submitted=lambda: self._attendance.get_for_user_and_date(auth.user_id, day) is not None,
        )
        try:
            validate_attendance(submission)
        except DomainError as e:
            logger.info("Attendance rejected for user %s on %s: %s", auth.user_id, day, e.code)
            raise

        try:
            record = self._attendance.create(
                user_id=auth.user_id,
                period_id=period.period_id,
                attendance_date=day,
                check_in_time=now,
                notes=optional_text(notes),
            )
        except UniqueViolation:
            raise AttendanceAlreadyExists("Attendance already submitted for this date")

        logger.info(
            "Attendance %s recorded for user %s on %s (period %s)",
            record.attendance_id,
            auth.user_id,
            day,
            period.period_id,
        )
        return record

    def get_user_attendance(self, user_id: int, period_id: Optional[int] = None) -> UserAttendance:
        period = self._periods.get_period(period_id) if period_id is not None else self._periods.get_active_period()
        records = list(self._attendance.list_for_user_in_period(int(user_id), period.period_id))
        return UserAttendance(
            period_id=period.period_id,
            records=records,
            summary=self._aggregation.employee_attendance_summary(int(user_id), period.period_id),
        )
