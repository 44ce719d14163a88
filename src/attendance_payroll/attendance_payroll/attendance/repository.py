from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        period_id: int,
        attendance_date: date,
        check_in_time: datetime,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert-if-absent on (user_id, attendance_date).

        Must raise UniqueViolation when the pair already exists.
        """

        raise NotImplementedError

    def list_for_user_in_period(self, user_id: int, period_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_days_by_user(self, period_id: int) -> dict[int, int]:
        """Attendance days per user_id within a period."""

        raise NotImplementedError
