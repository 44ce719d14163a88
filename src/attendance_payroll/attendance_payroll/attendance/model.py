from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: int
    user_id: int
    period_id: int
    attendance_date: date
    check_in_time: datetime
    notes: Optional[str] = None


@dataclass(frozen=True)
class EmployeeAttendanceSummary:
    user_id: int
    period_id: int
    attendance_days: int
    total_working_days: int


@dataclass(frozen=True)
class UserAttendance:
    """Read-model: a user's records in a period plus their summary."""

    period_id: int
    records: list[AttendanceRecord]
    summary: EmployeeAttendanceSummary
