"""Ordered checks for an attendance submission.

Range checks run first and the duplicate lookup last, so a submission that is
invalid on its face never touches existing records.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..common.checks import run_checks
from ..common.datetime_utils import is_future_date, is_weekend
from ..core.exceptions import (
    AttendanceAlreadyExists,
    DateOutsidePeriod,
    FutureDateNotAllowed,
    NoActivePeriod,
    WeekendNotAllowed,
)
from ..periods.model import AttendancePeriod


@dataclass(frozen=True)
class AttendanceSubmission:
    user_id: int
    attendance_date: date
    now: datetime
    period: Optional[AttendancePeriod]
    already_submitted: Callable[[], bool]


def require_active_period(s: AttendanceSubmission) -> None:
    if s.period is None:
        raise NoActivePeriod("No active attendance period")


def reject_future_date(s: AttendanceSubmission) -> None:
    if is_future_date(s.attendance_date, s.now):
        raise FutureDateNotAllowed("Cannot submit attendance for a future date")


def require_within_period(s: AttendanceSubmission) -> None:
    if not s.period.contains(s.attendance_date):
        raise DateOutsidePeriod(
            f"Attendance date must be between {s.period.start_date.isoformat()} and {s.period.end_date.isoformat()}"
        )


def reject_weekend(s: AttendanceSubmission) -> None:
    if is_weekend(s.attendance_date):
        raise WeekendNotAllowed("Cannot submit attendance for weekends")


def reject_duplicate(s: AttendanceSubmission) -> None:
    if s.already_submitted():
        raise AttendanceAlreadyExists("Attendance already submitted for this date")


ATTENDANCE_CHECKS = (
    require_active_period,
    reject_future_date,
    require_within_period,
    reject_weekend,
    reject_duplicate,
)


def validate_attendance(submission: AttendanceSubmission) -> AttendanceSubmission:
    return run_checks(ATTENDANCE_CHECKS, submission)
