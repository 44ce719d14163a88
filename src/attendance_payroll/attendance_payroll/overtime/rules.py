from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from ..common.checks import run_checks
from ..core.constants import MAX_OVERTIME_HOURS
from ..core.exceptions import DateOutsidePeriod, NoActivePeriod, OvertimeAlreadyExists, ValidationError
from ..periods.model import AttendancePeriod


@dataclass(frozen=True)
class OvertimeSubmission:
    user_id: int
    overtime_date: date
    hours_worked: Decimal
    description: str
    period: Optional[AttendancePeriod]
    already_submitted: Callable[[], bool]


def require_active_period(s: OvertimeSubmission) -> None:
    if s.period is None:
        raise NoActivePeriod("No active attendance period")


def require_within_period(s: OvertimeSubmission) -> None:
    if not s.period.contains(s.overtime_date):
        raise DateOutsidePeriod("Overtime date must be within the active period")


def require_hours_in_bounds(s: OvertimeSubmission) -> None:
    if not (Decimal("0") < s.hours_worked <= MAX_OVERTIME_HOURS):
        raise ValidationError(f"Overtime hours must be greater than 0 and at most {MAX_OVERTIME_HOURS}")


def require_description(s: OvertimeSubmission) -> None:
    if not s.description:
        raise ValidationError("Description is required")


def reject_duplicate(s: OvertimeSubmission) -> None:
    if s.already_submitted():
        raise OvertimeAlreadyExists("Overtime already submitted for this date")


OVERTIME_CHECKS = (
    require_active_period,
    require_within_period,
    require_hours_in_bounds,
    require_description,
    reject_duplicate,
)


def validate_overtime(submission: OvertimeSubmission) -> OvertimeSubmission:
    return run_checks(OVERTIME_CHECKS, submission)
