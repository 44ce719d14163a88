from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.claims import decision_status, initial_status
from ..common.datetime_utils import Clock, SystemClock, coerce_date
from ..common.validators import optional_text, page_window, require_cents, require_choice
from ..core.enums import RecordStatus
from ..core.exceptions import (
    DomainError,
    OvertimeAlreadyExists,
    PayrollAlreadyProcessed,
    RecordNotFound,
    UniqueViolation,
    ValidationError,
)
from ..periods.service import PeriodService
from ..users.model import AuthContext
from .model import OvertimeRecord, OvertimeSummary
from .repository import OvertimeRepository
from .rules import OvertimeSubmission, validate_overtime

logger = logging.getLogger(__name__)


class OvertimeService:
    def __init__(self, overtime: OvertimeRepository, periods: PeriodService, *, clock: Clock | None = None):
        self._overtime = overtime
        self._periods = periods
        self._clock = clock or SystemClock()

    def submit_overtime(
        self,
        auth: AuthContext,
        overtime_date,
        hours_worked,
        description: str,
        *,
        status=None,
    ) -> OvertimeRecord:
        auth.require_active()
        record_status = initial_status(status, auth)
        day = coerce_date(overtime_date, "overtime_date")
        hours = require_cents(hours_worked, "hours_worked")
        period = self._periods.find_active_period()

        submission = OvertimeSubmission(
            user_id=auth.user_id,
            overtime_date=day,
            hours_worked=hours,
            description=optional_text(description) or "",
            period=period,
            already_submitted=lambda: self._overtime.get_for_user_and_date(auth.user_id, day) is not None,
        )
        try:
            validate_overtime(submission)
        except DomainError as e:
            logger.info("Overtime rejected for user %s on %s: %s", auth.user_id, day, e.code)
            raise

        try:
            record = self._overtime.create(
                user_id=auth.user_id,
                period_id=period.period_id,
                overtime_date=day,
                hours_worked=hours,
                description=submission.description,
                status=record_status,
                created_at=self._clock.now(),
            )
        except UniqueViolation:
            raise OvertimeAlreadyExists("Overtime already submitted for this date")

        logger.info(
            "Overtime %s submitted by user %s: %s h on %s (%s)",
            record.overtime_id,
            auth.user_id,
            hours,
            day,
            record_status.value,
        )
        return record

    def decide_overtime(self, overtime_id: int, status, *, requester: AuthContext) -> OvertimeRecord:
        """Approve or reject a pending overtime claim."""

        requester.require_admin("approve or reject overtime")
        new_status = decision_status(status)

        record = self._overtime.get_by_id(int(overtime_id))
        if not record:
            raise RecordNotFound(f"Overtime record {overtime_id} not found")

        period = self._periods.get_period(record.period_id)
        if period.payroll_processed:
            raise PayrollAlreadyProcessed("Cannot change overtime of a period whose payroll is processed")
        if record.status != RecordStatus.PENDING:
            raise ValidationError("Overtime record has already been decided")

        decided = self._overtime.decide(
            overtime_id=record.overtime_id,
            status=new_status,
            decided_by=requester.user_id,
            decided_at=self._clock.now(),
        )
        if not decided:
            if self._periods.get_period(record.period_id).payroll_processed:
                raise PayrollAlreadyProcessed("Cannot change overtime of a period whose payroll is processed")
            raise ValidationError("Overtime record has already been decided")

        logger.info("Overtime %s %s by user %s", record.overtime_id, new_status.value, requester.user_id)
        return self._overtime.get_by_id(record.overtime_id)

    def list_user_overtime(self, user_id: int, period_id: Optional[int] = None) -> tuple[list[OvertimeRecord], OvertimeSummary]:
        period = self._periods.get_period(period_id) if period_id is not None else self._periods.get_active_period()
        records = list(self._overtime.list_for_user_in_period(int(user_id), period.period_id))
        return records, OvertimeSummary.of(records)

    def list_period_overtime(
        self,
        period_id: int,
        *,
        status=None,
        page: int = 1,
        limit: int = 50,
    ) -> Sequence[OvertimeRecord]:
        period = self._periods.get_period(period_id)
        status_filter = require_choice(status, RecordStatus, "status") if status else None
        limit, offset = page_window(page, limit)
        return self._overtime.list_for_period(period.period_id, status=status_filter, limit=limit, offset=offset)
