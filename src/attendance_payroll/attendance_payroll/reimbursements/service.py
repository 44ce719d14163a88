from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.claims import decision_status, initial_status
from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import page_window, require_cents, require_choice, require_non_empty
from ..core.constants import MAX_REIMBURSEMENT_AMOUNT
from ..core.enums import RecordStatus, ReimbursementCategory
from ..core.exceptions import PayrollAlreadyProcessed, RecordNotFound, ValidationError
from ..periods.service import PeriodService
from ..users.model import AuthContext
from .model import Reimbursement, ReimbursementSummary
from .repository import ReimbursementRepository

logger = logging.getLogger(__name__)


class ReimbursementService:
    """Reimbursement claims. Several claims per day are allowed."""

    def __init__(self, reimbursements: ReimbursementRepository, periods: PeriodService, *, clock: Clock | None = None):
        self._reimbursements = reimbursements
        self._periods = periods
        self._clock = clock or SystemClock()

    def submit_reimbursement(
        self,
        auth: AuthContext,
        amount,
        description: str,
        category,
        *,
        status=None,
    ) -> Reimbursement:
        auth.require_active()
        record_status = initial_status(status, auth)
        period = self._periods.get_active_period()

        value = require_cents(amount, "amount")
        if value <= 0:
            raise ValidationError("Reimbursement amount must be positive")
        if value > MAX_REIMBURSEMENT_AMOUNT:
            raise ValidationError(f"Reimbursement amount cannot exceed {MAX_REIMBURSEMENT_AMOUNT}")
        description = require_non_empty(description, "Description")
        category = require_choice(category, ReimbursementCategory, "category")

        item = self._reimbursements.create(
            user_id=auth.user_id,
            period_id=period.period_id,
            amount=value,
            description=description,
            category=category,
            status=record_status,
            created_at=self._clock.now(),
        )
        logger.info(
            "Reimbursement %s submitted by user %s: %s (%s, %s)",
            item.reimbursement_id,
            auth.user_id,
            value,
            category.value,
            record_status.value,
        )
        return item

    def decide_reimbursement(self, reimbursement_id: int, status, *, requester: AuthContext) -> Reimbursement:
        requester.require_admin("approve or reject reimbursements")
        new_status = decision_status(status)

        item = self._reimbursements.get_by_id(int(reimbursement_id))
        if not item:
            raise RecordNotFound(f"Reimbursement {reimbursement_id} not found")

        period = self._periods.get_period(item.period_id)
        if period.payroll_processed:
            raise PayrollAlreadyProcessed("Cannot change reimbursements of a period whose payroll is processed")
        if item.status != RecordStatus.PENDING:
            raise ValidationError("Reimbursement has already been decided")

        decided = self._reimbursements.decide(
            reimbursement_id=item.reimbursement_id,
            status=new_status,
            decided_by=requester.user_id,
            decided_at=self._clock.now(),
        )
        if not decided:
            if self._periods.get_period(item.period_id).payroll_processed:
                raise PayrollAlreadyProcessed("Cannot change reimbursements of a period whose payroll is processed")
            raise ValidationError("Reimbursement has already been decided")

        logger.info("Reimbursement %s %s by user %s", item.reimbursement_id, new_status.value, requester.user_id)
        return self._reimbursements.get_by_id(item.reimbursement_id)

    def list_user_reimbursements(
        self, user_id: int, period_id: Optional[int] = None
    ) -> tuple[list[Reimbursement], ReimbursementSummary]:
        period = self._periods.get_period(period_id) if period_id is not None else self._periods.get_active_period()
        items = list(self._reimbursements.list_for_user_in_period(int(user_id), period.period_id))
        return items, ReimbursementSummary.of(items)

    def list_period_reimbursements(
        self,
        period_id: int,
        *,
        status=None,
        page: int = 1,
        limit: int = 50,
    ) -> Sequence[Reimbursement]:
        period = self._periods.get_period(period_id)
        status_filter = require_choice(status, RecordStatus, "status") if status else None
        limit, offset = page_window(page, limit)
        return self._reimbursements.list_for_period(period.period_id, status=status_filter, limit=limit, offset=offset)
