from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import optional_text, page_window
from ..core.exceptions import (
    AuthorizationError,
    PayrollAlreadyProcessed,
    PeriodStillActive,
    RecordNotFound,
    UniqueViolation,
)
from ..periods.service import PeriodService
from ..users.model import AuthContext
from .aggregation import AggregationService
from .model import Payroll, PayrollDraft, PayrollSummary, PayrollTotals, Payslip
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    """Compiles a closed period into exactly one persisted Payroll row and its payslips."""

    def __init__(
        self,
        payrolls: PayrollRepository,
        periods: PeriodService,
        aggregation: AggregationService,
        *,
        clock: Clock | None = None,
    ):
        self._payrolls = payrolls
        self._periods = periods
        self._aggregation = aggregation
        self._clock = clock or SystemClock()

    def compile_payroll(self, period_id: int, *, requester: AuthContext, notes: Optional[str] = None) -> Payroll:
        requester.require_admin("process payroll")

        period = self._periods.get_period(period_id)
        if period.payroll_processed:
            raise PayrollAlreadyProcessed(f"Payroll already processed for period {period.period_id}")
        if period.is_active:
            raise PeriodStillActive("Close the period before processing payroll")

        def build() -> PayrollDraft:
            lines = self._aggregation.employee_breakdown(period.period_id)
            return PayrollDraft(totals=PayrollTotals.of(lines), lines=lines)

        try:
            payroll = self._payrolls.record_compiled(
                period_id=period.period_id,
                build=build,
                processed_by=requester.user_id,
                created_at=self._clock.now(),
                notes=optional_text(notes),
            )
        except UniqueViolation:
            payroll = None
        if payroll is None:
            raise PayrollAlreadyProcessed(f"Payroll already processed for period {period.period_id}")

        logger.info(
            "Payroll %s compiled for period %s by user %s: %s employees, total %s",
            payroll.payroll_id,
            period.period_id,
            requester.user_id,
            payroll.total_employees,
            payroll.total_amount,
        )
        return payroll

    def get_payroll_for_period(self, period_id: int) -> Payroll:
        period = self._periods.get_period(period_id)
        payroll = self._payrolls.get_by_period(period.period_id)
        if not payroll:
            raise RecordNotFound(f"Payroll not processed for period {period.period_id}")
        return payroll

    def list_payrolls(self, *, page: int = 1, limit: int = 20) -> Sequence[Payroll]:
        limit, offset = page_window(page, limit)
        return self._payrolls.list_recent(limit=limit, offset=offset)

    def get_payslip(self, user_id: int, period_id: int, *, requester: AuthContext) -> Payslip:
        """Employees read their own payslip; admins read anyone's."""

        if not requester.is_admin and requester.user_id != int(user_id):
            raise AuthorizationError("Employees can only view their own payslip")

        payroll = self.get_payroll_for_period(period_id)
        payslip = self._payrolls.get_payslip(int(user_id), payroll.period_id)
        if not payslip:
            raise RecordNotFound(f"No payslip for user {user_id} in period {payroll.period_id}")
        return payslip

    def payroll_summary(self, period_id: int, *, requester: AuthContext) -> PayrollSummary:
        requester.require_admin("view payroll summaries")

        payroll = self.get_payroll_for_period(period_id)
        return PayrollSummary(payroll=payroll, payslips=list(self._payrolls.list_payslips(payroll.period_id)))
