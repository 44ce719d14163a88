from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Protocol, Sequence

from .model import Payroll, PayrollDraft, Payslip


class PayrollRepository(Protocol):
    def get_by_period(self, period_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def record_compiled(
        self,
        *,
        period_id: int,
        build: Callable[[], PayrollDraft],
        processed_by: int,
        created_at: datetime,
        notes: Optional[str] = None,
    ) -> Optional[Payroll]:
        """In one transaction: lock the period, build the draft, insert payroll and payslips, set the flag.

        The period row stays locked while ``build`` runs, so claim decisions
        (which require ``payroll_processed = 0`` on the same row) wait for the
        outcome. Returns None when the period is still active or already
        processed; raises UniqueViolation when a payroll row already exists.
        Either way nothing is written.
        """

        raise NotImplementedError

    def list_recent(self, *, limit: int, offset: int = 0) -> Sequence[Payroll]:
        raise NotImplementedError

    def get_payslip(self, user_id: int, period_id: int) -> Optional[Payslip]:
        raise NotImplementedError

    def list_payslips(self, period_id: int) -> Sequence[Payslip]:
        """Payslips of a period's payroll, in user_id order."""

        raise NotImplementedError
