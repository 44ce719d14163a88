from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import RecordStatus, ReimbursementCategory
from .model import Reimbursement


class ReimbursementRepository(Protocol):
    def get_by_id(self, reimbursement_id: int) -> Optional[Reimbursement]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        period_id: int,
        amount: Decimal,
        description: str,
        category: ReimbursementCategory,
        status: RecordStatus,
        created_at: datetime,
    ) -> Reimbursement:
        raise NotImplementedError

    def decide(self, *, reimbursement_id: int, status: RecordStatus, decided_by: int, decided_at: datetime) -> bool:
        """Same contract as OvertimeRepository.decide."""

        raise NotImplementedError

    def list_for_user_in_period(self, user_id: int, period_id: int) -> Sequence[Reimbursement]:
        raise NotImplementedError

    def list_for_period(
        self,
        period_id: int,
        *,
        status: Optional[RecordStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[Reimbursement]:
        raise NotImplementedError

    def count_by_user(self, period_id: int) -> dict[int, int]:
        raise NotImplementedError

    def approved_amount_by_user(self, period_id: int) -> dict[int, Decimal]:
        raise NotImplementedError
