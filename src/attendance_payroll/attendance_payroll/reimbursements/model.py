from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import RecordStatus, ReimbursementCategory


@dataclass(frozen=True)
class Reimbursement:
    reimbursement_id: int
    user_id: int
    period_id: int
    amount: Decimal
    description: str
    category: ReimbursementCategory
    status: RecordStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class ReimbursementSummary:
    total_requests: int
    total_amount: Decimal
    approved_amount: Decimal
    pending_amount: Decimal
    rejected_amount: Decimal

    @classmethod
    def of(cls, items) -> "ReimbursementSummary":
        totals = {status: Decimal("0") for status in RecordStatus}
        for item in items:
            totals[item.status] += item.amount
        return cls(
            total_requests=len(items),
            total_amount=sum(totals.values(), Decimal("0")),
            approved_amount=totals[RecordStatus.APPROVED],
            pending_amount=totals[RecordStatus.PENDING],
            rejected_amount=totals[RecordStatus.REJECTED],
        )
