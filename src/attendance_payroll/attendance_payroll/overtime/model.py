from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import RecordStatus


@dataclass(frozen=True)
class OvertimeRecord:
    overtime_id: int
    user_id: int
    period_id: int
    overtime_date: date
    hours_worked: Decimal
    description: str
    status: RecordStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class OvertimeSummary:
    total_records: int
    total_hours: Decimal
    approved_hours: Decimal
    pending_hours: Decimal
    rejected_hours: Decimal

    @classmethod
    def of(cls, records) -> "OvertimeSummary":
        totals = {status: Decimal("0") for status in RecordStatus}
        for r in records:
            totals[r.status] += r.hours_worked
        return cls(
            total_records=len(records),
            total_hours=sum(totals.values(), Decimal("0")),
            approved_hours=totals[RecordStatus.APPROVED],
            pending_hours=totals[RecordStatus.PENDING],
            rejected_hours=totals[RecordStatus.REJECTED],
        )
