from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import RecordStatus
from .model import OvertimeRecord


class OvertimeRepository(Protocol):
    def get_by_id(self, overtime_id: int) -> Optional[OvertimeRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, overtime_date: date) -> Optional[OvertimeRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        period_id: int,
        overtime_date: date,
        hours_worked: Decimal,
        description: str,
        status: RecordStatus,
        created_at: datetime,
    ) -> OvertimeRecord:
        """Insert-if-absent on (user_id, overtime_date); raises UniqueViolation otherwise."""

        raise NotImplementedError

    def decide(self, *, overtime_id: int, status: RecordStatus, decided_by: int, decided_at: datetime) -> bool:
        """Move a pending record to status.

        False when it is no longer pending or its period's payroll is processed;
        the check and the update are one statement.
        """

        raise NotImplementedError

    def list_for_user_in_period(self, user_id: int, period_id: int) -> Sequence[OvertimeRecord]:
        raise NotImplementedError

    def list_for_period(
        self,
        period_id: int,
        *,
        status: Optional[RecordStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[OvertimeRecord]:
        raise NotImplementedError

    def count_by_user(self, period_id: int) -> dict[int, int]:
        raise NotImplementedError

    def approved_hours_by_user(self, period_id: int) -> dict[int, Decimal]:
        raise NotImplementedError
