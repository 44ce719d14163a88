from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendancePeriod


class PeriodRepository(Protocol):
    def get_by_id(self, period_id: int) -> Optional[AttendancePeriod]:
        raise NotImplementedError

    def get_active(self) -> Optional[AttendancePeriod]:
        raise NotImplementedError

    def create_active(
        self,
        *,
        name: str,
        start_date: date,
        end_date: date,
        created_by: int,
        created_at: datetime,
        description: Optional[str] = None,
    ) -> AttendancePeriod:
        """Insert an active period.

        Must raise UniqueViolation when another active period already exists.
        """

        raise NotImplementedError

    def deactivate(self, period_id: int) -> bool:
        raise NotImplementedError

    def list_recent(self, *, limit: int, offset: int = 0) -> Sequence[AttendancePeriod]:
        raise NotImplementedError
