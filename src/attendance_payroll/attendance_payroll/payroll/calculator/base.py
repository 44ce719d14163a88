from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...users.model import User


class OvertimeRateCalculator(ABC):
    """Calculator interface (Strategy Pattern for overtime pay)."""

    @abstractmethod
    def hourly_rate(self, employee: User, *, working_days: int) -> Decimal:
        """Amount paid per approved overtime hour for this employee."""

        raise NotImplementedError
