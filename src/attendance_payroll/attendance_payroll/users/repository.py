from __future__ import annotations

from typing import Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def list_active_employees(self) -> Sequence[User]:
        """Active users with role employee, ordered by user_id."""

        raise NotImplementedError
