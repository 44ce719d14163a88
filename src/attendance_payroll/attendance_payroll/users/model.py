from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class User:
    """Domain entity: User, as exposed by the external user store.

    Note: plain data object, no DB access code.
    """

    user_id: int
    full_name: str
    username: str
    role: Role
    salary: Decimal = Decimal("0")
    is_active: bool = True

    @property
    def is_employee(self) -> bool:
        return self.role == Role.EMPLOYEE


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller, supplied by the auth collaborator and trusted as-is."""

    user_id: int
    role: Role
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN and self.is_active

    def require_admin(self, action: str = "perform this action") -> None:
        if not self.is_admin:
            raise AuthorizationError(f"Only admins can {action}")

    def require_active(self) -> None:
        if not self.is_active:
            raise AuthorizationError("Account is deactivated")
