from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT, MONEY_QUANTUM
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    """Strip free text; blank or missing values become None."""
    if value is None:
        return None
    return str(value).strip() or None


def require_decimal(value, field_name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return number


def require_cents(value, field_name: str) -> Decimal:
    """Decimal with at most two decimal places, returned at exactly two."""
    number = require_decimal(value, field_name)
    try:
        cents = number.quantize(MONEY_QUANTUM)
    except InvalidOperation:
        raise ValidationError(f"{field_name} is out of range")
    if number != cents:
        raise ValidationError(f"{field_name} allows at most 2 decimal places")
    return cents


def require_choice(value, enum_cls: Type[E], field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def page_window(page: int = 1, limit: int = DEFAULT_LIST_LIMIT) -> tuple[int, int]:
    """Turn 1-based page/limit into a clamped (limit, offset) pair."""
    try:
        page = max(int(page), 1)
        limit = min(max(int(limit), 1), MAX_LIST_LIMIT)
    except (TypeError, ValueError):
        raise ValidationError("page and limit must be integers")
    return limit, (page - 1) * limit
