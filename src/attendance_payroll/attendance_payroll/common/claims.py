"""Approval-state rules shared by overtime and reimbursement claims."""

from __future__ import annotations

from ..core.enums import RecordStatus
from ..core.exceptions import AuthorizationError, ValidationError
from .validators import require_choice


def initial_status(requested, auth) -> RecordStatus:
    """New claims start pending; only admins may create them pre-decided."""

    if requested is None or requested == "":
        return RecordStatus.PENDING

    status = require_choice(requested, RecordStatus, "status")
    if status != RecordStatus.PENDING and not auth.is_admin:
        raise AuthorizationError("Only admins can create pre-approved records")
    return status


def decision_status(requested) -> RecordStatus:
    status = require_choice(requested, RecordStatus, "status")
    if status == RecordStatus.PENDING:
        raise ValidationError("Status must be either approved or rejected")
    return status
