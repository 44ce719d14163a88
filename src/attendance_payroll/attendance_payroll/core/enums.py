from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for permission checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class RecordStatus(str, Enum):
    """Approval state of overtime and reimbursement claims."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReimbursementCategory(str, Enum):
    TRAVEL = "travel"
    MEALS = "meals"
    ACCOMMODATION = "accommodation"
    EQUIPMENT = "equipment"
    TRAINING = "training"
    COMMUNICATION = "communication"
    OTHER = "other"


class PeriodState(str, Enum):
    """Lifecycle state of an attendance period.

    DRAFT is never persisted: periods are created active.
    """

    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"
    PAYROLL_PROCESSED = "payroll_processed"
