class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable machine-readable ``code`` and the HTTP
    status the transport layer should answer with.
    """

    code = "DOMAIN_ERROR"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class InvalidRange(ValidationError):
    """Raised when a date range ends before it starts."""

    code = "INVALID_RANGE"


class PeriodStillActive(ValidationError):
    code = "PERIOD_STILL_ACTIVE"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "INSUFFICIENT_PERMISSIONS"
    http_status = 403


InsufficientPermissions = AuthorizationError


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    http_status = 404


class PeriodNotFound(NotFoundError):
    code = "PERIOD_NOT_FOUND"


class RecordNotFound(NotFoundError):
    code = "RECORD_NOT_FOUND"


class NoActivePeriod(NotFoundError):
    code = "NO_ACTIVE_PERIOD"


class ConflictError(DomainError):
    code = "CONFLICT"
    http_status = 409


class ActivePeriodExists(ConflictError):
    code = "ACTIVE_PERIOD_EXISTS"


class AttendanceAlreadyExists(ConflictError):
    code = "ATTENDANCE_ALREADY_EXISTS"


class OvertimeAlreadyExists(ConflictError):
    code = "OVERTIME_ALREADY_EXISTS"


class PayrollAlreadyProcessed(ConflictError):
    code = "PAYROLL_ALREADY_PROCESSED"


class DateOutsidePeriod(ValidationError):
    code = "DATE_OUTSIDE_PERIOD"


class WeekendNotAllowed(ValidationError):
    code = "WEEKEND_NOT_ALLOWED"


class FutureDateNotAllowed(ValidationError):
    code = "FUTURE_DATE_NOT_ALLOWED"


class UniqueViolation(Exception):
    """Raised by repositories when an insert/update hits a unique constraint.

    Not a DomainError: services translate it into the matching conflict.
    """
