"""Custom exception classes for the finance tracker.

Each exception carries an error_code that maps to the catalog in errors.py
and the HTTP status the API layer should answer with.
"""

from typing import Any


class FinanceTrackerError(Exception):
    """Base exception for all domain errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "TXN_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    default_code = "SYS_001"
    default_status = 500

    def __init__(
        self,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py
            details: Additional error context (not shown to users)
            http_status: HTTP status code
        """
        self.error_code = error_code or self.default_code
        self.details = details or {}
        self.http_status = http_status or self.default_status
        super().__init__(self.error_code)


class ValidationError(FinanceTrackerError):
    """Raised when input violates the data model.

    Attributes:
        field_errors: Mapping of field name to a human readable message,
            one entry per violated field.
    """

    default_code = "VAL_001"
    default_status = 400

    def __init__(self, field_errors: dict[str, str], details: dict[str, Any] | None = None):
        self.field_errors = dict(field_errors)
        super().__init__(details=details)


class UnauthenticatedError(FinanceTrackerError):
    """Raised for missing, invalid or expired credentials.

    The response never says which of those it was.
    """

    default_code = "AUTH_001"
    default_status = 401


class NotFoundError(FinanceTrackerError):
    """Raised when a record is absent or owned by another user."""

    default_code = "TXN_001"
    default_status = 404


class ConflictError(FinanceTrackerError):
    """Raised when a unique field (e.g. email) is already taken."""

    default_code = "AUTH_003"
    default_status = 400


class InternalError(FinanceTrackerError):
    """Raised for store or connectivity failures."""

    default_code = "SYS_001"
    default_status = 500
