"""Custom exception classes for the expense tracker services.

Every service-level failure is raised as a subclass of
``ExpenseTrackerError``. Each subclass carries a default error code from
the catalog in errors.py, which also decides the HTTP status at the API
boundary.
"""

from typing import Any

from expense_tracker.core.errors import get_error, get_status_code


class ExpenseTrackerError(Exception):
    """Base exception for all expense tracker errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "TXN_001")
        message: Message shown to the client; defaults to the catalog text
        details: Additional context about the error (for logging only)
    """

    default_code = "SYS_001"

    def __init__(
        self,
        error_code: str | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py (defaults per subclass)
            message: Optional message overriding the catalog message
            details: Additional error context (not shown to users)
        """
        self.error_code = error_code or self.default_code
        self.message = message or get_error(self.error_code)["message"]
        self.details = details or {}
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return get_status_code(self.error_code)


class ValidationError(ExpenseTrackerError):
    """Raised when input is missing or malformed.

    Recoverable: the caller corrects the input and retries.
    """

    default_code = "VAL_001"


class DuplicateEmailError(ExpenseTrackerError):
    """Raised when an email is already bound to another user."""

    default_code = "AUTH_002"


class InvalidCredentialsError(ExpenseTrackerError):
    """Raised on login with an unknown email or a wrong password."""

    default_code = "AUTH_001"


class UnauthenticatedError(ExpenseTrackerError):
    """Raised when a bearer token is missing, invalid or expired."""

    default_code = "AUTH_003"


class ForbiddenError(ExpenseTrackerError):
    """Raised when an authenticated caller lacks the required role."""

    default_code = "AUTH_004"


class NotFoundError(ExpenseTrackerError):
    """Raised when an entity is absent or not owned by the caller.

    Both cases share one message so ownership is never revealed.
    """

    default_code = "TXN_001"


class StoreUnavailableError(ExpenseTrackerError):
    """Raised when the database times out or cannot be reached.

    Transient: safe to retry with backoff.
    """

    default_code = "DB_001"
