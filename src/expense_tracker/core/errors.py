"""Error codes, client messages and HTTP status codes.

This module is the single mapping from error kind to response. Each
error has:
- code: Unique identifier
- message: Client-facing message used when the raiser supplies none
- http_status: Status code returned at the API boundary
- retry_allowed: Whether the caller may retry unchanged
"""

from fastapi import status

# Error catalog for the expense tracker
ERROR_CATALOG: dict[str, dict] = {
    "VAL_001": {
        "code": "VAL_001",
        "message": "Invalid input data",
        "http_status": status.HTTP_400_BAD_REQUEST,
        "retry_allowed": False,
    },
    "AUTH_001": {
        "code": "AUTH_001",
        "message": "Invalid email or password",
        "http_status": status.HTTP_401_UNAUTHORIZED,
        "retry_allowed": False,
    },
    "AUTH_002": {
        "code": "AUTH_002",
        "message": "Email already exists",
        "http_status": status.HTTP_400_BAD_REQUEST,
        "retry_allowed": False,
    },
    "AUTH_003": {
        "code": "AUTH_003",
        "message": "Could not validate credentials",
        "http_status": status.HTTP_401_UNAUTHORIZED,
        "retry_allowed": False,
    },
    "AUTH_004": {
        "code": "AUTH_004",
        "message": "Admin access only",
        "http_status": status.HTTP_403_FORBIDDEN,
        "retry_allowed": False,
    },
    "TXN_001": {
        "code": "TXN_001",
        "message": "Expense not found",
        "http_status": status.HTTP_404_NOT_FOUND,
        "retry_allowed": False,
    },
    "USR_001": {
        "code": "USR_001",
        "message": "User not found",
        "http_status": status.HTTP_404_NOT_FOUND,
        "retry_allowed": False,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database is unavailable, please try again later",
        "http_status": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "retry_allowed": True,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "http_status": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Unknown codes resolve to a generic 500 entry instead of raising, so a
    typo in a raise site still produces a well-formed response.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": "An unexpected error occurred",
            "http_status": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_status_code(error_code: str) -> int:
    """Get the HTTP status code for an error code."""
    return get_error(error_code)["http_status"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable.

    Args:
        error_code: Error code from the catalog

    Returns:
        True if the operation can be retried, False otherwise
    """
    return get_error(error_code)["retry_allowed"]
