"""Global error handling.

Every failure is converted to the ``{"success": false, "message": ...,
"error_code": ...}`` envelope. Status codes come from the error catalog
in ``expense_tracker.core.errors``; nothing else decides them.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from expense_tracker.config import settings
from expense_tracker.core.errors import get_error, is_retryable
from expense_tracker.core.exceptions import ExpenseTrackerError
from expense_tracker.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(error_code: str, message: str | None = None) -> JSONResponse:
    """Build the error envelope for a catalog code."""
    error_info = get_error(error_code)
    headers = None
    if error_info["http_status"] == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    body = ErrorResponse(message=message or error_info["message"], error_code=error_code)
    return JSONResponse(
        status_code=error_info["http_status"],
        content=body.model_dump(),
        headers=headers,
    )


async def handle_expense_tracker_error(
    request: Request, exc: ExpenseTrackerError
) -> JSONResponse:
    """Handle typed service errors.

    Args:
        request: The incoming request
        exc: The service exception

    Returns:
        JSONResponse with the catalog status code
    """
    extra = {
        "error_code": exc.error_code,
        "retry_allowed": is_retryable(exc.error_code),
        "path": request.url.path,
        "method": request.method,
    }
    if settings.debug:
        extra["details"] = exc.details

    if exc.http_status >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"Request failed: {exc.error_code}", extra=extra)
    else:
        logger.info(f"Request rejected: {exc.error_code}", extra=extra)

    return error_response(exc.error_code, exc.message)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request body, query or path failed schema validation: 400 VAL_001.

    The message lists every failing field as ``field: reason``, joined by
    `` | ``. Malformed UUID path parameters land here as well.
    """
    errors = exc.errors()
    extra = {"path": request.url.path, "method": request.method}
    if settings.debug:
        extra["errors"] = errors
    logger.info(f"Validation error on {request.url.path}", extra=extra)

    return error_response("VAL_001", " | ".join(_describe(error) for error in errors))


def _describe(error: dict) -> str:
    field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    msg = error.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def handle_integrity_error(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Handle database integrity errors.

    The only unique constraint is on user email, so a unique violation is
    a registration race that slipped past the service-level check.
    """
    # Do not log str(exc): it can include SQL + bound parameters.
    logger.error(
        f"Database integrity error on {request.url.path}",
        extra={"path": request.url.path, "method": request.method},
    )

    error_msg = str(exc).lower()
    if "unique" in error_msg or "duplicate" in error_msg:
        return error_response("AUTH_002")

    return error_response("DB_001", "Database operation failed")


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Anything not mapped above: 500 SYS_001 with no internals in the body."""
    # In non-debug: do not log str(exc) or traceback (may include sensitive data).
    extra = {
        "error_type": type(exc).__name__,
        "path": request.url.path,
        "method": request.method,
    }
    if settings.debug:
        logger.exception(f"Unexpected error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Unexpected error on {request.url.path}", extra=extra)

    return error_response("SYS_001")
