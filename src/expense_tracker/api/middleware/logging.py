"""Structured JSON logging for the API.

Every record passes through ``filter_sensitive`` before it is written, so
emails, bearer tokens, JWTs and passwords are replaced by placeholders.
"""

import json
import logging
import re
import sys
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# Sensitive patterns to filter from logs
SENSITIVE_PATTERNS = [
    # Email addresses
    (re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'), '[EMAIL]'),
    # Bearer tokens / JWTs
    (re.compile(r'\bBearer\s+[A-Za-z0-9._-]+', re.I), 'Bearer [TOKEN]'),
    (re.compile(r'\beyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*'), '[TOKEN]'),
    # password=... in query strings or messages
    (re.compile(r'(password["\']?\s*[:=]\s*)["\']?[^\s&"\',]+', re.I), r'\1[REDACTED]'),
]

# Fields copied from LogRecord extras into the JSON output.
EXTRA_FIELDS = (
    "request_id",
    "user_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "error_code",
    "error_type",
    "retry_allowed",
    "client_ip",
    "target_user_id",
    "transaction_id",
    "transactions_deleted",
    "role",
)


def filter_sensitive(text: str) -> str:
    """Remove emails, tokens and passwords from text.

    Args:
        text: Input text that may contain sensitive values

    Returns:
        Text with sensitive values replaced by placeholders
    """
    if not text:
        return text

    filtered = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        filtered = pattern.sub(replacement, filtered)

    return filtered


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one line when it starts and one when it ends.

    An incoming ``X-Request-ID`` header is reused so ids can be correlated
    across services; otherwise a new UUID is generated. The id is echoed
    back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": filter_sensitive(request.url.path),
        }
        logger.info(
            "Request started",
            extra={**context, "client_ip": request.client.host if request.client else None},
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed",
                extra={
                    **context,
                    "user_id": _user_id(request),
                    "duration_ms": _elapsed_ms(started),
                    "error_type": type(exc).__name__,
                },
            )
            raise

        response.headers["X-Request-ID"] = request_id
        logger.log(
            logging.ERROR if response.status_code >= 500 else logging.INFO,
            "Request completed",
            extra={
                **context,
                "user_id": _user_id(request),
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(started),
            },
        )
        return response


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _user_id(request: Request) -> str | None:
    # Set by get_current_identity once the token has been verified.
    identity = getattr(request.state, "identity", None)
    return str(identity.user_id) if identity else None


class JSONLogFormatter(logging.Formatter):
    """One JSON object per line; known ``extra`` fields become top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": filter_sensitive(record.getMessage()),
        }

        for field in EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = filter_sensitive(self.formatException(record.exc_info))

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Send all application logs to stdout as JSON."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONLogFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())
