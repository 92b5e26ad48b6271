"""Shared response envelopes and field types."""

from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer

from expense_tracker.core.totals import coerce_decimal

T = TypeVar("T")

# Decimal in Python, plain JSON number on the wire.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda value: float(value), return_type=float, when_used="json"),
]

# User-supplied amount: malformed values are coerced to zero before range checks.
AmountInput = Annotated[Decimal, BeforeValidator(coerce_decimal)]


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: T


class MessageResponse(BaseModel):
    """Success envelope for operations without a payload."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned by the exception handlers."""

    success: bool = False
    message: str
    error_code: str


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses."""

    page: int = Field(description="Current page number (1-indexed)")
    limit: int = Field(description="Items per page")
    total: int = Field(description="Total number of items")
    total_pages: int = Field(description="Total number of pages")
