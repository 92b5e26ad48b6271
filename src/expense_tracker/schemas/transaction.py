"""Transaction request/response schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from expense_tracker.models.transaction import TaxType, TransactionType
from expense_tracker.schemas.common import AmountInput, Money, PaginationMeta

MIN_AMOUNT = Decimal("0.01")
# Largest value a Numeric(12, 2) column holds.
MAX_AMOUNT = Decimal("9999999999.99")

Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]


class TransactionCreate(BaseModel):
    """Request model for creating a transaction."""

    description: Description
    amount: AmountInput = Field(ge=MIN_AMOUNT, le=MAX_AMOUNT, description="Amount before tax (min 0.01)")
    type: TransactionType
    tax_type: TaxType = TaxType.FLAT
    tax_amount: AmountInput = Field(
        default=Decimal("0"), ge=0, le=MAX_AMOUNT, description="Flat tax amount or tax percentage"
    )


class TransactionUpdate(BaseModel):
    """Request model for updating a transaction; omitted fields are unchanged."""

    description: Description | None = None
    amount: AmountInput | None = Field(default=None, ge=MIN_AMOUNT, le=MAX_AMOUNT)
    type: TransactionType | None = None
    tax_type: TaxType | None = None
    tax_amount: AmountInput | None = Field(default=None, ge=0, le=MAX_AMOUNT)


class TransactionResponse(BaseModel):
    """Transaction as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    description: str
    amount: Money
    type: TransactionType
    tax_type: TaxType
    tax_amount: Money
    total_amount: Money
    created_at: datetime
    updated_at: datetime


class TransactionListResult(BaseModel):
    """Paginated list of transactions."""

    transactions: list[TransactionResponse]
    pagination: PaginationMeta


class DashboardSummary(BaseModel):
    """Income/expense totals over all of a user's transactions."""

    total_income: Money
    total_expense: Money
    balance: Money
    total_records: int
