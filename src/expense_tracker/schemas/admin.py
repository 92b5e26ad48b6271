"""Schemas for the admin endpoints."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from expense_tracker.models.user import UserRole
from expense_tracker.schemas.auth import Name, Password, UserResponse
from expense_tracker.schemas.common import AmountInput, Money
from expense_tracker.schemas.transaction import (
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)


class AdminUserCreate(BaseModel):
    """Request model for an admin creating a user."""

    name: Name
    email: EmailStr
    password: Password
    role: UserRole = UserRole.USER


class AdminUserUpdate(BaseModel):
    """Request model for an admin editing a user; omitted fields are unchanged."""

    name: Name | None = None
    email: EmailStr | None = None
    role: UserRole | None = None


class UserListResult(BaseModel):
    users: list[UserResponse]


class AdminTransactionCreate(TransactionCreate):
    """Transaction created by an admin on behalf of ``user_id``."""

    user_id: UUID


class AdminTransactionUpdate(TransactionUpdate):
    """Admin edit of a transaction.

    ``total_amount`` is accepted for client compatibility but never stored;
    the total is always recomputed from amount and tax.
    """

    total_amount: AmountInput | None = Field(
        default=None, description="Ignored; the total is always recomputed"
    )


class TransactionOwner(BaseModel):
    id: UUID
    name: str
    email: str


class AdminTransactionResponse(TransactionResponse):
    """Transaction annotated with its owner's name and email."""

    user: TransactionOwner


class AdminTransactionListResult(BaseModel):
    transactions: list[AdminTransactionResponse]


class AdminStats(BaseModel):
    """System-wide figures for the admin dashboard."""

    total_users: int
    total_transactions: int
    total_income: Money
    total_expense: Money
