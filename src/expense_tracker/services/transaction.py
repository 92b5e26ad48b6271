"""Transaction service: owner-scoped CRUD, pagination and summaries."""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from expense_tracker.core.exceptions import NotFoundError, UnauthenticatedError, ValidationError
from expense_tracker.core.totals import compute_total
from expense_tracker.models.transaction import TaxType, Transaction, TransactionType
from expense_tracker.repositories.transaction import TransactionRepository
from expense_tracker.repositories.user import UserRepository
from expense_tracker.schemas.transaction import (
    MAX_AMOUNT,
    MIN_AMOUNT,
    DashboardSummary,
    TransactionCreate,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Largest OFFSET the databases accept (signed 64-bit).
MAX_OFFSET = 2**63 - 1


@dataclass
class TransactionPage:
    items: list[Transaction]
    page: int
    limit: int
    total: int
    total_pages: int


def apply_fields(transaction: Transaction, data: TransactionCreate | TransactionUpdate) -> None:
    """Merge the provided fields into ``transaction`` and recompute its total.

    Raises:
        ValidationError: If the merged values break the field rules
    """
    merged = {
        field: getattr(transaction, field)
        for field in ("description", "amount", "type", "tax_type", "tax_amount")
    }
    merged.update(data.model_dump(include=set(merged), exclude_none=True))
    if merged["tax_type"] is None:
        merged["tax_type"] = TaxType.FLAT
    if merged["tax_amount"] is None:
        merged["tax_amount"] = ZERO

    # Validate before touching the instance so a rejected edit leaves it clean.
    if not merged["description"] or not merged["description"].strip():
        raise ValidationError(message="description: Description is required")
    if merged["amount"] is None or merged["amount"] < MIN_AMOUNT:
        raise ValidationError(message=f"amount: Amount must be at least {MIN_AMOUNT}")
    if merged["type"] not in (TransactionType.EXPENSE, TransactionType.INCOME):
        raise ValidationError(message="type: Type must be 'expense' or 'income'")
    if merged["tax_amount"] < 0:
        raise ValidationError(message="tax_amount: Tax amount cannot be negative")

    total = compute_total(merged["amount"], merged["tax_type"], merged["tax_amount"])
    if total > MAX_AMOUNT:
        raise ValidationError(message=f"total_amount: Total cannot exceed {MAX_AMOUNT}")

    for field, value in merged.items():
        setattr(transaction, field, value)
    transaction.total_amount = total


class TransactionService:
    """CRUD over a single user's transactions.

    Every method takes the authenticated user's id and only ever touches
    rows owned by that user. A missing row and another user's row raise
    the same ``NotFoundError``.
    """

    def __init__(self, transaction_repo: TransactionRepository, user_repo: UserRepository):
        self.transaction_repo = transaction_repo
        self.user_repo = user_repo

    async def create(self, user_id: UUID, data: TransactionCreate) -> Transaction:
        """Create a transaction owned by ``user_id``."""
        await self._require_owner(user_id)
        transaction = Transaction(user_id=user_id)
        apply_fields(transaction, data)
        return await self.transaction_repo.create(transaction)

    async def list(self, user_id: UUID, page: int = 1, limit: int = 10) -> TransactionPage:
        """Get one page of the user's transactions, newest first."""
        if page < 1 or limit < 1:
            raise ValidationError(message="page and limit must be positive integers")
        if (page - 1) * limit > MAX_OFFSET:
            raise ValidationError(message="page: Page is out of range")

        total = await self.transaction_repo.count_by_user(user_id)
        items = await self.transaction_repo.get_all_by_user(
            user_id, skip=(page - 1) * limit, limit=limit
        )
        return TransactionPage(
            items=items,
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        )

    async def get(self, user_id: UUID, transaction_id: UUID) -> Transaction:
        transaction = await self.transaction_repo.get_by_user(user_id, transaction_id)
        if transaction is None:
            raise NotFoundError()
        return transaction

    async def update(
        self, user_id: UUID, transaction_id: UUID, data: TransactionUpdate
    ) -> Transaction:
        """Update the user's transaction; the total is always recomputed."""
        await self._require_owner(user_id)
        transaction = await self.get(user_id, transaction_id)
        apply_fields(transaction, data)
        return await self.transaction_repo.save(transaction)

    async def delete(self, user_id: UUID, transaction_id: UUID) -> None:
        transaction = await self.get(user_id, transaction_id)
        await self.transaction_repo.remove(transaction)
        logger.info("Transaction deleted", extra={"user_id": str(user_id)})

    async def dashboard_summary(self, user_id: UUID) -> DashboardSummary:
        """Sum total_amount per type over all of the user's transactions."""
        totals = await self.transaction_repo.get_totals_by_type(user_id)
        income, income_count = totals.get(TransactionType.INCOME, (ZERO, 0))
        expense, expense_count = totals.get(TransactionType.EXPENSE, (ZERO, 0))
        return DashboardSummary(
            total_income=income,
            total_expense=expense,
            balance=income - expense,
            total_records=income_count + expense_count,
        )

    async def _require_owner(self, user_id: UUID) -> None:
        # The token may belong to a user an admin has since deleted.
        if await self.user_repo.get_by_id(user_id) is None:
            raise UnauthenticatedError(message="User not found")
