"""Admin service: system-wide management of users and transactions.

Role checks happen before any of these methods run (see
``expense_tracker.api.deps.require_admin``); nothing here is scoped to the
calling admin.
"""

import logging
from decimal import Decimal
from uuid import UUID

from expense_tracker.core.exceptions import DuplicateEmailError, NotFoundError
from expense_tracker.models.transaction import Transaction, TransactionType
from expense_tracker.models.user import User, UserRole
from expense_tracker.repositories.transaction import TransactionRepository
from expense_tracker.repositories.user import UserRepository, normalize_email
from expense_tracker.schemas.admin import (
    AdminStats,
    AdminTransactionCreate,
    AdminTransactionResponse,
    AdminTransactionUpdate,
    AdminUserUpdate,
    TransactionOwner,
)
from expense_tracker.services.auth import AuthService
from expense_tracker.services.transaction import apply_fields

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def to_admin_view(transaction: Transaction, owner: User) -> AdminTransactionResponse:
    return AdminTransactionResponse.model_validate(
        {
            **{
                field: getattr(transaction, field)
                for field in AdminTransactionResponse.model_fields
                if field != "user"
            },
            "user": TransactionOwner(id=owner.id, name=owner.name, email=owner.email),
        }
    )


class AdminService:
    """Cross-user CRUD over users and transactions."""

    def __init__(
        self,
        user_repo: UserRepository,
        transaction_repo: TransactionRepository,
        auth_service: AuthService,
    ):
        self.user_repo = user_repo
        self.transaction_repo = transaction_repo
        self.auth_service = auth_service

    # Users

    async def list_users(self) -> list[User]:
        return await self.user_repo.get_all(limit=None)

    async def create_user(
        self, name: str, email: str, password: str, role: UserRole = UserRole.USER
    ) -> User:
        """Create a user with the same rules as registration, role chosen by the admin."""
        return await self.auth_service.create_user(name, email, password, role=role)

    async def update_user(self, user_id: UUID, data: AdminUserUpdate) -> User:
        """
        Update name, email and/or role of a user.

        Raises:
            NotFoundError: If the user does not exist
            DuplicateEmailError: If another user already holds the email
        """
        user = await self._get_user(user_id)

        changes = data.model_dump(exclude_none=True)
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            if await self.user_repo.email_exists(changes["email"], exclude_id=user_id):
                raise DuplicateEmailError()

        for key, value in changes.items():
            setattr(user, key, value)
        updated = await self.user_repo.save(user)
        logger.info("User updated", extra={"target_user_id": str(user_id)})
        return updated

    async def delete_user(self, user_id: UUID) -> None:
        """
        Delete a user and every transaction they own.

        Dependents are removed first and both deletes are committed together,
        so an interrupted cascade never leaves orphaned transactions.
        """
        user = await self._get_user(user_id)

        deleted = await self.transaction_repo.delete_all_by_user(user_id)
        await self.user_repo.remove(user)
        logger.info(
            "User deleted",
            extra={"target_user_id": str(user_id), "transactions_deleted": deleted},
        )

    # Transactions

    async def create_expense_for(self, data: AdminTransactionCreate) -> AdminTransactionResponse:
        """Create a transaction owned by ``data.user_id``."""
        owner = await self._get_user(data.user_id)

        transaction = Transaction(user_id=owner.id)
        apply_fields(transaction, data)
        created = await self.transaction_repo.create(transaction)
        return to_admin_view(created, owner)

    async def list_all_expenses(self) -> list[AdminTransactionResponse]:
        """Every transaction, newest first, with its owner's name and email."""
        rows = await self.transaction_repo.get_all_with_owner()
        return [to_admin_view(transaction, owner) for transaction, owner in rows]

    async def update_expense(
        self, transaction_id: UUID, data: AdminTransactionUpdate
    ) -> AdminTransactionResponse:
        """
        Update any transaction. The total is recomputed from amount and tax;
        a client-supplied ``total_amount`` is ignored.
        """
        transaction = await self._get_transaction(transaction_id)
        apply_fields(transaction, data)

        if data.total_amount is not None and data.total_amount != transaction.total_amount:
            logger.warning(
                "Ignoring client-supplied total_amount that differs from computed total",
                extra={"transaction_id": str(transaction_id)},
            )

        updated = await self.transaction_repo.save(transaction)
        owner = await self._get_user(updated.user_id)
        return to_admin_view(updated, owner)

    async def delete_expense(self, transaction_id: UUID) -> None:
        transaction = await self._get_transaction(transaction_id)
        await self.transaction_repo.remove(transaction)
        logger.info("Transaction deleted by admin", extra={"transaction_id": str(transaction_id)})

    async def system_stats(self) -> AdminStats:
        totals = await self.transaction_repo.get_totals_by_type()
        return AdminStats(
            total_users=await self.user_repo.count(),
            total_transactions=await self.transaction_repo.count(),
            total_income=totals.get(TransactionType.INCOME, (ZERO, 0))[0],
            total_expense=totals.get(TransactionType.EXPENSE, (ZERO, 0))[0],
        )

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(error_code="USR_001")
        return user

    async def _get_transaction(self, transaction_id: UUID) -> Transaction:
        transaction = await self.transaction_repo.get_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError()
        return transaction
