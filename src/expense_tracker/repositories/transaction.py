"""Transaction repository with user-scoped queries and aggregation."""
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.models.transaction import Transaction, TransactionType
from expense_tracker.models.user import User
from expense_tracker.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model.

    The ``*_by_user`` methods put the owner filter in the SQL statement, so
    another user's rows are never loaded.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def get_by_user(self, user_id: UUID, transaction_id: UUID) -> Transaction | None:
        """Get transaction only if it belongs to the specified user."""
        result = await self.execute(
            select(Transaction).where(
                Transaction.id == transaction_id, Transaction.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def get_all_by_user(
        self, user_id: UUID, skip: int = 0, limit: int = 10
    ) -> list[Transaction]:
        """Get a page of a user's transactions, newest first."""
        result = await self.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_user(self, user_id: UUID) -> int:
        result = await self.execute(
            select(func.count()).select_from(Transaction).where(Transaction.user_id == user_id)
        )
        return result.scalar_one()

    async def count(self) -> int:
        result = await self.execute(select(func.count()).select_from(Transaction))
        return result.scalar_one()

    async def get_totals_by_type(
        self, user_id: UUID | None = None
    ) -> dict[TransactionType, tuple[Decimal, int]]:
        """
        Aggregate total_amount and row count per transaction type.
        Returns dict of {type: (sum_of_total_amount, count)}; pass no
        user_id to aggregate over every user.
        """
        query = select(
            Transaction.type,
            func.sum(Transaction.total_amount).label("total"),
            func.count().label("records"),
        ).group_by(Transaction.type)
        if user_id is not None:
            query = query.where(Transaction.user_id == user_id)

        result = await self.execute(query)
        return {
            TransactionType(row.type): (Decimal(str(row.total or 0)), int(row.records))
            for row in result
        }

    async def get_all_with_owner(self) -> list[tuple[Transaction, User]]:
        """Get every transaction with its owner, newest first."""
        result = await self.execute(
            select(Transaction, User)
            .join(User, Transaction.user_id == User.id)
            .order_by(Transaction.created_at.desc())
        )
        return [(row.Transaction, row.User) for row in result]

    async def delete_all_by_user(self, user_id: UUID) -> int:
        """Delete every transaction owned by a user.

        Does not commit; the caller commits together with the owner delete.
        """
        result = await self.execute(delete(Transaction).where(Transaction.user_id == user_id))
        return result.rowcount or 0
