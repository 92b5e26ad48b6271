"""Integration tests for repository layer."""
import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import DataError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.core.exceptions import StoreUnavailableError, ValidationError
from expense_tracker.models.transaction import TaxType, Transaction, TransactionType
from expense_tracker.models.user import User
from expense_tracker.repositories.transaction import TransactionRepository
from expense_tracker.repositories.user import UserRepository


def make_transaction(user: User, amount: str, type: TransactionType) -> Transaction:
    return Transaction(
        user_id=user.id,
        description="Entry",
        amount=Decimal(amount),
        type=type,
        tax_type=TaxType.FLAT,
        tax_amount=Decimal("0"),
        total_amount=Decimal(amount),
    )


# UserRepository Tests
class TestUserRepository:
    """Test suite for UserRepository."""

    async def test_create_user_defaults(self, db_session: AsyncSession):
        repo = UserRepository(db_session)
        created = await repo.create(
            User(name="New User", email="newuser@example.com", password_hash="hashed")
        )

        assert created.id is not None
        assert created.role.value == "user"
        assert created.created_at is not None

    async def test_get_by_email_is_case_insensitive(self, db_session: AsyncSession, test_user: User):
        repo = UserRepository(db_session)
        found = await repo.get_by_email("TestUser@EXAMPLE.com")

        assert found is not None
        assert found.id == test_user.id

    async def test_email_exists(self, db_session: AsyncSession, test_user: User):
        repo = UserRepository(db_session)

        assert await repo.email_exists(test_user.email) is True
        assert await repo.email_exists("nonexistent@example.com") is False
        assert await repo.email_exists(test_user.email, exclude_id=test_user.id) is False

    async def test_count(self, db_session: AsyncSession, test_user: User, other_user: User):
        assert await UserRepository(db_session).count() == 2


# TransactionRepository Tests
class TestTransactionRepository:
    """Test suite for TransactionRepository."""

    async def test_get_by_user_enforces_owner(
        self, db_session: AsyncSession, test_user: User, other_user: User
    ):
        repo = TransactionRepository(db_session)
        transaction = await repo.create(make_transaction(test_user, "10", TransactionType.EXPENSE))

        assert await repo.get_by_user(test_user.id, transaction.id) is not None
        assert await repo.get_by_user(other_user.id, transaction.id) is None

    async def test_get_all_by_user_paginates(self, db_session: AsyncSession, test_user: User):
        repo = TransactionRepository(db_session)
        for _ in range(7):
            await repo.create(make_transaction(test_user, "1", TransactionType.EXPENSE))

        assert len(await repo.get_all_by_user(test_user.id, skip=0, limit=5)) == 5
        assert len(await repo.get_all_by_user(test_user.id, skip=5, limit=5)) == 2
        assert await repo.count_by_user(test_user.id) == 7

    async def test_totals_by_type(self, db_session: AsyncSession, test_user: User, other_user: User):
        repo = TransactionRepository(db_session)
        await repo.create(make_transaction(test_user, "100", TransactionType.INCOME))
        await repo.create(make_transaction(test_user, "25.50", TransactionType.EXPENSE))
        await repo.create(make_transaction(test_user, "4.50", TransactionType.EXPENSE))
        await repo.create(make_transaction(other_user, "1000", TransactionType.INCOME))

        own = await repo.get_totals_by_type(test_user.id)
        everyone = await repo.get_totals_by_type()

        assert own[TransactionType.INCOME] == (Decimal("100"), 1)
        assert own[TransactionType.EXPENSE] == (Decimal("30"), 2)
        assert everyone[TransactionType.INCOME] == (Decimal("1100"), 2)

    async def test_get_all_with_owner(self, db_session: AsyncSession, test_user: User):
        repo = TransactionRepository(db_session)
        await repo.create(make_transaction(test_user, "5", TransactionType.EXPENSE))

        rows = await repo.get_all_with_owner()

        assert len(rows) == 1
        transaction, owner = rows[0]
        assert owner.id == transaction.user_id == test_user.id

    async def test_delete_all_by_user(self, db_session: AsyncSession, test_user: User, other_user: User):
        repo = TransactionRepository(db_session)
        for _ in range(3):
            await repo.create(make_transaction(test_user, "5", TransactionType.EXPENSE))
        await repo.create(make_transaction(other_user, "5", TransactionType.EXPENSE))

        deleted = await repo.delete_all_by_user(test_user.id)
        await repo.commit()

        assert deleted == 3
        assert await repo.count_by_user(test_user.id) == 0
        assert await repo.count_by_user(other_user.id) == 1

    async def test_owner_foreign_key_is_enforced(self, db_session: AsyncSession):
        repo = TransactionRepository(db_session)
        orphan = Transaction(
            user_id=uuid4(),
            description="Orphan",
            amount=Decimal("1"),
            type=TransactionType.EXPENSE,
            tax_type=TaxType.FLAT,
            tax_amount=Decimal("0"),
            total_amount=Decimal("1"),
        )

        with pytest.raises(IntegrityError):
            await repo.create(orphan)


class TestStoreUnavailable:
    """Driver failures map to domain errors instead of leaking out."""

    async def test_operational_error(self):
        db = AsyncMock(spec=AsyncSession)
        db.execute = AsyncMock(
            side_effect=OperationalError("SELECT 1", {}, Exception("connection refused"))
        )
        repo = UserRepository(db)

        with pytest.raises(StoreUnavailableError):
            await repo.get_by_email("someone@example.com")
        db.rollback.assert_awaited()

    async def test_timeout(self):
        async def slow_execute(*args, **kwargs):
            await asyncio.sleep(1)

        db = AsyncMock(spec=AsyncSession)
        db.execute = AsyncMock(side_effect=slow_execute)
        repo = TransactionRepository(db)
        repo.timeout = 0.01

        with pytest.raises(StoreUnavailableError) as exc_info:
            await repo.count()
        assert exc_info.value.http_status == 500

    async def test_value_out_of_column_range_is_a_validation_error(self):
        db = AsyncMock(spec=AsyncSession)
        db.commit = AsyncMock(
            side_effect=DataError("INSERT", {}, Exception("numeric field overflow"))
        )
        repo = TransactionRepository(db)

        with pytest.raises(ValidationError) as exc_info:
            await repo.commit()
        assert exc_info.value.http_status == 400
        db.rollback.assert_awaited()
