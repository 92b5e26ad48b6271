"""User repository for user-specific queries."""
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.models.user import User
from expense_tracker.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Repository for User model with authentication queries."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        """Find user by email address (used for login)."""
        result = await self.execute(select(User).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str, exclude_id: UUID | None = None) -> bool:
        """Check if email is registered, optionally ignoring one user."""
        query = select(User.id).where(User.email == normalize_email(email))
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.execute(query)
        return result.first() is not None

    async def count(self) -> int:
        result = await self.execute(select(func.count()).select_from(User))
        return result.scalar_one()
