"""Base repository with generic CRUD operations."""
import asyncio
import logging
from typing import Any, Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Result
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from expense_tracker.config import settings
from expense_tracker.core.exceptions import StoreUnavailableError, ValidationError
from expense_tracker.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """Generic repository providing CRUD operations for any model.

    Every database round trip goes through ``_guard`` so that slow or
    unreachable stores surface as ``StoreUnavailableError``.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model
        self.timeout = settings.db_timeout_seconds

    async def _guard(self, awaitable) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except IntegrityError:
            raise
        except DataError:
            # Value rejected by a column type, e.g. numeric overflow.
            await self.db.rollback()
            raise ValidationError(message="Value out of range")
        except (asyncio.TimeoutError, OperationalError, DBAPIError) as exc:
            logger.error(
                "Database call failed",
                extra={"error_type": type(exc).__name__, "model": self.model.__name__},
            )
            await self.db.rollback()
            raise StoreUnavailableError(details={"error_type": type(exc).__name__})

    async def execute(self, statement: Executable) -> Result:
        return await self._guard(self.db.execute(statement))

    async def commit(self) -> None:
        await self._guard(self.db.commit())

    async def get_by_id(self, id: UUID) -> T | None:
        """Get a single record by ID."""
        result = await self.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_all(self, limit: int | None = 100) -> list[T]:
        """Get records newest first; limit=None returns all."""
        result = await self.execute(
            select(self.model).order_by(self.model.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, obj: T) -> T:
        """Create a new record."""
        self.db.add(obj)
        await self.commit()
        await self._guard(self.db.refresh(obj))
        return obj

    async def save(self, obj: T) -> T:
        """Persist changes made to an already loaded record."""
        await self.commit()
        await self._guard(self.db.refresh(obj))
        return obj

    async def remove(self, obj: T) -> None:
        """Delete an already loaded record and commit pending changes."""
        await self._guard(self.db.delete(obj))
        await self.commit()
