"""FastAPI dependency injection for authentication and database."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.core.exceptions import ForbiddenError
from expense_tracker.core.security import authenticate
from expense_tracker.db.session import get_db
from expense_tracker.repositories.transaction import TransactionRepository
from expense_tracker.repositories.user import UserRepository
from expense_tracker.schemas.auth import Identity
from expense_tracker.services.admin import AdminService
from expense_tracker.services.auth import AuthService
from expense_tracker.services.transaction import TransactionService

# Bearer token scheme; missing headers are reported by authenticate() as 401.
security = HTTPBearer(auto_error=False)


async def get_user_repository(
    db: AsyncSession = Depends(get_db),
) -> UserRepository:
    """
    Get user repository instance.

    Args:
        db: Database session

    Returns:
        UserRepository instance
    """
    return UserRepository(db)


async def get_transaction_repository(
    db: AsyncSession = Depends(get_db),
) -> TransactionRepository:
    return TransactionRepository(db)


async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        user_repo: User repository

    Returns:
        AuthService instance
    """
    return AuthService(user_repo)


async def get_transaction_service(
    transaction_repo: TransactionRepository = Depends(get_transaction_repository),
    user_repo: UserRepository = Depends(get_user_repository),
) -> TransactionService:
    return TransactionService(transaction_repo, user_repo)


async def get_admin_service(
    user_repo: UserRepository = Depends(get_user_repository),
    transaction_repo: TransactionRepository = Depends(get_transaction_repository),
    auth_service: AuthService = Depends(get_auth_service),
) -> AdminService:
    return AdminService(user_repo, transaction_repo, auth_service)


async def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Identity:
    """
    Extract and validate the caller identity from the bearer token.

    Runs before any data access; it does not touch the database.

    Raises:
        UnauthenticatedError: If token is missing, invalid or expired
    """
    token = credentials.credentials if credentials else None
    identity = authenticate(token)
    request.state.identity = identity
    return identity


async def require_admin(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """
    Authorization guard applied to the whole admin router.

    Raises:
        ForbiddenError: If the caller is not an admin
    """
    if not identity.is_admin:
        raise ForbiddenError()
    return identity
