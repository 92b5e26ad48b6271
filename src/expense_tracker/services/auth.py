"""Authentication service with business logic."""

import logging
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from expense_tracker.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    UnauthenticatedError,
    ValidationError,
)
from expense_tracker.core.security import (
    REFRESH_TOKEN_TYPE,
    authenticate,
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)
from expense_tracker.models.user import User, UserRole
from expense_tracker.repositories.user import UserRepository, normalize_email
from expense_tracker.schemas.auth import LoginResult, TokenPair, UserRegister, UserResponse

logger = logging.getLogger(__name__)


def validation_message(exc: PydanticValidationError) -> str:
    """Flatten pydantic errors into ``field: message | field: message``."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(x) for x in error.get("loc", []))
        parts.append(f"{field}: {error.get('msg', 'Invalid value')}" if field else error.get("msg", ""))
    return " | ".join(parts)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, user_repo: UserRepository):
        """
        Initialize authentication service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    async def create_user(
        self, name: str, email: str, password: str, role: UserRole = UserRole.USER
    ) -> User:
        """
        Validate and store a new user with a hashed password.

        Shared by self-registration and admin-created accounts.

        Raises:
            ValidationError: If name, email or password are malformed
            DuplicateEmailError: If email already exists
        """
        try:
            data = UserRegister(name=name, email=email, password=password)
        except PydanticValidationError as exc:
            raise ValidationError(message=validation_message(exc))

        email = normalize_email(data.email)
        if await self.user_repo.email_exists(email):
            raise DuplicateEmailError()

        user = User(
            name=data.name,
            email=email,
            password_hash=hash_password(data.password),
            role=role,
        )
        created_user = await self.user_repo.create(user)
        logger.info("User created", extra={"user_id": str(created_user.id), "role": role.value})
        return created_user

    async def register(self, name: str, email: str, password: str) -> User:
        """
        Register a new user with the default ``user`` role.

        Args:
            name: User's display name
            email: User email address
            password: Plain text password

        Returns:
            Created user object

        Raises:
            ValidationError: If input is malformed
            DuplicateEmailError: If email already exists
        """
        return await self.create_user(name, email, password, role=UserRole.USER)

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate user and return JWT tokens with the public user view.

        Raises:
            InvalidCredentialsError: If email is unknown or password wrong
        """
        user = await self.user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        tokens = self._issue_tokens(user)
        return LoginResult(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=UserResponse.model_validate(user),
        )

    async def refresh_tokens(self, refresh_token: str) -> TokenPair:
        """
        Generate new token pair using refresh token.

        The user is re-read so a role change made by an admin is picked up.

        Raises:
            UnauthenticatedError: If refresh token is invalid or the user is gone
        """
        identity = authenticate(refresh_token, token_type=REFRESH_TOKEN_TYPE)

        user = await self.user_repo.get_by_id(identity.user_id)
        if user is None:
            raise UnauthenticatedError(message="User not found")

        return self._issue_tokens(user)

    async def get_user(self, user_id: UUID) -> User:
        """Get user for an authenticated request."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UnauthenticatedError(message="User not found")
        return user

    async def ensure_admin(self, name: str, email: str, password: str) -> User | None:
        """Create the bootstrap admin account unless the email is taken.

        Returns the created user, or None when an account already exists.
        """
        if await self.user_repo.email_exists(email):
            logger.info("Admin user already exists")
            return None
        return await self.create_user(name, email, password, role=UserRole.ADMIN)

    @staticmethod
    def _issue_tokens(user: User) -> TokenPair:
        return TokenPair(
            access_token=create_access_token(user.id, user.role.value),
            refresh_token=create_refresh_token(user.id, user.role.value),
        )
