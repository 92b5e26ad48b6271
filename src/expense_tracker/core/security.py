"""Security utilities for password hashing and JWT token management."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from expense_tracker.config import settings
from expense_tracker.core.exceptions import UnauthenticatedError
from expense_tracker.models.user import UserRole
from expense_tracker.schemas.auth import Identity

# Password hashing with Argon2
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Password to verify
        hashed_password: Stored password hash

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def _encode(user_id: UUID, role: str, token_type: str, expires_delta: timedelta) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {
        "sub": str(user_id),
        "role": role,
        "exp": expire,
        "type": token_type,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(
    user_id: UUID, role: str, expires_delta: timedelta | None = None
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: User ID to encode in token
        role: User role to encode in token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_expire_minutes)
    return _encode(user_id, role, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(user_id: UUID, role: str) -> str:
    """Create a JWT refresh token."""
    return _encode(
        user_id,
        role,
        REFRESH_TOKEN_TYPE,
        timedelta(days=settings.jwt_refresh_expire_days),
    )


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        JWTError: If token is invalid or expired
    """
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def authenticate(token: str | None, token_type: str = ACCESS_TOKEN_TYPE) -> Identity:
    """
    Derive the caller identity from a bearer token.

    Args:
        token: JWT token string (may be None when the header is missing)
        token_type: Expected value of the ``type`` claim

    Returns:
        Identity carrying the user id and role

    Raises:
        UnauthenticatedError: If the token is missing, malformed, expired,
            signed with another key, of the wrong type or missing claims
    """
    if not token:
        raise UnauthenticatedError(message="Authentication token is missing")

    try:
        payload = decode_token(token)
    except JWTError:
        raise UnauthenticatedError()

    if payload.get("type") != token_type:
        raise UnauthenticatedError()

    user_id_str = payload.get("sub")
    role = payload.get("role")
    if user_id_str is None or role not in {r.value for r in UserRole}:
        raise UnauthenticatedError()

    try:
        user_id = UUID(user_id_str)
    except (TypeError, ValueError):
        raise UnauthenticatedError()

    return Identity(user_id=user_id, role=UserRole(role))
