"""Unit tests for AuthService."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    UnauthenticatedError,
    ValidationError,
)
from expense_tracker.core.security import authenticate, create_refresh_token, verify_password
from expense_tracker.models.user import User, UserRole
from expense_tracker.repositories.user import UserRepository
from expense_tracker.services.auth import AuthService


@pytest.fixture
def service(db_session: AsyncSession) -> AuthService:
    return AuthService(UserRepository(db_session))


class TestRegister:
    async def test_register_stores_hash_and_default_role(self, service):
        user = await service.register("New User", "New.User@Example.com", "secret123")

        assert user.role == UserRole.USER
        assert user.email == "new.user@example.com"
        assert user.password_hash != "secret123"
        assert verify_password("secret123", user.password_hash)

    async def test_register_duplicate_email_is_case_insensitive(self, service, test_user: User):
        with pytest.raises(DuplicateEmailError):
            await service.register("Dup", "TestUser@Example.com", "secret123")

    @pytest.mark.parametrize(
        "name,email,password",
        [
            ("", "valid@example.com", "secret123"),
            ("   ", "valid@example.com", "secret123"),
            ("Name", "not-an-email", "secret123"),
            ("Name", "valid@example.com", "short"),
        ],
    )
    async def test_register_validation(self, service, name, email, password):
        with pytest.raises(ValidationError):
            await service.register(name, email, password)


class TestLogin:
    async def test_login_returns_tokens_and_user(self, service, test_user: User):
        result = await service.login(test_user.email, "password123")

        assert result.user.id == test_user.id
        assert result.token_type == "bearer"
        identity = authenticate(result.access_token)
        assert identity.user_id == test_user.id
        assert identity.role == UserRole.USER

    async def test_login_email_is_case_insensitive(self, service, test_user: User):
        result = await service.login("TESTUSER@example.com", "password123")
        assert result.user.email == test_user.email

    async def test_wrong_password_and_unknown_email_look_the_same(self, service, test_user: User):
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await service.login(test_user.email, "wrong-password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await service.login("nobody@example.com", "password123")

        assert wrong_password.value.message == unknown_email.value.message


class TestRefresh:
    async def test_refresh_picks_up_role_change(self, service, db_session, test_user: User):
        refresh_token = create_refresh_token(test_user.id, test_user.role.value)
        test_user.role = UserRole.ADMIN
        await db_session.commit()

        tokens = await service.refresh_tokens(refresh_token)

        assert authenticate(tokens.access_token).role == UserRole.ADMIN

    async def test_refresh_rejects_access_token(self, service, test_user: User):
        result = await service.login(test_user.email, "password123")

        with pytest.raises(UnauthenticatedError):
            await service.refresh_tokens(result.access_token)


class TestEnsureAdmin:
    async def test_creates_admin_once(self, service):
        created = await service.ensure_admin("Root", "root@example.com", "rootpass1")
        again = await service.ensure_admin("Root", "root@example.com", "rootpass1")

        assert created is not None
        assert created.role == UserRole.ADMIN
        assert again is None
