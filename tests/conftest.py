import os
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

ENV_TEST_PATH = Path(__file__).parents[1] / ".env.test"


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key, value)


_load_env_file(ENV_TEST_PATH)

# Settings are read at import time, so these must be set before the app is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from expense_tracker.core.security import create_access_token, hash_password  # noqa: E402
from expense_tracker.db.session import enable_sqlite_foreign_keys, get_db  # noqa: E402
from expense_tracker.main import app  # noqa: E402
from expense_tracker.models.base import BaseModel  # noqa: E402
from expense_tracker.models.user import User, UserRole  # noqa: E402
from expense_tracker.repositories.user import UserRepository  # noqa: E402

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture(scope="function")
async def test_engine():
    """Fresh database per test; tables are created and dropped around it."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False} if TEST_DATABASE_URL.startswith("sqlite") else {},
    )
    if engine.dialect.name == "sqlite":
        enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Provide test database session."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()


async def _make_user(
    db_session: AsyncSession, email: str, name: str, role: UserRole = UserRole.USER
) -> User:
    repo = UserRepository(db_session)
    return await repo.create(
        User(
            name=name,
            email=email,
            password_hash=hash_password("password123"),
            role=role,
        )
    )


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Regular user; password is ``password123``."""
    return await _make_user(db_session, "testuser@example.com", "Test User")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Second regular user for ownership isolation tests."""
    return await _make_user(db_session, "other@example.com", "Other User")


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Admin user; password is ``password123``."""
    return await _make_user(db_session, "admin@example.com", "System Admin", UserRole.ADMIN)


def bearer(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def auth_headers(test_user: User) -> dict[str, str]:
    """Provide authentication headers with valid JWT token."""
    return bearer(test_user)


@pytest.fixture
async def other_headers(other_user: User) -> dict[str, str]:
    return bearer(other_user)


@pytest.fixture
async def admin_headers(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture
async def client(db_session: AsyncSession):
    """Provide test client with database override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
