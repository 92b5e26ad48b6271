from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from expense_tracker.config import settings


def _connect_args(database_url: str, timeout: float) -> dict:
    """Driver-level timeouts so an unreachable database fails fast."""
    if database_url.startswith("postgresql+asyncpg"):
        return {"timeout": timeout, "command_timeout": timeout}
    if database_url.startswith("sqlite+aiosqlite"):
        return {"timeout": timeout}
    return {}


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless each connection turns them on."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Do not log SQL statement parameters by default (can contain sensitive data).
#
# Even if someone accidentally sets DB_ECHO=true in non-dev, keep it off to avoid
# logging queries/params in shared environments.
async_engine = create_async_engine(
    settings.database_url,
    echo=(settings.db_echo if settings.app_env.lower() == "development" else False),
    connect_args=_connect_args(settings.database_url, settings.db_timeout_seconds),
)
if async_engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(async_engine)

AsyncSessionLocal = async_sessionmaker(
    async_engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def init_db(engine: AsyncEngine, create_tables: bool) -> None:
    """Verify the database is reachable and optionally create the schema.

    Raises whatever the driver raises; startup should abort on failure.
    """
    from expense_tracker.models.base import BaseModel

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        if create_tables:
            await conn.run_sync(BaseModel.metadata.create_all)
