import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from expense_tracker.api.middleware.error_handler import (
    handle_expense_tracker_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from expense_tracker.api.middleware.logging import RequestLoggingMiddleware, configure_logging
from expense_tracker.api.v1 import router as v1_router
from expense_tracker.api.v1.health import router as health_router
from expense_tracker.config import settings
from expense_tracker.core.exceptions import ExpenseTrackerError
from expense_tracker.db.session import AsyncSessionLocal, async_engine, init_db
from expense_tracker.repositories.user import UserRepository
from expense_tracker.services.auth import AuthService

logger = logging.getLogger(__name__)


async def bootstrap_admin() -> None:
    """Create the configured admin account if it does not exist yet."""
    if not (settings.bootstrap_admin_email and settings.bootstrap_admin_password):
        return
    async with AsyncSessionLocal() as session:
        await AuthService(UserRepository(session)).ensure_admin(
            name=settings.bootstrap_admin_name,
            email=settings.bootstrap_admin_email,
            password=settings.bootstrap_admin_password,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: an unreachable database aborts startup instead of serving errors
    await init_db(async_engine, create_tables=settings.db_create_tables)
    await bootstrap_admin()
    logger.info("Application started")
    yield
    # Shutdown
    await async_engine.dispose()


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Expense Tracker API",
        description="Personal income/expense tracking with an admin dashboard",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(ExpenseTrackerError, handle_expense_tracker_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    # Register routers
    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run("expense_tracker.main:app", host=settings.host, port=settings.port)
