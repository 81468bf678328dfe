"""
Student Registry — Database Pool Management
============================================

What:  Async SQLAlchemy engine (the connection pool), session factory, and the
       FastAPI dependency that hands a pooled session to each request.
Why:   The pool is the only shared resource in the service. Owning it in one
       object with an explicit lifecycle keeps it out of module globals.
How:   `Database` is built in the application lifespan, stored on
       `app.state.database`, and disposed on shutdown. Handlers receive sessions
       through `Depends(get_db_session)`.
Who:   Used by the lifespan (create/dispose), the schema initializer, the health
       check, and every student route via dependency injection.

Connection Pooling Strategy:
    pool_size:      Persistent connections for normal load
    max_overflow:   Temporary connections for traffic spikes
    pool_timeout:   Upper bound on how long a request waits for a free connection
    pool_pre_ping:  Validates connections before use (catches stale connections)
    pool_recycle:   Recycles connections every hour
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from student_registry.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models; its metadata drives schema creation."""
    pass


def _engine_options(settings: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        # SQL logging is noisy; only useful during development
        "echo": settings.log_level == "DEBUG",
    }
    # SQLite chooses its own pool class, which rejects queue sizing arguments
    if make_url(settings.database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=3600,
        )
    return options


class Database:
    """
    Owns the async engine and the session factory built on top of it.

    One instance exists per running application. It is created during
    lifespan startup and closed with `dispose()` during shutdown.
    """

    def __init__(self, settings: Settings):
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url,
            **_engine_options(settings),
        )
        # expire_on_commit=False: committed rows stay readable for response building
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Database engine created for %s", self.engine.url.render_as_string(hide_password=True))

    async def ping(self) -> None:
        """Runs SELECT 1 through the pool; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Closes every pooled connection. Called once during application shutdown."""
        await self.engine.dispose()
        logger.info("Database connections closed")


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a pooled database session per request.

    How it works:
        1. Takes the Database owned by the running application
        2. Opens a session (a connection is checked out on first statement)
        3. Yields it to the route handler
        4. On error: rolls back so the connection returns to the pool clean
        5. Always: closes the session, returning the connection to the pool

    Writes are committed by StudentService itself so that a failed commit is
    reported through the same error path as a failed statement.

    Example usage in a route:
        @router.get("/students")
        async def list_students(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
