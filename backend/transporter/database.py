"""
Transporter Backend — Database Connector
==========================================

What:  Async SQLAlchemy engine handle, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   `Database` wraps an async engine with connection pooling. The entry point
       creates exactly one, connects it once (no retry), hands it to the app
       factory, and closes it after the server has stopped.
Who:   Route handlers receive sessions through `get_db_session`, which reads
       the handle from `request.app.state.database`.

Connection Pooling Strategy:
    pool_size=10:      Persistent connections for normal load
    max_overflow=5:    Temporary connections for traffic spikes
    pool_pre_ping:     Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour

    The pool is what makes a single handle safe to share between concurrent
    request handlers; each request still gets its own session.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Union

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from transporter.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model with a single metadata object, which Alembic reads
    for migrations and the test suite uses to create tables.
    """
    pass


class Database:
    """
    Process-lifetime handle on the relational store.

    Lifecycle:
        db = Database.from_settings(settings)
        await db.connect()     # single attempt; DatabaseError on failure
        ...                    # sessions handed out per request
        await db.close()       # returns all pooled connections
    """

    def __init__(self, url: Union[str, URL], **engine_options: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_options)
        # expire_on_commit=False: attributes stay readable after commit, so
        # response models can be built without another round-trip
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings) -> "Database":
        """Build a pooled handle from validated Settings."""
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            # Echo SQL only when debugging; it is very noisy otherwise
            echo=settings.log_level == "DEBUG",
        )

    @property
    def safe_url(self) -> str:
        """Connection URL with the password masked, for log lines."""
        if isinstance(self.url, URL):
            return self.url.render_as_string(hide_password=True)
        return str(self.url)

    async def connect(self) -> None:
        """
        What:  Opens a first connection and runs SELECT 1.
        Why:   Engines connect lazily; without this, a wrong host or password
               would only surface on the first request instead of at startup.
        Raises:
            DatabaseError: the store could not be reached. Not retried.
        """
        logger.info("Connecting to database at %s", self.safe_url)
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseError(
                message=f"Could not connect to database: {e}",
                context={"url": self.safe_url, "error_type": type(e).__name__},
            ) from e
        logger.info("Database connection established")

    async def ping(self) -> bool:
        """Lightweight connectivity probe used by the health route."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional session.

        1. Creates a new session from the factory
        2. Yields it to the caller
        3. On success: commits
        4. On error: rolls back and re-raises
        5. Always: closes (returns the connection to the pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def close(self) -> None:
        """
        What:  Gracefully closes all connections in the pool.
        When:  After the HTTP server has stopped.
        """
        await self.engine.dispose()
        logger.info("Database connection closed")


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The handle is looked up on the application that received the request,
    so every app instance (including test apps) brings its own database.

    Example usage in a route:
        @router.get("/drivers")
        async def list_drivers(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
