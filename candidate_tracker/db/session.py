"""
Database engine and session management.

The store connection is a process-scoped resource: a ``Database`` is created
by the application factory, connected in the FastAPI lifespan before the
first request and disposed on shutdown. Endpoints receive sessions through
``get_db``, which reads the ``Database`` from ``app.state``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from candidate_tracker.db.base import Base

logger = logging.getLogger(__name__)


class DatabaseNotConnected(RuntimeError):
    """Raised when a session is requested before ``connect()``."""


class Database:
    """Owns the async engine and session factory for one process."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseNotConnected("Database.connect() must be awaited before use")
        return self._engine

    async def connect(self) -> None:
        """Create the engine and session factory. Idempotent."""
        if self._engine is not None:
            return

        self._engine = create_async_engine(
            self.url,
            echo=self.echo,  # When DEBUG=True, prints SQL queries to console
            pool_pre_ping=True,
        )
        self._session_maker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Keeps data accessible after commit
        )
        logger.info("Database engine created for %s", self._engine.url.render_as_string(hide_password=True))

    async def create_schema(self) -> None:
        """Create missing tables (CREATE TABLE IF NOT EXISTS semantics)."""
        from candidate_tracker import models  # noqa: F401  registers tables

        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
        logger.info("Database schema initialized")

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session context: commits on success, rolls back on error."""
        if self._session_maker is None:
            raise DatabaseNotConnected("Database.connect() must be awaited before use")

        async with self._session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session for the current request.

    Usage in a FastAPI endpoint:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
