"""
Database Connection Module

Wraps the SQLAlchemy async engine in a ``RecordStore`` handle. One store is
built at application startup, kept on ``app.state``, and handed to every
request through the ``get_db`` dependency.
"""

import logging
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# Base class for all our models
class Base(DeclarativeBase):
    pass


class RecordStore:
    """
    Durable storage for users, menu items and orders.

    Attributes:
        url: SQLAlchemy async connection URL
        engine: The async engine (connection pool)
        session_maker: Factory for request-scoped sessions
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs = {"echo": echo}
        if make_url(url).get_backend_name() != "sqlite":
            engine_kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)

        self.engine = create_async_engine(url, **engine_kwargs)

        # Session factory - creates new database sessions
        self.session_maker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False  # Objects remain accessible after commit
        )

    def session(self) -> AsyncSession:
        """Open a new session; use as ``async with store.session() as s``."""
        return self.session_maker()

    async def init(self) -> None:
        """
        Create all tables in database.
        Called once at application startup.
        """
        # Register the mapped classes on Base.metadata
        from foodorder import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Record store tables ready")

    async def ping(self) -> bool:
        """Run a trivial query to confirm the store is reachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency injection for FastAPI routes.
    Yields a database session from the application's store and ensures cleanup.
    """
    store: RecordStore = request.app.state.store
    async with store.session() as session:
        try:
            yield session
        finally:
            await session.close()
