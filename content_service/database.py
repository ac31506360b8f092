"""Database connection and session management for the search index.

Async SQLAlchemy setup for SQLite (dev, tests) and PostgreSQL (prod). The
database object is created by the composition root and handed to the index
and directory implementations; nothing here is a process-wide global.

Examples:
    >>> from content_service.database import IndexDatabase
    >>> db = IndexDatabase("sqlite+aiosqlite:///:memory:")
    >>> await db.init()
    >>> async with db.session() as session:
    ...     await session.execute(select(IndexedEnvelope))

Tests:
    - tests/unit/test_index/test_sql_index.py
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def create_index_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the index database.

    Note:
        For SQLite, enables WAL mode and a busy timeout; in-memory SQLite
        shares one connection so every session sees the same tables.
        For PostgreSQL, configures connection pooling.
    """
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(url, echo=echo, **kwargs)

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

    else:
        engine = create_async_engine(
            url,
            echo=echo,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
        )

    logger.info(f"Index database engine created: {url.split('@')[-1]}")
    return engine


class IndexDatabase:
    """Engine plus session factory for the index database."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine = create_index_engine(url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session as async context manager.

        Note:
            Session is automatically committed on success, rolled back on error.
        """
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def init(self) -> None:
        """Create all index tables. Should be called once at startup."""
        from content_service.index.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Index tables created")

    async def check_connection(self) -> bool:
        """Check if the index database is accessible."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Index database health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close database connections."""
        await self.engine.dispose()
        logger.info("Index database connections closed")
