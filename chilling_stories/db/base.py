"""
Database base configuration

Declarative Base plus the Database gateway that owns the engine and the
session factory.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker

# Declarative base
Base = declarative_base()


def get_database_url(url: str) -> str:
    """
    Normalize a database URL for the async engine

    postgresql:// -> postgresql+asyncpg://
    """
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Persistence gateway

    Created once at startup and handed to every service. Each `session()`
    checks a connection out of the pool, runs one transaction and always gives
    the connection back.
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
        pool_timeout: Optional[int] = None,
    ):
        url = get_database_url(url)
        engine_kwargs = {"echo": echo}

        # SQLite connections are not pooled by size
        if not url.startswith("sqlite"):
            if pool_size is not None:
                engine_kwargs["pool_size"] = pool_size
            if max_overflow is not None:
                engine_kwargs["max_overflow"] = max_overflow
            if pool_timeout is not None:
                engine_kwargs["pool_timeout"] = pool_timeout

        self.engine = create_async_engine(url, **engine_kwargs)

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Transaction scope

        Commits when the block exits normally, rolls back and re-raises on
        any exception.

        Usage:
        ```python
        async with database.session() as session:
            story = await StoryDAO.get_by_id(session, story_id)
        ```
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                logger.warning(f"⚠️  Transaction rolled back: {type(e).__name__}: {e}")
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create every table known to Base"""
        # Importing the models registers them on Base.metadata
        from chilling_stories.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        from chilling_stories.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> bool:
        """Health probe"""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        """Close every pooled connection"""
        await self.engine.dispose()


def create_database(settings) -> Database:
    """Build the Database gateway from application settings"""
    return Database(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
    )
