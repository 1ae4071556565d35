# backend/inventory_api/core/database.py
"""Database engine and session management.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for development and
tests. The driver is picked from DATABASE_URL.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
from inventory_api.core.config import settings
import logging

logger = logging.getLogger(__name__)


def async_database_url(db_url: str) -> str:
    """Point a plain postgresql:// or sqlite:// URL at its async driver.

    URLs that already name asyncpg or aiosqlite are returned unchanged.
    """
    if db_url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + db_url[len("postgresql://"):]
    if db_url.startswith("sqlite://"):
        return "sqlite+aiosqlite://" + db_url[len("sqlite://"):]
    if db_url.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        return db_url
    raise ValueError(f"Unsupported database URL scheme: {db_url}")


def _create_engine():
    """Create the async engine matching DATABASE_URL."""
    db_url = async_database_url(settings.effective_database_url)

    if db_url.startswith("postgresql+asyncpg://"):
        logger.info(f"Using PostgreSQL database: {db_url.split('@')[-1]}")
        return create_async_engine(
            db_url,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            echo=False,
        )

    logger.info(f"Using SQLite database: {db_url}")
    return create_async_engine(
        db_url,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )


engine = _create_engine()
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session


@asynccontextmanager
async def transactional(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block as one unit of work on ``session``.

    Commits when the block finishes, rolls back and re-raises on any
    exception, so no partial writes from the block survive.
    """
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        raise
