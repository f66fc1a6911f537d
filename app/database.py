"""Async SQLAlchemy database setup."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def normalize_async_url(database_url: str) -> str:
    """Coerce sync driver URLs into the async variants this project uses."""
    url = (database_url or "").strip()
    if url.startswith("sqlite:///") and "aiosqlite" not in url:
        return url.replace("sqlite:///", "sqlite+aiosqlite:///")
    if url.startswith("postgresql://") and "+asyncpg" not in url:
        return url.replace("postgresql://", "postgresql+asyncpg://")
    return url


class Database:
    """Async database connection manager.

    Media records are written from request handlers only, so a single engine
    with short transactional sessions is all that is needed.
    """

    def __init__(self, database_url: str):
        """Initialize database with connection URL.

        Args:
            database_url: SQLAlchemy database URL. Sync sqlite/postgres URLs
                are converted to their async drivers.
        """
        database_url = normalize_async_url(database_url)
        self._is_sqlite = database_url.startswith("sqlite")

        connect_args = {"timeout": 30} if self._is_sqlite else {}
        self._engine: AsyncEngine = create_async_engine(
            database_url,
            echo=False,
            connect_args=connect_args,
        )
        self._async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine instance."""
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Transactional scope: commit on success, roll back on error.

        Yields:
            AsyncSession: An async SQLAlchemy session.
        """
        async with self._async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def init_db(self) -> None:
        """Create all tables from ORM models.

        For production, use Alembic migrations instead.
        """
        # Populate Base.metadata before create_all.
        from app.models import orm  # noqa: F401

        async with self._engine.begin() as conn:
            if self._is_sqlite:
                await conn.execute(text("PRAGMA foreign_keys=ON"))
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Close database connections and dispose of the engine."""
        await self._engine.dispose()
