"""
Database Session Management

Manages the SQLAlchemy async engine for PostgreSQL (asyncpg) or SQLite (aiosqlite, tests).

- ``Database`` is built once in the application lifespan and stored on ``app.state``.
- ``get_db`` is the FastAPI dependency that yields one AsyncSession per request.
- Services that need their own transactions (webhook reconciliation, user deletion)
  open them with ``database.session()``.

Usage (request handlers):
    from app.database.session import get_db
    async def handler(db: AsyncSession = Depends(get_db)):
        result = await db.execute(select(User).where(...))

Usage (own transaction):
    async with database.session() as session:
        session.add(obj)
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator
import logging

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def make_async_url(url: str) -> str:
    """Map a sync URL (the one Alembic uses) to its async driver form."""
    if url.startswith("postgresql+asyncpg://") or url.startswith("sqlite+aiosqlite://"):
        return url
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


class Database:
    """Owns the async engine and session factory for the process lifetime."""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = make_async_url(url)
        self.engine: AsyncEngine = create_async_engine(
            self.url,
            pool_pre_ping=True,
            echo=echo,
            **engine_kwargs,
        )
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings) -> "Database":
        kwargs = {}
        if not settings.async_database_url.startswith("sqlite"):
            kwargs = {"pool_size": 10, "max_overflow": 20}
        return cls(settings.async_database_url, **kwargs)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Transactional scope: commit on success, rollback on error."""
        session = self.sessionmaker()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_all(self) -> None:
        """Create tables (use Alembic in production)."""
        import app.database.models  # noqa: F401 - registers all models with Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Async FastAPI dependency: yields AsyncSession."""
    async with get_database(request).session() as session:
        yield session
