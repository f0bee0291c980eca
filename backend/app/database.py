"""
DogAdopt Backend — Database Handle & Session Management
=========================================================

What:  `Database` owns the async SQLAlchemy engine and session factory.
How:   The application factory constructs one handle and stores it on
       `app.state.database`; tests construct their own against in-memory
       SQLite. Repositories receive a per-request session from the
       `get_db_session` dependency, which commits on success and rolls back
       on error. There is no module-level engine.

Connection Pooling (server databases only):
    pool_size / max_overflow / pool_pre_ping come from settings,
    pool_recycle=3600 recycles connections hourly. SQLite URLs skip these
    options because aiosqlite does not pool.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the models, `Database.create_all`
    and Alembic's autogenerate.
    """
    pass


class Database:
    """
    Explicitly constructed handle to the record store.

    Usage:
        db = Database("sqlite+aiosqlite:///./dev.db")
        async with db.session() as session:
            ...
        await db.dispose()
    """

    def __init__(self, url: str, echo: bool = False, **engine_options: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_options)
        # expire_on_commit=False: ORM objects stay readable after the
        # request's commit while the response is serialized
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle with pool options appropriate to the configured URL."""
        options: Dict[str, Any] = {}
        if not settings.database_url.startswith("sqlite"):
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(
            settings.database_url,
            echo=settings.log_level == "DEBUG",
            **options,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Unit of work: yields a session, commits on success, rolls back on error.

        The session is always closed, returning its connection to the pool.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create every table registered on `Base.metadata` (idempotent)."""
        # Model modules register their tables on import
        from app import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def ping(self) -> bool:
        """Lightweight connectivity probe used by the health check."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Gracefully closes all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Reads the `Database` handle the app factory placed on `app.state`.
    Any exception raised by the handler rolls the transaction back and is
    re-raised for the global error handlers.
    """
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Application was created without a Database handle")
    async with database.session() as session:
        yield session
