"""
Postboard Backend: Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   create_engine_from_settings() builds the engine once per application;
       get_db_session() hands each request its own session that commits on
       success and rolls back on error.
Who:   create_app() builds the engine; routes receive sessions via Depends().

The engine and session factory are stored on app.state by create_app() rather
than at module level, so tests can build isolated applications against
throwaway databases.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import DateTime, func
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.functions import FunctionElement

from postboard.config import Settings

# sqlite's CURRENT_TIMESTAMP stops at whole seconds; %f adds milliseconds
SQLITE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%f"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


# ── Server Clock ──────────────────────────────────────────────────────────
class server_now(FunctionElement):
    """
    The database's current UTC time, usable as a server_default and in UPDATE.

    Renders CURRENT_TIMESTAMP everywhere except sqlite, where it renders
    strftime('%Y-%m-%d %H:%M:%f', 'now') so that two writes a few
    milliseconds apart get different timestamps.
    """

    type = DateTime(timezone=True)
    name = "server_now"
    inherit_cache = True


@compiles(server_now)
def _compile_server_now(element, compiler, **kw):
    return "CURRENT_TIMESTAMP"


@compiles(server_now, "sqlite")
def _compile_server_now_sqlite(element, compiler, **kw):
    return compiler.process(func.strftime(SQLITE_TIMESTAMP_FORMAT, "now"), **kw)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured DATABASE_URL.

    Pool sizing is only passed to server backends (PostgreSQL): sqlite
    in-memory databases use a StaticPool, which rejects pool_size.
    """
    options = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: response models are built after the commit
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables registered on Base.metadata."""
    # Import models so they register with Base before create_all runs
    from postboard.models import Comment, Post  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory on app.state
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns connection to pool)
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
