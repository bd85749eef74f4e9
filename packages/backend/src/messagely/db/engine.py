"""Async SQLAlchemy engine and session factory.

SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via
FastAPI. Services never open connections themselves; they are handed a
session.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from messagely.config import settings
from messagely.db.models import Base


def _engine_options(database_url: str) -> dict:
    """Pool sizing for server databases; SQLite manages its own pool."""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}
    # Connection pool: min 5, max 20 connections.
    return {"pool_size": 5, "max_overflow": 15}


# echo=True in dev to see SQL queries.
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)

# Session factory — each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create all tables directly. For development and tests; use Alembic otherwise."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
