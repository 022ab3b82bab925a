"""Async PostgreSQL engine and the shared session factory.

Repositories open one short-lived session per call from
``async_session_factory``; nothing holds a session across requests.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from salon.config import settings

engine: AsyncEngine = create_async_engine(
    settings.db.database_url,
    echo=settings.log_level == "DEBUG",
    pool_size=10,
    max_overflow=20,
    pool_pre_ping=True,
    pool_recycle=3600,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Check connectivity; outside production also create missing tables."""
    async with engine.begin() as conn:
        # Registers every table on Base.metadata
        import salon.models  # noqa: F401
        from salon.models.base import Base

        if not settings.is_production:
            await conn.run_sync(Base.metadata.create_all)


@contextlib.asynccontextmanager
async def db_lifespan() -> AsyncGenerator[None, None]:
    """Open the pool for the app's lifetime and dispose it on shutdown."""
    await init_db()
    try:
        yield
    finally:
        await engine.dispose()
