"""
Flatmatch — Persistence plumbing.

One asyncpg-backed engine per process, a session factory bound to it, and the
``get_db`` dependency that wraps each request in a single transaction.
Pool sizing comes from ``DB_POOL_SIZE``, ``DB_MAX_OVERFLOW`` and
``DB_POOL_RECYCLE_SECONDS``.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from flatmatch.config import Settings, get_settings

logger = logging.getLogger(__name__)

ASYNC_DRIVER = "postgresql+asyncpg"

# Schemes accepted in DATABASE_URL and rewritten to the asyncpg dialect.
_SYNC_SCHEMES = ("postgres://", "postgresql://", "postgresql+psycopg2://")


class Base(DeclarativeBase):
    """Declarative base for the ``users`` and ``quiz_results`` tables."""


def normalise_database_url(url: str) -> str:
    """Point a plain PostgreSQL URL at the asyncpg driver.

    ``postgres://`` and ``postgresql://`` URLs, as handed out by most hosting
    providers, are rewritten; anything else is returned unchanged.
    """
    for scheme in _SYNC_SCHEMES:
        if url.startswith(scheme):
            return f"{ASYNC_DRIVER}://" + url[len(scheme):]
    return url


def build_engine(settings: Settings) -> AsyncEngine:
    url = normalise_database_url(settings.DATABASE_URL)
    created = create_async_engine(
        url,
        echo=settings.LOG_LEVEL.upper() == "DEBUG",
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE_SECONDS,
        pool_pre_ping=True,
    )
    logger.info(
        "Engine ready for %s (pool %d+%d)",
        created.url.render_as_string(hide_password=True),
        settings.DB_POOL_SIZE,
        settings.DB_MAX_OVERFLOW,
    )
    return created


engine = build_engine(get_settings())

async_session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def ping_database() -> None:
    """Open a pooled connection and run a trivial query; raises on failure."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: committed on success, rolled back on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
