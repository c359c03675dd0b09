# src/authgateway/app/db/session.py
from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

_log = logging.getLogger("authgateway.db")


# ------------------------------------------------------------
# Base class for ORM models
# ------------------------------------------------------------
class Base(DeclarativeBase):
    """Base for all ORM models."""
    pass


# ------------------------------------------------------------
# Engine + session factory
# ------------------------------------------------------------
def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine. In-memory SQLite gets a StaticPool so every
    session sees the same database.
    """
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )


# ------------------------------------------------------------
# Schema + connectivity
# ------------------------------------------------------------
async def init_models(engine: AsyncEngine) -> None:
    """
    Creates all tables defined in the ORM models.
    Safe to run multiple times (CREATE IF NOT EXISTS semantics).
    """
    from . import models  # noqa: F401  (register mappers on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_connection(engine: AsyncEngine) -> int:
    """Round-trip SELECT 1; raises when the database is unreachable."""
    async with engine.connect() as conn:
        result = await conn.execute(text("SELECT 1"))
        value = result.scalar_one()
    _log.info("database connection OK")
    return value
