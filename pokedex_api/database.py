"""SQLAlchemy async database configuration for the Pokedex API.

Exposes the declarative base shared by all ORM models plus small factories
for the async engine and session maker. The engine is created by the
application lifespan from :class:`~pokedex_api.config.Settings` rather than
at import time, so tests can point it at a throwaway database.
"""

from __future__ import annotations

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool


class Base(AsyncAttrs, declarative_base()):
    """Abstract base class for all ORM models."""

    __abstract__ = True


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for ``database_url``.

    In-memory SQLite needs a single shared connection, otherwise every
    checkout would see an empty database.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables known to :data:`Base.metadata` if missing."""
    # Register the mapped classes before touching the metadata.
    from pokedex_api import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
