"""Inventory store engine and session management."""

import logging
import typing as t

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from expirycal.core.config import SETTINGS

LOGGER: logging.Logger = logging.getLogger(__name__)


class Base(DeclarativeBase):  # pylint: disable=too-few-public-methods
    """Declarative base of the inventory tables."""


ENGINE: AsyncEngine = create_async_engine(
    SETTINGS.database_url,
    echo=SETTINGS.debug,
)

# Snapshots handed to the calendar must stay readable after commit
ASYNC_SESSION_MAKER: async_sessionmaker[AsyncSession] = async_sessionmaker(
    ENGINE,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> t.AsyncGenerator[AsyncSession, None]:
    """Request-scoped session for inventory writes.

    Routers commit explicitly before scheduling a calendar refresh; any
    remaining changes are committed when the request ends and rolled
    back if it fails.

    Yields:
        AsyncSession: The session.
    """
    async with ASYNC_SESSION_MAKER() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> t.List[str]:
    """Create the inventory tables if missing.

    Returns:
        List[str]: Names of the tables managed by the store.
    """
    async with ENGINE.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    tables: t.List[str] = sorted(Base.metadata.tables)
    LOGGER.info("Inventory store ready with tables: %s", ", ".join(tables))
    return tables


async def close_db() -> None:
    """Dispose of the engine's connection pool."""
    await ENGINE.dispose()
    LOGGER.debug("Inventory store connections closed")
