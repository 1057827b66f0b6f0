"""
MindEase Backend — Database Engine and Store Wiring
=====================================================

What:  Builds the async SQLAlchemy engine, connection pool, session factory,
       and the SQLAlchemyStore that services use.
How:   Database is constructed explicitly (by create_app() or a test) and
       attached to app.state; routes reach the store through the get_store
       dependency. There is no module-level engine.
When:  Once per application instance; disposed in the lifespan shutdown.

Connection Pooling Strategy:
    pool_size=10:      small fixed set of persistent connections
    max_overflow=0:    no burst connections beyond the pool
    pool_timeout=30:   callers queue this long for a free connection
    pool_pre_ping:     validates connections before use
    pool_recycle=3600: recycles connections every hour

    SQLite URLs skip the sizing arguments (SQLAlchemy picks a suitable pool).
"""

import logging
from typing import Any, Dict

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mindease.config import Settings
from mindease.models import Base
from mindease.storage.base import DataStore
from mindease.storage.sql_store import SQLAlchemyStore

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the engine and hands out the DataStore built on top of it.

    Attributes:
        engine:          AsyncEngine with its connection pool
        session_factory: async_sessionmaker bound to engine
        store:           SQLAlchemyStore using session_factory
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: int = 30,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_pre_ping=pool_pre_ping,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)

        # expire_on_commit=False: records are read after the transaction closes
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.store: DataStore = SQLAlchemyStore(self.session_factory, self.engine.dialect.name)
        logger.info("Database configured (dialect=%s)", self.engine.dialect.name)

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "Database":
        return cls(
            app_settings.database_url,
            pool_size=app_settings.db_pool_size,
            max_overflow=app_settings.db_max_overflow,
            pool_timeout=app_settings.db_pool_timeout,
            pool_pre_ping=app_settings.db_pool_pre_ping,
            echo=app_settings.log_level == "DEBUG",
        )

    async def create_all(self) -> None:
        """Create any missing tables (development and tests; production uses Alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


# ── Store Dependency ──────────────────────────────────────────────────────
def get_store(request: Request) -> DataStore:
    """
    FastAPI dependency returning the application's DataStore.

    Tests override it with app.dependency_overrides[get_store] or by passing
    their own Database to create_app().
    """
    return request.app.state.database.store
