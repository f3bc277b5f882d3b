"""Database engine and session handling for drawing storage."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from paintflow.storage.db.models import DrawingModel

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./paintflow.db"

_ASYNC_DRIVERS = {
    "sqlite:///": "sqlite+aiosqlite:///",
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
}


def normalize_database_url(url: str | None = None) -> str:
    """Resolve a database URL to its async driver form.

    Reads ``DATABASE_URL`` when ``url`` is not given and falls back to a local
    SQLite file, e.g. ``sqlite:///./a.db`` becomes ``sqlite+aiosqlite:///./a.db``.
    """
    url = url or os.environ.get("DATABASE_URL", "")
    if not url:
        return DEFAULT_DATABASE_URL
    for prefix, async_prefix in _ASYNC_DRIVERS.items():
        if url.startswith(prefix):
            return async_prefix + url[len(prefix) :]
    return url


class DatabaseManager:
    """Owns the engine of the drawings database.

    ``init`` creates the engine and the ``drawing`` table; ``session`` hands out
    one committed-or-rolled-back session per unit of work.

    Attributes:
        url: The normalized database URL.
    """

    def __init__(self, url: str | None = None, *, echo: bool | None = None) -> None:
        """Initialize the manager without connecting.

        Args:
            url: Database URL. If None, uses the environment or the SQLite default.
            echo: Log SQL statements; defaults to the ``DATABASE_ECHO`` variable.
        """
        self.url = normalize_database_url(url)
        self._echo = os.environ.get("DATABASE_ECHO", "").lower() == "true" if echo is None else echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    async def init(self) -> None:
        """Create the engine and the drawings table."""
        connect_args = {"check_same_thread": False} if self.url.startswith("sqlite") else {}
        self._engine = create_async_engine(self.url, echo=self._echo, connect_args=connect_args)
        self._session_factory = async_sessionmaker(self._engine, class_=AsyncSession, expire_on_commit=False)
        async with self._engine.begin() as conn:
            await conn.run_sync(DrawingModel.metadata.create_all)
        logger.info("Database initialized", url=self._engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        """Dispose of the engine; the manager can be initialized again afterwards."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on error.

        Raises:
            RuntimeError: If ``init`` has not been awaited.
        """
        if self._session_factory is None:
            msg = "Database not initialized. Call init() first."
            raise RuntimeError(msg)

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Whether the database answers a trivial query."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError, RuntimeError) as exc:
            logger.warning("Database ping failed", error=str(exc))
            return False
        return True
