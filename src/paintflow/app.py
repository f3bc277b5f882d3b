"""Main Litestar application for paintflow.

This module provides the application factory and a configured app instance
for running the paintflow backend standalone.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from litestar import Litestar
from litestar.openapi import OpenAPIConfig

from paintflow import __version__
from paintflow.core.error_handling import get_exception_handlers
from paintflow.core.logging import RequestLoggingMiddleware, configure_logging
from paintflow.plugin import PaintflowConfig, PaintflowPlugin

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from paintflow.storage.base import StorageProtocol
    from paintflow.storage.db.setup import DatabaseManager

logger = structlog.get_logger(__name__)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("true", "1", "yes")


def _database_lifespan(db_manager: DatabaseManager) -> Callable[[Litestar], AsyncGenerator[None, None]]:
    @asynccontextmanager
    async def lifespan(app: Litestar) -> AsyncGenerator[None, None]:
        """Initialize the database on startup and close connections on shutdown."""
        await db_manager.init()
        app.state.db_manager = db_manager
        try:
            yield
        finally:
            await db_manager.close()

    return lifespan


def create_app(
    *,
    debug: bool = False,
    json_logs: bool = False,
    database_url: str | None = None,
    storage: StorageProtocol | None = None,
) -> Litestar:
    """Create and configure the Litestar application.

    Drawings are kept in memory unless ``database_url`` (or the
    ``DATABASE_URL`` environment variable) names a database.

    Args:
        debug: Whether to enable debug mode.
        json_logs: Whether to output logs as JSON (for production).
        database_url: SQLAlchemy URL of the drawings database.
        storage: Explicit storage backend; takes precedence over any database URL.

    Returns:
        Configured Litestar application instance.
    """
    configure_logging(debug=debug, json_logs=json_logs)

    lifespan = []
    database_url = database_url or os.environ.get("DATABASE_URL")
    if storage is None and database_url:
        from paintflow.storage.db.setup import DatabaseManager
        from paintflow.storage.db.storage import ManagedDatabaseStorage

        db_manager = DatabaseManager(database_url)
        storage = ManagedDatabaseStorage(db_manager)
        lifespan.append(_database_lifespan(db_manager))
        logger.info("Using database storage")

    return Litestar(
        plugins=[PaintflowPlugin(PaintflowConfig(storage=storage))],
        debug=debug,
        lifespan=lifespan,
        middleware=[RequestLoggingMiddleware],
        exception_handlers=get_exception_handlers(),
        openapi_config=OpenAPIConfig(
            title="paintflow API",
            version=__version__,
            description="Persistence and export API for paintflow drawings",
            path="/schema",
            use_handler_docstrings=True,
        ),
    )


# Default application instance for uvicorn
# Use PAINTFLOW_DEBUG=true for dev mode and PAINTFLOW_JSON_LOGS=true in production
app = create_app(debug=_env_flag("PAINTFLOW_DEBUG"), json_logs=_env_flag("PAINTFLOW_JSON_LOGS"))
