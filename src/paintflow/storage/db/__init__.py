"""Database storage backend for paintflow.

This module provides SQLAlchemy-based persistent storage.
Requires the `db` optional dependency: `pip install paintflow[db]`
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paintflow.storage.db.models import DrawingModel
    from paintflow.storage.db.setup import DatabaseManager
    from paintflow.storage.db.storage import DatabaseStorage, ManagedDatabaseStorage

__all__ = ["DatabaseManager", "DatabaseStorage", "DrawingModel", "ManagedDatabaseStorage"]


def __getattr__(name: str) -> object:
    """Lazy import database components to avoid import errors without the db extra."""
    if name in ("DatabaseStorage", "ManagedDatabaseStorage"):
        from paintflow.storage.db import storage

        return getattr(storage, name)
    if name == "DrawingModel":
        from paintflow.storage.db.models import DrawingModel

        return DrawingModel
    if name == "DatabaseManager":
        from paintflow.storage.db.setup import DatabaseManager

        return DatabaseManager
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
