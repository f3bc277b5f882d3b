"""Storage backends for paintflow."""

from __future__ import annotations

from typing import TYPE_CHECKING

from paintflow.storage.base import StorageProtocol
from paintflow.storage.memory import InMemoryStorage

if TYPE_CHECKING:
    from paintflow.storage.db import DatabaseStorage

__all__ = ["DatabaseStorage", "InMemoryStorage", "StorageProtocol"]


def __getattr__(name: str) -> object:
    """Lazy import DatabaseStorage to avoid import errors without the db extra."""
    if name == "DatabaseStorage":
        from paintflow.storage.db import DatabaseStorage

        return DatabaseStorage
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
