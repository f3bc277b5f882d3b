"""In-memory storage implementation for paintflow."""

from __future__ import annotations

import asyncio
import copy
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from paintflow.exceptions import DrawingNotFoundError

if TYPE_CHECKING:
    from uuid import UUID

    from paintflow.core.models import Drawing


def _copy(drawing: Drawing) -> Drawing:
    return replace(drawing, shapes=copy.deepcopy(drawing.shapes))


class InMemoryStorage:
    """Task-safe in-memory storage implementation.

    Drawings live in a dictionary guarded by an asyncio lock. Every read and
    write goes through a deep copy of the shape list, so callers never share
    state with the store.

    Note:
        All data is lost when the application stops. This storage is suitable
        for development, testing, or ephemeral sessions.

    Attributes:
        _drawings: Internal dictionary mapping drawing IDs to drawings.
        _lock: Asyncio lock for task-safe operations.
    """

    def __init__(self) -> None:
        """Initialize the in-memory storage with an empty drawing dictionary."""
        self._drawings: dict[UUID, Drawing] = {}
        self._lock = asyncio.Lock()

    async def create_drawing(self, drawing: Drawing) -> Drawing:
        """Create a new drawing in storage.

        Args:
            drawing: The drawing to create.

        Returns:
            A copy of the created drawing.
        """
        async with self._lock:
            self._drawings[drawing.id] = _copy(drawing)
            return _copy(drawing)

    async def get_drawing(self, drawing_id: UUID) -> Drawing | None:
        """Retrieve a drawing by its ID.

        Args:
            drawing_id: The unique identifier of the drawing.

        Returns:
            A copy of the drawing if found, None otherwise.
        """
        async with self._lock:
            drawing = self._drawings.get(drawing_id)
            return _copy(drawing) if drawing else None

    async def list_drawings(self, limit: int | None = None) -> list[Drawing]:
        """List drawings, most recently updated first.

        Args:
            limit: Maximum number of drawings to return.

        Returns:
            Drawing copies ordered by ``updated_at`` descending.
        """
        async with self._lock:
            drawings = sorted(self._drawings.values(), key=lambda d: d.updated_at, reverse=True)
            if limit is not None:
                drawings = drawings[:limit]
            return [_copy(d) for d in drawings]

    async def update_drawing(self, drawing: Drawing) -> Drawing:
        """Update an existing drawing in storage.

        Args:
            drawing: The drawing with updated data.

        Returns:
            A copy of the updated drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        async with self._lock:
            if drawing.id not in self._drawings:
                raise DrawingNotFoundError(drawing.id)
            updated = replace(_copy(drawing), updated_at=datetime.now(UTC))
            self._drawings[drawing.id] = updated
            return _copy(updated)

    async def delete_drawing(self, drawing_id: UUID) -> bool:
        """Delete a drawing from storage.

        Args:
            drawing_id: The unique identifier of the drawing to delete.

        Returns:
            True if the drawing was deleted, False if it did not exist.
        """
        async with self._lock:
            return self._drawings.pop(drawing_id, None) is not None
