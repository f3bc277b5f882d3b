"""Drawing service providing business logic for persisted drawings."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from paintflow.core.models import Drawing
from paintflow.exceptions import DrawingNotFoundError

if TYPE_CHECKING:
    from uuid import UUID

    from paintflow.core.models import Shape
    from paintflow.storage.base import StorageProtocol

logger = structlog.get_logger(__name__)

DEFAULT_LIST_LIMIT = 50


class DrawingService:
    """Service for managing saved drawings.

    This service wraps the storage layer with not-found handling and the
    listing policy of the drawing browser.

    Attributes:
        list_limit: Maximum number of drawings returned by ``list_drawings``.
    """

    def __init__(self, storage: StorageProtocol, list_limit: int = DEFAULT_LIST_LIMIT) -> None:
        """Initialize the drawing service.

        Args:
            storage: Storage backend implementing StorageProtocol.
            list_limit: Maximum number of drawings to list.
        """
        self._storage = storage
        self.list_limit = list_limit

    async def create_drawing(
        self,
        shapes: list[Shape],
        title: str = "Untitled",
        image_data_url: str | None = None,
    ) -> Drawing:
        """Create a new drawing.

        Args:
            shapes: The drawing's shapes in z-order.
            title: Display title; blank titles become "Untitled".
            image_data_url: PNG preview as a data URL.

        Returns:
            The newly created drawing.
        """
        drawing = Drawing(
            title=title.strip() or "Untitled",
            shapes=deepcopy(shapes),
            image_data_url=image_data_url,
        )
        created = await self._storage.create_drawing(drawing)
        logger.info("Drawing created", drawing_id=str(created.id), shapes=len(created.shapes))
        return created

    async def get_drawing(self, drawing_id: UUID) -> Drawing:
        """Get a drawing by ID.

        Args:
            drawing_id: The drawing's unique identifier.

        Returns:
            The requested drawing.

        Raises:
            DrawingNotFoundError: If the drawing doesn't exist.
        """
        drawing = await self._storage.get_drawing(drawing_id)
        if drawing is None:
            raise DrawingNotFoundError(drawing_id)
        return drawing

    async def list_drawings(self) -> list[Drawing]:
        """List saved drawings, most recently updated first."""
        return await self._storage.list_drawings(limit=self.list_limit)

    async def update_drawing(
        self,
        drawing_id: UUID,
        *,
        shapes: list[Shape] | None = None,
        title: str | None = None,
        image_data_url: str | None = None,
    ) -> Drawing:
        """Update a drawing's content.

        Fields passed as None keep their stored value.

        Args:
            drawing_id: The drawing's unique identifier.
            shapes: New shape sequence.
            title: New display title.
            image_data_url: New PNG preview.

        Returns:
            The updated drawing.

        Raises:
            DrawingNotFoundError: If the drawing doesn't exist.
        """
        drawing = await self.get_drawing(drawing_id)
        updated = replace(
            drawing,
            title=(title.strip() or "Untitled") if title is not None else drawing.title,
            shapes=deepcopy(shapes) if shapes is not None else drawing.shapes,
            image_data_url=image_data_url if image_data_url is not None else drawing.image_data_url,
            updated_at=datetime.now(UTC),
        )
        result = await self._storage.update_drawing(updated)
        logger.info("Drawing updated", drawing_id=str(drawing_id), shapes=len(result.shapes))
        return result

    async def delete_drawing(self, drawing_id: UUID) -> None:
        """Delete a drawing.

        Args:
            drawing_id: The drawing's unique identifier.

        Raises:
            DrawingNotFoundError: If the drawing doesn't exist.
        """
        if not await self._storage.delete_drawing(drawing_id):
            raise DrawingNotFoundError(drawing_id)
        logger.info("Drawing deleted", drawing_id=str(drawing_id))
