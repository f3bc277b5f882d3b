"""Storage protocol definition for paintflow."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from paintflow.core.models import Drawing


@runtime_checkable
class StorageProtocol(Protocol):
    """Protocol defining the storage interface for drawings.

    All storage backends implement this contract. Returned drawings are copies;
    mutating them never changes what is stored.
    """

    async def create_drawing(self, drawing: Drawing) -> Drawing:
        """Store a new drawing.

        Args:
            drawing: The drawing to create.

        Returns:
            The stored drawing.
        """
        ...

    async def get_drawing(self, drawing_id: UUID) -> Drawing | None:
        """Retrieve a drawing by its ID.

        Args:
            drawing_id: The unique identifier of the drawing.

        Returns:
            The drawing if found, None otherwise.
        """
        ...

    async def list_drawings(self, limit: int | None = None) -> list[Drawing]:
        """List drawings, most recently updated first.

        Args:
            limit: Maximum number of drawings to return; all when None.

        Returns:
            The drawings.
        """
        ...

    async def update_drawing(self, drawing: Drawing) -> Drawing:
        """Replace a stored drawing and bump its ``updated_at``.

        Args:
            drawing: The drawing with updated data.

        Returns:
            The updated drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        ...

    async def delete_drawing(self, drawing_id: UUID) -> bool:
        """Delete a drawing.

        Args:
            drawing_id: The unique identifier of the drawing to delete.

        Returns:
            True if the drawing was deleted, False if it did not exist.
        """
        ...
