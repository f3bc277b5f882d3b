"""Database storage implementation for paintflow."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select

from paintflow.core.serialization import shapes_to_list
from paintflow.exceptions import DrawingNotFoundError
from paintflow.storage.db.models import DrawingModel, drawing_from_model, drawing_to_model

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from paintflow.core.models import Drawing
    from paintflow.storage.db.setup import DatabaseManager


class DatabaseStorage:
    """Async database storage implementation using SQLAlchemy.

    Persists drawings to a relational database through an async session. It
    implements the StorageProtocol interface.

    Attributes:
        _session: SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the database storage with an async session.

        Args:
            session: SQLAlchemy async session for database operations.
        """
        self._session = session

    async def _get_model(self, drawing_id: UUID) -> DrawingModel | None:
        result = await self._session.execute(select(DrawingModel).where(DrawingModel.id == drawing_id))
        return result.scalar_one_or_none()

    async def create_drawing(self, drawing: Drawing) -> Drawing:
        """Create a new drawing in the database.

        Args:
            drawing: The drawing to create.

        Returns:
            The created drawing with database-assigned timestamps.
        """
        model = drawing_to_model(drawing)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return drawing_from_model(model)

    async def get_drawing(self, drawing_id: UUID) -> Drawing | None:
        """Retrieve a drawing by its ID.

        Args:
            drawing_id: The unique identifier of the drawing.

        Returns:
            The drawing if found, None otherwise.
        """
        model = await self._get_model(drawing_id)
        return drawing_from_model(model) if model is not None else None

    async def list_drawings(self, limit: int | None = None) -> list[Drawing]:
        """List drawings, most recently updated first.

        Args:
            limit: Maximum number of drawings to return.

        Returns:
            The drawings.
        """
        stmt = select(DrawingModel).order_by(DrawingModel.updated_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [drawing_from_model(m) for m in result.scalars().all()]

    async def update_drawing(self, drawing: Drawing) -> Drawing:
        """Update an existing drawing in the database.

        Args:
            drawing: The drawing with updated data.

        Returns:
            The updated drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        model = await self._get_model(drawing.id)
        if model is None:
            raise DrawingNotFoundError(drawing.id)

        model.title = drawing.title
        model.data = {"shapes": shapes_to_list(drawing.shapes)}
        model.image_data_url = drawing.image_data_url
        model.updated_at = datetime.now(UTC)

        await self._session.flush()
        await self._session.refresh(model)
        return drawing_from_model(model)

    async def delete_drawing(self, drawing_id: UUID) -> bool:
        """Delete a drawing from the database.

        Args:
            drawing_id: The unique identifier of the drawing to delete.

        Returns:
            True if the drawing was deleted, False if it did not exist.
        """
        model = await self._get_model(drawing_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True


class ManagedDatabaseStorage:
    """StorageProtocol adapter opening one committed session per operation.

    Attributes:
        _manager: The database manager providing sessions.
    """

    def __init__(self, manager: DatabaseManager) -> None:
        """Initialize with an initialized DatabaseManager."""
        self._manager = manager

    async def create_drawing(self, drawing: Drawing) -> Drawing:
        """Create a drawing in its own transaction."""
        async with self._manager.session() as session:
            return await DatabaseStorage(session).create_drawing(drawing)

    async def get_drawing(self, drawing_id: UUID) -> Drawing | None:
        """Retrieve a drawing in its own transaction."""
        async with self._manager.session() as session:
            return await DatabaseStorage(session).get_drawing(drawing_id)

    async def list_drawings(self, limit: int | None = None) -> list[Drawing]:
        """List drawings in their own transaction."""
        async with self._manager.session() as session:
            return await DatabaseStorage(session).list_drawings(limit)

    async def update_drawing(self, drawing: Drawing) -> Drawing:
        """Update a drawing in its own transaction."""
        async with self._manager.session() as session:
            return await DatabaseStorage(session).update_drawing(drawing)

    async def delete_drawing(self, drawing_id: UUID) -> bool:
        """Delete a drawing in its own transaction."""
        async with self._manager.session() as session:
            return await DatabaseStorage(session).delete_drawing(drawing_id)
