"""Custom exceptions for paintflow."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class PaintflowError(Exception):
    """Base exception class for all paintflow errors."""


class ShapeIndexError(PaintflowError, IndexError):
    """Raised when a shape index is outside the current document.

    Attributes:
        index: The offending index.
        count: Number of shapes in the document at the time.
    """

    def __init__(self, index: int, count: int) -> None:
        """Initialize the exception with the index and document size.

        Args:
            index: The offending index.
            count: Number of shapes in the document.
        """
        self.index = index
        self.count = count
        super().__init__(f"Shape index {index} out of range for document of {count} shapes")


class DrawingNotFoundError(PaintflowError):
    """Raised when a drawing with the specified ID cannot be found.

    Attributes:
        drawing_id: The ID of the drawing that was not found.
    """

    def __init__(self, drawing_id: UUID | str) -> None:
        """Initialize the exception with the drawing ID.

        Args:
            drawing_id: The ID of the drawing that was not found.
        """
        self.drawing_id = drawing_id
        super().__init__(f"Drawing with ID {drawing_id} not found")


class InvalidShapeError(PaintflowError):
    """Raised when shape data is invalid or malformed."""

    def __init__(self, message: str) -> None:
        """Initialize the exception with a custom message.

        Args:
            message: Description of why the shape is invalid.
        """
        super().__init__(message)


class SerializationError(PaintflowError):
    """Raised when a serialized shape sequence cannot be parsed."""


class PersistenceNetworkError(PaintflowError):
    """Raised when the persistence backend cannot be reached or answers with a server error."""
