"""SQLAlchemy models for paintflow database storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from paintflow.core.serialization import shapes_from_list, shapes_to_list

if TYPE_CHECKING:
    from paintflow.core.models import Drawing


class DrawingModel(UUIDAuditBase):
    """SQLAlchemy model for Drawing entities.

    The shape sequence is stored as one JSON document in the same layout the
    REST API uses, so a row round-trips losslessly.

    Attributes:
        id: UUID primary key (from UUIDAuditBase).
        title: Display title.
        data: JSON object ``{"shapes": [...]}``.
        image_data_url: PNG preview as a data URL.
        created_at: Creation timestamp (from UUIDAuditBase).
        updated_at: Last update timestamp (from UUIDAuditBase).
    """

    __tablename__ = "drawings"

    title: Mapped[str] = mapped_column(String(255), default="Untitled")
    data: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    image_data_url: Mapped[str | None] = mapped_column(Text, nullable=True)


def drawing_to_model(drawing: Drawing) -> DrawingModel:
    """Convert a domain Drawing to a DrawingModel.

    Args:
        drawing: Domain Drawing dataclass instance.

    Returns:
        DrawingModel instance ready for database insertion.
    """
    return DrawingModel(
        id=drawing.id,
        title=drawing.title,
        data={"shapes": shapes_to_list(drawing.shapes)},
        image_data_url=drawing.image_data_url,
        created_at=drawing.created_at,
        updated_at=drawing.updated_at,
    )


def drawing_from_model(model: DrawingModel) -> Drawing:
    """Convert a DrawingModel to a domain Drawing.

    Args:
        model: SQLAlchemy DrawingModel instance.

    Returns:
        Domain Drawing dataclass instance.
    """
    from paintflow.core.models import Drawing as DrawingRecord

    return DrawingRecord(
        id=model.id,
        title=model.title,
        shapes=shapes_from_list((model.data or {}).get("shapes")),
        image_data_url=model.image_data_url,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
