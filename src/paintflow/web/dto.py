"""Data Transfer Objects (DTOs) for the paintflow API.

The wire format keeps the original client's camelCase keys: drawings are
identified by ``_id`` and carry ``imageDataUrl``, ``createdAt`` and
``updatedAt``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.dto import DataclassDTO, DTOConfig

from paintflow.core.serialization import shapes_from_list, shapes_to_list
from paintflow.exceptions import InvalidShapeError

if TYPE_CHECKING:
    from paintflow.core.models import Drawing, Shape

DATA_URL_PREFIX = "data:image/"


@dataclass
class DrawingDataDTO:
    """The ``data`` object of a drawing request.

    Attributes:
        shapes: Persisted shape dictionaries, decoded by the serialization layer.
    """

    shapes: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class DrawingPayloadDTO:
    """DTO for creating or replacing a drawing.

    Attributes:
        data: The shape container. A body without it is rejected with
            ``Missing data`` rather than a generic validation error.
        title: Display title, "Untitled" when absent or blank.
        image_data_url: PNG preview as a data URL (``imageDataUrl`` on the wire).
    """

    data: DrawingDataDTO | None = None
    title: str | None = None
    image_data_url: str | None = None


class DrawingPayloadReadDTO(DataclassDTO[DrawingPayloadDTO]):
    """Reads request bodies written with the client's camelCase keys."""

    config = DTOConfig(rename_strategy="camel")


@dataclass
class DecodedDrawing:
    """A request body with its shapes decoded."""

    title: str
    shapes: list[Shape]
    image_data_url: str | None = None


def decode_payload(payload: DrawingPayloadDTO) -> DecodedDrawing:
    """Decode the shapes of a request body and apply the title and preview rules.

    Raises:
        InvalidShapeError: If ``data`` is missing, the shapes are invalid or
            the preview is not an image data URL.
    """
    if payload.data is None:
        msg = "Missing data"
        raise InvalidShapeError(msg)

    image = payload.image_data_url
    if image is not None and not image.startswith(DATA_URL_PREFIX):
        msg = "imageDataUrl must be an image data URL"
        raise InvalidShapeError(msg)

    title = (payload.title or "").strip() or "Untitled"
    return DecodedDrawing(title=title, shapes=shapes_from_list(payload.data.shapes), image_data_url=image)


def drawing_to_summary(drawing: Drawing) -> dict[str, Any]:
    """Convert a drawing to its list entry (no shapes, no preview)."""
    return {
        "_id": str(drawing.id),
        "title": drawing.title,
        "createdAt": drawing.created_at.isoformat(),
        "updatedAt": drawing.updated_at.isoformat(),
    }


def drawing_to_response(drawing: Drawing) -> dict[str, Any]:
    """Convert a drawing to the full response body."""
    return {
        **drawing_to_summary(drawing),
        "data": {"shapes": shapes_to_list(drawing.shapes)},
        "imageDataUrl": drawing.image_data_url,
    }
