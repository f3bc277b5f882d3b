"""Persistence collaborators used by the drawing session.

The editor only needs to list, load and save drawings. Two adapters implement
that contract: one calls the service layer in-process, the other talks to the
REST API over HTTP.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from uuid import UUID

import httpx
import structlog

from paintflow.core.serialization import shapes_from_list, shapes_to_list
from paintflow.exceptions import DrawingNotFoundError, InvalidShapeError, PersistenceNetworkError

if TYPE_CHECKING:
    from paintflow.core.models import Shape
    from paintflow.services.drawing import DrawingService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DrawingSummary:
    """One entry of the saved-drawings list."""

    id: UUID
    title: str
    updated_at: datetime


@dataclass
class DrawingRecord:
    """A loaded drawing: identity, title and shapes."""

    id: UUID
    title: str
    shapes: list[Shape] = field(default_factory=list)


@runtime_checkable
class PersistenceProtocol(Protocol):
    """Protocol for the editor's drawing persistence."""

    async def load(self, drawing_id: UUID) -> DrawingRecord:
        """Load a drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        ...

    async def save(
        self,
        drawing_id: UUID | None,
        title: str,
        shapes: list[Shape],
        preview_png: bytes | None = None,
    ) -> UUID:
        """Create the drawing when ``drawing_id`` is None, else update it, and return its id.

        Raises:
            DrawingNotFoundError: If an update targets a missing drawing.
        """
        ...

    async def list(self) -> list[DrawingSummary]:
        """List saved drawings, most recently updated first."""
        ...


def png_data_url(png: bytes | None) -> str | None:
    """Encode PNG bytes as a ``data:`` URL."""
    if png is None:
        return None
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


class ServicePersistence:
    """Persistence adapter calling a :class:`DrawingService` in the same process."""

    def __init__(self, service: DrawingService) -> None:
        """Initialize the adapter.

        Args:
            service: The drawing service to delegate to.
        """
        self._service = service

    async def load(self, drawing_id: UUID) -> DrawingRecord:
        drawing = await self._service.get_drawing(drawing_id)
        return DrawingRecord(id=drawing.id, title=drawing.title, shapes=drawing.shapes)

    async def save(
        self,
        drawing_id: UUID | None,
        title: str,
        shapes: list[Shape],
        preview_png: bytes | None = None,
    ) -> UUID:
        image = png_data_url(preview_png)
        if drawing_id is None:
            drawing = await self._service.create_drawing(shapes, title=title, image_data_url=image)
        else:
            drawing = await self._service.update_drawing(drawing_id, shapes=shapes, title=title, image_data_url=image)
        return drawing.id

    async def list(self) -> list[DrawingSummary]:
        drawings = await self._service.list_drawings()
        return [DrawingSummary(id=d.id, title=d.title, updated_at=d.updated_at) for d in drawings]


class HttpPersistence:
    """Persistence adapter for the paintflow REST API.

    Attributes:
        base_url: API root, e.g. ``http://localhost:8000/api``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the adapter.

        Args:
            base_url: API root URL.
            client: Optional pre-configured client; one is created otherwise.
            timeout: Request timeout in seconds for the created client.
        """
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(self, method: str, path: str, drawing_id: UUID | None = None, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Persistence request failed", method=method, url=url, error=str(exc))
            msg = f"{method} {url} failed: {exc}"
            raise PersistenceNetworkError(msg) from exc

        if response.status_code == 404 and drawing_id is not None:
            raise DrawingNotFoundError(drawing_id)
        if response.status_code >= 400:
            logger.warning("Persistence request rejected", method=method, url=url, status=response.status_code)
            msg = f"{method} {url} returned {response.status_code}"
            raise PersistenceNetworkError(msg)
        return response.json()

    async def load(self, drawing_id: UUID) -> DrawingRecord:
        body = await self._request("GET", f"/drawings/{drawing_id}", drawing_id)
        try:
            shapes = shapes_from_list((body.get("data") or {}).get("shapes"))
        except InvalidShapeError as exc:
            msg = f"Drawing {drawing_id} holds invalid shapes: {exc}"
            raise PersistenceNetworkError(msg) from exc
        return DrawingRecord(id=UUID(str(body["_id"])), title=body.get("title") or "Untitled", shapes=shapes)

    async def save(
        self,
        drawing_id: UUID | None,
        title: str,
        shapes: list[Shape],
        preview_png: bytes | None = None,
    ) -> UUID:
        payload: dict[str, Any] = {"title": title or "Untitled", "data": {"shapes": shapes_to_list(shapes)}}
        image = png_data_url(preview_png)
        if image is not None:
            payload["imageDataUrl"] = image
        if drawing_id is None:
            body = await self._request("POST", "/drawings", json=payload)
        else:
            body = await self._request("PUT", f"/drawings/{drawing_id}", drawing_id, json=payload)
        return UUID(str(body["_id"]))

    async def list(self) -> list[DrawingSummary]:
        body = await self._request("GET", "/drawings")
        return [
            DrawingSummary(
                id=UUID(str(item["_id"])),
                title=item.get("title") or "Untitled",
                updated_at=datetime.fromisoformat(item["updatedAt"]),
            )
            for item in body
        ]
