"""Litestar controllers for paintflow API endpoints."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, ClassVar
from uuid import UUID

from litestar import Controller, Request, delete, get, post, put
from litestar.response import Response
from litestar.status_codes import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from paintflow.services.drawing import DrawingService
from paintflow.services.export import ExportService
from paintflow.web.dto import (
    DrawingPayloadDTO,
    DrawingPayloadReadDTO,
    decode_payload,
    drawing_to_response,
    drawing_to_summary,
)

if TYPE_CHECKING:
    from paintflow.core.models import Drawing

_UNSAFE_FILENAME = re.compile(r"[^\w\- ]+")


def _filename(drawing: Drawing, extension: str) -> str:
    stem = _UNSAFE_FILENAME.sub("", drawing.title).strip() or "drawing"
    return f"{stem}.{extension}"


class DrawingController(Controller):
    """Controller for saved drawings.

    Create, read, update and delete drawings stored as JSON shape lists with
    a PNG preview.
    """

    path = "/drawings"
    tags: ClassVar[list[str]] = ["Drawings"]

    @get("/")
    async def list_drawings(self, drawing_service: DrawingService) -> list[dict[str, Any]]:
        """List saved drawings, most recently updated first.

        Args:
            drawing_service: The drawing service instance (injected).

        Returns:
            Drawing summaries without shapes or preview.
        """
        drawings = await drawing_service.list_drawings()
        return [drawing_to_summary(d) for d in drawings]

    @get("/{drawing_id:uuid}")
    async def get_drawing(self, drawing_id: UUID, drawing_service: DrawingService) -> dict[str, Any]:
        """Get a drawing with its shapes and preview.

        Args:
            drawing_id: The unique identifier of the drawing.
            drawing_service: The drawing service instance (injected).

        Returns:
            The full drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        drawing = await drawing_service.get_drawing(drawing_id)
        return drawing_to_response(drawing)

    @post("/", dto=DrawingPayloadReadDTO, return_dto=None)
    async def create_drawing(self, data: DrawingPayloadDTO, drawing_service: DrawingService) -> dict[str, Any]:
        """Create a drawing.

        Args:
            data: Request body with ``title``, ``data.shapes`` and ``imageDataUrl``.
            drawing_service: The drawing service instance (injected).

        Returns:
            The created drawing.

        Raises:
            InvalidShapeError: If ``data`` is missing or holds invalid shapes.
        """
        payload = decode_payload(data)
        drawing = await drawing_service.create_drawing(
            payload.shapes,
            title=payload.title,
            image_data_url=payload.image_data_url,
        )
        return drawing_to_response(drawing)

    @put("/{drawing_id:uuid}", dto=DrawingPayloadReadDTO, return_dto=None)
    async def update_drawing(
        self,
        drawing_id: UUID,
        data: DrawingPayloadDTO,
        drawing_service: DrawingService,
    ) -> dict[str, Any]:
        """Replace a drawing's title, shapes and preview.

        Args:
            drawing_id: The unique identifier of the drawing.
            data: Request body with ``title``, ``data.shapes`` and ``imageDataUrl``.
            drawing_service: The drawing service instance (injected).

        Returns:
            The updated drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
            InvalidShapeError: If ``data`` is missing or holds invalid shapes.
        """
        payload = decode_payload(data)
        drawing = await drawing_service.update_drawing(
            drawing_id,
            shapes=payload.shapes,
            title=payload.title,
            image_data_url=payload.image_data_url,
        )
        return drawing_to_response(drawing)

    @delete("/{drawing_id:uuid}", status_code=HTTP_200_OK)
    async def delete_drawing(self, drawing_id: UUID, drawing_service: DrawingService) -> dict[str, bool]:
        """Delete a drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        await drawing_service.delete_drawing(drawing_id)
        return {"ok": True}

    @get("/{drawing_id:uuid}/export/json")
    async def export_json(
        self,
        drawing_id: UUID,
        drawing_service: DrawingService,
        export_service: ExportService,
    ) -> Response[str]:
        """Export a drawing as a JSON file."""
        drawing = await drawing_service.get_drawing(drawing_id)
        return Response(
            content=export_service.to_json(drawing),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{_filename(drawing, "json")}"'},
        )

    @get("/{drawing_id:uuid}/export/svg")
    async def export_svg(
        self,
        drawing_id: UUID,
        drawing_service: DrawingService,
        export_service: ExportService,
    ) -> Response[str]:
        """Export a drawing as SVG.

        Args:
            drawing_id: The unique identifier of the drawing.
            drawing_service: The drawing service instance (injected).
            export_service: The export service instance (injected).

        Returns:
            SVG content as a response with appropriate content type.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        drawing = await drawing_service.get_drawing(drawing_id)
        return Response(
            content=export_service.to_svg(drawing.shapes, title=drawing.title),
            media_type="image/svg+xml",
            headers={"Content-Disposition": f'inline; filename="{_filename(drawing, "svg")}"'},
        )

    @get("/{drawing_id:uuid}/export/png")
    async def export_png(
        self,
        drawing_id: UUID,
        drawing_service: DrawingService,
        export_service: ExportService,
    ) -> Response[bytes]:
        """Export a drawing as PNG on a white background.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        drawing = await drawing_service.get_drawing(drawing_id)
        return Response(
            content=export_service.to_png(drawing.shapes),
            media_type="image/png",
            headers={"Content-Disposition": f'inline; filename="{_filename(drawing, "png")}"'},
        )

    @get("/{drawing_id:uuid}/export/pdf")
    async def export_pdf(
        self,
        drawing_id: UUID,
        drawing_service: DrawingService,
        export_service: ExportService,
    ) -> Response[bytes]:
        """Export a drawing as a one-page A4 landscape PDF.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        drawing = await drawing_service.get_drawing(drawing_id)
        return Response(
            content=export_service.to_pdf(drawing.shapes),
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{_filename(drawing, "pdf")}"'},
        )

    @get("/{drawing_id:uuid}/export/doc")
    async def export_doc(
        self,
        drawing_id: UUID,
        drawing_service: DrawingService,
        export_service: ExportService,
    ) -> Response[str]:
        """Export a drawing as a Word-compatible HTML document.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        drawing = await drawing_service.get_drawing(drawing_id)
        return Response(
            content=export_service.to_doc(drawing.shapes, title=drawing.title),
            media_type="application/msword",
            headers={"Content-Disposition": f'attachment; filename="{_filename(drawing, "doc")}"'},
        )


class HealthController(Controller):
    """Health check controller.

    Provides a liveness probe and a readiness probe that also checks the
    database when one is configured.
    """

    path = ""
    tags: ClassVar[list[str]] = ["Health"]

    @get("/health")
    async def health(self) -> dict[str, bool]:
        """Liveness probe endpoint."""
        return {"ok": True}

    @get("/ready")
    async def ready(self, request: Request) -> Response[dict[str, Any]]:
        """Readiness probe endpoint.

        Returns:
            ``ready`` plus the result of each check; 503 when a check fails.
        """
        checks: dict[str, bool] = {"application": True}
        db_manager = getattr(request.app.state, "db_manager", None)
        if db_manager is not None:
            checks["database"] = await db_manager.ping()
        ready = all(checks.values())
        return Response(
            content={"ready": ready, "checks": checks},
            status_code=HTTP_200_OK if ready else HTTP_503_SERVICE_UNAVAILABLE,
        )
