"""Export service for drawing rendering to various formats."""

from __future__ import annotations

import base64
import io
import json
from datetime import datetime
from html import escape
from typing import TYPE_CHECKING, Any
from uuid import UUID

from PIL import Image

from paintflow.core.serialization import shapes_to_list
from paintflow.render import PillowSurface, SvgSurface, render

if TYPE_CHECKING:
    from collections.abc import Sequence

    from paintflow.core.models import Drawing, Shape

DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 800

# A4 landscape in PDF points
A4_LANDSCAPE = (842, 595)
PDF_POINTS_PER_INCH = 72


class ExportService:
    """Service for exporting drawings to various formats.

    Supports exporting to:
    - PNG: Raster image on a white background
    - PDF: One A4 landscape page with the raster fitted and centred
    - DOC: HTML document embedding the raster, served as a Word file
    - SVG: Vector graphics from the same outlines the raster uses
    - JSON: Full drawing data

    No export draws the selection box or mutates the shapes.

    Attributes:
        width: Raster width in pixels.
        height: Raster height in pixels.
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> None:
        """Initialize the export service with the canvas size exports render at."""
        self.width = width
        self.height = height

    def render_image(self, shapes: Sequence[Shape]) -> Image.Image:
        """Render shapes onto a white RGB image without selection decoration."""
        surface = PillowSurface(self.width, self.height, background="#ffffff")
        render(shapes, None, surface)
        return surface.image.convert("RGB")

    def to_png(self, shapes: Sequence[Shape]) -> bytes:
        """Export shapes to PNG format using Pillow.

        Args:
            shapes: The shapes to export, in z-order.

        Returns:
            PNG image as bytes.
        """
        buffer = io.BytesIO()
        self.render_image(shapes).save(buffer, format="PNG")
        return buffer.getvalue()

    def to_data_url(self, shapes: Sequence[Shape]) -> str:
        """Export shapes as a ``data:image/png;base64`` URL."""
        return "data:image/png;base64," + base64.b64encode(self.to_png(shapes)).decode("ascii")

    def to_pdf(self, shapes: Sequence[Shape], *, dpi: int = 144) -> bytes:
        """Export shapes to a single-page A4 landscape PDF.

        The raster is scaled by the largest factor that fits the page and
        centred on it.

        Args:
            shapes: The shapes to export.
            dpi: Resolution of the embedded page image.

        Returns:
            PDF document as bytes.
        """
        scale = dpi / PDF_POINTS_PER_INCH
        page_w, page_h = round(A4_LANDSCAPE[0] * scale), round(A4_LANDSCAPE[1] * scale)
        image = self.render_image(shapes)

        ratio = min(page_w / image.width, page_h / image.height)
        fitted = image.resize((max(1, round(image.width * ratio)), max(1, round(image.height * ratio))))
        page = Image.new("RGB", (page_w, page_h), "#ffffff")
        page.paste(fitted, ((page_w - fitted.width) // 2, (page_h - fitted.height) // 2))

        buffer = io.BytesIO()
        page.save(buffer, format="PDF", resolution=dpi)
        return buffer.getvalue()

    def to_doc(self, shapes: Sequence[Shape], *, title: str | None = None) -> str:
        """Export shapes as an HTML document that word processors open as ``.doc``.

        Args:
            shapes: The shapes to export.
            title: Optional document title.

        Returns:
            HTML text embedding the PNG as a data URL.
        """
        head = f"<head><title>{escape(title)}</title></head>" if title else ""
        img = f'<img src="{self.to_data_url(shapes)}" style="max-width:100%"/>'
        return f"<!doctype html><html>{head}<body>{img}</body></html>"

    def to_svg(self, shapes: Sequence[Shape], *, title: str | None = None) -> str:
        """Export shapes to SVG format.

        Args:
            shapes: The shapes to export.
            title: Optional ``<title>`` of the document.

        Returns:
            SVG string representation of the shapes.
        """
        surface = SvgSurface(self.width, self.height, background="#ffffff", title=title)
        render(shapes, None, surface)
        return surface.to_svg()

    def to_dict(self, drawing: Drawing) -> dict[str, Any]:
        """Export a drawing to a dictionary.

        Args:
            drawing: The drawing to export.

        Returns:
            Dictionary representation of the drawing.
        """
        return {
            "_id": drawing.id,
            "title": drawing.title,
            "data": {"shapes": shapes_to_list(drawing.shapes)},
            "createdAt": drawing.created_at,
            "updatedAt": drawing.updated_at,
        }

    def to_json(self, drawing: Drawing, *, indent: int | None = 2) -> str:
        """Export a drawing to JSON format.

        Args:
            drawing: The drawing to export.
            indent: JSON indentation level (None for compact).

        Returns:
            JSON string representation of the drawing.
        """
        return json.dumps(self.to_dict(drawing), indent=indent, default=self._json_serializer)

    def _json_serializer(self, obj: Any) -> Any:
        """Serialize UUIDs and datetimes for JSON output."""
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        msg = f"Object of type {type(obj).__name__} is not JSON serializable"
        raise TypeError(msg)
