"""Tests for the export service."""

from __future__ import annotations

import base64
import io
import json

import pytest
from PIL import Image

from paintflow.core.models import Box, Drawing, Text
from paintflow.services.export import ExportService


@pytest.fixture
def export_service() -> ExportService:
    """Create an export service rendering at 200x100."""
    return ExportService(200, 100)


@pytest.fixture
def drawing(red_rect: Box, sample_text: Text) -> Drawing:
    """A saved drawing with a rectangle and a text block."""
    return Drawing(title="Poster", shapes=[red_rect, sample_text])


class TestRasterExports:
    """Tests for PNG, PDF and DOC exports."""

    def test_png_on_white(self, export_service: ExportService, red_rect: Box) -> None:
        """Test PNG export renders shapes on an opaque white background."""
        image = Image.open(io.BytesIO(export_service.to_png([red_rect])))
        assert image.size == (200, 100)
        assert image.mode == "RGB"
        assert image.getpixel((50, 30)) == (255, 0, 0)
        assert image.getpixel((190, 90)) == (255, 255, 255)

    def test_empty_png(self, export_service: ExportService) -> None:
        """Test an empty drawing exports as a blank white image."""
        image = Image.open(io.BytesIO(export_service.to_png([])))
        assert image.getextrema() == ((255, 255), (255, 255), (255, 255))

    def test_data_url(self, export_service: ExportService) -> None:
        """Test the data URL wraps base64 PNG bytes."""
        url = export_service.to_data_url([])
        assert url.startswith("data:image/png;base64,")
        assert base64.b64decode(url.split(",", 1)[1]).startswith(b"\x89PNG")

    def test_pdf(self, export_service: ExportService, red_rect: Box) -> None:
        """Test PDF export produces a one-page document."""
        pdf = export_service.to_pdf([red_rect])
        assert pdf.startswith(b"%PDF")
        assert b"/Count 1" in pdf
        assert pdf.rstrip().endswith(b"%%EOF")

    def test_doc_embeds_png(self, export_service: ExportService, red_rect: Box) -> None:
        """Test DOC export is HTML with the PNG inlined and the title escaped."""
        doc = export_service.to_doc([red_rect], title="A & B")
        assert doc.startswith("<!doctype html>")
        assert "<title>A &amp; B</title>" in doc
        assert '<img src="data:image/png;base64,' in doc

    def test_exports_leave_shapes_untouched(self, export_service: ExportService, red_rect: Box) -> None:
        """Test exporting does not mutate the shapes."""
        before = repr(red_rect)
        export_service.to_png([red_rect])
        export_service.to_svg([red_rect])
        assert repr(red_rect) == before


class TestSvgExport:
    """Tests for SVG export."""

    def test_svg_document(self, export_service: ExportService, drawing: Drawing) -> None:
        """Test the SVG carries the canvas size, background, shapes and title."""
        svg = export_service.to_svg(drawing.shapes, title=drawing.title)
        assert 'viewBox="0 0 200 100"' in svg
        assert '<rect width="100%" height="100%" fill="#ffffff"/>' in svg
        assert 'fill="#ff0000"' in svg
        assert "<title>Poster</title>" in svg
        assert "stroke-dasharray" not in svg


class TestJsonExport:
    """Tests for JSON export."""

    def test_to_dict(self, export_service: ExportService, drawing: Drawing) -> None:
        """Test the dictionary form uses the wire keys."""
        data = export_service.to_dict(drawing)
        assert data["_id"] == drawing.id
        assert data["title"] == "Poster"
        assert [s["type"] for s in data["data"]["shapes"]] == ["rect", "text"]
        assert data["createdAt"] == drawing.created_at

    def test_to_json(self, export_service: ExportService, drawing: Drawing) -> None:
        """Test JSON output serializes ids and timestamps as strings."""
        data = json.loads(export_service.to_json(drawing))
        assert data["_id"] == str(drawing.id)
        assert data["updatedAt"] == drawing.updated_at.isoformat()

    def test_compact_json(self, export_service: ExportService, drawing: Drawing) -> None:
        """Test indent=None produces single-line output."""
        assert "\n" not in export_service.to_json(drawing, indent=None)
