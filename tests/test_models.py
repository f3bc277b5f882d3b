"""Tests for core domain models."""

from __future__ import annotations

from uuid import UUID

import pytest

from paintflow.core.models import Arrow, Box, Curve, Document, Drawing, Eraser, Line, Path, Point, Text
from paintflow.core.style import TRANSPARENT, ShapeStyle, ToolSettings
from paintflow.core.types import BOX_KINDS, BOX_TOOLS, ShapeKind, Tool
from paintflow.exceptions import InvalidShapeError, ShapeIndexError


class TestShapeVariants:
    """Tests for the shape variant classes."""

    def test_kinds_are_set(self) -> None:
        """Test each variant reports its own kind."""
        assert Path().kind == ShapeKind.PATH
        assert Line().kind == ShapeKind.LINE
        assert Arrow().kind == ShapeKind.ARROW
        assert Curve().kind == ShapeKind.CURVE
        assert Eraser().kind == ShapeKind.ERASER
        assert Text().kind == ShapeKind.TEXT
        assert Box(shape_type=ShapeKind.STAR6).kind == ShapeKind.STAR6

    def test_box_accepts_string_kind(self) -> None:
        """Test a box primitive given as its wire name is normalized to the enum."""
        box = Box(shape_type="calloutCloud")
        assert box.shape_type is ShapeKind.CALLOUT_CLOUD
        assert box.kind is ShapeKind.CALLOUT_CLOUD

    def test_box_rejects_point_kinds(self) -> None:
        """Test a box cannot carry a point-list kind."""
        with pytest.raises(InvalidShapeError):
            Box(shape_type=ShapeKind.LINE)

    def test_default_style(self) -> None:
        """Test the default style is a 2px #222 stroke with no fill."""
        style = Path().style
        assert style.stroke_color == "#222"
        assert style.fill_color == TRANSPARENT
        assert style.stroke_width == 2
        assert not style.has_fill

    def test_text_defaults_to_empty(self) -> None:
        """Test a standalone text starts with an empty string, other shapes with no label."""
        assert Text().text == ""
        assert Box().text is None

    def test_has_text_ignores_whitespace(self) -> None:
        """Test whitespace-only labels count as no text."""
        assert not Box(text="  \n").has_text
        assert Box(text="label").has_text

    def test_box_kinds_cover_primitives(self) -> None:
        """Test there are 29 parametric primitives, each with a matching tool."""
        assert len(BOX_KINDS) == 29
        assert {tool.value for tool in BOX_TOOLS} == {kind.value for kind in BOX_KINDS}


class TestToolSettings:
    """Tests for the editor palette."""

    def test_shape_style_copies_palette(self) -> None:
        """Test new shapes take the palette stroke, fill and width."""
        settings = ToolSettings(stroke_color="#123456", fill_color="#abcdef", stroke_width=5)
        assert settings.shape_style() == ShapeStyle("#123456", "#abcdef", 5)

    def test_zero_width_falls_back(self) -> None:
        """Test a zero palette width still produces a visible stroke."""
        assert ToolSettings(stroke_width=0).shape_style().stroke_width == 2


class TestDocument:
    """Tests for the Document model."""

    def test_append_returns_index(self) -> None:
        """Test appending returns the new shape's index."""
        doc = Document()
        assert doc.append(Path()) == 0
        assert doc.append(Line()) == 1
        assert doc.count() == 2

    def test_get_out_of_range(self) -> None:
        """Test reading an invalid index raises ShapeIndexError."""
        doc = Document(shapes=[Path()])
        with pytest.raises(ShapeIndexError) as exc_info:
            doc.get(3)
        assert exc_info.value.index == 3
        assert exc_info.value.count == 1
        assert isinstance(exc_info.value, IndexError)

    def test_mutate_in_place_and_replace(self) -> None:
        """Test mutate supports in-place edits and slot replacement."""
        doc = Document(shapes=[Box(w=10, h=10)])
        doc.mutate(0, lambda s: setattr(s, "w", 20))
        assert doc.shapes[0].w == 20

        replacement = Box(shape_type=ShapeKind.CIRCLE)
        doc.mutate(0, lambda _: replacement)
        assert doc.shapes[0] is replacement

    def test_remove_keeps_selection_valid(self) -> None:
        """Test removing shapes shifts or clears the selection."""
        doc = Document(shapes=[Path(), Line(), Box()])
        doc.select(2)
        doc.remove_at(0)
        assert doc.selection == 1
        doc.remove_at(1)
        assert doc.selection == -1

    def test_replace_all_resets_selection(self) -> None:
        """Test replacing the sequence clears the selection."""
        doc = Document(shapes=[Path(), Line()])
        doc.select(1)
        doc.replace_all([Box()])
        assert doc.selection == -1
        assert doc.selected is None

    def test_select_none(self) -> None:
        """Test selecting None or -1 clears the selection."""
        doc = Document(shapes=[Path()])
        doc.select(0)
        assert doc.selected is doc.shapes[0]
        doc.select(None)
        assert doc.selection == -1

    def test_select_invalid_raises(self) -> None:
        """Test selecting a missing index raises."""
        with pytest.raises(ShapeIndexError):
            Document().select(0)


class TestDrawing:
    """Tests for the persisted Drawing record."""

    def test_defaults(self) -> None:
        """Test a drawing gets an id, a title and timestamps."""
        drawing = Drawing()
        assert isinstance(drawing.id, UUID)
        assert drawing.title == "Untitled"
        assert drawing.shapes == []
        assert drawing.image_data_url is None
        assert drawing.created_at.tzinfo is not None
