"""Tests for the overlay text editor."""

from __future__ import annotations

from paintflow.core.history import SnapshotHistory
from paintflow.core.models import Box, Document, Text
from paintflow.core.types import ShapeKind
from paintflow.editor.text_overlay import TextEditorState, overlay_for


class TestOverlayGeometry:
    """Tests for overlay placement."""

    def test_standalone_text_overlay(self, sample_text: Text) -> None:
        """Test standalone text edits left aligned over its own box."""
        overlay = overlay_for(sample_text)
        assert (overlay.x, overlay.y, overlay.width, overlay.height) == (20, 20, 120, 60)
        assert overlay.align == "left"
        assert overlay.text == "Hi\nYou"
        assert overlay.font_size == 18
        assert overlay.line_height == 1.2

    def test_small_text_gets_minimum_size(self) -> None:
        """Test tiny text boxes get an editor of at least 80 by 30."""
        overlay = overlay_for(Text(x=5, y=5, w=10, h=10))
        assert (overlay.width, overlay.height) == (80, 30)

    def test_label_overlay_matches_normalized_box(self) -> None:
        """Test labels edit centred over the normalized bounding box."""
        shape = Box(shape_type=ShapeKind.HEART, x=100, y=100, w=-40, h=-20, text_color="#ff0000")
        overlay = overlay_for(shape)
        assert (overlay.x, overlay.y, overlay.width, overlay.height) == (60, 80, 40, 20)
        assert overlay.align == "center"
        assert overlay.color == "#ff0000"
        assert overlay.text == ""


class TestTextEditorState:
    """Tests for an open editing session."""

    def test_open_puts_caret_at_end(self, sample_text: Text) -> None:
        """Test a session starts with the shape text and the caret after it."""
        editor = TextEditorState.open(Document(shapes=[sample_text]), 0)
        assert editor.value == "Hi\nYou"
        assert editor.cursor == 6

    def test_set_value_clamps_cursor(self) -> None:
        """Test an out-of-range caret is clamped into the text."""
        editor = TextEditorState(index=0, original="", value="", cursor=0)
        editor.set_value("abc", cursor=10)
        assert editor.cursor == 3
        editor.set_value("abc", cursor=-2)
        assert editor.cursor == 0

    def test_close_commits_changed_text(self, history: SnapshotHistory, red_rect: Box) -> None:
        """Test a changed label is written after a snapshot."""
        document = Document(shapes=[red_rect])
        document.select(0)
        editor = TextEditorState.open(document, 0)
        editor.set_value("Hello")
        editor.close(document, history)

        assert red_rect.text == "Hello"
        assert history.undo_count == 1
        assert document.selection == -1

    def test_close_unchanged_records_nothing(self, history: SnapshotHistory, sample_text: Text) -> None:
        """Test closing without edits leaves history alone."""
        document = Document(shapes=[sample_text])
        TextEditorState.open(document, 0).close(document, history)
        assert history.undo_count == 0
        assert document.count() == 1

    def test_clearing_standalone_text_removes_it(self, history: SnapshotHistory, sample_text: Text) -> None:
        """Test emptying a standalone text removes the shape."""
        document = Document(shapes=[sample_text])
        editor = TextEditorState.open(document, 0)
        editor.set_value("   ")
        editor.close(document, history)
        assert document.count() == 0
        assert history.undo_count == 1

    def test_clearing_label_keeps_shape(self, history: SnapshotHistory) -> None:
        """Test emptying a label keeps the shape it was attached to."""
        shape = Box(text="old")
        document = Document(shapes=[shape])
        editor = TextEditorState.open(document, 0)
        editor.set_value("")
        editor.close(document, history)
        assert document.count() == 1
        assert shape.text == ""

    def test_existing_blank_text_is_removed_with_snapshot(self, history: SnapshotHistory) -> None:
        """Test a previously saved blank text is removed after a snapshot."""
        document = Document(shapes=[Text(x=0, y=0, w=100, h=30)])
        TextEditorState.open(document, 0).close(document, history)
        assert document.count() == 0
        assert history.undo_count == 1

    def test_missing_shape_only_clears_selection(self, history: SnapshotHistory) -> None:
        """Test closing a session whose shape vanished is harmless."""
        document = Document(shapes=[Box()])
        document.select(0)
        editor = TextEditorState(index=3, original="", value="x", cursor=1)
        editor.close(document, history)
        assert document.selection == -1
        assert history.undo_count == 0
