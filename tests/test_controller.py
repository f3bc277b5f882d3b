"""Tests for the tool controller state machine."""

from __future__ import annotations

import pytest

from paintflow.core.models import Arrow, Box, Curve, Document, Line, Path, Point, Text
from paintflow.core.serialization import dumps_shapes
from paintflow.core.types import ShapeKind, Tool
from paintflow.editor.controller import EditorContext, ToolController, transition
from paintflow.editor.events import (
    ChangeSettings,
    CloseTextEditor,
    EditorBlur,
    KeyPress,
    Notify,
    OpenTextEditor,
    PointerDown,
    PointerMove,
    PointerUp,
    Redo,
    Repaint,
    TextInput,
    Undo,
)


class TestDrawingTools:
    """Tests for tools that create shapes."""

    def test_brush_drag_creates_path(self, controller: ToolController) -> None:
        """Test a brush drag appends one path with every visited point."""
        effects = controller.drag(Point(0, 0), Point(10, 0), Point(20, 5))
        shapes = controller.document.shapes
        assert len(shapes) == 1
        assert isinstance(shapes[0], Path)
        assert [(p.x, p.y) for p in shapes[0].points] == [(0, 0), (10, 0), (20, 5)]
        assert Repaint() in effects
        assert controller.context.history.undo_count == 1

    def test_new_shape_uses_palette(self, controller: ToolController) -> None:
        """Test new shapes copy the palette stroke, fill and width."""
        controller.dispatch(ChangeSettings(stroke_color="#123456", fill_color="#abcdef", stroke_width=6))
        controller.drag(Point(0, 0), Point(5, 5))
        style = controller.document.shapes[0].style
        assert (style.stroke_color, style.fill_color, style.stroke_width) == ("#123456", "#abcdef", 6)

    @pytest.mark.parametrize(("tool", "cls"), [(Tool.LINE, Line), (Tool.ARROW, Arrow)])
    def test_line_tools_track_endpoint(self, controller: ToolController, tool: Tool, cls: type) -> None:
        """Test line and arrow drags move only the second point."""
        controller.select_tool(tool)
        controller.drag(Point(0, 0), Point(20, 20), Point(50, 40))
        shape = controller.document.shapes[0]
        assert type(shape) is cls
        assert [(p.x, p.y) for p in shape.points] == [(0, 0), (50, 40)]

    def test_box_tool_keeps_signed_size(self, controller: ToolController) -> None:
        """Test a drag towards the top-left stores a negative width and height."""
        controller.select_tool(Tool.STAR5)
        controller.drag(Point(100, 100), Point(60, 70))
        shape = controller.document.shapes[0]
        assert isinstance(shape, Box)
        assert shape.kind is ShapeKind.STAR5
        assert (shape.x, shape.y, shape.w, shape.h) == (100, 100, -40, -30)

    def test_curve_is_two_gestures(self, controller: ToolController) -> None:
        """Test a curve places its end on the first drag and its control on the second."""
        controller.select_tool(Tool.CURVE)
        controller.drag(Point(0, 0), Point(100, 0))
        curve = controller.document.shapes[0]
        assert isinstance(curve, Curve)
        assert curve.phase == 1

        controller.dispatch(PointerMove(Point(10, 10)))
        assert (curve.points[2].x, curve.points[2].y) == (0, 0)

        controller.drag(Point(50, 20), Point(50, 80))
        assert len(controller.document.shapes) == 1
        assert [(p.x, p.y) for p in curve.points] == [(0, 0), (100, 0), (50, 80)]
        assert not controller.context.drawing
        assert controller.context.history.undo_count == 1

    def test_move_without_gesture_is_ignored(self, controller: ToolController) -> None:
        """Test moving the pointer without pressing changes nothing."""
        assert controller.dispatch(PointerMove(Point(5, 5))) == []
        assert controller.document.count() == 0

    def test_tool_switch_ends_gesture(self, controller: ToolController) -> None:
        """Test switching tools mid-drag abandons the gesture."""
        controller.dispatch(PointerDown(Point(0, 0)))
        controller.select_tool(Tool.RECT)
        controller.dispatch(PointerMove(Point(10, 10)))
        assert len(controller.document.shapes[0].points) == 1


class TestSelectionTools:
    """Tests for select, fill and stroke."""

    def test_select_picks_topmost(self, controller: ToolController, document: Document) -> None:
        """Test the select tool selects the topmost shape and clears on a miss."""
        controller.context.document = document
        controller.select_tool(Tool.SELECT)
        controller.dispatch(PointerDown(Point(50, 30)))
        assert document.selection == 1

        controller.dispatch(PointerDown(Point(300, 300)))
        assert document.selection == -1

    def test_fill_recolors_hit_shape(self, controller: ToolController, document: Document) -> None:
        """Test the fill tool applies the palette fill after a snapshot."""
        controller.context.document = document
        controller.dispatch(ChangeSettings(fill_color="#00ff00"))
        controller.select_tool(Tool.FILL)
        effects = controller.dispatch(PointerDown(Point(50, 30)))

        assert document.shapes[1].style.fill_color == "#00ff00"
        assert document.shapes[1].style.stroke_color == "#000000"
        assert document.selection == 1
        assert effects == [Repaint()]
        assert controller.context.history.undo_count == 1

    def test_stroke_recolors_hit_shape(self, controller: ToolController, document: Document) -> None:
        """Test the stroke tool only changes the stroke color."""
        controller.context.document = document
        controller.dispatch(ChangeSettings(stroke_color="#0000ff"))
        controller.select_tool(Tool.STROKE)
        controller.dispatch(PointerDown(Point(50, 30)))
        assert document.shapes[1].style.stroke_color == "#0000ff"
        assert document.shapes[1].style.fill_color == "#ff0000"

    def test_fill_miss_records_nothing(self, controller: ToolController, document: Document) -> None:
        """Test a fill click on empty canvas takes no snapshot."""
        controller.context.document = document
        controller.select_tool(Tool.FILL)
        assert controller.dispatch(PointerDown(Point(300, 300))) == []
        assert controller.context.history.undo_count == 0


class TestTextTool:
    """Tests for text creation and editing."""

    def test_click_on_empty_canvas_creates_text(self, controller: ToolController) -> None:
        """Test a text click on empty canvas creates a centred box and opens the editor."""
        controller.select_tool(Tool.TEXT)
        effects = controller.dispatch(PointerDown(Point(200, 200)))

        shape = controller.document.shapes[0]
        assert isinstance(shape, Text)
        assert (shape.x, shape.y, shape.w, shape.h) == (150, 185, 100, 30)
        assert isinstance(effects[0], OpenTextEditor)
        assert effects[0].overlay.align == "left"

    def test_typed_text_is_committed_on_blur(self, controller: ToolController) -> None:
        """Test typing then blurring commits the text and clears the selection."""
        controller.select_tool(Tool.TEXT)
        controller.dispatch(PointerDown(Point(200, 200)))
        controller.dispatch(TextInput("hello"))
        controller.dispatch(KeyPress("Enter"))
        controller.dispatch(TextInput("hello\nworld"))
        effects = controller.dispatch(EditorBlur())

        assert controller.document.shapes[0].text == "hello\nworld"
        assert controller.document.selection == -1
        assert effects == [CloseTextEditor(), Repaint()]
        assert controller.context.editor is None

    def test_enter_inserts_newline_at_caret(self, controller: ToolController) -> None:
        """Test Enter adds a line break where the caret is."""
        controller.select_tool(Tool.TEXT)
        controller.dispatch(PointerDown(Point(200, 200)))
        controller.dispatch(TextInput("ab", cursor=1))
        controller.dispatch(KeyPress("Enter"))
        controller.dispatch(KeyPress("Escape"))
        assert controller.document.shapes[0].text == "a\nb"

    def test_blank_new_text_is_removed(self, controller: ToolController) -> None:
        """Test a text box closed without content disappears."""
        controller.select_tool(Tool.TEXT)
        controller.dispatch(PointerDown(Point(200, 200)))
        controller.dispatch(KeyPress("Tab"))
        assert controller.document.count() == 0
        assert controller.context.history.undo_count == 1

    def test_click_on_shape_edits_its_label(self, controller: ToolController, document: Document) -> None:
        """Test a text click on an existing shape labels it with the palette font."""
        controller.context.document = document
        controller.dispatch(ChangeSettings(font_size=24, text_color="#ff00ff"))
        controller.select_tool(Tool.TEXT)
        effects = controller.dispatch(PointerDown(Point(50, 30)))

        overlay = effects[0].overlay
        assert overlay.align == "center"
        assert (overlay.x, overlay.y, overlay.width, overlay.height) == (10, 10, 100, 50)
        assert overlay.font_size == 24

        controller.dispatch(TextInput("Label"))
        controller.dispatch(PointerDown(Point(400, 400)))
        rect = document.shapes[1]
        assert rect.text == "Label"
        assert rect.text_color == "#ff00ff"
        assert document.count() == 3

    def test_font_change_applies_to_selected_label(self, controller: ToolController) -> None:
        """Test changing the font size restyles the text being edited."""
        controller.select_tool(Tool.TEXT)
        controller.dispatch(PointerDown(Point(200, 200)))
        effects = controller.dispatch(ChangeSettings(font_size=30))
        assert controller.document.shapes[0].font_size == 30
        assert isinstance(effects[0], OpenTextEditor)
        assert effects[0].overlay.font_size == 30


class TestHistory:
    """Tests for undo and redo through the controller."""

    def test_undo_and_redo(self, controller: ToolController) -> None:
        """Test undo removes the last stroke and redo restores it."""
        controller.drag(Point(0, 0), Point(10, 10))
        assert controller.dispatch(Undo()) == [Repaint()]
        assert controller.document.count() == 0

        controller.dispatch(Redo())
        assert controller.document.count() == 1

    def test_undo_with_empty_history(self, controller: ToolController) -> None:
        """Test undo without history changes nothing."""
        assert controller.dispatch(Undo()) == []

    def test_keyboard_shortcuts(self, controller: ToolController) -> None:
        """Test ctrl+z undoes, ctrl+shift+z and ctrl+y redo and plain keys do nothing."""
        controller.drag(Point(0, 0), Point(10, 10))
        assert controller.dispatch(KeyPress("z")) == []
        controller.dispatch(KeyPress("z", ctrl=True))
        assert controller.document.count() == 0
        controller.dispatch(KeyPress("Z", shift=True, ctrl=True))
        assert controller.document.count() == 1
        controller.dispatch(KeyPress("z", ctrl=True))
        controller.dispatch(KeyPress("y", ctrl=True))
        assert controller.document.count() == 1

    def test_undo_closes_text_editor(self, controller: ToolController) -> None:
        """Test undo while editing commits the editor first."""
        controller.select_tool(Tool.TEXT)
        controller.dispatch(PointerDown(Point(200, 200)))
        controller.dispatch(TextInput("draft"))
        effects = controller.dispatch(Undo())
        assert effects[0] == CloseTextEditor()
        assert controller.context.editor is None
        assert controller.document.shapes[0].text == ""

    def test_full_undo_then_redo_restores_document(self, controller: ToolController) -> None:
        """Test undoing every step and redoing them all rebuilds the exact document."""
        history = controller.context.history

        controller.drag(Point(0, 0), Point(10, 10), Point(20, 5))
        assert not history.can_redo()

        controller.select_tool(Tool.RECT)
        controller.drag(Point(50, 50), Point(150, 120))
        controller.dispatch(Undo())
        assert history.can_redo()
        controller.drag(Point(50, 50), Point(150, 120))
        assert not history.can_redo()

        controller.context.settings.fill_color = "#00ff00"
        controller.select_tool(Tool.FILL)
        controller.dispatch(PointerDown(Point(100, 80)))
        controller.dispatch(PointerUp())
        assert not history.can_redo()

        controller.select_tool(Tool.AI_GENERATE)
        controller.dispatch(PointerDown(Point(300, 300)))
        controller.dispatch(PointerUp())
        assert not history.can_redo()

        controller.select_tool(Tool.TEXT)
        controller.dispatch(PointerDown(Point(400, 400)))
        controller.dispatch(TextInput("note"))
        controller.dispatch(EditorBlur())
        assert not history.can_redo()

        final = dumps_shapes(controller.document.shapes)
        assert [s.kind for s in controller.document.shapes] == [
            ShapeKind.PATH,
            ShapeKind.RECT,
            ShapeKind.CIRCLE,
            ShapeKind.TEXT,
        ]
        assert controller.document.shapes[1].style.fill_color == "#00ff00"

        steps = 0
        while history.can_undo():
            controller.dispatch(Undo())
            steps += 1
        assert controller.document.count() == 0

        for _ in range(steps):
            controller.dispatch(Redo())
        assert not history.can_redo()
        assert dumps_shapes(controller.document.shapes) == final


class TestAiAndErrors:
    """Tests for AI tool dispatch and stale indices."""

    def test_ai_tool_notifies(self, controller: ToolController) -> None:
        """Test an AI tool click reports its message."""
        controller.select_tool(Tool.AI_GENERATE)
        effects = controller.dispatch(PointerDown(Point(100, 100)))
        assert Notify("AI generated a new shape!") in effects
        assert controller.document.shapes[0].kind is ShapeKind.CIRCLE

    def test_stale_index_aborts_gesture(self) -> None:
        """Test a gesture pointing at a removed shape is dropped without raising."""
        context = EditorContext(drawing=True, current=4)
        context, effects = transition(context, PointerMove(Point(1, 1)))
        assert effects == [Repaint()]
        assert not context.drawing
        assert context.current is None

    def test_unknown_event_raises(self, controller: ToolController) -> None:
        """Test unsupported events are rejected."""
        with pytest.raises(TypeError):
            controller.dispatch(object())  # type: ignore[arg-type]
