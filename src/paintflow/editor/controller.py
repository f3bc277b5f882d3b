"""Tool controller: the editor's explicit state machine.

The active tool is the state; pointer, keyboard and UI events are the
transitions. :func:`transition` applies one event to an :class:`EditorContext`
and returns the effects the host UI must carry out (repaint, notify, show or
hide the text editor). Nothing here depends on a UI toolkit.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

import structlog

from paintflow.core.history import SnapshotHistory
from paintflow.core.models import Arrow, Box, Curve, Document, Eraser, Line, Path, Point, Text
from paintflow.core.picking import hit_test
from paintflow.core.style import TRANSPARENT, ShapeStyle, ToolSettings
from paintflow.core.types import AI_TOOLS, BOX_TOOLS, ShapeKind, Tool
from paintflow.editor.ai import apply_ai_tool
from paintflow.editor.eraser import DEFAULT_ERASER_SIZE, erase_at
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
    SelectTool,
    TextInput,
    Undo,
)
from paintflow.editor.text_overlay import TextEditorState
from paintflow.exceptions import ShapeIndexError

if TYPE_CHECKING:
    from paintflow.core.models import Shape
    from paintflow.editor.events import Effect, Event

logger = structlog.get_logger(__name__)

MIN_NEW_TEXT_WIDTH = 100
MIN_NEW_TEXT_HEIGHT = 30


@dataclass
class EditorContext:
    """Everything the controller owns while the editor runs.

    Attributes:
        document: The document being edited.
        history: Undo/redo snapshots.
        settings: Current palette values.
        tool: Active tool.
        drawing: Whether a gesture is in progress.
        pressed: Whether the pointer is currently held down.
        current: Index of the shape the active gesture edits.
        trail: Transient eraser trail of the active eraser gesture.
        editor: Open text editing session, if any.
        rng: Random source for the AI tools.
    """

    document: Document = field(default_factory=Document)
    history: SnapshotHistory = field(default_factory=SnapshotHistory)
    settings: ToolSettings = field(default_factory=ToolSettings)
    tool: Tool = Tool.BRUSH
    drawing: bool = False
    pressed: bool = False
    current: int | None = None
    trail: Eraser | None = None
    editor: TextEditorState | None = None
    rng: random.Random = field(default_factory=random.Random)

    def end_gesture(self) -> None:
        """Forget the in-progress gesture; the document keeps its last state."""
        self.drawing = False
        self.current = None
        self.trail = None


def _copy(point: Point) -> Point:
    return Point(point.x, point.y)


def _close_editor(ctx: EditorContext) -> list[Effect]:
    if ctx.editor is None:
        return []
    editor, ctx.editor = ctx.editor, None
    editor.close(ctx.document, ctx.history)
    return [CloseTextEditor(), Repaint()]


def _open_editor(ctx: EditorContext, index: int, *, created: bool = False) -> list[Effect]:
    ctx.document.select(index)
    ctx.editor = TextEditorState.open(ctx.document, index, created=created)
    return [OpenTextEditor(ctx.editor.overlay(ctx.document)), Repaint()]


def _new_shape(ctx: EditorContext, point: Point) -> Shape | None:
    settings = ctx.settings
    common = {"style": settings.shape_style(), "font_size": settings.font_size}
    tool = ctx.tool
    if tool == Tool.BRUSH:
        return Path(points=[_copy(point)], **common)
    if tool == Tool.LINE:
        return Line(points=[_copy(point), _copy(point)], **common)
    if tool == Tool.ARROW:
        return Arrow(points=[_copy(point), _copy(point)], **common)
    if tool == Tool.CURVE:
        return Curve(points=[_copy(point), _copy(point), _copy(point)], phase=0, **common)
    if tool in BOX_TOOLS:
        return Box(shape_type=ShapeKind(tool.value), x=point.x, y=point.y, w=0, h=0, **common)
    return None


def _text_down(ctx: EditorContext, point: Point) -> list[Effect]:
    document = ctx.document
    index = hit_test(document.shapes, point)
    if index is not None:
        shape = document.get(index)
        if not isinstance(shape, Text) and shape.text is None:
            shape.text = ""
            shape.font_size = ctx.settings.font_size
            shape.text_color = ctx.settings.text_color
        return _open_editor(ctx, index)

    font_size = ctx.settings.font_size
    width = max(MIN_NEW_TEXT_WIDTH, font_size * 4)
    height = max(MIN_NEW_TEXT_HEIGHT, font_size + 10)
    ctx.history.record(document.shapes)
    index = document.append(
        Text(
            x=point.x - width / 2,
            y=point.y - height / 2,
            w=width,
            h=height,
            text="",
            font_size=font_size,
            text_color=ctx.settings.text_color,
            style=ShapeStyle(stroke_color=TRANSPARENT, fill_color=TRANSPARENT, stroke_width=0),
        )
    )
    return _open_editor(ctx, index, created=True)


def _recolor(ctx: EditorContext, point: Point) -> list[Effect]:
    document = ctx.document
    index = hit_test(document.shapes, point)
    if index is None:
        return []
    ctx.history.record(document.shapes)
    shape = document.get(index)
    if ctx.tool == Tool.FILL:
        shape.style = replace(shape.style, fill_color=ctx.settings.fill_color)
    else:
        shape.style = replace(shape.style, stroke_color=ctx.settings.stroke_color)
    document.select(index)
    return [Repaint()]


def _pending_curve(ctx: EditorContext) -> Curve | None:
    if not ctx.drawing or ctx.current is None or ctx.current >= ctx.document.count():
        return None
    shape = ctx.document.get(ctx.current)
    if isinstance(shape, Curve) and shape.phase == 1:
        return shape
    return None


def _pointer_down(ctx: EditorContext, point: Point) -> list[Effect]:
    effects = _close_editor(ctx)
    ctx.pressed = True
    tool = ctx.tool

    if tool in AI_TOOLS:
        ctx.end_gesture()
        message = apply_ai_tool(tool, ctx.document, ctx.history, point, ctx.settings, ctx.rng)
        logger.debug("Applied AI tool", tool=tool.value, message=message)
        return [*effects, Notify(message), Repaint()]

    if tool == Tool.CURVE and _pending_curve(ctx) is not None:
        # Second press of a curve gesture: the drag now places the control point.
        return effects

    ctx.end_gesture()
    if tool == Tool.ERASER:
        ctx.history.record(ctx.document.shapes)
        width = ctx.settings.stroke_width or DEFAULT_ERASER_SIZE
        ctx.trail = Eraser(points=[_copy(point)], style=ShapeStyle(stroke_width=width))
        ctx.drawing = True
        return effects
    if tool == Tool.TEXT:
        return [*effects, *_text_down(ctx, point)]
    if tool == Tool.SELECT:
        ctx.document.select(hit_test(ctx.document.shapes, point))
        return [*effects, Repaint()]
    if tool in (Tool.FILL, Tool.STROKE):
        return [*effects, *_recolor(ctx, point)]

    shape = _new_shape(ctx, point)
    if shape is None:
        return effects
    ctx.history.record(ctx.document.shapes)
    ctx.current = ctx.document.append(shape)
    ctx.drawing = True
    return [*effects, Repaint()]


def _extend(shape: Shape, point: Point, pressed: bool) -> None:
    if isinstance(shape, Path):
        shape.points.append(_copy(point))
    elif isinstance(shape, Curve):
        if shape.phase == 0:
            shape.points[1] = _copy(point)
        elif pressed:
            shape.points[2] = _copy(point)
    elif isinstance(shape, Line):
        shape.points[1] = _copy(point)
    elif isinstance(shape, (Box, Text)):
        shape.w = point.x - shape.x
        shape.h = point.y - shape.y


def _pointer_move(ctx: EditorContext, point: Point) -> list[Effect]:
    if not ctx.drawing:
        return []
    if ctx.trail is not None:
        ctx.trail.points.append(_copy(point))
        erase_at(ctx.document, point, ctx.trail.style.stroke_width)
        return [Repaint()]
    if ctx.current is None:
        return []
    ctx.document.mutate(ctx.current, lambda shape: _extend(shape, point, ctx.pressed))
    return [Repaint()]


def _pointer_up(ctx: EditorContext) -> list[Effect]:
    ctx.pressed = False
    if ctx.drawing and ctx.current is not None and ctx.current < ctx.document.count():
        shape = ctx.document.get(ctx.current)
        if isinstance(shape, Curve) and shape.phase == 0:
            shape.phase = 1
            return []
    ctx.end_gesture()
    return []


def _key_press(ctx: EditorContext, event: KeyPress) -> list[Effect]:
    if ctx.editor is None:
        if not event.ctrl:
            return []
        key = event.key.lower()
        if key == "z":
            return _history_step(ctx, redo=event.shift)
        if key == "y":
            return _history_step(ctx, redo=True)
        return []
    if event.key == "Enter":
        ctx.editor.insert_newline()
        return []
    if event.key in ("Escape", "Tab"):
        return _close_editor(ctx)
    return []


def _history_step(ctx: EditorContext, *, redo: bool) -> list[Effect]:
    effects = _close_editor(ctx)
    ctx.end_gesture()
    history = ctx.history
    restored = history.redo(ctx.document.shapes) if redo else history.undo(ctx.document.shapes)
    if restored is None:
        return effects
    ctx.document.replace_all(restored)
    return [*effects, Repaint()]


def _change_settings(ctx: EditorContext, event: ChangeSettings) -> list[Effect]:
    settings = ctx.settings
    changes = {name: value for name, value in vars(event).items() if value is not None}
    ctx.settings = replace(settings, **changes)
    if event.font_size is None and event.text_color is None:
        return []

    shape = ctx.document.selected
    if shape is None or shape.text is None:
        return []
    ctx.history.record(ctx.document.shapes)
    if event.font_size is not None:
        shape.font_size = event.font_size
    if event.text_color is not None:
        shape.text_color = event.text_color
    effects: list[Effect] = [Repaint()]
    if ctx.editor is not None:
        effects.insert(0, OpenTextEditor(ctx.editor.overlay(ctx.document)))
    return effects


def _dispatch(ctx: EditorContext, event: Event) -> list[Effect]:
    if isinstance(event, SelectTool):
        effects = _close_editor(ctx)
        ctx.end_gesture()
        ctx.tool = event.tool
        return effects
    if isinstance(event, PointerDown):
        return _pointer_down(ctx, event.point)
    if isinstance(event, PointerMove):
        return _pointer_move(ctx, event.point)
    if isinstance(event, PointerUp):
        return _pointer_up(ctx)
    if isinstance(event, TextInput):
        if ctx.editor is not None:
            ctx.editor.set_value(event.value, event.cursor)
        return []
    if isinstance(event, KeyPress):
        return _key_press(ctx, event)
    if isinstance(event, EditorBlur):
        return _close_editor(ctx)
    if isinstance(event, Undo):
        return _history_step(ctx, redo=False)
    if isinstance(event, Redo):
        return _history_step(ctx, redo=True)
    if isinstance(event, ChangeSettings):
        return _change_settings(ctx, event)
    msg = f"Unsupported editor event: {type(event).__name__}"
    raise TypeError(msg)


def transition(ctx: EditorContext, event: Event) -> tuple[EditorContext, list[Effect]]:
    """Apply one event to the editor.

    The context is updated in place and returned alongside the effects the
    host must perform, in order. A stale shape index aborts the gesture and
    never reaches the renderer.

    Args:
        ctx: The editor context.
        event: The incoming event.

    Returns:
        The context and the list of effects.

    Raises:
        TypeError: If the event type is unknown.
    """
    try:
        return ctx, _dispatch(ctx, event)
    except ShapeIndexError as exc:
        logger.warning("Editor event hit a stale shape index", event_type=type(event).__name__, error=str(exc))
        ctx.end_gesture()
        ctx.document.select(None)
        return ctx, [Repaint()]


class ToolController:
    """Convenience wrapper driving :func:`transition` on an owned context.

    Attributes:
        context: The editor context.
    """

    def __init__(self, context: EditorContext | None = None) -> None:
        """Initialize the controller with a fresh context unless one is given."""
        self.context = context or EditorContext()

    @property
    def document(self) -> Document:
        """The document being edited."""
        return self.context.document

    def dispatch(self, event: Event) -> list[Effect]:
        """Apply ``event`` and return the resulting effects."""
        self.context, effects = transition(self.context, event)
        return effects

    def select_tool(self, tool: Tool | str) -> list[Effect]:
        """Switch to ``tool``."""
        return self.dispatch(SelectTool(Tool(tool)))

    def drag(self, start: Point, *moves: Point) -> list[Effect]:
        """Press at ``start``, move through ``moves`` and release."""
        effects = self.dispatch(PointerDown(start))
        for point in moves:
            effects += self.dispatch(PointerMove(point))
        effects += self.dispatch(PointerUp())
        return effects
