"""Renderer: paints a shape sequence onto a :class:`~paintflow.render.surface.Surface`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from paintflow.core.geometry import bounding_box, build_outline
from paintflow.core.models import Eraser, Text
from paintflow.core.style import DEFAULT_FONT_SIZE, DEFAULT_TEXT_COLOR

if TYPE_CHECKING:
    from collections.abc import Sequence

    from paintflow.core.models import Shape
    from paintflow.render.surface import Surface, TextAlign

SELECTION_COLOR = "#4a90e2"
SELECTION_DASH = (6, 4)
SELECTION_WIDTH = 1
SELECTION_MARGIN = 4
TEXT_PADDING = 4
LINE_HEIGHT_FACTOR = 1.2
TEXT_OUTLINE_COLOR = "#ffffff"


@dataclass
class TextLine:
    """One positioned line of a shape's label.

    Attributes:
        text: The line content.
        x: Anchor x-coordinate.
        y: Anchor y-coordinate (top for left aligned lines, middle otherwise).
        align: ``"left"`` for standalone text, ``"center"`` for labels.
    """

    text: str
    x: float
    y: float
    align: TextAlign


def line_height(shape: Shape) -> float:
    """Line height of the shape's text."""
    return (shape.font_size or DEFAULT_FONT_SIZE) * LINE_HEIGHT_FACTOR


def layout_text(shape: Shape) -> list[TextLine]:
    """Position each line of a shape's text.

    Standalone text stacks lines downwards from the padded top-left corner.
    Labels on other shapes are centered horizontally and stacked around the
    vertical middle of the box, each line clamped to a 4-unit inset.

    Returns:
        The lines to draw; empty when the shape carries no visible text.
    """
    if not shape.has_text:
        return []
    box = bounding_box(shape)
    lines = shape.text.split("\n")
    step = line_height(shape)
    if isinstance(shape, Text):
        return [
            TextLine(line, box.x + TEXT_PADDING, box.y + TEXT_PADDING + i * step, "left") for i, line in enumerate(lines)
        ]

    cx, cy = box.center
    start = cy - len(lines) * step / 2 + step / 2
    top, bottom = box.y + TEXT_PADDING, box.bottom - TEXT_PADDING
    out = []
    for i, line in enumerate(lines):
        y = start + i * step
        y = max(y, top)
        y = min(y, bottom)
        out.append(TextLine(line, cx, y, "center"))
    return out


def draw_text(surface: Surface, shape: Shape) -> None:
    """Draw the shape's text, outlined in white unless the text itself is white."""
    color = shape.text_color or DEFAULT_TEXT_COLOR
    outline = None if (shape.text_color or "").lower() == TEXT_OUTLINE_COLOR else TEXT_OUTLINE_COLOR
    font_size = shape.font_size or DEFAULT_FONT_SIZE
    for line in layout_text(shape):
        surface.draw_text(line.text, line.x, line.y, font_size=font_size, color=color, align=line.align, outline_color=outline)


def draw_shape(surface: Surface, shape: Shape) -> None:
    """Draw one shape: fill, then stroke, then its text."""
    if isinstance(shape, Eraser):
        return
    if not isinstance(shape, Text):
        outline = build_outline(shape)
        if shape.style.has_fill:
            surface.fill_outline(outline, shape.style.fill_color)
        surface.stroke_outline(outline, shape.style.stroke_color, shape.style.stroke_width)
    draw_text(surface, shape)


def draw_selection(surface: Surface, shape: Shape) -> None:
    """Draw the dashed selection box around ``shape``; text shapes get none."""
    if isinstance(shape, (Text, Eraser)):
        return
    box = bounding_box(shape).expanded(SELECTION_MARGIN)
    surface.stroke_dashed_rect(box, SELECTION_COLOR, SELECTION_WIDTH, SELECTION_DASH)


def render(shapes: Sequence[Shape], selection: int | None, surface: Surface) -> None:
    """Clear ``surface`` and paint every shape in z-order, then the selection.

    Args:
        shapes: Shapes in drawing order.
        selection: Index of the selected shape; None or an invalid index draws no selection.
        surface: Target surface.
    """
    surface.clear()
    for shape in shapes:
        draw_shape(surface, shape)
    if selection is not None and 0 <= selection < len(shapes):
        draw_selection(surface, shapes[selection])
