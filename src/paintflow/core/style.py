"""Style definitions for shapes and the editor palette."""

from __future__ import annotations

from dataclasses import dataclass

TRANSPARENT = "transparent"
DEFAULT_STROKE = "#222"
DEFAULT_STROKE_WIDTH = 2
DEFAULT_FONT_SIZE = 18
DEFAULT_TEXT_COLOR = "#000000"


@dataclass
class ShapeStyle:
    """Styling configuration for a shape.

    Attributes:
        stroke_color: Color of the outline, or ``"transparent"``.
        fill_color: Fill color, or ``"transparent"`` for no fill.
        stroke_width: Width of the outline in pixels.
    """

    stroke_color: str = DEFAULT_STROKE
    fill_color: str = TRANSPARENT
    stroke_width: float = DEFAULT_STROKE_WIDTH

    @property
    def has_fill(self) -> bool:
        """Whether the shape has a visible fill."""
        return bool(self.fill_color) and self.fill_color != TRANSPARENT


@dataclass
class ToolSettings:
    """Current palette values used when the editor creates or recolors shapes.

    Attributes:
        stroke_color: Stroke color for new shapes and the stroke tool.
        fill_color: Fill color for new shapes and the fill tool.
        stroke_width: Stroke width for new shapes; doubles as the eraser size.
        font_size: Font size for new text.
        text_color: Text color for new text.
    """

    stroke_color: str = "#000000"
    fill_color: str = TRANSPARENT
    stroke_width: int = DEFAULT_STROKE_WIDTH
    font_size: int = DEFAULT_FONT_SIZE
    text_color: str = DEFAULT_TEXT_COLOR

    def shape_style(self) -> ShapeStyle:
        """Build the style applied to a freshly drawn shape."""
        return ShapeStyle(
            stroke_color=self.stroke_color,
            fill_color=self.fill_color,
            stroke_width=self.stroke_width or DEFAULT_STROKE_WIDTH,
        )
