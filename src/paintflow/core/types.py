"""Core type definitions for paintflow."""

from __future__ import annotations

from enum import StrEnum


class ShapeKind(StrEnum):
    """Enumeration of shape variants stored in a document."""

    PATH = "path"
    LINE = "line"
    ARROW = "arrow"
    CURVE = "curve"
    TEXT = "text"
    ERASER = "eraser"

    RECT = "rect"
    SQUARE = "square"
    ROUNDRECT = "roundrect"
    ELLIPSE = "ellipse"
    CIRCLE = "circle"
    DIAMOND = "diamond"
    TRIANGLE = "triangle"
    TRIANGLE_RIGHT = "triangleRight"
    TRIANGLE_ISO = "triangleIso"
    STAR = "star"
    STAR4 = "star4"
    STAR5 = "star5"
    STAR6 = "star6"
    POLYGON5 = "polygon5"
    POLYGON6 = "polygon6"
    DONUT = "donut"
    CROSS = "cross"
    ARROW_LEFT = "arrowLeft"
    ARROW_RIGHT = "arrowRight"
    ARROW_UP = "arrowUp"
    ARROW_DOWN = "arrowDown"
    ARROW_LR = "arrowLR"
    ARROW_UD = "arrowUD"
    CALLOUT_ROUNDED = "calloutRounded"
    CALLOUT_CLOUD = "calloutCloud"
    HEART = "heart"
    BOLT = "bolt"
    SUN = "sun"
    MOON = "moon"


POINT_KINDS = frozenset(
    {ShapeKind.PATH, ShapeKind.LINE, ShapeKind.ARROW, ShapeKind.CURVE, ShapeKind.ERASER},
)

# Parametric primitives drawn from a dragged (x, y, w, h) box
BOX_KINDS = frozenset(kind for kind in ShapeKind if kind not in POINT_KINDS and kind != ShapeKind.TEXT)


class Tool(StrEnum):
    """Enumeration of editor tools; the active tool is the controller state."""

    BRUSH = "brush"
    ERASER = "eraser"
    LINE = "line"
    ARROW = "arrow"
    CURVE = "curve"
    TEXT = "text"
    SELECT = "select"
    FILL = "fill"
    STROKE = "stroke"

    RECT = "rect"
    SQUARE = "square"
    ROUNDRECT = "roundrect"
    ELLIPSE = "ellipse"
    CIRCLE = "circle"
    DIAMOND = "diamond"
    TRIANGLE = "triangle"
    TRIANGLE_RIGHT = "triangleRight"
    TRIANGLE_ISO = "triangleIso"
    STAR = "star"
    STAR4 = "star4"
    STAR5 = "star5"
    STAR6 = "star6"
    POLYGON5 = "polygon5"
    POLYGON6 = "polygon6"
    DONUT = "donut"
    CROSS = "cross"
    ARROW_LEFT = "arrowLeft"
    ARROW_RIGHT = "arrowRight"
    ARROW_UP = "arrowUp"
    ARROW_DOWN = "arrowDown"
    ARROW_LR = "arrowLR"
    ARROW_UD = "arrowUD"
    CALLOUT_ROUNDED = "calloutRounded"
    CALLOUT_CLOUD = "calloutCloud"
    HEART = "heart"
    BOLT = "bolt"
    SUN = "sun"
    MOON = "moon"

    AI_AUTO_COMPLETE = "aiAutoComplete"
    AI_COLORIZE = "aiColorize"
    AI_ENHANCE = "aiEnhance"
    AI_GENERATE = "aiGenerate"
    AI_STYLE = "aiStyle"


BOX_TOOLS = frozenset(tool for tool in Tool if tool.value in {kind.value for kind in BOX_KINDS})

AI_TOOLS = frozenset(
    {Tool.AI_AUTO_COMPLETE, Tool.AI_COLORIZE, Tool.AI_ENHANCE, Tool.AI_GENERATE, Tool.AI_STYLE},
)
