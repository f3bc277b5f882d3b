"""Picking engine: find the shape under a point."""

from __future__ import annotations

from typing import TYPE_CHECKING

from paintflow.core.geometry import bounding_box, build_outline
from paintflow.core.models import Eraser

if TYPE_CHECKING:
    from collections.abc import Sequence

    from paintflow.core.models import Point, Shape

STROKE_TOLERANCE = 4


def hits_outline(shape: Shape, x: float, y: float) -> bool:
    """Whether the point is inside the shape's fill outline or on its widened stroke.

    The stroke band is ``stroke_width + 4`` wide, centred on the outline.
    """
    if isinstance(shape, Eraser):
        return False
    outline = build_outline(shape)
    if outline.contains(x, y):
        return True
    band = (shape.style.stroke_width or 0) + STROKE_TOLERANCE
    return outline.distance_to(x, y) <= band / 2


def hits_bounding_box(shape: Shape, x: float, y: float) -> bool:
    """Whether the point is inside the shape's normalized bounding box."""
    if isinstance(shape, Eraser):
        return False
    return bounding_box(shape).contains(x, y)


def pick_outline(shapes: Sequence[Shape], point: Point) -> int | None:
    """Index of the topmost shape whose outline or stroke band contains ``point``."""
    for index in range(len(shapes) - 1, -1, -1):
        if hits_outline(shapes[index], point.x, point.y):
            return index
    return None


def hit_test(shapes: Sequence[Shape], point: Point, *, fallback: bool = True) -> int | None:
    """Find the topmost shape under ``point``.

    Exact outline hits on any shape take priority; only when no outline is hit
    does the bounding-box fallback run, again from topmost to bottommost.

    Args:
        shapes: Shapes in z-order (last is topmost).
        point: The probe point.
        fallback: Whether to fall back to bounding boxes.

    Returns:
        The index of the hit shape, or None.
    """
    index = pick_outline(shapes, point)
    if index is not None or not fallback:
        return index
    for index in range(len(shapes) - 1, -1, -1):
        if hits_bounding_box(shapes[index], point.x, point.y):
            return index
    return None
