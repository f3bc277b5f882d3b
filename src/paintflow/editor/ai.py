"""AI-flavoured heuristics: shape completion, recoloring and smoothing.

The "AI" is a set of deterministic rules with randomized parameters. The
random source is passed in so that callers and tests control it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

import structlog

from paintflow.core.geometry import BBox
from paintflow.core.models import Box, BoxedShape, Path, Point
from paintflow.core.picking import hit_test
from paintflow.core.style import ShapeStyle
from paintflow.core.types import ShapeKind, Tool

if TYPE_CHECKING:
    import random
    from collections.abc import Sequence

    from paintflow.core.history import SnapshotHistory
    from paintflow.core.models import Document, Shape
    from paintflow.core.style import ToolSettings

logger = structlog.get_logger(__name__)

SMART_COLORS = ("#ff6b6b", "#4ecdc4", "#45b7d1", "#96ceb4", "#feca57", "#ff9ff3", "#54a0ff")
SMART_STROKE = "#333"
STYLE_BUNDLES = (
    ShapeStyle(stroke_color="#ff0000", fill_color="#ffcccc", stroke_width=4),
    ShapeStyle(stroke_color="#0000ff", fill_color="#ccccff", stroke_width=3),
    ShapeStyle(stroke_color="#00ff00", fill_color="#ccffcc", stroke_width=5),
    ShapeStyle(stroke_color="#ff00ff", fill_color="#ffccff", stroke_width=2),
)
GENERATED_STYLE = ShapeStyle(stroke_color="#ff0000", fill_color="#ffcccc", stroke_width=3)
GENERATED_SIZE = 50
ENHANCED_MIN_WIDTH = 3

CLOSE_DISTANCE = 50
MIDPOINT_JITTER = 20
LINE_COMPLETION_MIN_LENGTH = 30

SQUARE_ASPECT_LIMIT = 0.3
SQUARE_MIN_SIDE = 20
SQUARE_CORNER_REACH = 0.15
CIRCLE_RADIUS_TOLERANCE = 0.4
CIRCLE_MIN_SCORE = 0.6
CIRCLE_MIN_RADIUS = 15

AI_MESSAGES: dict[Tool, str] = {
    Tool.AI_AUTO_COMPLETE: "AI completed your shape!",
    Tool.AI_COLORIZE: "AI applied smart colors!",
    Tool.AI_ENHANCE: "AI enhanced your drawing!",
    Tool.AI_GENERATE: "AI generated a new shape!",
    Tool.AI_STYLE: "AI applied artistic style!",
}

MISS_MESSAGES: dict[Tool, str] = {
    Tool.AI_COLORIZE: "No shape found to colorize",
    Tool.AI_ENHANCE: "No shape found to enhance",
    Tool.AI_STYLE: "No shape found to style",
}


@dataclass
class PathAnalysis:
    """Outcome of classifying a freehand path.

    Attributes:
        suggested: ``SQUARE``, ``CIRCLE`` or ``PATH`` when the path looks like neither.
        bounds: Bounding box of the points.
        aspect_ratio: ``|w - h| / max(w, h)``.
        circle_score: Fraction of points near the expected circle radius.
    """

    suggested: ShapeKind
    bounds: BBox
    aspect_ratio: float = 0.0
    circle_score: float = 0.0


def _reaches_corners(points: Sequence[Point], bounds: BBox) -> bool:
    # A square stroke passes close to at least three corners of its box; a circle never does.
    reach = SQUARE_CORNER_REACH * max(bounds.w, bounds.h)
    corners = [(bounds.x, bounds.y), (bounds.right, bounds.y), (bounds.right, bounds.bottom), (bounds.x, bounds.bottom)]
    reached = sum(1 for cx, cy in corners if any(math.hypot(p.x - cx, p.y - cy) <= reach for p in points))
    return reached >= 3


def analyze_path(points: Sequence[Point]) -> PathAnalysis:
    """Classify a freehand path as a rough square, a rough circle, or neither.

    A path is a square when its box is within 30% of square, both sides are
    over 20 units and the stroke reaches the box corners. Otherwise it is a
    circle when more than 60% of its points lie within 40% of the expected
    radius ``max(w, h) / 2`` from the box centre and that radius exceeds 15.
    The square check runs first.

    The corner requirement is stricter than the aspect-ratio and side-length
    rule on its own. A round stroke has a box as square as a square stroke
    does, so without it every circle would be classified as a square.
    """
    if len(points) < 3:
        return PathAnalysis(ShapeKind.PATH, BBox(0.0, 0.0, 0.0, 0.0))

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    bounds = BBox(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
    longest = max(bounds.w, bounds.h)
    if longest == 0:
        return PathAnalysis(ShapeKind.PATH, bounds)

    aspect_ratio = abs(bounds.w - bounds.h) / longest
    radius = longest / 2
    cx, cy = bounds.center
    near = sum(1 for p in points if abs(math.hypot(p.x - cx, p.y - cy) - radius) / radius < CIRCLE_RADIUS_TOLERANCE)
    circle_score = near / len(points)

    suggested = ShapeKind.PATH
    if (
        aspect_ratio < SQUARE_ASPECT_LIMIT
        and bounds.w > SQUARE_MIN_SIDE
        and bounds.h > SQUARE_MIN_SIDE
        and _reaches_corners(points, bounds)
    ):
        suggested = ShapeKind.SQUARE
    elif circle_score > CIRCLE_MIN_SCORE and radius > CIRCLE_MIN_RADIUS:
        suggested = ShapeKind.CIRCLE

    logger.debug(
        "Analyzed path",
        points=len(points),
        aspect_ratio=round(aspect_ratio, 3),
        circle_score=round(circle_score, 3),
        suggested=suggested.value,
    )
    return PathAnalysis(suggested, bounds, aspect_ratio, circle_score)


def smooth_path(points: Sequence[Point]) -> list[Point]:
    """Three-point moving average; the endpoints stay where they are."""
    if len(points) < 3:
        return list(points)
    smoothed = [points[0]]
    for prev, curr, nxt in zip(points, points[1:], points[2:]):
        smoothed.append(Point((prev.x + curr.x + nxt.x) / 3, (prev.y + curr.y + nxt.y) / 3))
    smoothed.append(points[-1])
    return smoothed


def _carry_label(source: Shape) -> dict:
    return {"text": source.text, "font_size": source.font_size, "text_color": source.text_color}


def _perfected(shape: BoxedShape, kind: ShapeKind) -> Box:
    size = max(abs(shape.w), abs(shape.h))
    return Box(
        shape_type=kind,
        x=shape.x + (shape.w - size) / 2,
        y=shape.y + (shape.h - size) / 2,
        w=size,
        h=size,
        style=replace(shape.style),
        **_carry_label(shape),
    )


def _complete(shape: Shape, rng: random.Random) -> Shape | None:
    """Return the completed replacement for ``shape``, or None when it cannot be completed."""
    if isinstance(shape, Box) and shape.kind in (ShapeKind.RECT, ShapeKind.SQUARE):
        return _perfected(shape, ShapeKind.SQUARE)
    if isinstance(shape, Box) and shape.kind in (ShapeKind.ELLIPSE, ShapeKind.CIRCLE):
        return _perfected(shape, ShapeKind.CIRCLE)

    if isinstance(shape, Path) and len(shape.points) > 2:
        analysis = analyze_path(shape.points)
        if analysis.suggested in (ShapeKind.SQUARE, ShapeKind.CIRCLE):
            bounds = analysis.bounds
            size = max(bounds.w, bounds.h)
            cx, cy = bounds.center
            return Box(
                shape_type=analysis.suggested,
                x=cx - size / 2,
                y=cy - size / 2,
                w=size,
                h=size,
                style=replace(shape.style),
                **_carry_label(shape),
            )
        first, last = shape.points[0], shape.points[-1]
        points = list(shape.points)
        if math.hypot(last.x - first.x, last.y - first.y) >= CLOSE_DISTANCE:
            mid_x = (first.x + last.x) / 2 + (rng.random() - 0.5) * MIDPOINT_JITTER
            mid_y = (first.y + last.y) / 2 + (rng.random() - 0.5) * MIDPOINT_JITTER
            points.append(Point(mid_x, mid_y))
        points.append(Point(first.x, first.y))
        return Path(points=points, style=replace(shape.style), **_carry_label(shape))

    if shape.kind == ShapeKind.LINE:
        p1, p2 = shape.points
        distance = math.hypot(p2.x - p1.x, p2.y - p1.y)
        if distance <= LINE_COMPLETION_MIN_LENGTH:
            return None
        apex = Point(
            (p1.x + p2.x) / 2 + (rng.random() - 0.5) * distance,
            (p1.y + p2.y) / 2 + (rng.random() - 0.5) * distance,
        )
        return Path(
            points=[Point(p1.x, p1.y), Point(p2.x, p2.y), apex, Point(p1.x, p1.y)],
            style=replace(shape.style),
            **_carry_label(shape),
        )
    return None


def _centered_box(kind: ShapeKind, point: Point, style: ShapeStyle) -> Box:
    half = GENERATED_SIZE / 2
    return Box(shape_type=kind, x=point.x - half, y=point.y - half, w=GENERATED_SIZE, h=GENERATED_SIZE, style=style)


def apply_ai_tool(
    tool: Tool,
    document: Document,
    history: SnapshotHistory,
    point: Point,
    settings: ToolSettings,
    rng: random.Random,
) -> str:
    """Run an AI tool at ``point``.

    Every change is preceded by a history snapshot. Colorize, enhance and
    style only act on an existing shape and otherwise leave the document
    untouched.

    Args:
        tool: One of the AI tools.
        document: The document to edit.
        history: History receiving the pre-change snapshot.
        point: Where the tool was applied.
        settings: Palette used for shapes created from scratch.
        rng: Random source for colors, styles and jitter.

    Returns:
        The notification message to show.

    Raises:
        ValueError: If ``tool`` is not an AI tool.
    """
    if tool not in AI_MESSAGES:
        msg = f"{tool!r} is not an AI tool"
        raise ValueError(msg)

    if tool == Tool.AI_GENERATE:
        history.record(document.shapes)
        document.append(_centered_box(ShapeKind.CIRCLE, point, replace(GENERATED_STYLE)))
        return AI_MESSAGES[tool]

    index = hit_test(document.shapes, point)

    if tool == Tool.AI_AUTO_COMPLETE:
        if index is None:
            history.record(document.shapes)
            document.append(_centered_box(ShapeKind.SQUARE, point, settings.shape_style()))
            return AI_MESSAGES[tool]
        completed = _complete(document.get(index), rng)
        if completed is not None:
            history.record(document.shapes)
            document.mutate(index, lambda _: completed)
        return AI_MESSAGES[tool]

    if index is None:
        return MISS_MESSAGES[tool]

    history.record(document.shapes)
    shape = document.get(index)
    if tool == Tool.AI_COLORIZE:
        shape.style = replace(shape.style, fill_color=rng.choice(SMART_COLORS), stroke_color=SMART_STROKE)
    elif tool == Tool.AI_STYLE:
        shape.style = replace(rng.choice(STYLE_BUNDLES))
    elif tool == Tool.AI_ENHANCE:
        if isinstance(shape, Path):
            shape.points = smooth_path(shape.points)
        shape.style = replace(shape.style, stroke_width=max(shape.style.stroke_width or 2, ENHANCED_MIN_WIDTH))
    return AI_MESSAGES[tool]
