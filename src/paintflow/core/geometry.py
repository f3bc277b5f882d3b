"""Geometry kernel: bounding boxes, outlines and distance helpers.

Every shape variant is reduced to an :class:`Outline`, a list of flattened
subpaths. The renderer fills and strokes exactly these subpaths and the
picking engine tests containment against them, so what is drawn is what can be
clicked. Curved edges are flattened with fixed segment counts, which keeps both
rendering and picking deterministic.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from paintflow.core.models import Box, BoxedShape, Curve, Eraser, Line, Path, PointShape, Text
from paintflow.core.types import ShapeKind
from paintflow.exceptions import InvalidShapeError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from paintflow.core.models import Point, Shape

Vec = tuple[float, float]

CURVE_SEGMENTS = 24
ELLIPSE_SEGMENTS = 72
CORNER_SEGMENTS = 6

STAR_INNER_RATIO = 2.5
ROUNDRECT_MAX_RADIUS = 12
ROUNDRECT_RADIUS_FACTOR = 0.25
CALLOUT_RADIUS = 10
CALLOUT_TAIL_RATIO = 0.18
ARROW_HEAD_BASE = 10
BOX_ARROW_HEAD_BASE = 8
SUN_RAYS = 8
CLOUD_LOBES = 8


@dataclass(frozen=True)
class BBox:
    """Axis-aligned box with a min corner and non-negative size."""

    x: float
    y: float
    w: float
    h: float

    @property
    def center(self) -> Vec:
        return (self.x + self.w / 2, self.y + self.h / 2)

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def expanded(self, margin: float) -> BBox:
        """Grow the box by ``margin`` on every side."""
        return BBox(self.x - margin, self.y - margin, self.w + 2 * margin, self.h + 2 * margin)

    def contains(self, x: float, y: float) -> bool:
        """Inclusive containment test."""
        return self.x <= x <= self.right and self.y <= y <= self.bottom


@dataclass
class Subpath:
    """A flattened run of points.

    Attributes:
        points: Vertices in drawing order.
        closed: Whether the run is closed and therefore fillable.
        hole: Whether the closed run is cut out of the fill.
    """

    points: list[Vec]
    closed: bool = False
    hole: bool = False

    def segments(self) -> Iterator[tuple[Vec, Vec]]:
        """Yield consecutive segments, including the closing one."""
        pts = self.points
        for a, b in zip(pts, pts[1:]):
            yield a, b
        if self.closed and len(pts) > 2:
            yield pts[-1], pts[0]


@dataclass
class Outline:
    """The geometric outline of a shape, shared by renderer and picker."""

    subpaths: list[Subpath] = field(default_factory=list)

    @property
    def fill_regions(self) -> list[Subpath]:
        return [s for s in self.subpaths if s.closed and not s.hole and len(s.points) > 2]

    @property
    def holes(self) -> list[Subpath]:
        return [s for s in self.subpaths if s.closed and s.hole and len(s.points) > 2]

    def contains(self, x: float, y: float) -> bool:
        """Whether the point lies inside the filled area (fill regions minus holes)."""
        if not any(polygon_contains(s.points, x, y) for s in self.fill_regions):
            return False
        return not any(polygon_contains(s.points, x, y) for s in self.holes)

    def distance_to(self, x: float, y: float) -> float:
        """Smallest distance from the point to any stroked segment."""
        best = math.inf
        for subpath in self.subpaths:
            if len(subpath.points) == 1:
                px, py = subpath.points[0]
                best = min(best, math.hypot(x - px, y - py))
                continue
            for a, b in subpath.segments():
                best = min(best, point_to_segment_distance((x, y), a, b))
        return best


def normalize_box(x: float, y: float, w: float, h: float) -> BBox:
    """Turn a signed (x, y, w, h) record into a min-corner box."""
    return BBox(min(x, x + w), min(y, y + h), abs(w), abs(h))


def bounding_box(shape: Shape) -> BBox:
    """Compute the axis-aligned bounding box of any shape variant."""
    if isinstance(shape, PointShape):
        if not shape.points:
            return BBox(0.0, 0.0, 0.0, 0.0)
        xs = [p.x for p in shape.points]
        ys = [p.y for p in shape.points]
        return BBox(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
    if isinstance(shape, BoxedShape):
        return normalize_box(shape.x, shape.y, shape.w, shape.h)
    msg = f"Unsupported shape variant: {type(shape).__name__}"
    raise InvalidShapeError(msg)


def point_to_segment_distance(point: Vec, a: Vec, b: Vec) -> float:
    """Distance from ``point`` to the closed segment ``a``-``b``."""
    px, py = point
    ax, ay = a
    bx, by = b
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - ax, py - ay)
    t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / length_sq))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def polygon_contains(points: Sequence[Vec], x: float, y: float) -> bool:
    """Even-odd ray cast containment test."""
    inside = False
    n = len(points)
    j = n - 1
    for i in range(n):
        xi, yi = points[i]
        xj, yj = points[j]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def regular_polygon_vertices(center: Vec, radius: float, sides: int, phase: float = -math.pi / 2) -> list[Vec]:
    """Vertices of a regular polygon, the first one at angle ``phase`` (apex up by default)."""
    cx, cy = center
    step = 2 * math.pi / sides
    return [(cx + radius * math.cos(step * i + phase), cy + radius * math.sin(step * i + phase)) for i in range(sides)]


def star_vertices(center: Vec, outer: float, points: int) -> list[Vec]:
    """Alternating outer/inner vertices of a star with ``points`` tips."""
    tips = regular_polygon_vertices(center, outer, points)
    valleys = regular_polygon_vertices(center, outer / STAR_INNER_RATIO, points, -math.pi / 2 + math.pi / points)
    return [vertex for pair in zip(tips, valleys) for vertex in pair]


def arc_points(center: Vec, radius: float, start: float, end: float, segments: int = ELLIPSE_SEGMENTS) -> list[Vec]:
    """Points along a circular arc from ``start`` to ``end`` (radians, y axis down)."""
    cx, cy = center
    angles = (start + (end - start) * i / segments for i in range(segments + 1))
    return [(cx + radius * math.cos(a), cy + radius * math.sin(a)) for a in angles]


def ellipse_points(center: Vec, rx: float, ry: float, segments: int = ELLIPSE_SEGMENTS) -> list[Vec]:
    """Closed ring of points around an axis-aligned ellipse."""
    cx, cy = center
    return [
        (cx + rx * math.cos(2 * math.pi * i / segments), cy + ry * math.sin(2 * math.pi * i / segments))
        for i in range(segments)
    ]


def quadratic_points(p0: Vec, control: Vec, p1: Vec, segments: int = CURVE_SEGMENTS) -> list[Vec]:
    """Flatten a quadratic Bezier, endpoints included."""
    out = []
    for i in range(segments + 1):
        t = i / segments
        u = 1 - t
        out.append(
            (
                u * u * p0[0] + 2 * u * t * control[0] + t * t * p1[0],
                u * u * p0[1] + 2 * u * t * control[1] + t * t * p1[1],
            )
        )
    return out


def cubic_points(p0: Vec, c1: Vec, c2: Vec, p1: Vec, segments: int = CURVE_SEGMENTS) -> list[Vec]:
    """Flatten a cubic Bezier, endpoints included."""
    out = []
    for i in range(segments + 1):
        t = i / segments
        u = 1 - t
        a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
        out.append(
            (
                a * p0[0] + b * c1[0] + c * c2[0] + d * p1[0],
                a * p0[1] + b * c1[1] + c * c2[1] + d * p1[1],
            )
        )
    return out


def rounded_rect_points(box: BBox, radius: float) -> list[Vec]:
    """Closed ring of a rectangle with quadratic corners; radius clamped to half of either side."""
    rx = min(box.w / 2, radius)
    ry = min(box.h / 2, radius)
    x0, y0, x1, y1 = box.x, box.y, box.right, box.bottom
    pts: list[Vec] = [(x0 + rx, y0), (x1 - rx, y0)]
    pts += quadratic_points((x1 - rx, y0), (x1, y0), (x1, y0 + ry), CORNER_SEGMENTS)[1:]
    pts.append((x1, y1 - ry))
    pts += quadratic_points((x1, y1 - ry), (x1, y1), (x1 - rx, y1), CORNER_SEGMENTS)[1:]
    pts.append((x0 + rx, y1))
    pts += quadratic_points((x0 + rx, y1), (x0, y1), (x0, y1 - ry), CORNER_SEGMENTS)[1:]
    pts.append((x0, y0 + ry))
    pts += quadratic_points((x0, y0 + ry), (x0, y0), (x0 + rx, y0), CORNER_SEGMENTS)[1:-1]
    return pts


def roundrect_radius(w: float, h: float) -> float:
    """Corner radius of a ``roundrect`` of signed size ``w`` x ``h``."""
    return min(ROUNDRECT_MAX_RADIUS, min(abs(w), abs(h))) * ROUNDRECT_RADIUS_FACTOR


def arrow_head(tip: Vec, angle: float, size: float) -> Subpath:
    """Open two-stroke arrow head ending at ``tip`` for a shaft heading at ``angle``."""
    tx, ty = tip
    left = (tx - size * math.cos(angle - math.pi / 6), ty - size * math.sin(angle - math.pi / 6))
    right = (tx - size * math.cos(angle + math.pi / 6), ty - size * math.sin(angle + math.pi / 6))
    return Subpath([left, tip, right])


def _xy(point: Point) -> Vec:
    return (point.x, point.y)


# Point-list variants


def _path_outline(shape: Path) -> Outline:
    if not shape.points:
        return Outline()
    return Outline([Subpath([_xy(p) for p in shape.points])])


def _line_outline(shape: Line) -> Outline:
    if len(shape.points) < 2:
        return Outline()
    p0, p1 = _xy(shape.points[0]), _xy(shape.points[1])
    outline = Outline([Subpath([p0, p1])])
    if shape.kind == ShapeKind.ARROW:
        angle = math.atan2(p1[1] - p0[1], p1[0] - p0[0])
        outline.subpaths.append(arrow_head(p1, angle, ARROW_HEAD_BASE + shape.style.stroke_width))
    return outline


def _curve_outline(shape: Curve) -> Outline:
    if len(shape.points) < 3:
        return Outline()
    start, end, control = (_xy(p) for p in shape.points[:3])
    return Outline([Subpath(quadratic_points(start, control, end))])


# Box variants; each builder receives the normalized box and the shape


def _rect(box: BBox, shape: BoxedShape) -> Outline:
    return Outline([Subpath([(box.x, box.y), (box.right, box.y), (box.right, box.bottom), (box.x, box.bottom)], closed=True)])


def _square_origin(shape: BoxedShape) -> tuple[float, float, float]:
    # The square side is anchored at the drag origin, growing in the drag direction.
    size = min(abs(shape.w), abs(shape.h))
    x0 = shape.x if shape.w >= 0 else shape.x - size
    y0 = shape.y if shape.h >= 0 else shape.y - size
    return x0, y0, size


def _square(box: BBox, shape: BoxedShape) -> Outline:
    x0, y0, size = _square_origin(shape)
    return _rect(BBox(x0, y0, size, size), shape)


def _roundrect(box: BBox, shape: BoxedShape) -> Outline:
    return Outline([Subpath(rounded_rect_points(box, roundrect_radius(shape.w, shape.h)), closed=True)])


def _ellipse(box: BBox, shape: BoxedShape) -> Outline:
    return Outline([Subpath(ellipse_points(box.center, box.w / 2, box.h / 2), closed=True)])


def _circle(box: BBox, shape: BoxedShape) -> Outline:
    x0, y0, size = _square_origin(shape)
    return Outline([Subpath(ellipse_points((x0 + size / 2, y0 + size / 2), size / 2, size / 2), closed=True)])


def _diamond(box: BBox, shape: BoxedShape) -> Outline:
    cx, cy = box.center
    return Outline([Subpath([(cx, box.y), (box.right, cy), (cx, box.bottom), (box.x, cy)], closed=True)])


def _triangle(box: BBox, shape: BoxedShape) -> Outline:
    apex = (box.x + box.w / 2, box.y)
    return Outline([Subpath([apex, (box.right, box.bottom), (box.x, box.bottom)], closed=True)])


def _triangle_right(box: BBox, shape: BoxedShape) -> Outline:
    return Outline([Subpath([(box.x, box.y), (box.right, box.bottom), (box.x, box.bottom)], closed=True)])


def _star(tips: int) -> Callable[[BBox, BoxedShape], Outline]:
    def build(box: BBox, shape: BoxedShape) -> Outline:
        return Outline([Subpath(star_vertices(box.center, min(box.w, box.h) / 2, tips), closed=True)])

    return build


def _polygon(sides: int) -> Callable[[BBox, BoxedShape], Outline]:
    def build(box: BBox, shape: BoxedShape) -> Outline:
        return Outline([Subpath(regular_polygon_vertices(box.center, min(box.w, box.h) / 2, sides), closed=True)])

    return build


def _donut(box: BBox, shape: BoxedShape) -> Outline:
    outer = min(box.w, box.h) / 2
    return Outline(
        [
            Subpath(ellipse_points(box.center, outer, outer), closed=True),
            Subpath(ellipse_points(box.center, outer / 2, outer / 2), closed=True, hole=True),
        ]
    )


def _cross(box: BBox, shape: BoxedShape) -> Outline:
    return Outline(
        [
            Subpath([(box.x, box.y), (box.right, box.bottom)]),
            Subpath([(box.right, box.y), (box.x, box.bottom)]),
        ]
    )


def _box_arrows(box: BBox, shape: BoxedShape) -> Outline:
    cx, cy = box.center
    size = BOX_ARROW_HEAD_BASE + shape.style.stroke_width
    kind = shape.kind
    shafts: list[tuple[Vec, Vec]] = []
    if kind in (ShapeKind.ARROW_LEFT, ShapeKind.ARROW_LR):
        shafts.append(((box.right, cy), (box.x, cy)))
    if kind in (ShapeKind.ARROW_RIGHT, ShapeKind.ARROW_LR):
        shafts.append(((box.x, cy), (box.right, cy)))
    if kind in (ShapeKind.ARROW_UP, ShapeKind.ARROW_UD):
        shafts.append(((cx, box.bottom), (cx, box.y)))
    if kind in (ShapeKind.ARROW_DOWN, ShapeKind.ARROW_UD):
        shafts.append(((cx, box.y), (cx, box.bottom)))
    outline = Outline()
    for start, tip in shafts:
        angle = math.atan2(tip[1] - start[1], tip[0] - start[0])
        outline.subpaths.append(Subpath([start, tip]))
        outline.subpaths.append(arrow_head(tip, angle, size))
    return outline


def _callout_rounded(box: BBox, shape: BoxedShape) -> Outline:
    tail_h = box.h * CALLOUT_TAIL_RATIO
    tail_w = box.w * CALLOUT_TAIL_RATIO
    body = BBox(box.x, box.y, box.w, box.h - tail_h)
    base_y = box.bottom - tail_h
    tail = [
        (box.x + box.w * 0.3, base_y),
        (box.x + box.w * 0.3 + tail_w * 0.4, box.bottom),
        (box.x + box.w * 0.5, base_y),
    ]
    return Outline([Subpath(rounded_rect_points(body, CALLOUT_RADIUS), closed=True), Subpath(tail, closed=True)])


def _callout_cloud(box: BBox, shape: BoxedShape) -> Outline:
    cx, cy = box.center
    r = min(box.w, box.h) / 4
    lobes = regular_polygon_vertices((cx, cy), r * 1.2, CLOUD_LOBES, 0.0)
    return Outline([Subpath(ellipse_points(lobe, r, r), closed=True) for lobe in lobes])


def _heart(box: BBox, shape: BoxedShape) -> Outline:
    cx, cy = box.center
    bottom = (cx, cy + box.h * 0.25)
    notch = (cx, box.y + box.h * 0.25)
    left = cubic_points(bottom, (cx - box.w * 0.5, cy - box.h * 0.15), (cx - box.w * 0.15, box.y), notch)
    right = cubic_points(notch, (cx + box.w * 0.15, box.y), (cx + box.w * 0.5, cy - box.h * 0.15), bottom)
    return Outline([Subpath(left + right[1:-1], closed=True)])


def _bolt(box: BBox, shape: BoxedShape) -> Outline:
    x, y, w, h = box.x, box.y, box.w, box.h
    return Outline(
        [
            Subpath(
                [
                    (x + w * 0.55, y),
                    (x + w * 0.2, y + h * 0.6),
                    (x + w * 0.5, y + h * 0.6),
                    (x + w * 0.45, y + h),
                    (x + w * 0.8, y + h * 0.4),
                    (x + w * 0.5, y + h * 0.4),
                ],
                closed=True,
            )
        ]
    )


def _sun(box: BBox, shape: BoxedShape) -> Outline:
    r = min(box.w, box.h) / 4
    outline = Outline([Subpath(ellipse_points(box.center, r, r), closed=True)])
    inner = regular_polygon_vertices(box.center, r, SUN_RAYS, 0.0)
    outer = regular_polygon_vertices(box.center, r * 1.8, SUN_RAYS, 0.0)
    outline.subpaths.extend(Subpath([a, b]) for a, b in zip(inner, outer))
    return outline


def _moon(box: BBox, shape: BoxedShape) -> Outline:
    cx, cy = box.center
    r = min(box.w, box.h) / 2
    outer = arc_points((cx, cy), r, math.pi * 0.2, math.pi * 1.8)
    inner = arc_points((cx + r * 0.5, cy - r * 0.1), r * 0.8, math.pi * 1.2, math.pi * 0.8, ELLIPSE_SEGMENTS // 4)
    return Outline([Subpath(outer + inner, closed=True)])


BOX_OUTLINES: dict[ShapeKind, Callable[[BBox, BoxedShape], Outline]] = {
    ShapeKind.RECT: _rect,
    ShapeKind.SQUARE: _square,
    ShapeKind.ROUNDRECT: _roundrect,
    ShapeKind.ELLIPSE: _ellipse,
    ShapeKind.CIRCLE: _circle,
    ShapeKind.DIAMOND: _diamond,
    ShapeKind.TRIANGLE: _triangle,
    ShapeKind.TRIANGLE_ISO: _triangle,
    ShapeKind.TRIANGLE_RIGHT: _triangle_right,
    ShapeKind.STAR: _star(5),
    ShapeKind.STAR4: _star(4),
    ShapeKind.STAR5: _star(5),
    ShapeKind.STAR6: _star(6),
    ShapeKind.POLYGON5: _polygon(5),
    ShapeKind.POLYGON6: _polygon(6),
    ShapeKind.DONUT: _donut,
    ShapeKind.CROSS: _cross,
    ShapeKind.ARROW_LEFT: _box_arrows,
    ShapeKind.ARROW_RIGHT: _box_arrows,
    ShapeKind.ARROW_UP: _box_arrows,
    ShapeKind.ARROW_DOWN: _box_arrows,
    ShapeKind.ARROW_LR: _box_arrows,
    ShapeKind.ARROW_UD: _box_arrows,
    ShapeKind.CALLOUT_ROUNDED: _callout_rounded,
    ShapeKind.CALLOUT_CLOUD: _callout_cloud,
    ShapeKind.HEART: _heart,
    ShapeKind.BOLT: _bolt,
    ShapeKind.SUN: _sun,
    ShapeKind.MOON: _moon,
}


def build_outline(shape: Shape) -> Outline:
    """Build the outline used for both drawing and hit-testing ``shape``.

    Raises:
        InvalidShapeError: If the variant has no outline builder.
    """
    if isinstance(shape, Eraser):
        return Outline()
    if isinstance(shape, Curve):
        return _curve_outline(shape)
    if isinstance(shape, Line):
        return _line_outline(shape)
    if isinstance(shape, Path):
        return _path_outline(shape)
    if isinstance(shape, Text):
        return _rect(bounding_box(shape), shape)
    if isinstance(shape, Box):
        builder = BOX_OUTLINES.get(shape.kind)
        if builder is not None:
            return builder(bounding_box(shape), shape)
    msg = f"No outline for shape kind {getattr(shape, 'kind', None)!r}"
    raise InvalidShapeError(msg)
