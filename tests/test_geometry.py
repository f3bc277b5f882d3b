"""Tests for the geometry kernel."""

from __future__ import annotations

import math

import pytest

from paintflow.core.geometry import (
    BBox,
    bounding_box,
    build_outline,
    normalize_box,
    point_to_segment_distance,
    polygon_contains,
    quadratic_points,
    roundrect_radius,
)
from paintflow.core.models import Arrow, Box, Curve, Eraser, Line, Path, Point, Text
from paintflow.core.types import BOX_KINDS, ShapeKind

STROKE_ONLY = {
    ShapeKind.CROSS,
    ShapeKind.ARROW_LEFT,
    ShapeKind.ARROW_RIGHT,
    ShapeKind.ARROW_UP,
    ShapeKind.ARROW_DOWN,
    ShapeKind.ARROW_LR,
    ShapeKind.ARROW_UD,
}


class TestBoxes:
    """Tests for bounding boxes and normalization."""

    def test_normalize_negative_drag(self) -> None:
        """Test a drag towards the top-left normalizes to a min-corner box."""
        assert normalize_box(100, 80, -40, -30) == BBox(60, 50, 40, 30)

    def test_bounding_box_of_points(self, sample_path: Path) -> None:
        """Test point shapes use the extent of their points."""
        assert bounding_box(sample_path) == BBox(0, 100, 100, 0)

    def test_bounding_box_of_empty_path(self) -> None:
        """Test a path without points has an empty box at the origin."""
        assert bounding_box(Path()) == BBox(0, 0, 0, 0)

    def test_bounding_box_of_box_shape(self, red_rect: Box) -> None:
        """Test box shapes use their normalized record."""
        assert bounding_box(red_rect) == BBox(10, 10, 100, 50)

    def test_expanded_and_contains(self) -> None:
        """Test expansion grows every side and containment is inclusive."""
        box = BBox(10, 10, 20, 20).expanded(5)
        assert box == BBox(5, 5, 30, 30)
        assert box.contains(5, 35)
        assert not box.contains(4.9, 20)


class TestPrimitives:
    """Tests for the low level geometric helpers."""

    def test_segment_distance(self) -> None:
        """Test the distance is measured to the closest point of the segment."""
        assert point_to_segment_distance((5, 3), (0, 0), (10, 0)) == pytest.approx(3)
        assert point_to_segment_distance((13, 4), (0, 0), (10, 0)) == pytest.approx(5)

    def test_degenerate_segment(self) -> None:
        """Test a zero-length segment measures to its point."""
        assert point_to_segment_distance((3, 4), (0, 0), (0, 0)) == pytest.approx(5)

    def test_polygon_contains(self) -> None:
        """Test even-odd containment for a square."""
        square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        assert polygon_contains(square, 5, 5)
        assert not polygon_contains(square, 15, 5)

    def test_quadratic_endpoints(self) -> None:
        """Test the flattened curve starts and ends on its anchors."""
        points = quadratic_points((0, 0), (50, 100), (100, 0))
        assert points[0] == pytest.approx((0, 0))
        assert points[-1] == pytest.approx((100, 0))
        assert max(y for _, y in points) == pytest.approx(50)

    def test_roundrect_radius_is_capped(self) -> None:
        """Test the corner radius is a quarter of the short side, capped at 12 before scaling."""
        assert roundrect_radius(8, 40) == pytest.approx(2)
        assert roundrect_radius(-200, 400) == pytest.approx(3)


class TestOutlines:
    """Tests for the per-variant outline builders."""

    @pytest.mark.parametrize("kind", sorted(BOX_KINDS))
    def test_every_primitive_has_an_outline(self, kind: ShapeKind) -> None:
        """Test every primitive builds an outline; all but the stroke-only ones are fillable."""
        outline = build_outline(Box(shape_type=kind, x=0, y=0, w=100, h=100))
        assert outline.subpaths
        assert bool(outline.fill_regions) is (kind not in STROKE_ONLY)

    def test_rect_contains_interior(self, red_rect: Box) -> None:
        """Test the rectangle outline contains its interior only."""
        outline = build_outline(red_rect)
        assert outline.contains(50, 30)
        assert not outline.contains(200, 200)

    def test_donut_has_hole(self) -> None:
        """Test the donut centre is a hole while its ring is filled."""
        outline = build_outline(Box(shape_type=ShapeKind.DONUT, x=0, y=0, w=100, h=100))
        assert outline.holes
        assert not outline.contains(50, 50)
        assert outline.contains(50, 5)

    def test_square_anchors_at_drag_origin(self) -> None:
        """Test a square dragged up-left grows from its origin by the short side."""
        outline = build_outline(Box(shape_type=ShapeKind.SQUARE, x=100, y=100, w=-60, h=-40))
        xs = [x for s in outline.subpaths for x, _ in s.points]
        ys = [y for s in outline.subpaths for _, y in s.points]
        assert (min(xs), max(xs)) == pytest.approx((60, 100))
        assert (min(ys), max(ys)) == pytest.approx((60, 100))

    def test_arrow_has_head(self) -> None:
        """Test an arrow adds a head subpath at its second point."""
        line = build_outline(Line(points=[Point(0, 0), Point(100, 0)]))
        arrow = build_outline(Arrow(points=[Point(0, 0), Point(100, 0)]))
        assert len(line.subpaths) == 1
        assert len(arrow.subpaths) == 2
        assert (100, 0) in arrow.subpaths[1].points

    def test_curve_passes_near_control(self) -> None:
        """Test the curve bends towards its control point."""
        curve = Curve(points=[Point(0, 0), Point(100, 0), Point(50, 100)], phase=1)
        outline = build_outline(curve)
        assert outline.distance_to(50, 50) == pytest.approx(0, abs=1)

    def test_text_outline_is_its_box(self, sample_text: Text) -> None:
        """Test standalone text uses its box as outline."""
        assert build_outline(sample_text).contains(30, 30)

    def test_eraser_has_no_outline(self) -> None:
        """Test eraser trails have nothing to draw or hit."""
        assert build_outline(Eraser(points=[Point(0, 0), Point(5, 5)])).subpaths == []

    def test_single_point_path_distance(self) -> None:
        """Test a dot is measured from its single point."""
        outline = build_outline(Path(points=[Point(10, 10)]))
        assert outline.distance_to(13, 14) == pytest.approx(5)
        assert math.isinf(build_outline(Path()).distance_to(0, 0))
