"""Point-wise erasure of document shapes."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog

from paintflow.core.geometry import bounding_box, build_outline, point_to_segment_distance
from paintflow.core.models import BoxedShape, Curve, Line, Path

if TYPE_CHECKING:
    from paintflow.core.models import Document, Point, Shape

logger = structlog.get_logger(__name__)

DEFAULT_ERASER_SIZE = 10
MIN_SURVIVING_RATIO = 0.3


def _erase_path(document: Document, index: int, shape: Path, point: Point, radius: float) -> bool:
    kept = [p for p in shape.points if math.hypot(p.x - point.x, p.y - point.y) > radius]
    if len(kept) == len(shape.points):
        return False
    if len(kept) < 2 or len(kept) < len(shape.points) * MIN_SURVIVING_RATIO:
        document.remove_at(index)
        logger.debug("Erased path", index=index)
        return True
    shape.points = kept
    return True


def _touches(shape: Shape, point: Point, radius: float) -> bool:
    if isinstance(shape, Curve):
        return build_outline(shape).distance_to(point.x, point.y) < radius
    if isinstance(shape, Line):
        a, b = shape.points[0], shape.points[1]
        return point_to_segment_distance((point.x, point.y), (a.x, a.y), (b.x, b.y)) < radius
    if isinstance(shape, BoxedShape):
        return bounding_box(shape).expanded(radius).contains(point.x, point.y)
    return False


def erase_at(document: Document, point: Point, size: float | None = None) -> int:
    """Erase whatever the eraser covers at ``point``.

    Paths lose the points within the eraser radius and disappear when fewer
    than two points, or fewer than 30% of them, survive. Lines, arrows and
    curves disappear when their stroke passes within the radius. Box shapes
    disappear when the point, grown by the radius, overlaps their bounding box.
    Applying the eraser twice at the same point changes nothing the second time.

    Args:
        document: The document to mutate.
        point: Eraser centre.
        size: Eraser diameter; defaults to 10.

    Returns:
        The number of shapes that were trimmed or removed.
    """
    radius = (size or DEFAULT_ERASER_SIZE) / 2
    changed = 0
    for index in range(document.count() - 1, -1, -1):
        shape = document.get(index)
        if isinstance(shape, Path):
            changed += _erase_path(document, index, shape, point, radius)
        elif _touches(shape, point, radius):
            document.remove_at(index)
            logger.debug("Erased shape", index=index, kind=shape.kind.value)
            changed += 1
    return changed
