"""Core domain models for paintflow."""

from paintflow.core.geometry import BBox, Outline, Subpath, bounding_box, build_outline
from paintflow.core.history import SnapshotHistory
from paintflow.core.models import (
    Arrow,
    Box,
    BoxedShape,
    Curve,
    Document,
    Drawing,
    Eraser,
    Line,
    Path,
    Point,
    PointShape,
    Shape,
    Text,
)
from paintflow.core.picking import hit_test
from paintflow.core.serialization import dumps_shapes, loads_shapes, shape_from_dict, shape_to_dict
from paintflow.core.style import ShapeStyle, ToolSettings
from paintflow.core.types import ShapeKind, Tool

__all__ = [
    "Arrow",
    "BBox",
    "Box",
    "BoxedShape",
    "Curve",
    "Document",
    "Drawing",
    "Eraser",
    "Line",
    "Outline",
    "Path",
    "Point",
    "PointShape",
    "Shape",
    "ShapeKind",
    "ShapeStyle",
    "SnapshotHistory",
    "Subpath",
    "Text",
    "Tool",
    "ToolSettings",
    "bounding_box",
    "build_outline",
    "dumps_shapes",
    "hit_test",
    "loads_shapes",
    "shape_from_dict",
    "shape_to_dict",
]
