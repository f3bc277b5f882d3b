"""JSON codec for shape sequences.

The wire layout matches what the browser client stores: one flat object per
shape with a ``type`` tag, ``points`` for point-list shapes, ``x/y/w/h`` for
box shapes, and optional ``stroke``, ``fill``, ``width``, ``text``,
``fontSize``, ``textColor`` and ``phase`` keys.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from paintflow.core.models import Arrow, Box, BoxedShape, Curve, Eraser, Line, Path, Point, PointShape, Text
from paintflow.core.style import DEFAULT_STROKE, DEFAULT_STROKE_WIDTH, TRANSPARENT, ShapeStyle
from paintflow.core.types import BOX_KINDS, ShapeKind
from paintflow.exceptions import InvalidShapeError, SerializationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from paintflow.core.models import Shape

_POINT_COUNTS = {ShapeKind.LINE: 2, ShapeKind.ARROW: 2, ShapeKind.CURVE: 3}


def shape_to_dict(shape: Shape) -> dict[str, Any]:
    """Convert a shape to its JSON-ready dictionary.

    Raises:
        InvalidShapeError: For transient eraser trails, which are never persisted.
    """
    if isinstance(shape, Eraser):
        msg = "Eraser trails are not persistable"
        raise InvalidShapeError(msg)

    data: dict[str, Any] = {"type": shape.kind.value}
    if isinstance(shape, PointShape):
        data["points"] = [{"x": p.x, "y": p.y} for p in shape.points]
        if isinstance(shape, Curve):
            data["phase"] = shape.phase
    elif isinstance(shape, BoxedShape):
        data.update(x=shape.x, y=shape.y, w=shape.w, h=shape.h)

    data["stroke"] = shape.style.stroke_color
    data["fill"] = shape.style.fill_color
    data["width"] = shape.style.stroke_width
    if shape.text is not None:
        data["text"] = shape.text
    if shape.font_size is not None:
        data["fontSize"] = shape.font_size
    if shape.text_color is not None:
        data["textColor"] = shape.text_color
    return data


def _number(data: dict[str, Any], key: str, kind: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"{kind} shape requires numeric {key!r}"
        raise InvalidShapeError(msg)
    return value


def _optional_number(
    data: dict[str, Any], key: str, kind: str, default: float | None, *, nullable: bool = False
) -> float | None:
    if key not in data or (nullable and data[key] is None):
        return default
    value = _number(data, key, kind)
    if value < 0:
        msg = f"{kind} shape requires non-negative {key!r}"
        raise InvalidShapeError(msg)
    return value


def _optional_string(
    data: dict[str, Any], key: str, kind: str, default: str | None, *, nullable: bool = False
) -> str | None:
    if key not in data or (nullable and data[key] is None):
        return default
    value = data[key]
    if not isinstance(value, str):
        msg = f"{kind} shape requires {key!r} to be a string"
        raise InvalidShapeError(msg)
    return value


def _phase(data: dict[str, Any]) -> int:
    value = data.get("phase", 1)
    if isinstance(value, bool) or value not in (0, 1):
        msg = f"curve shape requires 'phase' 0 or 1, got {value!r}"
        raise InvalidShapeError(msg)
    return int(value)


def _points(data: dict[str, Any], kind: ShapeKind) -> list[Point]:
    raw = data.get("points")
    if not isinstance(raw, list):
        msg = f"{kind.value} shape requires a 'points' list"
        raise InvalidShapeError(msg)
    points = []
    for item in raw:
        if not isinstance(item, dict):
            msg = f"{kind.value} shape has a malformed point: {item!r}"
            raise InvalidShapeError(msg)
        points.append(Point(x=_number(item, "x", kind.value), y=_number(item, "y", kind.value)))
    expected = _POINT_COUNTS.get(kind)
    if expected is not None and len(points) != expected:
        msg = f"{kind.value} shape requires exactly {expected} points, got {len(points)}"
        raise InvalidShapeError(msg)
    if kind == ShapeKind.PATH and not points:
        msg = "path shape requires at least one point"
        raise InvalidShapeError(msg)
    return points


def shape_from_dict(data: dict[str, Any]) -> Shape:
    """Build a shape from its dictionary form.

    Raises:
        InvalidShapeError: If the data is not a valid persisted shape.
    """
    if not isinstance(data, dict):
        msg = f"Shape must be an object, got {type(data).__name__}"
        raise InvalidShapeError(msg)
    try:
        kind = ShapeKind(data.get("type"))
    except ValueError:
        msg = f"Unknown shape type: {data.get('type')!r}"
        raise InvalidShapeError(msg) from None
    if kind == ShapeKind.ERASER:
        msg = "Eraser trails are not persistable"
        raise InvalidShapeError(msg)

    name = kind.value
    style = ShapeStyle(
        stroke_color=_optional_string(data, "stroke", name, DEFAULT_STROKE),
        fill_color=_optional_string(data, "fill", name, TRANSPARENT),
        stroke_width=_optional_number(data, "width", name, DEFAULT_STROKE_WIDTH),
    )
    common: dict[str, Any] = {
        "style": style,
        "font_size": _optional_number(data, "fontSize", name, None, nullable=True),
        "text_color": _optional_string(data, "textColor", name, None, nullable=True),
    }
    text = _optional_string(data, "text", name, None, nullable=True)
    if text is not None:
        common["text"] = text

    if kind == ShapeKind.PATH:
        return Path(points=_points(data, kind), **common)
    if kind == ShapeKind.LINE:
        return Line(points=_points(data, kind), **common)
    if kind == ShapeKind.ARROW:
        return Arrow(points=_points(data, kind), **common)
    if kind == ShapeKind.CURVE:
        return Curve(points=_points(data, kind), phase=_phase(data), **common)

    box = {key: _number(data, key, kind.value) for key in ("x", "y", "w", "h")}
    if kind == ShapeKind.TEXT:
        common.setdefault("text", "")
        return Text(**box, **common)
    if kind in BOX_KINDS:
        return Box(shape_type=kind, **box, **common)
    msg = f"Unsupported shape type: {kind.value!r}"
    raise InvalidShapeError(msg)


def shapes_to_list(shapes: Iterable[Shape]) -> list[dict[str, Any]]:
    """Convert a shape sequence to dictionaries, skipping transient eraser trails."""
    return [shape_to_dict(shape) for shape in shapes if not isinstance(shape, Eraser)]


def shapes_from_list(items: Any) -> list[Shape]:
    """Build a shape sequence from a list of dictionaries.

    Raises:
        InvalidShapeError: If ``items`` is not a list or any entry is invalid.
    """
    if items is None:
        return []
    if not isinstance(items, list):
        msg = f"Shapes must be a list, got {type(items).__name__}"
        raise InvalidShapeError(msg)
    return [shape_from_dict(item) for item in items]


def dumps_shapes(shapes: Iterable[Shape]) -> str:
    """Serialize a shape sequence to compact JSON text."""
    return json.dumps(shapes_to_list(shapes), separators=(",", ":"))


def loads_shapes(serialized: str) -> list[Shape]:
    """Parse JSON text produced by :func:`dumps_shapes`.

    Raises:
        SerializationError: If the text is not valid JSON or holds invalid shapes.
    """
    try:
        return shapes_from_list(json.loads(serialized))
    except (json.JSONDecodeError, TypeError) as exc:
        msg = f"Snapshot is not valid JSON: {exc}"
        raise SerializationError(msg) from exc
    except InvalidShapeError as exc:
        msg = f"Snapshot holds an invalid shape: {exc}"
        raise SerializationError(msg) from exc
