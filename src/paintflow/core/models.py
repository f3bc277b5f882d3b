"""Core domain models for the paintflow document."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from paintflow.core.style import ShapeStyle
from paintflow.core.types import BOX_KINDS, ShapeKind
from paintflow.exceptions import InvalidShapeError, ShapeIndexError

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class Point:
    """Represents a point in 2D canvas space.

    Attributes:
        x: X-coordinate position.
        y: Y-coordinate position.
    """

    x: float
    y: float


@dataclass
class Shape:
    """Base class for all shapes in a document.

    Attributes:
        kind: Variant tag of the shape.
        style: Stroke/fill styling of the shape body.
        text: Optional label drawn over the shape.
        font_size: Font size of the label in pixels.
        text_color: Color of the label.
    """

    kind: ShapeKind = field(init=False)
    style: ShapeStyle = field(default_factory=ShapeStyle)
    text: str | None = None
    font_size: int | None = None
    text_color: str | None = None

    @property
    def has_text(self) -> bool:
        """Whether the shape carries a non-blank label."""
        return bool(self.text and self.text.strip())


@dataclass
class PointShape(Shape):
    """Base class for shapes defined by an ordered list of points.

    Attributes:
        points: Ordered points of the shape.
    """

    points: list[Point] = field(default_factory=list)


@dataclass
class Path(PointShape):
    """A freehand polyline drawn with the brush."""

    def __post_init__(self) -> None:
        """Set the kind to PATH after initialization."""
        self.kind = ShapeKind.PATH


@dataclass
class Line(PointShape):
    """A straight segment between exactly two points."""

    def __post_init__(self) -> None:
        """Set the kind to LINE after initialization."""
        self.kind = ShapeKind.LINE


@dataclass
class Arrow(Line):
    """A straight segment with an arrow head at its second point."""

    def __post_init__(self) -> None:
        """Set the kind to ARROW after initialization."""
        self.kind = ShapeKind.ARROW


@dataclass
class Curve(PointShape):
    """A quadratic curve stored as ``[start, end, control]``.

    Attributes:
        phase: 0 while the end point is being dragged, 1 while the control point is.
    """

    phase: int = 0

    def __post_init__(self) -> None:
        """Set the kind to CURVE after initialization."""
        self.kind = ShapeKind.CURVE


@dataclass
class Eraser(PointShape):
    """Transient eraser trail; never part of a document."""

    def __post_init__(self) -> None:
        """Set the kind to ERASER after initialization."""
        self.kind = ShapeKind.ERASER


@dataclass
class BoxedShape(Shape):
    """Base class for shapes dragged out as a box.

    Width and height are signed: a drag towards the top-left yields negative
    values, which geometry normalizes on read.

    Attributes:
        x: X-coordinate of the drag origin.
        y: Y-coordinate of the drag origin.
        w: Signed width.
        h: Signed height.
    """

    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0


@dataclass
class Box(BoxedShape):
    """A parametric primitive (rect, star, callout, ...) drawn inside its box.

    Attributes:
        shape_type: Which primitive to draw.
    """

    shape_type: ShapeKind = ShapeKind.RECT

    def __post_init__(self) -> None:
        """Validate the primitive and mirror it into ``kind``."""
        shape_type = ShapeKind(self.shape_type)
        if shape_type not in BOX_KINDS:
            msg = f"{shape_type.value!r} is not a box primitive"
            raise InvalidShapeError(msg)
        self.shape_type = shape_type
        self.kind = shape_type


@dataclass
class Text(BoxedShape):
    """A standalone text block; its text is the primary content."""

    text: str | None = ""

    def __post_init__(self) -> None:
        """Set the kind to TEXT after initialization."""
        self.kind = ShapeKind.TEXT


@dataclass
class Document:
    """The ordered shape sequence being edited.

    List order is z-order: later shapes are drawn on top and win hit-test ties.

    Attributes:
        shapes: Shapes in drawing order.
        selection: Index of the selected shape, or -1 for none.
        drawing_id: Persistence identifier, None until first save.
        title: Display title used when saving.
    """

    shapes: list[Shape] = field(default_factory=list)
    selection: int = -1
    drawing_id: UUID | None = None
    title: str = "Untitled"

    def count(self) -> int:
        """Number of shapes in the document."""
        return len(self.shapes)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.shapes):
            raise ShapeIndexError(index, len(self.shapes))

    def get(self, index: int) -> Shape:
        """Get the shape at ``index``.

        Raises:
            ShapeIndexError: If the index is out of range.
        """
        self._check(index)
        return self.shapes[index]

    def append(self, shape: Shape) -> int:
        """Append a shape on top of the others and return its index."""
        self.shapes.append(shape)
        return len(self.shapes) - 1

    def mutate(self, index: int, fn: Callable[[Shape], Shape | None]) -> Shape:
        """Apply ``fn`` to the shape at ``index``.

        ``fn`` may edit the shape in place (returning None) or return a
        replacement shape, which takes the same slot.

        Raises:
            ShapeIndexError: If the index is out of range.
        """
        self._check(index)
        replacement = fn(self.shapes[index])
        if replacement is not None:
            self.shapes[index] = replacement
        return self.shapes[index]

    def remove_at(self, index: int) -> Shape:
        """Remove and return the shape at ``index``, keeping the selection valid.

        Raises:
            ShapeIndexError: If the index is out of range.
        """
        self._check(index)
        removed = self.shapes.pop(index)
        if self.selection == index:
            self.selection = -1
        elif self.selection > index:
            self.selection -= 1
        return removed

    def replace_all(self, shapes: list[Shape]) -> None:
        """Replace the whole sequence and clear the selection."""
        self.shapes = list(shapes)
        self.selection = -1

    def select(self, index: int | None) -> None:
        """Select the shape at ``index``; None or -1 clears the selection.

        Raises:
            ShapeIndexError: If the index is out of range.
        """
        if index is None or index < 0:
            self.selection = -1
            return
        self._check(index)
        self.selection = index

    @property
    def selected(self) -> Shape | None:
        """The selected shape, if any."""
        if 0 <= self.selection < len(self.shapes):
            return self.shapes[self.selection]
        return None


@dataclass
class Drawing:
    """A persisted drawing: a titled shape sequence plus its preview image.

    Attributes:
        id: Unique identifier for the drawing.
        title: Display title.
        shapes: The drawing's shapes in z-order.
        image_data_url: PNG preview as a ``data:`` URL, if one was uploaded.
        created_at: Timestamp when the drawing was created.
        updated_at: Timestamp when the drawing was last updated.
    """

    id: UUID = field(default_factory=uuid4)
    title: str = "Untitled"
    shapes: list[Shape] = field(default_factory=list)
    image_data_url: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
