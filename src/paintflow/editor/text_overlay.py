"""Overlay text editor bound to a shape's geometry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from paintflow.core.geometry import bounding_box
from paintflow.core.models import Text
from paintflow.core.style import DEFAULT_FONT_SIZE, DEFAULT_TEXT_COLOR

if TYPE_CHECKING:
    from paintflow.core.history import SnapshotHistory
    from paintflow.core.models import Document, Shape
    from paintflow.render.surface import TextAlign

logger = structlog.get_logger(__name__)

MIN_TEXT_WIDTH = 80
MIN_TEXT_HEIGHT = 30
LINE_HEIGHT_FACTOR = 1.2


@dataclass(frozen=True)
class TextOverlay:
    """Geometry and style of the overlay editor, in surface coordinates.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Editor width.
        height: Editor height.
        align: ``"left"`` for standalone text, ``"center"`` for labels.
        font_size: Font size in pixels.
        color: Text color.
        line_height: Line height as a multiple of the font size.
        text: Initial content.
    """

    x: float
    y: float
    width: float
    height: float
    align: TextAlign
    font_size: int
    color: str
    text: str
    line_height: float = LINE_HEIGHT_FACTOR


def overlay_for(shape: Shape) -> TextOverlay:
    """Derive the overlay geometry for editing ``shape``'s text."""
    box = bounding_box(shape)
    font_size = shape.font_size or DEFAULT_FONT_SIZE
    color = shape.text_color or DEFAULT_TEXT_COLOR
    text = shape.text or ""
    if isinstance(shape, Text):
        return TextOverlay(
            box.x, box.y, max(MIN_TEXT_WIDTH, box.w), max(MIN_TEXT_HEIGHT, box.h), "left", font_size, color, text
        )
    return TextOverlay(box.x, box.y, box.w, box.h, "center", font_size, color, text)


@dataclass
class TextEditorState:
    """An open editing session.

    Attributes:
        index: Index of the bound shape.
        original: Text of the shape when the session opened.
        value: Current editor content.
        cursor: Caret position within ``value``.
        created: Whether the bound shape was created for this session.
    """

    index: int
    original: str
    value: str
    cursor: int
    created: bool = False

    @classmethod
    def open(cls, document: Document, index: int, *, created: bool = False) -> TextEditorState:
        """Start editing the shape at ``index`` with the caret at the end of its text.

        Raises:
            ShapeIndexError: If the index is out of range.
        """
        text = document.get(index).text or ""
        return cls(index=index, original=text, value=text, cursor=len(text), created=created)

    def overlay(self, document: Document) -> TextOverlay:
        """Overlay geometry for the bound shape."""
        return overlay_for(document.get(self.index))

    def set_value(self, value: str, cursor: int | None = None) -> None:
        """Replace the editor content, keeping the caret inside it."""
        self.value = value
        self.cursor = len(value) if cursor is None else max(0, min(cursor, len(value)))

    def insert_newline(self) -> None:
        """Insert a soft line break at the caret."""
        self.value = self.value[: self.cursor] + "\n" + self.value[self.cursor :]
        self.cursor += 1

    def close(self, document: Document, history: SnapshotHistory) -> None:
        """End the session, committing or discarding the text.

        A changed text is committed after a snapshot. A standalone text shape
        left blank is removed; the selection is always cleared.
        """
        if not 0 <= self.index < document.count():
            logger.warning("Text editor bound to a missing shape", index=self.index)
            document.select(None)
            return

        shape = document.get(self.index)
        blank = not self.value.strip()
        if self.value != self.original:
            history.record(document.shapes)
            shape.text = self.value
            if blank and isinstance(shape, Text):
                document.remove_at(self.index)
        elif blank and isinstance(shape, Text):
            # A fresh empty text box is already covered by its creation snapshot.
            if not self.created:
                history.record(document.shapes)
            document.remove_at(self.index)
        document.select(None)
