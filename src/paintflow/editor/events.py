"""Input events consumed and effects produced by the tool controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from paintflow.core.models import Point
    from paintflow.core.types import Tool
    from paintflow.editor.text_overlay import TextOverlay


@dataclass(frozen=True)
class SelectTool:
    """The user picked a different tool."""

    tool: Tool


@dataclass(frozen=True)
class PointerDown:
    """A pointer press on the surface."""

    point: Point


@dataclass(frozen=True)
class PointerMove:
    """A pointer move; ignored unless a gesture is active."""

    point: Point


@dataclass(frozen=True)
class PointerUp:
    """A pointer release anywhere, on or off the surface."""


@dataclass(frozen=True)
class TextInput:
    """Replaces the overlay editor's content, as typed by the user.

    Attributes:
        value: The full editor content.
        cursor: Caret position after the edit; end of text when None.
    """

    value: str
    cursor: int | None = None


@dataclass(frozen=True)
class KeyPress:
    """A key press.

    While the overlay editor has focus, keys edit the text; otherwise only
    the undo/redo shortcuts (ctrl+z, ctrl+shift+z, ctrl+y) are handled.

    Attributes:
        key: Key name (``"Enter"``, ``"Escape"``, ``"Tab"``, ``"z"``, ...).
        shift: Whether shift was held.
        ctrl: Whether the platform command modifier (ctrl or cmd) was held.
    """

    key: str
    shift: bool = False
    ctrl: bool = False


@dataclass(frozen=True)
class EditorBlur:
    """The overlay editor lost focus."""


@dataclass(frozen=True)
class Undo:
    """Undo the last mutation."""


@dataclass(frozen=True)
class Redo:
    """Redo the last undone mutation."""


@dataclass(frozen=True)
class ChangeSettings:
    """Update palette values; fields left as None are unchanged."""

    stroke_color: str | None = None
    fill_color: str | None = None
    stroke_width: int | None = None
    font_size: int | None = None
    text_color: str | None = None


Event = Union[
    SelectTool, PointerDown, PointerMove, PointerUp, TextInput, KeyPress, EditorBlur, Undo, Redo, ChangeSettings
]


@dataclass(frozen=True)
class Repaint:
    """The document changed visibly; render again."""


@dataclass(frozen=True)
class Notify:
    """Show a transient message that dismisses itself after ``duration`` seconds."""

    message: str
    duration: float = 2.0


@dataclass(frozen=True)
class OpenTextEditor:
    """Show the overlay text editor with the given geometry and content."""

    overlay: TextOverlay


@dataclass(frozen=True)
class CloseTextEditor:
    """Hide the overlay text editor."""


Effect = Union[Repaint, Notify, OpenTextEditor, CloseTextEditor]
