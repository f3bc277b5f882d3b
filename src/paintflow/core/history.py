"""Snapshot history for undo/redo functionality."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from paintflow.core.serialization import dumps_shapes, loads_shapes
from paintflow.exceptions import SerializationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from paintflow.core.models import Shape

logger = structlog.get_logger(__name__)


class SnapshotHistory:
    """Manages undo/redo stacks of serialized shape sequences.

    Every mutation records the document *before* it changes. Snapshots are
    stored in two stacks:
    - undo_stack: states that can be restored by undo
    - redo_stack: states that were undone and can be restored by redo

    Attributes:
        max_history: Maximum number of snapshots kept on the undo stack.
    """

    def __init__(self, max_history: int = 100) -> None:
        """Initialize snapshot history.

        Args:
            max_history: Maximum number of undo snapshots to keep.
        """
        self.max_history = max_history
        self._undo_stack: list[str] = []
        self._redo_stack: list[str] = []

    def _push_undo(self, snapshot: str) -> None:
        self._undo_stack.append(snapshot)
        if len(self._undo_stack) > self.max_history:
            self._undo_stack.pop(0)

    def record(self, shapes: Iterable[Shape]) -> None:
        """Snapshot the pre-mutation state and start a fresh linear history.

        This clears the redo stack since new actions invalidate any
        previously undone states.

        Args:
            shapes: The shapes as they are before the mutation.
        """
        self._push_undo(dumps_shapes(shapes))
        self._redo_stack.clear()

    def undo(self, current: Iterable[Shape]) -> list[Shape] | None:
        """Step back one snapshot.

        Args:
            current: The shapes as they are now; saved for redo.

        Returns:
            The shapes to apply, or None if there is nothing to undo or the
            snapshot was unreadable.
        """
        if not self._undo_stack:
            return None
        snapshot = self._undo_stack.pop()
        restored = self._parse(snapshot, "undo")
        if restored is None:
            return None
        self._redo_stack.append(dumps_shapes(current))
        return restored

    def redo(self, current: Iterable[Shape]) -> list[Shape] | None:
        """Step forward one snapshot.

        Args:
            current: The shapes as they are now; saved for undo.

        Returns:
            The shapes to apply, or None if there is nothing to redo or the
            snapshot was unreadable.
        """
        if not self._redo_stack:
            return None
        snapshot = self._redo_stack.pop()
        restored = self._parse(snapshot, "redo")
        if restored is None:
            return None
        self._push_undo(dumps_shapes(current))
        return restored

    def _parse(self, snapshot: str, direction: str) -> list[Shape] | None:
        # Malformed entries are dropped; the caller keeps its current document.
        try:
            return loads_shapes(snapshot)
        except SerializationError as exc:
            logger.warning("Discarded unreadable history snapshot", direction=direction, error=str(exc))
            return None

    def can_undo(self) -> bool:
        """Check if there are snapshots to undo."""
        return len(self._undo_stack) > 0

    def can_redo(self) -> bool:
        """Check if there are snapshots to redo."""
        return len(self._redo_stack) > 0

    def clear_redo(self) -> None:
        """Drop every redoable snapshot."""
        self._redo_stack.clear()

    def clear(self) -> None:
        """Clear all history."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    @property
    def undo_count(self) -> int:
        """Number of snapshots that can be undone."""
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        """Number of snapshots that can be redone."""
        return len(self._redo_stack)
