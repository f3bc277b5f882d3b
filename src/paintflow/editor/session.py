"""Drawing session: an editor wired to a persistence backend."""

from __future__ import annotations

from copy import deepcopy
from typing import TYPE_CHECKING

import structlog

from paintflow.editor.controller import ToolController
from paintflow.editor.events import EditorBlur, Notify, Repaint
from paintflow.exceptions import DrawingNotFoundError, PaintflowError
from paintflow.services.export import DEFAULT_HEIGHT, DEFAULT_WIDTH, ExportService

if TYPE_CHECKING:
    from uuid import UUID

    from paintflow.editor.events import Effect
    from paintflow.editor.persistence import DrawingSummary, PersistenceProtocol

logger = structlog.get_logger(__name__)

SAVED_MESSAGE = "Saved"
SAVE_FAILED_MESSAGE = "Save failed"
LOAD_FAILED_MESSAGE = "Load failed"
NOT_FOUND_MESSAGE = "Drawing not found"


class DrawingSession:
    """Owns one editor and saves, loads and resets its document.

    Saving captures the shapes and preview before the first await, so edits
    made while the request is in flight are neither lost nor half-written.
    Failures become :class:`Notify` effects and leave local state unchanged.

    Attributes:
        controller: The tool controller driving the document.
        persistence: Backend used to list, load and save drawings.
    """

    def __init__(
        self,
        persistence: PersistenceProtocol,
        controller: ToolController | None = None,
        *,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ) -> None:
        """Initialize the session.

        Args:
            persistence: Backend implementing PersistenceProtocol.
            controller: Existing controller; a fresh one is created otherwise.
            width: Width of the preview image sent on save.
            height: Height of the preview image sent on save.
        """
        self.persistence = persistence
        self.controller = controller or ToolController()
        self._export = ExportService(width, height)

    def _settle_editor(self) -> list[Effect]:
        # Commits any open text edit and drops a half-finished gesture.
        effects = self.controller.dispatch(EditorBlur())
        self.controller.context.end_gesture()
        return effects

    async def save(self, title: str | None = None) -> list[Effect]:
        """Create or update the current drawing.

        Args:
            title: New title; the document's title is kept when None.

        Returns:
            The effects to perform.
        """
        effects = self._settle_editor()
        document = self.controller.document
        if title is not None:
            document.title = title.strip() or "Untitled"
        drawing_id = document.drawing_id
        shapes = deepcopy(document.shapes)
        preview = self._export.to_png(shapes)

        try:
            saved_id = await self.persistence.save(drawing_id, document.title, shapes, preview)
        except (PaintflowError, OSError) as exc:
            logger.warning("Drawing save failed", drawing_id=str(drawing_id), error=str(exc))
            return [*effects, Notify(SAVE_FAILED_MESSAGE)]

        # A document replaced while saving keeps its own identity.
        if self.controller.document is document and document.drawing_id == drawing_id:
            document.drawing_id = saved_id
        logger.info("Drawing saved", drawing_id=str(saved_id), shapes=len(shapes))
        return [*effects, Notify(SAVED_MESSAGE)]

    async def load(self, drawing_id: UUID) -> list[Effect]:
        """Replace the current document with a saved drawing.

        The replaced shapes stay reachable through undo when there were any,
        and the redo stack is cleared.

        Args:
            drawing_id: The drawing to load.

        Returns:
            The effects to perform.
        """
        try:
            record = await self.persistence.load(drawing_id)
        except DrawingNotFoundError:
            logger.warning("Drawing to load not found", drawing_id=str(drawing_id))
            return [Notify(NOT_FOUND_MESSAGE)]
        except (PaintflowError, OSError) as exc:
            logger.warning("Drawing load failed", drawing_id=str(drawing_id), error=str(exc))
            return [Notify(LOAD_FAILED_MESSAGE)]

        effects = self._settle_editor()
        ctx = self.controller.context
        self._reset_history()
        ctx.document.replace_all(record.shapes)
        ctx.document.drawing_id = record.id
        ctx.document.title = record.title or "Untitled"
        return [*effects, Repaint()]

    def new_document(self) -> list[Effect]:
        """Start an empty, unsaved document; the old shapes remain undoable."""
        effects = self._settle_editor()
        ctx = self.controller.context
        self._reset_history()
        ctx.document.replace_all([])
        ctx.document.drawing_id = None
        ctx.document.title = "Untitled"
        return [*effects, Repaint()]

    def _reset_history(self) -> None:
        ctx = self.controller.context
        if ctx.document.shapes:
            ctx.history.record(ctx.document.shapes)
        else:
            ctx.history.clear_redo()

    async def list(self) -> list[DrawingSummary]:
        """List saved drawings; an unreachable backend yields an empty list."""
        try:
            return await self.persistence.list()
        except (PaintflowError, OSError) as exc:
            logger.warning("Drawing list failed", error=str(exc))
            return []
