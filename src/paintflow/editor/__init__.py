"""Toolkit-independent editor engine driven by pointer and keyboard events."""

from paintflow.editor.controller import EditorContext, ToolController, transition
from paintflow.editor.persistence import (
    DrawingRecord,
    DrawingSummary,
    HttpPersistence,
    PersistenceProtocol,
    ServicePersistence,
)
from paintflow.editor.session import DrawingSession

__all__ = [
    "DrawingRecord",
    "DrawingSession",
    "DrawingSummary",
    "EditorContext",
    "HttpPersistence",
    "PersistenceProtocol",
    "ServicePersistence",
    "ToolController",
    "transition",
]
