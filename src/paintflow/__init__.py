"""paintflow: a drawing and diagramming engine with a Litestar persistence API.

The package holds a vector document of heterogeneous shapes, a deterministic
Pillow renderer, geometric hit testing, snapshot undo/redo, a text overlay
editor and a small set of "smart" shape heuristics. A Litestar plugin exposes
saved drawings and their exports over a JSON REST API.

Key Components:
    - Core: Shape variants, Document, geometry, picking, history
    - Render: Surface protocol, PillowSurface, SvgSurface
    - Editor: ToolController state machine, DrawingSession
    - Storage: InMemoryStorage, DatabaseStorage (``db`` extra)
    - Services: DrawingService, ExportService
    - Plugin: PaintflowPlugin for Litestar integration

Quick Start:
    >>> from litestar import Litestar
    >>> from paintflow import PaintflowConfig, PaintflowPlugin
    >>>
    >>> app = Litestar(plugins=[PaintflowPlugin(PaintflowConfig())])
"""

from __future__ import annotations

from paintflow.core import Document, Point, Shape, ShapeKind, Tool
from paintflow.editor import DrawingSession, ToolController
from paintflow.exceptions import (
    DrawingNotFoundError,
    InvalidShapeError,
    PaintflowError,
    PersistenceNetworkError,
    SerializationError,
    ShapeIndexError,
)
from paintflow.plugin import PaintflowConfig, PaintflowPlugin
from paintflow.services import DrawingService, ExportService
from paintflow.storage import InMemoryStorage, StorageProtocol
from paintflow.web import create_router

__all__ = [
    "Document",
    "DrawingNotFoundError",
    "DrawingService",
    "DrawingSession",
    "ExportService",
    "InMemoryStorage",
    "InvalidShapeError",
    "PaintflowConfig",
    "PaintflowError",
    "PaintflowPlugin",
    "PersistenceNetworkError",
    "Point",
    "SerializationError",
    "Shape",
    "ShapeIndexError",
    "ShapeKind",
    "StorageProtocol",
    "Tool",
    "ToolController",
    "create_router",
]

__version__ = "0.1.0"
