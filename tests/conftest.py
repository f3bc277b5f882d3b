"""Pytest configuration and fixtures for paintflow tests."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pytest
from litestar import Litestar
from litestar.testing import TestClient

from paintflow.core.history import SnapshotHistory
from paintflow.core.models import Box, Document, Line, Path, Point, Text
from paintflow.core.style import ShapeStyle
from paintflow.core.types import ShapeKind
from paintflow.editor.controller import EditorContext, ToolController
from paintflow.plugin import PaintflowConfig, PaintflowPlugin
from paintflow.storage.memory import InMemoryStorage

if TYPE_CHECKING:
    from collections.abc import Iterator

    from paintflow.core.geometry import BBox, Outline


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


# Rendering fixtures


@dataclass
class RecordingSurface:
    """Surface double that records every drawing call in order."""

    calls: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def clear(self) -> None:
        self.calls.append(("clear", {}))

    def fill_outline(self, outline: Outline, color: str) -> None:
        self.calls.append(("fill", {"outline": outline, "color": color}))

    def stroke_outline(self, outline: Outline, color: str, width: float) -> None:
        self.calls.append(("stroke", {"outline": outline, "color": color, "width": width}))

    def stroke_dashed_rect(self, box: BBox, color: str, width: float, dash: tuple[float, float]) -> None:
        self.calls.append(("dashed", {"box": box, "color": color, "width": width, "dash": dash}))

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font_size: float,
        color: str,
        align: str,
        outline_color: str | None = None,
    ) -> None:
        self.calls.append(
            (
                "text",
                {
                    "text": text,
                    "x": x,
                    "y": y,
                    "font_size": font_size,
                    "color": color,
                    "align": align,
                    "outline_color": outline_color,
                },
            )
        )

    def names(self) -> list[str]:
        """Names of the recorded calls."""
        return [name for name, _ in self.calls]

    def of(self, name: str) -> list[dict[str, Any]]:
        """Arguments of every recorded call named ``name``."""
        return [args for call, args in self.calls if call == name]


@pytest.fixture
def surface() -> RecordingSurface:
    """Create a fresh recording surface."""
    return RecordingSurface()


# Model fixtures


@pytest.fixture
def red_rect() -> Box:
    """A red-filled rectangle spanning (10, 10) to (110, 60)."""
    return Box(
        shape_type=ShapeKind.RECT,
        x=10,
        y=10,
        w=100,
        h=50,
        style=ShapeStyle(stroke_color="#000000", fill_color="#ff0000", stroke_width=2),
    )


@pytest.fixture
def sample_path() -> Path:
    """A horizontal freehand path of eleven points."""
    return Path(points=[Point(x=float(x), y=100.0) for x in range(0, 110, 10)])


@pytest.fixture
def sample_line() -> Line:
    """A diagonal line."""
    return Line(points=[Point(0, 0), Point(100, 100)])


@pytest.fixture
def sample_text() -> Text:
    """A standalone two-line text block."""
    return Text(x=20, y=20, w=120, h=60, text="Hi\nYou", font_size=18)


@pytest.fixture
def document(red_rect: Box, sample_line: Line) -> Document:
    """A document holding a line under a rectangle."""
    return Document(shapes=[sample_line, red_rect])


# Editor fixtures


@pytest.fixture
def controller() -> ToolController:
    """Create a controller with a seeded random source."""
    return ToolController(EditorContext(rng=random.Random(7)))


@pytest.fixture
def history() -> SnapshotHistory:
    """Create an empty snapshot history."""
    return SnapshotHistory()


# Storage and application fixtures


@pytest.fixture
def storage() -> InMemoryStorage:
    """Create a fresh InMemoryStorage instance for each test."""
    return InMemoryStorage()


@pytest.fixture
def plugin(storage: InMemoryStorage) -> PaintflowPlugin:
    """Create a plugin over the test storage."""
    return PaintflowPlugin(PaintflowConfig(storage=storage, canvas_width=320, canvas_height=200))


@pytest.fixture
def app(plugin: PaintflowPlugin) -> Litestar:
    """Create a Litestar app with PaintflowPlugin for testing."""
    from paintflow.core.error_handling import get_exception_handlers

    return Litestar(plugins=[plugin], exception_handlers=get_exception_handlers())


@pytest.fixture
def client(app: Litestar) -> Iterator[TestClient[Litestar]]:
    """Create a test client for the app."""
    with TestClient(app=app) as test_client:
        yield test_client
