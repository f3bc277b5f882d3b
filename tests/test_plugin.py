"""Tests for the Litestar plugin and the application factory."""

from __future__ import annotations

import pytest
from litestar import Litestar, get
from litestar.testing import TestClient

from paintflow import PaintflowConfig, PaintflowPlugin
from paintflow.app import create_app
from paintflow.core.error_handling import get_exception_handlers
from paintflow.core.models import Point
from paintflow.services.drawing import DrawingService
from paintflow.storage import InMemoryStorage


class TestPaintflowPlugin:
    """Tests for PaintflowPlugin."""

    def test_not_initialized(self) -> None:
        """Test accessing the service before app init raises."""
        plugin = PaintflowPlugin()
        with pytest.raises(RuntimeError):
            _ = plugin.service
        with pytest.raises(RuntimeError):
            _ = plugin.storage
        with pytest.raises(RuntimeError):
            plugin.create_session()

    def test_default_storage(self) -> None:
        """Test in-memory storage is used when none is configured."""
        plugin = PaintflowPlugin()
        Litestar(plugins=[plugin])
        assert isinstance(plugin.storage, InMemoryStorage)
        assert isinstance(plugin.service, DrawingService)

    def test_registers_dependencies(self, plugin: PaintflowPlugin) -> None:
        """Test the services are registered under their dependency keys."""
        app = Litestar(plugins=[plugin])
        assert "drawing_service" in app.dependencies
        assert "export_service" in app.dependencies

    def test_custom_dependency_key(self) -> None:
        """Test the drawing service can be injected under another name."""

        @get("/count", sync_to_thread=False)
        def count(drawings: DrawingService) -> dict[str, bool]:
            return {"ok": isinstance(drawings, DrawingService)}

        plugin = PaintflowPlugin(PaintflowConfig(enable_api=False, dependency_key="drawings"))
        with TestClient(app=Litestar(route_handlers=[count], plugins=[plugin])) as client:
            assert client.get("/count").json() == {"ok": True}

    def test_api_disabled(self) -> None:
        """Test no routes are mounted when the API is disabled."""
        plugin = PaintflowPlugin(PaintflowConfig(enable_api=False))
        with TestClient(app=Litestar(plugins=[plugin])) as client:
            assert client.get("/api/health").status_code == 404

    def test_custom_api_path(self) -> None:
        """Test the API can be mounted under another prefix."""
        plugin = PaintflowPlugin(PaintflowConfig(api_path="/api/v1"))
        app = Litestar(plugins=[plugin], exception_handlers=get_exception_handlers())
        with TestClient(app=app) as client:
            assert client.get("/api/v1/health").json() == {"ok": True}
            assert client.get("/api/v1/drawings").json() == []

    async def test_create_session(self, plugin: PaintflowPlugin, storage: InMemoryStorage) -> None:
        """Test sessions save through the plugin's storage and honor the undo depth."""
        plugin.config.max_history = 3
        Litestar(plugins=[plugin])

        session = plugin.create_session()
        assert session.controller.context.history.max_history == 3
        session.controller.drag(Point(0, 0), Point(10, 10))
        await session.save("From plugin")

        drawings = await storage.list_drawings()
        assert [d.title for d in drawings] == ["From plugin"]

    def test_sessions_are_independent(self, plugin: PaintflowPlugin) -> None:
        """Test each session gets its own document and history."""
        Litestar(plugins=[plugin])
        first, second = plugin.create_session(), plugin.create_session()
        first.controller.drag(Point(0, 0), Point(5, 5))
        assert second.controller.document.count() == 0


class TestCreateApp:
    """Tests for the application factory."""

    def test_serves_api(self) -> None:
        """Test the standalone app serves the API with logging middleware."""
        app = create_app(storage=InMemoryStorage())
        with TestClient(app=app) as client:
            response = client.get("/api/health", headers={"X-Correlation-ID": "req-1"})
            assert response.status_code == 200
            assert response.headers["x-correlation-id"] == "req-1"

    def test_generates_correlation_id(self) -> None:
        """Test a correlation id is generated when the caller sends none."""
        with TestClient(app=create_app(storage=InMemoryStorage())) as client:
            response = client.get("/api/drawings")
            assert response.status_code == 200
            assert response.headers["x-correlation-id"]

    def test_openapi_schema(self) -> None:
        """Test the OpenAPI schema is published."""
        with TestClient(app=create_app(storage=InMemoryStorage())) as client:
            response = client.get("/schema/openapi.json")
            assert response.status_code == 200
            assert response.json()["info"]["title"] == "paintflow API"
