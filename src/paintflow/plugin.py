"""Litestar plugin for paintflow integration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from paintflow.core.history import SnapshotHistory
from paintflow.editor.controller import EditorContext, ToolController
from paintflow.editor.persistence import ServicePersistence
from paintflow.editor.session import DrawingSession
from paintflow.services.drawing import DEFAULT_LIST_LIMIT, DrawingService
from paintflow.services.export import DEFAULT_HEIGHT, DEFAULT_WIDTH, ExportService
from paintflow.storage.memory import InMemoryStorage
from paintflow.web.router import create_router

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from paintflow.storage.base import StorageProtocol


@dataclass
class PaintflowConfig:
    """Configuration for the paintflow plugin.

    Attributes:
        storage: Storage backend for drawings. If None, InMemoryStorage is used.
        enable_api: Whether to mount the REST API routes. Defaults to True.
        api_path: Base path for mounting API routes. Defaults to "/api".
        dependency_key: Dependency injection key for DrawingService.
        canvas_width: Width in pixels that exports render at.
        canvas_height: Height in pixels that exports render at.
        list_limit: Maximum number of drawings returned by the list endpoint.
        max_history: Undo depth for editor sessions created from this config.

    Example:
        >>> from paintflow.storage.memory import InMemoryStorage
        >>> config = PaintflowConfig(storage=InMemoryStorage(), api_path="/api/v1")
    """

    storage: StorageProtocol | None = None
    enable_api: bool = True
    api_path: str = "/api"
    dependency_key: str = "drawing_service"
    canvas_width: int = DEFAULT_WIDTH
    canvas_height: int = DEFAULT_HEIGHT
    list_limit: int = DEFAULT_LIST_LIMIT
    max_history: int = 100


class PaintflowPlugin(InitPluginProtocol):
    """Litestar plugin for paintflow integration.

    Registers the DrawingService and ExportService with dependency injection
    and mounts the REST API.

    Example:
        >>> from litestar import Litestar
        >>> from paintflow import PaintflowConfig, PaintflowPlugin
        >>>
        >>> app = Litestar(plugins=[PaintflowPlugin(PaintflowConfig())])

    Attributes:
        _config: The plugin configuration.
        _storage: The initialized storage backend (None until on_app_init).
        _service: The initialized DrawingService (None until on_app_init).
        _export_service: The initialized ExportService (None until on_app_init).
    """

    def __init__(self, config: PaintflowConfig | None = None) -> None:
        """Initialize the plugin with optional configuration.

        Args:
            config: Plugin configuration. If None, PaintflowConfig with default
                values will be used.
        """
        self._config = config or PaintflowConfig()
        self._storage: StorageProtocol | None = None
        self._service: DrawingService | None = None
        self._export_service: ExportService | None = None

    @property
    def config(self) -> PaintflowConfig:
        """The plugin configuration."""
        return self._config

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin during application startup.

        Args:
            app_config: The Litestar application configuration object.

        Returns:
            The modified application configuration.
        """
        config = self._config
        self._storage = config.storage or InMemoryStorage()
        self._service = DrawingService(self._storage, list_limit=config.list_limit)
        self._export_service = ExportService(config.canvas_width, config.canvas_height)

        app_config.dependencies[config.dependency_key] = Provide(self._provide_service, sync_to_thread=False)
        app_config.dependencies["export_service"] = Provide(self._provide_export_service, sync_to_thread=False)

        if config.enable_api:
            app_config.route_handlers.append(create_router(path=config.api_path))

        return app_config

    def create_session(self) -> DrawingSession:
        """Create an editor session persisting through this plugin's service.

        Returns:
            A DrawingSession with the configured undo depth and canvas size.

        Raises:
            RuntimeError: If the plugin has not been initialized yet.
        """
        config = self._config
        context = EditorContext(history=SnapshotHistory(config.max_history))
        return DrawingSession(
            ServicePersistence(self.service),
            ToolController(context),
            width=config.canvas_width,
            height=config.canvas_height,
        )

    def _provide_service(self) -> DrawingService:
        return self.service

    def _provide_export_service(self) -> ExportService:
        if self._export_service is None:
            msg = "Export service not initialized"
            raise RuntimeError(msg)
        return self._export_service

    @property
    def storage(self) -> StorageProtocol:
        """Get the initialized storage backend.

        Raises:
            RuntimeError: If the plugin has not been initialized yet.
        """
        if self._storage is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._storage

    @property
    def service(self) -> DrawingService:
        """Get the initialized DrawingService.

        Raises:
            RuntimeError: If the plugin has not been initialized yet.
        """
        if self._service is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._service
