"""Web layer for paintflow: REST controllers and routing."""

from paintflow.web.controllers import DrawingController, HealthController
from paintflow.web.router import create_router

__all__ = ["DrawingController", "HealthController", "create_router"]
