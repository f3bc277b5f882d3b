"""Business logic services for paintflow."""

from paintflow.services.drawing import DrawingService
from paintflow.services.export import ExportService

__all__ = ["DrawingService", "ExportService"]
