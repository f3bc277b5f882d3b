"""Exception handlers for the paintflow API.

Every error body carries an ``error`` message, a machine readable ``code`` and,
when known, the request's correlation id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from litestar import Response
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

if TYPE_CHECKING:
    from litestar import Request
    from litestar.exceptions import HTTPException

logger = structlog.get_logger(__name__)

_CODES = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "validation_error",
    500: "internal_error",
}


@dataclass
class ErrorResponse:
    """Structured error response format."""

    error: str
    code: str = "internal_error"
    correlation_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {"error": self.error, "code": self.code}
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        return result


def get_correlation_id(request: Request) -> str | None:
    """Extract the correlation id from the ASGI state or the request headers."""
    state_id = request.scope.get("state", {}).get("correlation_id")
    if state_id:
        return state_id
    return request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID")


def _respond(request: Request, status_code: int, message: str, code: str) -> Response[dict[str, Any]]:
    body = ErrorResponse(error=message, code=code, correlation_id=get_correlation_id(request))
    return Response(content=body.to_dict(), status_code=status_code, media_type="application/json")


def http_exception_handler(request: Request, exc: HTTPException) -> Response[dict[str, Any]]:
    """Handle Litestar HTTP exceptions (validation errors included)."""
    code = _CODES.get(exc.status_code, "error")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    log = logger.warning if exc.status_code < 500 else logger.error
    log("HTTP exception", path=request.url.path, status_code=exc.status_code, error_code=code)
    return _respond(request, exc.status_code, message, code)


def drawing_not_found_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle DrawingNotFoundError with the ``Not found`` body clients expect."""
    logger.warning("Drawing not found", drawing_id=str(getattr(exc, "drawing_id", "unknown")), path=request.url.path)
    return _respond(request, HTTP_404_NOT_FOUND, "Not found", "not_found")


def invalid_drawing_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle payloads whose shapes cannot be decoded."""
    logger.warning("Invalid drawing payload", error=str(exc), path=request.url.path)
    return _respond(request, HTTP_400_BAD_REQUEST, str(exc), "invalid_drawing")


def generic_exception_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle unexpected exceptions with a generic error response.

    Logs the full exception but returns a safe message to the client.
    """
    logger.exception("Unhandled exception", path=request.url.path, method=request.method, exc_info=exc)
    return _respond(request, HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "internal_error")


def get_exception_handlers() -> dict:
    """Get all exception handlers for the application.

    Returns:
        Dictionary mapping exception types to handler functions.
    """
    from litestar.exceptions import HTTPException

    from paintflow.exceptions import DrawingNotFoundError, InvalidShapeError, SerializationError

    return {
        HTTPException: http_exception_handler,
        DrawingNotFoundError: drawing_not_found_handler,
        InvalidShapeError: invalid_drawing_handler,
        SerializationError: invalid_drawing_handler,
        Exception: generic_exception_handler,
    }
