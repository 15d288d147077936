# nametag/middleware/error_handler.py
"""
Error handling middleware for FastAPI application.

Last line of defence for errors the endpoints do not handle themselves. Every
failure is logged with a correlation id and returned as ``{"error": message}``,
the same body the endpoints use.
"""

import uuid

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..config import settings
from ..constants import UNKNOWN_ERROR_MESSAGE
from ..enums import Environment, LogEmoji, LoggerName, LogSource
from ..exceptions import NametagError
from ..services.logger import get_service_logger

logger = get_service_logger(LoggerName.ERROR_HANDLER, LogSource.MIDDLEWARE)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Centralized error handling middleware.

    Catches all unhandled exceptions, logs them with correlation IDs,
    and returns a JSON error response.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.debug_mode = settings.environment == Environment.DEVELOPMENT.value

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request and handle any errors that occur."""

        correlation_id = str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        try:
            return await call_next(request)
        except Exception as exc:
            self._log_error(exc, request, correlation_id)
            return self._create_error_response(exc, correlation_id)

    def _log_error(self, exc: Exception, request: Request, correlation_id: str) -> None:
        """Log error with request context and correlation ID."""
        logger.error(
            f"Unhandled exception in {request.method} {request.url.path}",
            exception=exc,
            extra_context={
                "correlation_id": correlation_id,
                "exception_type": type(exc).__name__,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client_ip": getattr(request.client, "host", "unknown"),
            },
            emoji=LogEmoji.CRITICAL,
        )

    def _create_error_response(
        self, exc: Exception, correlation_id: str
    ) -> JSONResponse:
        # Core errors carry user-facing messages; anything else is hidden
        # outside development
        if isinstance(exc, NametagError) or self.debug_mode:
            message = str(exc) or UNKNOWN_ERROR_MESSAGE
        else:
            message = UNKNOWN_ERROR_MESSAGE

        return JSONResponse(
            status_code=500,
            content={"error": message},
            headers={"X-Correlation-ID": correlation_id},
        )
