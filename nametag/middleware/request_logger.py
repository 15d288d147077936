# nametag/middleware/request_logger.py
"""
Request logging middleware.

Each request is logged on arrival at debug level and on completion at a level
picked from its status code and duration. Documentation routes are not logged.
"""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..enums import LogEmoji, LoggerName, LogSource
from ..services.logger import get_service_logger

logger = get_service_logger(LoggerName.REQUEST_LOGGER, LogSource.MIDDLEWARE)

SLOW_REQUEST_SECONDS = 5.0
UNLOGGED_PATHS = frozenset({"/docs", "/redoc", "/openapi.json", "/favicon.ico"})


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every API request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if path in UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        request_context = {
            "correlation_id": getattr(request.state, "correlation_id", None),
            "method": request.method,
            "path": path,
        }

        logger.debug(
            f"{request.method} {path}",
            extra_context={
                **request_context,
                "query": str(request.url.query),
                "ip": getattr(request.client, "host", "unknown"),
            },
            emoji=LogEmoji.REQUEST,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = _elapsed_ms(started)
            logger.error(
                f"{request.method} {path} raised {type(exc).__name__} after {elapsed_ms}ms",
                extra_context={**request_context, "duration_ms": elapsed_ms},
            )
            # ErrorHandlerMiddleware turns it into a response
            raise

        elapsed_ms = _elapsed_ms(started)
        summary = f"{request.method} {path} -> {response.status_code} ({elapsed_ms}ms)"
        context = {
            **request_context,
            "status": response.status_code,
            "duration_ms": elapsed_ms,
            "media_type": response.headers.get("content-type"),
        }

        if response.status_code >= 500:
            logger.error(summary, extra_context=context, emoji=LogEmoji.FAILED)
        elif response.status_code >= 400 or elapsed_ms > SLOW_REQUEST_SECONDS * 1000:
            logger.warning(summary, extra_context=context)
        else:
            logger.info(summary, extra_context=context, emoji=LogEmoji.RESPONSE)

        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
