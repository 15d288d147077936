# nametag/utils/router_helpers.py
"""
Router Helper Functions

Common functions and decorators for FastAPI routers to reduce code duplication.
Provides standardized error handling and image response building.
"""

from functools import wraps
from typing import Callable

from fastapi import HTTPException
from fastapi.responses import JSONResponse, Response

from ..constants import IMAGE_CACHE_CONTROL, UNKNOWN_ERROR_MESSAGE
from ..enums import LoggerName, LogSource
from ..services.asset_pipeline.utils import detect_mime
from ..services.logger import get_service_logger

logger = get_service_logger(LoggerName.NAMETAG_ROUTER, LogSource.API)


def error_response(exc: BaseException, status_code: int = 500) -> JSONResponse:
    """Build the ``{"error": message}`` body every endpoint fails with."""
    message = str(exc) or UNKNOWN_ERROR_MESSAGE
    return JSONResponse(status_code=status_code, content={"error": message})


def handle_exceptions(operation_name: str):
    """
    Decorator for standardized exception handling in router endpoints.

    Any error raised by the endpoint is logged and returned as
    ``{"error": message}`` with status 500.

    Args:
        operation_name: Human-readable description of the operation for logs

    Usage:
        @handle_exceptions("create nametag")
        async def create_nametag():
            # endpoint logic here
            pass
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException as e:
                return error_response(Exception(e.detail), status_code=e.status_code)
            except Exception as e:
                logger.error(f"Error during {operation_name}: {e}", exception=e)
                return error_response(e)

        return wrapper

    return decorator


def create_image_response(content: bytes) -> Response:
    """
    Wrap encoded image bytes in a response with a sniffed Content-Type.

    Raises:
        ValueError: If the content type cannot be inferred
    """
    media_type = detect_mime(content)
    if media_type is None:
        raise ValueError("Unable to infer file type!")

    return Response(
        content=content,
        media_type=media_type,
        headers={"Cache-Control": IMAGE_CACHE_CONTROL},
    )
