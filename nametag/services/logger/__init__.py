"""
Centralized Logger Service Module.

Usage:
    from nametag.services.logger import get_service_logger
    from nametag.enums import LogSource, LoggerName

    logger = get_service_logger(LoggerName.ASSET_PIPELINE, LogSource.PIPELINE)
    logger.info("Resolved asset", extra_context={"asset_id": 123})
"""

# Re-export commonly used enums for convenience
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .handlers import ConsoleHandler, FileHandler
from .logger_service import (
    LoggerService,
    get_service_logger,
    initialize_global_logger,
    log,
)

__all__ = [
    "LoggerService",
    "log",
    "get_service_logger",
    "initialize_global_logger",
    "ConsoleHandler",
    "FileHandler",
    # Enums
    "LogLevel",
    "LogSource",
    "LoggerName",
    "LogEmoji",
]
