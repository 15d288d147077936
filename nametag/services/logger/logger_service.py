"""
Centralized Logger Service for the nametag service.

This service provides a unified logging interface on top of loguru that handles:
- Console output with emoji support
- Optional file logging with rotation
- Structured context bound to every record (logger name, source, context)

Architecture:
- Type-safe enum-based configuration
- Handlers installed once by initialize_global_logger()
- Service loggers created per module with get_service_logger()
"""

from threading import Lock
from typing import Any, Dict, Optional

from loguru import logger

from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .constants import (
    EXTRA_CONTEXT_KEY,
    EXTRA_EMOJI_KEY,
    EXTRA_LOGGER_NAME_KEY,
    EXTRA_SOURCE_KEY,
)
from .handlers.console_handler import ConsoleHandler
from .handlers.file_handler import FileHandler


class LoggerService:
    """
    Centralized logging service that owns the loguru sinks.

    Usage:
        service = LoggerService(level=LogLevel.DEBUG, log_file="logs/nametag.log")
        service.install()
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        log_file: Optional[str] = None,
        enable_console: bool = True,
        enable_file_logging: bool = True,
    ):
        self.level = level
        self.log_file = log_file
        self.enable_console = enable_console
        self.enable_file_logging = enable_file_logging and bool(log_file)

        self.console_handler: Optional[ConsoleHandler] = None
        self.file_handler: Optional[FileHandler] = None
        self._installed = False

    def install(self) -> None:
        """Replace loguru's default sink with the configured handlers."""
        if self._installed:
            return

        logger.remove()

        if self.enable_console:
            self.console_handler = ConsoleHandler(min_level=self.level)
            self.console_handler.install()

        if self.enable_file_logging and self.log_file:
            self.file_handler = FileHandler(self.log_file, min_level=self.level)
            self.file_handler.install()

        self._installed = True

    def shutdown(self) -> None:
        """Remove installed handlers."""
        if self.console_handler:
            self.console_handler.uninstall()
        if self.file_handler:
            self.file_handler.uninstall()
        self._installed = False

    def emit(
        self,
        level: LogLevel,
        message: str,
        logger_name: LoggerName,
        source: LogSource,
        emoji: Optional[LogEmoji] = None,
        extra_context: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        """Emit a single record with the service binding attached."""
        bound = logger.bind(
            **{
                EXTRA_LOGGER_NAME_KEY: logger_name.value,
                EXTRA_SOURCE_KEY: source.value,
                EXTRA_EMOJI_KEY: emoji.value if emoji else "",
                EXTRA_CONTEXT_KEY: extra_context or {},
            }
        )
        # depth=2 attributes the record to the caller of the service logger
        bound.opt(exception=exception, depth=2).log(level.value, message)


_global_logger: Optional[LoggerService] = None
_global_lock = Lock()


def initialize_global_logger(
    level: LogLevel = LogLevel.INFO,
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file_logging: bool = True,
) -> LoggerService:
    """
    Initialize the process-wide logger service.

    Safe to call more than once; later calls replace the installed handlers.
    """
    global _global_logger
    with _global_lock:
        if _global_logger is not None:
            _global_logger.shutdown()
        _global_logger = LoggerService(
            level=level,
            log_file=log_file,
            enable_console=enable_console,
            enable_file_logging=enable_file_logging,
        )
        _global_logger.install()
        return _global_logger


def log() -> LoggerService:
    """
    Get the global logger service.

    Falls back to an uninstalled service that writes through loguru's default
    sink, so modules can log before the application lifespan has started.
    """
    global _global_logger
    if _global_logger is None:
        with _global_lock:
            if _global_logger is None:
                _global_logger = LoggerService()
    return _global_logger


def get_service_logger(
    logger_name: LoggerName,
    source: LogSource = LogSource.SYSTEM,
    default_emoji: Optional[LogEmoji] = None,
):
    """
    Factory function to create a pre-configured logger for a specific service.

    Emoji priority system (highest to lowest):
    1. Direct: Emoji passed directly to log method call
    2. Instance-set: Default emoji set when creating the service logger
    3. Fallback: Default emoji based on log level

    Example:
        logger = get_service_logger(LoggerName.ASSET_PIPELINE, LogSource.PIPELINE)
        logger.warning("Fetch failed", extra_context={"asset_id": 123})
        logger.error("Resolution failed", exception=e, emoji=LogEmoji.NETWORK)
    """

    def _resolve_emoji(
        method_emoji: Optional[LogEmoji], fallback_emoji: LogEmoji
    ) -> LogEmoji:
        if method_emoji is not None:
            return method_emoji
        if default_emoji is not None:
            return default_emoji
        return fallback_emoji

    class ServiceLogger:
        @staticmethod
        def error(
            message: str,
            exception: Optional[BaseException] = None,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            """Log an error with emoji priority system."""
            log().emit(
                LogLevel.ERROR,
                message,
                logger_name,
                source,
                emoji=_resolve_emoji(emoji, LogEmoji.ERROR),
                extra_context=extra_context,
                exception=exception,
            )

        @staticmethod
        def warning(
            message: str,
            exception: Optional[BaseException] = None,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            """Log a warning with emoji priority system."""
            log().emit(
                LogLevel.WARNING,
                message,
                logger_name,
                source,
                emoji=_resolve_emoji(emoji, LogEmoji.WARNING),
                extra_context=extra_context,
                exception=exception,
            )

        @staticmethod
        def info(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            """Log an info message with emoji priority system."""
            log().emit(
                LogLevel.INFO,
                message,
                logger_name,
                source,
                emoji=_resolve_emoji(emoji, LogEmoji.INFO),
                extra_context=extra_context,
            )

        @staticmethod
        def debug(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            """Log a debug message with emoji priority system."""
            log().emit(
                LogLevel.DEBUG,
                message,
                logger_name,
                source,
                emoji=_resolve_emoji(emoji, LogEmoji.DEBUG),
                extra_context=extra_context,
            )

    return ServiceLogger()
