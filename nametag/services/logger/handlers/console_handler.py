"""
Console Handler for the Logger Service.

Outputs logs to stderr through a loguru sink with emoji support, colour
formatting and a short preview of the structured context attached to a log.
"""

import sys
from typing import Any, Dict, Optional

from loguru import logger

from ....enums import LogLevel
from ..constants import (
    CONSOLE_CONTEXT_INDENTATION,
    CONSOLE_MAX_CONTEXT_ITEMS,
    CONSOLE_TIMESTAMP_FORMAT,
    DEFAULT_LOGGER_NAME,
    DEFAULT_SOURCE,
    EXTRA_CONTEXT_KEY,
    EXTRA_EMOJI_KEY,
    EXTRA_LOGGER_NAME_KEY,
    EXTRA_SOURCE_KEY,
)


class ConsoleHandler:
    """
    Console handler registered as a loguru sink.

    Features:
    - Colour-coded log levels (loguru markup, disabled for non-tty output)
    - Emoji prefix resolved by the service logger
    - Logger name and source columns
    - Context preview limited to a handful of items
    """

    def __init__(
        self,
        min_level: LogLevel = LogLevel.DEBUG,
        use_colors: bool = True,
        include_context: bool = True,
    ):
        self.min_level = min_level
        self.use_colors = use_colors and sys.stderr.isatty()
        self.include_context = include_context
        self._handler_id: Optional[int] = None

    def install(self) -> int:
        """Register the sink with loguru and return its handler id."""
        self._handler_id = logger.add(
            sys.stderr,
            level=self.min_level.value,
            format=self._format_record,
            colorize=self.use_colors,
            backtrace=False,
            diagnose=False,
        )
        return self._handler_id

    def uninstall(self) -> None:
        """Remove the sink if it was installed."""
        if self._handler_id is not None:
            logger.remove(self._handler_id)
            self._handler_id = None

    def _format_record(self, record: Dict[str, Any]) -> str:
        extra = record["extra"]
        extra.setdefault(EXTRA_LOGGER_NAME_KEY, DEFAULT_LOGGER_NAME)
        extra.setdefault(EXTRA_SOURCE_KEY, DEFAULT_SOURCE)
        extra.setdefault(EXTRA_EMOJI_KEY, "")

        line = (
            f"<green>{{time:{CONSOLE_TIMESTAMP_FORMAT}}}</green> | "
            "<level>{level: <8}</level> | "
            f"<cyan>{{extra[{EXTRA_SOURCE_KEY}]}}</cyan>:"
            f"<cyan>{{extra[{EXTRA_LOGGER_NAME_KEY}]}}</cyan> | "
            f"{{extra[{EXTRA_EMOJI_KEY}]}} <level>{{message}}</level>\n"
        )

        context = extra.get(EXTRA_CONTEXT_KEY)
        if self.include_context and context:
            extra["_context_preview"] = self._format_context(context)
            line += "{extra[_context_preview]}"

        if record["exception"] is not None:
            line += "{exception}"
        return line

    @staticmethod
    def _format_context(context: Dict[str, Any]) -> str:
        items = list(context.items())[:CONSOLE_MAX_CONTEXT_ITEMS]
        return "".join(
            f"{CONSOLE_CONTEXT_INDENTATION}{key}: {value}\n" for key, value in items
        )
