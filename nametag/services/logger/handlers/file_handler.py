"""
File Handler for the Logger Service.

Writes logs to a rotating file through loguru, with compression of rotated
files and a retention policy. JSON serialization keeps the bound context
(logger name, source, structured context) available to log tooling.
"""

from pathlib import Path
from typing import Optional, Union

from loguru import logger

from ....enums import LogLevel
from ..constants import LOG_FILE_COMPRESSION, LOG_FILE_RETENTION, LOG_FILE_ROTATION


class FileHandler:
    """
    File handler registered as a loguru sink.

    Features:
    - Size based rotation
    - Gzip compression of rotated files
    - Time based retention
    - Thread-safe writes (loguru enqueue)
    """

    def __init__(
        self,
        log_file: Union[str, Path],
        min_level: LogLevel = LogLevel.INFO,
        rotation: str = LOG_FILE_ROTATION,
        retention: str = LOG_FILE_RETENTION,
        compression: str = LOG_FILE_COMPRESSION,
        use_json_format: bool = True,
    ):
        self.log_file = Path(log_file)
        self.min_level = min_level
        self.rotation = rotation
        self.retention = retention
        self.compression = compression
        self.use_json_format = use_json_format
        self._handler_id: Optional[int] = None

    def install(self) -> int:
        """Register the sink with loguru and return its handler id."""
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self._handler_id = logger.add(
            str(self.log_file),
            level=self.min_level.value,
            rotation=self.rotation,
            retention=self.retention,
            compression=self.compression,
            serialize=self.use_json_format,
            enqueue=True,
            backtrace=False,
            diagnose=False,
        )
        return self._handler_id

    def uninstall(self) -> None:
        """Remove the sink if it was installed."""
        if self._handler_id is not None:
            logger.remove(self._handler_id)
            self._handler_id = None
