"""
Logger Service Constants

Local constants for the logger service to avoid hardcoded values
and provide centralized configuration for logger-specific settings.
"""

# ====================================================================
# CONSOLE HANDLER CONSTANTS
# ====================================================================

CONSOLE_TIMESTAMP_FORMAT = "YYYY-MM-DD HH:mm:ss"
CONSOLE_MAX_CONTEXT_ITEMS = 5
CONSOLE_CONTEXT_INDENTATION = "  ↳ "

# ====================================================================
# FILE HANDLER CONSTANTS
# ====================================================================

LOG_FILE_ROTATION = "10 MB"
LOG_FILE_RETENTION = "14 days"
LOG_FILE_COMPRESSION = "gz"

# ====================================================================
# RECORD BINDING KEYS
# ====================================================================

EXTRA_LOGGER_NAME_KEY = "logger_name"
EXTRA_SOURCE_KEY = "source"
EXTRA_EMOJI_KEY = "emoji"
EXTRA_CONTEXT_KEY = "context"

DEFAULT_LOGGER_NAME = "system"
DEFAULT_SOURCE = "system"
