# nametag/enums.py
"""
Application Enums - Centralized enum definitions.

Keeping enums in one module lets constants, models and services import them
without creating circular dependencies.
"""

from enum import Enum


# =============================================================================
# ASSET SYSTEM
# =============================================================================


class AssetKind(str, Enum):
    """Semantic role of a resolved asset, used to pick its draw offset."""

    UNCLASSIFIED = "unclassified"
    SHIRT = "shirt"
    GRAPHIC = "graphic"


# =============================================================================
# ENVIRONMENT
# =============================================================================


class Environment(str, Enum):
    """Deployment environments accepted by the settings layer."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


# =============================================================================
# LOGGING SYSTEM
# =============================================================================


class LogLevel(str, Enum):
    """Log level constants for centralized logging system."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogSource(str, Enum):
    """Log source constants for identifying log origins."""

    API = "api"
    SYSTEM = "system"
    PIPELINE = "pipeline"
    MIDDLEWARE = "middleware"


class LogEmoji(str, Enum):
    """Type-safe emoji constants for log messages."""

    # Request/Response emojis
    REQUEST = "📥"
    RESPONSE = "📤"

    # Status emojis
    SUCCESS = "✅"
    FAILED = "❌"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"
    DEBUG = "🐞"
    CRITICAL = "☠️"

    # Work emojis
    PROCESSING = "🔄"
    STARTUP = "🚀"
    SHUTDOWN = "🛑"

    # Domain emojis
    NETWORK = "🌐"
    CACHE = "💾"
    IMAGE = "🖼️"
    TEMPLATE = "🏷️"
    TEXT = "🔤"


class LoggerName(str, Enum):
    """Logger name constants for categorizing log entries."""

    # API/Request loggers
    REQUEST_LOGGER = "request_logger"
    ERROR_HANDLER = "error_handler"
    NAMETAG_ROUTER = "nametag_router"

    # Pipeline loggers
    ASSET_PIPELINE = "asset_pipeline"
    NAMETAG_PIPELINE = "nametag_pipeline"

    # Service loggers
    NAMETAG_SERVICE = "nametag_service"
    TEMPLATE_SERVICE = "template_service"

    SYSTEM = "system"
