# nametag/config.py
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_API_PORT,
    DEFAULT_ASSET_DELIVERY_URL,
    DEFAULT_ASSET_FETCH_TIMEOUT,
    DEFAULT_CORS_ORIGIN_REGEX,
    DEFAULT_MAX_CONCURRENT_FETCHES,
)
from .enums import Environment, LogLevel


def get_project_root() -> Path:
    """Get project root directory - ONLY use for initial config setup"""
    return Path(__file__).parent.parent


class Settings(BaseSettings):
    environment: str = Environment.DEVELOPMENT.value

    # API
    api_host: str = Field(default="0.0.0.0", description="API host to bind to")
    api_port: int = Field(
        default=DEFAULT_API_PORT, ge=1, le=65535, description="API port to bind to"
    )
    api_reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )
    cors_origin_regex: str = Field(
        default=DEFAULT_CORS_ORIGIN_REGEX,
        description="Regular expression matched against request origins for CORS",
    )

    # Asset delivery
    asset_delivery_url: str = Field(
        default=DEFAULT_ASSET_DELIVERY_URL,
        description="Delivery endpoint template, must contain '{asset_id}'",
    )
    asset_fetch_timeout: float = Field(
        default=DEFAULT_ASSET_FETCH_TIMEOUT,
        gt=0,
        le=60,
        description="Timeout in seconds for a single asset fetch",
    )
    max_concurrent_fetches: int = Field(
        default=DEFAULT_MAX_CONCURRENT_FETCHES,
        ge=1,
        le=64,
        description="Maximum concurrent fetches for a batch resolution",
    )

    # ============= PATH CONFIGURATION =============

    # Resources (templates, fonts, glyph directories) are read-only
    resources_directory: str = str(get_project_root() / "resources")

    @property
    def resources_path(self) -> Path:
        """Get resources directory as Path object"""
        return Path(self.resources_directory)

    @property
    def templates_file(self) -> Path:
        """JSON file holding the template definitions"""
        return self.resources_path / "templates.json"

    @property
    def templates_directory(self) -> Path:
        """Directory holding the template base images"""
        return self.resources_path / "templates"

    @property
    def fonts_directory(self) -> Path:
        """Directory holding the font files referenced by template layouts"""
        return self.resources_path / "fonts"

    def get_resource_path(self, relative_path: str) -> Path:
        """Convert a path from a template definition to a full path"""
        path = Path(relative_path)
        if path.is_absolute():
            return path
        return self.resources_path / path

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (optional)"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v) -> LogLevel:
        """Validate log level is one of the allowed values"""
        if isinstance(v, LogLevel):
            return v
        allowed_levels = LogLevel.__members__.keys()
        v_upper = str(v).upper()
        if v_upper not in allowed_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(allowed_levels)}"
            )
        return LogLevel[v_upper]

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values"""
        allowed_envs = [env.value for env in Environment]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {', '.join(allowed_envs)}"
            )
        return v_lower

    @field_validator("asset_delivery_url")
    @classmethod
    def validate_asset_delivery_url(cls, v: str) -> str:
        """Validate the delivery URL can be formatted with an asset id"""
        if "{asset_id}" not in v:
            raise ValueError("asset_delivery_url must contain an '{asset_id}' placeholder")
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


# Global settings instance
settings = Settings()
