#!/usr/bin/env python3
"""
Unit tests for the Settings layer.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nametag.config import Settings
from nametag.constants import DEFAULT_API_PORT, DEFAULT_ASSET_FETCH_TIMEOUT
from nametag.enums import LogLevel


@pytest.mark.unit
class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.api_port == DEFAULT_API_PORT
        assert settings.asset_fetch_timeout == DEFAULT_ASSET_FETCH_TIMEOUT
        assert settings.environment == "development"
        assert settings.log_level == LogLevel.INFO
        assert "{asset_id}" in settings.asset_delivery_url

    def test_resource_paths(self, tmp_path):
        settings = Settings(_env_file=None, resources_directory=str(tmp_path))

        assert settings.templates_file == tmp_path / "templates.json"
        assert settings.templates_directory == tmp_path / "templates"
        assert settings.fonts_directory == tmp_path / "fonts"
        assert settings.get_resource_path("glyphs/neon") == tmp_path / "glyphs" / "neon"
        assert settings.get_resource_path("/abs/glyphs") == Path("/abs/glyphs")

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("API_PORT", "4000")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ENVIRONMENT", "PRODUCTION")

        settings = Settings(_env_file=None)

        assert settings.api_port == 4000
        assert settings.log_level == LogLevel.DEBUG
        assert settings.environment == "production"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="moon")

    def test_delivery_url_requires_placeholder(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, asset_delivery_url="https://assets.test/fixed")

    def test_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_concurrent_fetches=0)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, asset_fetch_timeout=0)
