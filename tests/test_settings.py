"""
Unit tests for app_config/settings.py.
"""

import pytest

from app_config.constants import GeminiConfig
from app_config.settings import load_settings
from clearview_core.errors import ConfigurationError


class TestLoadSettings:
    """Test suite for load_settings."""

    def test_missing_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            load_settings({})

    def test_blank_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            load_settings({"GEMINI_API_KEY": "   "})

    def test_defaults(self):
        settings = load_settings({"GEMINI_API_KEY": "secret"})
        assert settings.api_key == "secret"
        assert settings.model == GeminiConfig.DEFAULT_MODEL
        assert settings.timeout_ms == GeminiConfig.DEFAULT_TIMEOUT_MS
        assert settings.log_level == "INFO"

    def test_fallback_key_name(self):
        assert load_settings({"API_KEY": "legacy"}).api_key == "legacy"

    def test_primary_key_wins(self):
        assert load_settings({"GEMINI_API_KEY": "new", "API_KEY": "old"}).api_key == "new"

    def test_overrides(self):
        settings = load_settings({
            "GEMINI_API_KEY": "secret",
            "GEMINI_IMAGE_MODEL": "gemini-custom-image",
            "GEMINI_TIMEOUT_MS": "60000",
            "CLEARVIEW_LOG_LEVEL": "debug",
        })
        assert settings.model == "gemini-custom-image"
        assert settings.timeout_ms == 60000
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["soon", "-5", "0"])
    def test_bad_timeout(self, value):
        with pytest.raises(ConfigurationError, match="GEMINI_TIMEOUT_MS"):
            load_settings({"GEMINI_API_KEY": "secret", "GEMINI_TIMEOUT_MS": value})

    def test_bad_log_level(self):
        with pytest.raises(ConfigurationError, match="CLEARVIEW_LOG_LEVEL"):
            load_settings({"GEMINI_API_KEY": "secret", "CLEARVIEW_LOG_LEVEL": "LOUD"})

    def test_reads_environment(self, monkeypatch, mocker):
        mocker.patch("app_config.settings.load_dotenv")
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "from-env")
        assert load_settings().api_key == "from-env"
