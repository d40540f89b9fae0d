"""
test_base.py - AdapterSettings / request part tests

Checks:
- credential read once from the environment (GEMINI_API_KEY, then GOOGLE_API_KEY)
- missing credential → config_error, not an exception
- model names from config
"""

from src.app.providers.base import (
    DEFAULT_TEXT_MODEL,
    DEFAULT_VISION_MODEL,
    AdapterSettings,
    inline_data_part,
    text_part,
    user_content,
)
from src.domain.errors import ConfigurationError, ErrorCodes


class TestAdapterSettings:
    """AdapterSettings.from_config tests."""

    def test_gemini_key(self):
        settings = AdapterSettings.from_config({}, environ={"GEMINI_API_KEY": "k1"})

        assert settings.api_key == "k1"
        assert settings.configured
        assert settings.config_error is None

    def test_google_key_fallback(self):
        settings = AdapterSettings.from_config({}, environ={"GOOGLE_API_KEY": "k2"})

        assert settings.api_key == "k2"

    def test_gemini_key_preferred(self):
        settings = AdapterSettings.from_config(
            {}, environ={"GEMINI_API_KEY": "k1", "GOOGLE_API_KEY": "k2"}
        )

        assert settings.api_key == "k1"

    def test_blank_key_is_missing(self):
        settings = AdapterSettings.from_config({}, environ={"GEMINI_API_KEY": "   "})

        assert not settings.configured

    def test_missing_key_sets_config_error(self):
        settings = AdapterSettings.from_config({}, environ={})

        assert settings.api_key is None
        assert isinstance(settings.config_error, ConfigurationError)
        assert settings.config_error.code == ErrorCodes.API_KEY_MISSING

    def test_uses_os_environ_by_default(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        assert AdapterSettings.from_config({}).api_key == "env-key"

    def test_defaults(self):
        settings = AdapterSettings.from_config({}, environ={"GEMINI_API_KEY": "k"})

        assert settings.text_model == DEFAULT_TEXT_MODEL
        assert settings.vision_model == DEFAULT_VISION_MODEL
        assert settings.request_timeout is None

    def test_models_from_config(self):
        config = {
            "ai": {
                "text_model": "fast",
                "vision_model": "vision",
                "request_timeout": 12.5,
            }
        }
        settings = AdapterSettings.from_config(config, environ={"GEMINI_API_KEY": "k"})

        assert settings.text_model == "fast"
        assert settings.vision_model == "vision"
        assert settings.request_timeout == 12.5


class TestRequestParts:
    """Request part builders."""

    def test_user_content(self):
        contents = user_content(text_part("hi"), inline_data_part("image/png", b"x"))

        assert contents == [{
            "role": "user",
            "parts": [
                {"text": "hi"},
                {"inline_data": {"mime_type": "image/png", "data": b"x"}},
            ],
        }]
