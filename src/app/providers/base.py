"""
Generative backend interface.

The adapter builds role-tagged contents and hands them to a backend;
tests substitute the backend to isolate model output from prompt building.

Request shape:
    [{"role": "user", "parts": [{"text": ...}, {"inline_data": {...}}]}]
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.domain.errors import ConfigurationError, ErrorCodes

# Checked in order; the first non-empty value wins
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

DEFAULT_TEXT_MODEL = "gemini-2.0-flash"
DEFAULT_VISION_MODEL = "gemini-2.0-flash"


# =============================================================================
# Request Parts
# =============================================================================


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


def inline_data_part(mime_type: str, data: bytes) -> dict[str, Any]:
    return {"inline_data": {"mime_type": mime_type, "data": data}}


def user_content(*parts: dict[str, Any]) -> list[dict[str, Any]]:
    """Single user turn."""
    return [{"role": "user", "parts": list(parts)}]


# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class AdapterSettings:
    """
    Adapter configuration, validated once at startup.

    config_error is set when the credential is missing; every adapter call
    raises it instead of touching the network.
    """
    api_key: str | None
    text_model: str = DEFAULT_TEXT_MODEL
    vision_model: str = DEFAULT_VISION_MODEL
    request_timeout: float | None = None
    config_error: ConfigurationError | None = field(default=None, compare=False)

    @property
    def configured(self) -> bool:
        return self.config_error is None

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        environ: Mapping[str, str] | None = None,
    ) -> "AdapterSettings":
        """
        Args:
            config: App config (reads config["ai"])
            environ: Environment (default: os.environ)
        """
        env = os.environ if environ is None else environ
        ai_config = config.get("ai", {}) or {}

        api_key = next(
            (env[name].strip() for name in API_KEY_ENV_VARS if env.get(name, "").strip()),
            None,
        )

        config_error = None
        if api_key is None:
            config_error = ConfigurationError(
                ErrorCodes.API_KEY_MISSING,
                "API key is not configured",
                env_vars=list(API_KEY_ENV_VARS),
            )

        return cls(
            api_key=api_key,
            text_model=ai_config.get("text_model", DEFAULT_TEXT_MODEL),
            vision_model=ai_config.get("vision_model", DEFAULT_VISION_MODEL),
            request_timeout=ai_config.get("request_timeout"),
            config_error=config_error,
        )


# =============================================================================
# Abstract Backend
# =============================================================================


class GenerativeBackend(ABC):
    """
    One request, one text response.

    Implementations raise whatever their transport raises; the adapter
    wraps it into UpstreamError.
    """

    @abstractmethod
    async def generate(self, model: str, contents: list[dict[str, Any]]) -> str:
        """
        Args:
            model: Model name (e.g. gemini-2.0-flash)
            contents: Role-tagged contents

        Returns:
            Response text
        """
        ...

    def classify_error(self, error: Exception) -> str:
        """Error code for a failure raised by generate()."""
        return ErrorCodes.UPSTREAM_FAILED
