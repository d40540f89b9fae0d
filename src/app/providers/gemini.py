"""
Google Gemini backend.

Error classification (codes only, no fallback/retry):
- Unauthenticated, PermissionDenied → UPSTREAM_AUTH
- ResourceExhausted → UPSTREAM_QUOTA
- ServiceUnavailable, DeadlineExceeded → UPSTREAM_UNAVAILABLE
- InvalidArgument, NotFound → UPSTREAM_INVALID_REQUEST
- anything else → UPSTREAM_FAILED
"""

import logging
from typing import Any

from google.api_core.exceptions import (
    DeadlineExceeded,
    InvalidArgument,
    NotFound,
    PermissionDenied,
    ResourceExhausted,
    ServiceUnavailable,
    Unauthenticated,
)

from src.domain.errors import ErrorCodes

from .base import GenerativeBackend

logger = logging.getLogger(__name__)

# =============================================================================
# Exception Mapping
# =============================================================================

ERROR_CODE_MAP: tuple[tuple[tuple[type[Exception], ...], str], ...] = (
    ((Unauthenticated, PermissionDenied), ErrorCodes.UPSTREAM_AUTH),
    ((ResourceExhausted,), ErrorCodes.UPSTREAM_QUOTA),
    ((ServiceUnavailable, DeadlineExceeded), ErrorCodes.UPSTREAM_UNAVAILABLE),
    ((InvalidArgument, NotFound), ErrorCodes.UPSTREAM_INVALID_REQUEST),
)


def classify_error(error: Exception) -> str:
    """Error code for an upstream exception."""
    for exc_types, code in ERROR_CODE_MAP:
        if isinstance(error, exc_types):
            return code

    # Plain transport errors carry no type information
    error_str = str(error).lower()
    if "api key" in error_str or "api_key" in error_str:
        return ErrorCodes.UPSTREAM_AUTH
    elif "quota" in error_str or "rate limit" in error_str:
        return ErrorCodes.UPSTREAM_QUOTA
    elif "timeout" in error_str or "connection" in error_str:
        return ErrorCodes.UPSTREAM_UNAVAILABLE

    return ErrorCodes.UPSTREAM_FAILED


class GeminiBackend(GenerativeBackend):
    """
    Gemini backend (google-generativeai).

    Usage:
        backend = GeminiBackend(api_key=settings.api_key)
        text = await backend.generate("gemini-2.0-flash", contents)
    """

    def __init__(self, api_key: str | None, request_timeout: float | None = None):
        """
        Args:
            api_key: Gemini API key (validated by AdapterSettings)
            request_timeout: Per-request timeout in seconds (None: library default)
        """
        self.api_key = api_key
        self.request_timeout = request_timeout
        self._client: Any = None

    def _get_client(self) -> Any:
        """Gemini client (lazy init)."""
        if self._client is None:
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._client = genai
        return self._client

    async def generate(self, model: str, contents: list[dict[str, Any]]) -> str:
        genai = self._get_client()
        model_instance = genai.GenerativeModel(model)

        request_options = None
        if self.request_timeout is not None:
            request_options = {"timeout": self.request_timeout}

        logger.debug(f"Gemini request: model={model}, turns={len(contents)}")
        response = await model_instance.generate_content_async(
            contents,
            request_options=request_options,
        )

        # response.text raises ValueError when the candidate was blocked
        return str(response.text)

    def classify_error(self, error: Exception) -> str:
        return classify_error(error)
