"""
test_gemini.py - Gemini backend tests

- error classification (google.api_core exceptions → error codes)
- lazy client init
- request forwarding (model, contents, timeout)
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from google.api_core.exceptions import (
    DeadlineExceeded,
    InvalidArgument,
    NotFound,
    PermissionDenied,
    ResourceExhausted,
    ServiceUnavailable,
    Unauthenticated,
)

from src.app.providers.gemini import GeminiBackend, classify_error
from src.domain.errors import ErrorCodes

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def gemini_backend() -> GeminiBackend:
    return GeminiBackend(api_key="test-api-key", request_timeout=30.0)


@pytest.fixture
def fake_genai():
    """Stand-in for the google.generativeai module."""
    genai = MagicMock()
    model = MagicMock()
    model.generate_content_async = AsyncMock(return_value=MagicMock(text="model says hi"))
    genai.GenerativeModel.return_value = model
    return genai


# =============================================================================
# Error classification
# =============================================================================


class TestClassifyError:
    """classify_error tests."""

    @pytest.mark.parametrize(
        "error, code",
        [
            (Unauthenticated("bad key"), ErrorCodes.UPSTREAM_AUTH),
            (PermissionDenied("nope"), ErrorCodes.UPSTREAM_AUTH),
            (ResourceExhausted("429"), ErrorCodes.UPSTREAM_QUOTA),
            (ServiceUnavailable("503"), ErrorCodes.UPSTREAM_UNAVAILABLE),
            (DeadlineExceeded("slow"), ErrorCodes.UPSTREAM_UNAVAILABLE),
            (InvalidArgument("bad input"), ErrorCodes.UPSTREAM_INVALID_REQUEST),
            (NotFound("no model"), ErrorCodes.UPSTREAM_INVALID_REQUEST),
        ],
    )
    def test_google_exceptions(self, error: Exception, code: str):
        assert classify_error(error) == code

    def test_message_heuristics(self):
        assert classify_error(RuntimeError("API key not valid")) == ErrorCodes.UPSTREAM_AUTH
        assert classify_error(RuntimeError("Quota exceeded")) == ErrorCodes.UPSTREAM_QUOTA
        assert classify_error(OSError("Connection reset")) == ErrorCodes.UPSTREAM_UNAVAILABLE

    def test_unknown(self):
        assert classify_error(ValueError("blocked")) == ErrorCodes.UPSTREAM_FAILED

    def test_backend_method_delegates(self, gemini_backend: GeminiBackend):
        assert gemini_backend.classify_error(ResourceExhausted("429")) == ErrorCodes.UPSTREAM_QUOTA


# =============================================================================
# Requests
# =============================================================================


class TestGeminiBackend:
    """GeminiBackend.generate tests."""

    def test_client_lazy_init(self, gemini_backend: GeminiBackend):
        assert gemini_backend._client is None

    @pytest.mark.asyncio
    async def test_generate_forwards_request(self, gemini_backend: GeminiBackend, fake_genai):
        gemini_backend._client = fake_genai
        contents = [{"role": "user", "parts": [{"text": "hello"}]}]

        text = await gemini_backend.generate("gemini-2.0-flash", contents)

        assert text == "model says hi"
        fake_genai.GenerativeModel.assert_called_once_with("gemini-2.0-flash")
        model = fake_genai.GenerativeModel.return_value
        model.generate_content_async.assert_awaited_once_with(
            contents, request_options={"timeout": 30.0}
        )

    @pytest.mark.asyncio
    async def test_no_timeout_option(self, fake_genai):
        backend = GeminiBackend(api_key="k")
        backend._client = fake_genai

        await backend.generate("m", [])

        model = fake_genai.GenerativeModel.return_value
        model.generate_content_async.assert_awaited_once_with([], request_options=None)

    @pytest.mark.asyncio
    async def test_errors_propagate(self, gemini_backend: GeminiBackend, fake_genai):
        model = fake_genai.GenerativeModel.return_value
        model.generate_content_async.side_effect = ServiceUnavailable("down")
        gemini_backend._client = fake_genai

        with pytest.raises(ServiceUnavailable):
            await gemini_backend.generate("m", [])
