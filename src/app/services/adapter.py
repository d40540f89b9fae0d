"""
AI Adapter: application intents → one Gemini request each.

- stateless apart from settings and backend
- one outbound call per operation, no retries, no caching
- missing credential → ConfigurationError before any network call
- any backend failure → logged once, re-raised as UpstreamError
"""

import base64
import logging
from collections.abc import Callable, Sequence
from typing import Any

from src.app.providers.base import (
    AdapterSettings,
    GenerativeBackend,
    inline_data_part,
    text_part,
    user_content,
)
from src.app.providers.gemini import GeminiBackend
from src.domain.errors import ConfigurationError, UpstreamError
from src.domain.schemas import FileContext

from .prompts import (
    IMAGE_TEXT_INSTRUCTION,
    build_chat_prompt,
    build_code_analysis_prompt,
    build_file_analysis_prompt,
)

logger = logging.getLogger(__name__)


class GeminiAdapter:
    """
    Facade over the generative backend.

    Usage:
        adapter = GeminiAdapter(AdapterSettings.from_config(config))
        summary = await adapter.analyze_file_content(text, "notes.md")
    """

    def __init__(
        self,
        settings: AdapterSettings,
        backend: GenerativeBackend | None = None,
    ):
        """
        Args:
            settings: Validated settings (config_error set when no key)
            backend: Backend override (None: GeminiBackend from settings)
        """
        self.settings = settings
        self.backend = backend or GeminiBackend(
            api_key=settings.api_key,
            request_timeout=settings.request_timeout,
        )

    # =========================================================================
    # Operations
    # =========================================================================

    async def generate_text(self, prompt: str) -> str:
        return await self._request(
            "generate_text",
            self.settings.text_model,
            lambda: user_content(text_part(prompt)),
        )

    async def analyze_file_content(self, content: str, file_name: str) -> str:
        prompt = build_file_analysis_prompt(content, file_name)
        return await self._request(
            "analyze_file_content",
            self.settings.text_model,
            lambda: user_content(text_part(prompt)),
            file_name=file_name,
        )

    async def analyze_code(self, code: str, language: str) -> str:
        prompt = build_code_analysis_prompt(code, language)
        return await self._request(
            "analyze_code",
            self.settings.text_model,
            lambda: user_content(text_part(prompt)),
            language=language,
        )

    async def extract_text_from_image(self, base64_image_data: str, mime_type: str) -> str:
        """
        Image → JSON string with raw_text / formatted_text.

        The result is returned unparsed; callers decode it (see
        WorkspaceService.extract_image_text).
        """
        return await self._request(
            "extract_text_from_image",
            self.settings.vision_model,
            lambda: user_content(
                inline_data_part(mime_type, base64.b64decode(base64_image_data, validate=True)),
                text_part(IMAGE_TEXT_INSTRUCTION),
            ),
            mime_type=mime_type,
        )

    async def chat_with_context(
        self,
        message: str,
        file_contexts: Sequence[FileContext] = (),
    ) -> str:
        prompt = build_chat_prompt(message, file_contexts)
        return await self._request(
            "chat_with_context",
            self.settings.text_model,
            lambda: user_content(text_part(prompt)),
            context_files=len(file_contexts),
        )

    async def generate_image(self, prompt: str) -> str:
        """
        Prompt → textual image description from the vision model.

        Gemini answers with text here, not pixels.
        """
        return await self._request(
            "generate_image",
            self.settings.vision_model,
            lambda: user_content(text_part(prompt)),
        )

    # =========================================================================
    # Request
    # =========================================================================

    async def _request(
        self,
        operation: str,
        model: str,
        build_contents: Callable[[], list[dict[str, Any]]],
        **context: Any,
    ) -> str:
        """
        Run one backend call.

        Args:
            operation: Operation name (logs/errors)
            model: Model name
            build_contents: Callable building the request contents
            **context: Extra error context

        Raises:
            ConfigurationError: No credential configured
            UpstreamError: Request building or backend call failed
        """
        config_error = self.settings.config_error
        if config_error is not None:
            # Logged once at startup, not per call
            raise ConfigurationError(
                config_error.code,
                config_error.message,
                operation=operation,
            )

        try:
            contents = build_contents()
            return await self.backend.generate(model, contents)
        except Exception as e:
            logger.error(f"{operation} failed (model={model}): {e}", exc_info=True)
            raise UpstreamError(
                self.backend.classify_error(e),
                str(e),
                operation=operation,
                model=model,
                **context,
            ) from e
