"""
Workspace Service: adapter calls → typed results, multi-file analysis.

- run(): WorkspaceError → AIResult(success=False, error_code=...)
- analyze_files(): fan-out with asyncio.gather, one failure fails all
- extract_image_text(): caller-side JSON decoding (ParseError on bad output)
"""

import asyncio
import json
import logging
import re
from collections.abc import Awaitable, Sequence
from typing import Any

from src.core.ingest import decode_text, encode_image
from src.core.registry import FileRegistry
from src.domain.errors import ErrorCodes, ParseError, WorkspaceError
from src.domain.schemas import (
    AIResult,
    AnalysisReport,
    ExtractedText,
    ImageText,
    StagedFile,
    UploadedFile,
)

from .adapter import GeminiAdapter

logger = logging.getLogger(__name__)

# ```json ... ``` wrapper some model versions put around JSON answers
_CODE_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n(?P<body>.*)\n\s*```$", re.DOTALL)


def parse_extracted_text(raw: str) -> ExtractedText:
    """
    Decode an image extraction result.

    Raises:
        ParseError: Not a JSON object with string raw_text/formatted_text
    """
    text = raw.strip()
    fenced = _CODE_FENCE_RE.match(text)
    if fenced:
        text = fenced.group("body").strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Extraction result is not JSON: {e}")
        raise ParseError(
            ErrorCodes.EXTRACTION_NOT_JSON,
            f"Extraction result is not valid JSON: {e.msg}",
            preview=text[:100],
        ) from e

    if not isinstance(data, dict):
        raise ParseError(
            ErrorCodes.EXTRACTION_BAD_SHAPE,
            "Extraction result is not a JSON object",
        )

    missing = [
        key for key in ("raw_text", "formatted_text")
        if not isinstance(data.get(key), str)
    ]
    if missing:
        raise ParseError(
            ErrorCodes.EXTRACTION_BAD_SHAPE,
            "Extraction result is missing text fields",
            missing=missing,
        )

    return ExtractedText(raw_text=data["raw_text"], formatted_text=data["formatted_text"])


class WorkspaceService:
    """
    Workspace operations shared by the routes.

    Holds the adapter and the registry handle passed in at startup.
    """

    def __init__(self, adapter: GeminiAdapter, registry: FileRegistry):
        """
        Args:
            adapter: AI adapter
            registry: Shared file registry
        """
        self.adapter = adapter
        self.registry = registry

    async def run(self, operation: str, call: Awaitable[str]) -> AIResult:
        """
        Await one adapter call as a typed result.

        Args:
            operation: Operation name recorded on the result
            call: Adapter coroutine
        """
        try:
            text = await call
        except WorkspaceError as e:
            return AIResult(
                success=False,
                operation=operation,
                error_code=e.code,
                error_message=e.message,
                model=e.context.get("model"),
            )
        return AIResult(success=True, operation=operation, text=text)

    async def extract_image_text(self, data: bytes, mime_type: str) -> ExtractedText:
        """
        Image bytes → parsed extraction.

        Raises:
            ConfigurationError / UpstreamError: from the adapter
            ParseError: model answer is not the expected JSON
        """
        raw = await self.adapter.extract_text_from_image(encode_image(data), mime_type)
        return parse_extracted_text(raw)

    async def analyze_files(self, staged: Sequence[StagedFile]) -> AnalysisReport:
        """
        Analyze every staged file concurrently.

        Text files are summarized and added to the registry once their own
        summary succeeded; images go through text extraction. Once every call
        has finished, the first failure in input order is raised and no partial
        report is produced.

        Raises:
            WorkspaceError: any single call failed
        """
        if not staged:
            return AnalysisReport()

        outcomes = await asyncio.gather(
            *(self._analyze_one(f) for f in staged), return_exceptions=True
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        results: list[dict[str, Any]] = outcomes  # type: ignore[assignment]
        text_results = [r for r in results if r["kind"] == "text"]
        image_results = [r for r in results if r["kind"] == "image"]

        summary = "---\n".join(
            f"File: {r['path']}\n{r['content']}\n\n" for r in text_results
        )
        return AnalysisReport(
            summary=summary,
            image_texts=[
                ImageText(path=r["path"], text=r["content"], preview=r["preview"])
                for r in image_results
            ],
        )

    async def _analyze_one(self, staged: StagedFile) -> dict[str, Any]:
        if staged.is_image:
            extracted = await self.adapter.extract_text_from_image(
                encode_image(staged.data), staged.type
            )
            return {
                "kind": "image",
                "path": staged.path,
                "content": extracted,
                "preview": staged.preview,
            }

        content = decode_text(staged.data)
        analysis = await self.adapter.analyze_file_content(content, staged.path)

        self.registry.add_files(
            [UploadedFile(name=staged.path, content=content, type=staged.type)]
        )
        return {"kind": "text", "path": staged.path, "content": analysis}
