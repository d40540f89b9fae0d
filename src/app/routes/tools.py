"""
Tool Routes: single-shot AI actions.

- POST /api/tools/generate → free-text prompt
- POST /api/tools/code → code review
- POST /api/tools/image-text → text extraction from an image
- POST /api/tools/image → image description from a prompt
"""

import logging
from collections.abc import Awaitable
from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile

from src.core.ingest import normalize_mime_type
from src.domain.errors import ErrorCodes, WorkspaceError

from .common import failure_payload, read_limited, require_text

logger = logging.getLogger(__name__)

api_router = APIRouter()

DEFAULT_LANGUAGE = "javascript"


async def _respond(request: Request, action: str, call: Awaitable[str]) -> dict[str, Any]:
    """Await an adapter call through WorkspaceService.run()."""
    result = await request.app.state.workspace.run(action, call)
    if not result.success:
        logger.debug(f"{action} failed: [{result.error_code}]")
        return failure_payload(action, code=result.error_code)
    return {"success": True, "text": result.text}


@api_router.post("/generate")
async def generate_text(request: Request, prompt: str = Form(...)) -> dict[str, Any]:
    require_text(prompt, "prompt")
    adapter = request.app.state.adapter
    return await _respond(request, "generate_text", adapter.generate_text(prompt))


@api_router.post("/code")
async def analyze_code(
    request: Request,
    code: str = Form(...),
    language: str = Form(DEFAULT_LANGUAGE),
) -> dict[str, Any]:
    require_text(code, "code")
    adapter = request.app.state.adapter
    return await _respond(request, "analyze_code", adapter.analyze_code(code, language))


@api_router.post("/image")
async def generate_image(request: Request, prompt: str = Form(...)) -> dict[str, Any]:
    """Image prompt → text description (Gemini returns no pixels)."""
    require_text(prompt, "prompt")
    adapter = request.app.state.adapter
    return await _respond(request, "generate_image", adapter.generate_image(prompt))


@api_router.post("/image-text")
async def extract_image_text(
    request: Request,
    image: UploadFile = File(...),
) -> dict[str, Any]:
    """
    Extract text from an uploaded image.

    Returns:
        success, raw_text, formatted_text
    """
    filename = image.filename or "unknown"
    mime_type = normalize_mime_type(filename, image.content_type)
    if not mime_type.startswith("image/"):
        raise HTTPException(
            status_code=400,
            detail={"code": ErrorCodes.UPLOAD_NOT_IMAGE, "message": "Please upload an image file"},
        )

    data = await read_limited(request, image)

    try:
        extracted = await request.app.state.workspace.extract_image_text(data, mime_type)
    except WorkspaceError as e:
        logger.debug(f"Image text extraction failed for '{filename}': [{e.code}]")
        return failure_payload("extract_image_text", e)

    return {"success": True, **extracted.to_dict()}
