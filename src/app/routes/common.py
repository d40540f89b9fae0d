"""
Shared route helpers: app state access and user-facing fallback messages.

Raw errors never reach a response body; each action answers with its own
fixed message plus the error code.
"""

from typing import Any

from fastapi import HTTPException, Request, UploadFile

from src.core.registry import FileRegistry
from src.domain.errors import ErrorCodes, WorkspaceError

DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024  # 20MB

FALLBACK_MESSAGES = {
    "analyze_files": (
        "Sorry, I encountered an error while analyzing your files. Please try again."
    ),
    "analyze_code": (
        "Sorry, I encountered an error while analyzing your code. Please try again."
    ),
    "extract_image_text": "Error processing image. Please try again.",
    "generate_text": (
        "Sorry, I encountered an error while generating a response. Please try again."
    ),
    "generate_image": (
        "Sorry, I encountered an error while generating the image. Please try again."
    ),
}

CONFIGURATION_HINT = "The AI service is not configured. Set GEMINI_API_KEY and restart."


def get_registry(request: Request) -> FileRegistry:
    return request.app.state.registry


def failure_payload(
    action: str,
    error: WorkspaceError | None = None,
    code: str | None = None,
) -> dict[str, Any]:
    """
    Response body for a failed action.

    Args:
        action: Key into FALLBACK_MESSAGES
        error: Caught error (only its code is exposed)
        code: Error code when no exception object is at hand
    """
    error_code = error.code if error is not None else code
    payload: dict[str, Any] = {
        "success": False,
        "message": FALLBACK_MESSAGES[action],
        "error_code": error_code,
    }
    if error_code == ErrorCodes.API_KEY_MISSING:
        payload["hint"] = CONFIGURATION_HINT
    return payload


def require_text(value: str, field_name: str) -> str:
    if not value.strip():
        raise HTTPException(
            status_code=400,
            detail={"code": ErrorCodes.EMPTY_INPUT, "message": f"'{field_name}' is empty"},
        )
    return value


async def read_limited(request: Request, upload: UploadFile) -> bytes:
    """Read an upload, rejecting anything above upload.max_bytes."""
    max_bytes = (
        request.app.state.config.get("upload", {}).get("max_bytes", DEFAULT_MAX_UPLOAD_BYTES)
    )
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail={
                "code": ErrorCodes.UPLOAD_TOO_LARGE,
                "message": f"'{upload.filename}' exceeds {max_bytes} bytes",
            },
        )
    return data
