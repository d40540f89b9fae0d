"""
Error definitions for the workspace.

Taxonomy:
- ConfigurationError: missing/invalid Gemini credential
- UpstreamError: network or model-side failure (cause message preserved)
- ParseError: caller-side decoding of image extraction results

The adapter recovers nothing locally. Route handlers catch at the boundary
of each user action and substitute a fixed message.
"""

from typing import Any


class WorkspaceError(Exception):
    """
    Base error for the workspace.

    Usage:
        raise UpstreamError(ErrorCodes.UPSTREAM_FAILED, str(e), operation="chat")
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Log/JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class ConfigurationError(WorkspaceError):
    """Credential absent or invalid."""
    pass


class UpstreamError(WorkspaceError):
    """Transport or model failure."""
    pass


class ParseError(WorkspaceError):
    """Extraction result is not the expected JSON object."""
    pass


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Error code constants."""

    # === Configuration ===
    API_KEY_MISSING = "API_KEY_MISSING"

    # === Upstream ===
    UPSTREAM_AUTH = "UPSTREAM_AUTH"
    UPSTREAM_QUOTA = "UPSTREAM_QUOTA"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    UPSTREAM_INVALID_REQUEST = "UPSTREAM_INVALID_REQUEST"
    UPSTREAM_FAILED = "UPSTREAM_FAILED"

    # === Parse ===
    EXTRACTION_NOT_JSON = "EXTRACTION_NOT_JSON"
    EXTRACTION_BAD_SHAPE = "EXTRACTION_BAD_SHAPE"

    # === Input ===
    EMPTY_INPUT = "EMPTY_INPUT"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"

    # === Upload ===
    UPLOAD_TOO_LARGE = "UPLOAD_TOO_LARGE"
    UPLOAD_NOT_IMAGE = "UPLOAD_NOT_IMAGE"
    UPLOAD_BAD_ARCHIVE = "UPLOAD_BAD_ARCHIVE"
