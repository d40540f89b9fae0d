"""Domain layer: errors and schemas."""

from .errors import (
    ConfigurationError,
    ErrorCodes,
    ParseError,
    UpstreamError,
    WorkspaceError,
)
from .schemas import (
    AIResult,
    AnalysisReport,
    ChatMessage,
    ExtractedText,
    FileContext,
    StagedFile,
    UploadedFile,
)

__all__ = [
    "WorkspaceError",
    "ConfigurationError",
    "UpstreamError",
    "ParseError",
    "ErrorCodes",
    "UploadedFile",
    "FileContext",
    "StagedFile",
    "ChatMessage",
    "AIResult",
    "ExtractedText",
    "AnalysisReport",
]
