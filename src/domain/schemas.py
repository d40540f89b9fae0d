"""
Data schemas for the workspace.

- UploadedFile: registry entry (name is the unique key)
- ChatMessage: view-local, referenced_files is a snapshot
- AIResult: typed success/error result of one adapter call
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

# =============================================================================
# Registry Schemas
# =============================================================================


@dataclass(frozen=True)
class UploadedFile:
    """
    Registry entry.

    content is None for binary/image files.
    preview is a transient URL released when the entry is discarded.
    """
    name: str
    content: str | None
    type: str
    path: str | None = None
    preview: str | None = None

    @property
    def is_image(self) -> bool:
        return self.type.startswith("image/")

    def to_dict(self) -> dict[str, Any]:
        """JSON serialization."""
        return {
            "name": self.name,
            "content": self.content,
            "type": self.type,
            "path": self.path,
            "preview": self.preview,
        }


@dataclass(frozen=True)
class FileContext:
    """File rendered into a chat prompt as a context block."""
    name: str
    type: str
    content: str


@dataclass(frozen=True)
class StagedFile:
    """
    File waiting for aggregate analysis.

    Holds raw bytes because images are sent to the vision model.
    """
    path: str
    type: str
    data: bytes
    preview: str | None = None

    @property
    def is_image(self) -> bool:
        return self.type.startswith("image/")


# =============================================================================
# Chat Schemas
# =============================================================================


class Sender(str, Enum):
    USER = "user"
    AI = "ai"


@dataclass
class ChatMessage:
    """Chat history entry."""
    sender: Sender
    text: str
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    referenced_files: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sender": self.sender.value,
            "text": self.text,
            "timestamp": self.timestamp,
            "referenced_files": self.referenced_files,
        }


# =============================================================================
# Result Schemas
# =============================================================================


@dataclass
class AIResult:
    """
    Adapter call result.

    success=False carries error_code/error_message. Display strings are
    chosen by the route layer from error_code.
    """
    success: bool
    operation: str
    text: str | None = None
    model: str | None = None
    error_code: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {
            "success": self.success,
            "operation": self.operation,
            "text": self.text,
            "model": self.model,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }
        return {k: v for k, v in result.items() if v is not None}


@dataclass(frozen=True)
class ExtractedText:
    """Parsed image extraction result."""
    raw_text: str
    formatted_text: str

    def to_dict(self) -> dict[str, str]:
        return {"raw_text": self.raw_text, "formatted_text": self.formatted_text}


@dataclass
class ImageText:
    path: str
    text: str
    preview: str | None = None


@dataclass
class AnalysisReport:
    """Aggregate analysis over staged files."""
    summary: str = ""
    image_texts: list[ImageText] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "image_texts": [
                {"path": i.path, "text": i.text, "preview": i.preview}
                for i in self.image_texts
            ],
        }
