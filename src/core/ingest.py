"""
Ingestion: raw upload bytes → UploadedFile / StagedFile.

- images: content=None, a preview is created
- everything else: decoded as UTF-8 (invalid bytes replaced)
- missing MIME types are guessed from the name, then default to text/plain
"""

import base64
import mimetypes
from collections.abc import Iterable

from src.core.registry import PreviewStore
from src.core.traversal import TraversedFile
from src.domain.schemas import StagedFile, UploadedFile

DEFAULT_MIME_TYPE = "text/plain"

_MIME_MAP = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
    ".md": "text/markdown",
    ".ts": "text/typescript",
    ".tsx": "text/typescript",
    ".py": "text/x-python",
}


def normalize_mime_type(file_name: str, declared: str | None = None) -> str:
    """
    MIME type for an upload.

    Args:
        file_name: File name (used when nothing was declared)
        declared: MIME type sent by the client, may be empty

    Returns:
        Lower-cased MIME type
    """
    # Browsers send application/octet-stream for anything they don't know
    if declared and declared != "application/octet-stream":
        return declared.lower()

    suffix = "." + file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
    if suffix in _MIME_MAP:
        return _MIME_MAP[suffix]

    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or declared or DEFAULT_MIME_TYPE


def decode_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def encode_image(data: bytes) -> str:
    """Base64 text for an inline-data request part."""
    return base64.b64encode(data).decode("ascii")


def read_upload(
    name: str,
    data: bytes,
    mime_type: str | None = None,
    path: str | None = None,
    previews: PreviewStore | None = None,
) -> UploadedFile:
    """
    Build a registry entry from upload bytes.

    Args:
        name: Registry key
        data: File bytes
        mime_type: Declared MIME type (may be None/empty)
        path: Relative path for folder uploads
        previews: Store for image previews (None: no preview)
    """
    file_type = normalize_mime_type(name, mime_type)

    if file_type.startswith("image/"):
        preview = previews.create(data, file_type) if previews is not None else None
        return UploadedFile(
            name=name, content=None, type=file_type, path=path, preview=preview
        )

    return UploadedFile(name=name, content=decode_text(data), type=file_type, path=path)


def stage_upload(
    path: str,
    data: bytes,
    mime_type: str | None = None,
    previews: PreviewStore | None = None,
) -> StagedFile:
    """Build a StagedFile for aggregate analysis."""
    file_type = normalize_mime_type(path, mime_type)
    preview = None
    if file_type.startswith("image/") and previews is not None:
        preview = previews.create(data, file_type)
    return StagedFile(path=path, type=file_type, data=data, preview=preview)


def read_traversed(
    traversed: Iterable[TraversedFile],
    previews: PreviewStore | None = None,
) -> list[UploadedFile]:
    """
    Registry entries for a flattened folder.

    The relative path doubles as the registry name so same-named files in
    different sub-folders do not collide. Every file is read before any
    preview is created, so a failed read leaves the preview store untouched.
    """
    contents = [(rel_path, entry.read()) for rel_path, entry in traversed]
    return [
        read_upload(rel_path, data, path=rel_path, previews=previews)
        for rel_path, data in contents
    ]
