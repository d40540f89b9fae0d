"""
Files Routes: shared file registry.

- GET /api/files → registry snapshot
- POST /api/files/upload → add files (text decoded, images previewed)
- POST /api/files/upload-folder → add a zipped folder (relative paths)
- DELETE /api/files/{name} → remove one entry
- DELETE /api/files → clear
- GET /api/files/preview/{token} → image preview bytes
- POST /api/files/analyze → summarize/extract several files at once
"""

import io
import logging
import zipfile
from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import Response

from src.core.ingest import read_traversed, read_upload, stage_upload
from src.core.traversal import DEFAULT_PAGE_SIZE, ZipDirectoryEntry, collect_entries
from src.domain.errors import ErrorCodes, WorkspaceError

from .common import failure_payload, get_registry, read_limited

logger = logging.getLogger(__name__)

api_router = APIRouter()


def _snapshot(request: Request) -> dict[str, Any]:
    registry = get_registry(request)
    return {
        "count": len(registry),
        "files": [f.to_dict() for f in registry.files],
    }


@api_router.get("")
async def list_files(request: Request) -> dict[str, Any]:
    """Registry snapshot."""
    return _snapshot(request)


@api_router.post("/upload")
async def upload_files(
    request: Request,
    files: list[UploadFile] = File(...),
) -> dict[str, Any]:
    """
    Add uploaded files to the registry.

    Names already present are skipped (existing entry wins). Every file is
    read (and size-checked) before any preview is created.
    """
    registry = get_registry(request)

    received = []
    for upload in files:
        data = await read_limited(request, upload)
        received.append((upload.filename or "unknown", data, upload.content_type))

    uploaded = [
        read_upload(name, data, content_type, previews=registry.previews)
        for name, data, content_type in received
    ]

    before = set(registry.names())
    registry.add_files(uploaded)
    added = [name for name in registry.names() if name not in before]

    logger.info(f"Uploaded {len(uploaded)} file(s), {len(added)} new")
    return {"added": added, **_snapshot(request)}


@api_router.post("/upload-folder")
async def upload_folder(
    request: Request,
    archive: UploadFile = File(...),
) -> dict[str, Any]:
    """
    Add every file of a zipped folder.

    Top-level items of the archive count as the dropped items, so a zipped
    folder/ yields paths relative to it (sub/b.txt). Paths double as
    registry names.
    """
    registry = get_registry(request)
    data = await read_limited(request, archive)
    page_size = request.app.state.config.get("traversal", {}).get(
        "page_size", DEFAULT_PAGE_SIZE
    )

    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            root = ZipDirectoryEntry(zf, page_size=page_size)
            traversed = collect_entries(root.children())
            uploaded = read_traversed(traversed, previews=registry.previews)
    except zipfile.BadZipFile as e:
        raise HTTPException(
            status_code=400,
            detail={"code": ErrorCodes.UPLOAD_BAD_ARCHIVE, "message": "Not a zip archive"},
        ) from e
    except (RuntimeError, NotImplementedError) as e:
        # Encrypted members, unsupported compression methods
        logger.warning(f"Unreadable archive '{archive.filename}': {e}")
        raise HTTPException(
            status_code=400,
            detail={
                "code": ErrorCodes.UPLOAD_BAD_ARCHIVE,
                "message": "Archive contains unreadable entries",
            },
        ) from e

    before = set(registry.names())
    registry.add_files(uploaded)
    added = [name for name in registry.names() if name not in before]

    logger.info(f"Folder upload '{archive.filename}': {len(uploaded)} file(s)")
    return {"added": added, **_snapshot(request)}


@api_router.get("/preview/{token}")
async def get_preview(request: Request, token: str) -> Response:
    """Image preview bytes."""
    preview = get_registry(request).previews.get(token)
    if preview is None:
        raise HTTPException(
            status_code=404,
            detail={"code": ErrorCodes.FILE_NOT_FOUND, "message": "Preview not found"},
        )
    return Response(content=preview.data, media_type=preview.mime_type)


@api_router.delete("/{name:path}")
async def remove_file(request: Request, name: str) -> dict[str, Any]:
    """Remove one entry (no-op when absent)."""
    get_registry(request).remove_file(name)
    return _snapshot(request)


@api_router.delete("")
async def clear_files(request: Request) -> dict[str, Any]:
    get_registry(request).clear_files()
    return _snapshot(request)


@api_router.post("/analyze")
async def analyze_files(
    request: Request,
    files: list[UploadFile] = File(...),
    paths: list[str] | None = Form(None),
) -> dict[str, Any]:
    """
    Analyze several files at once.

    Text files are summarized (and added to the registry), images go
    through text extraction. One failure fails the whole request.

    Args:
        files: Files to analyze
        paths: Relative paths, same order as files (default: file names)
    """
    service = request.app.state.workspace

    staged = []
    for index, upload in enumerate(files):
        data = await read_limited(request, upload)
        path = paths[index] if paths and index < len(paths) else (upload.filename or "unknown")
        staged.append(stage_upload(path, data, upload.content_type))

    try:
        report = await service.analyze_files(staged)
    except WorkspaceError as e:
        logger.debug(f"File analysis failed: [{e.code}]")
        return failure_payload("analyze_files", e)

    return {"success": True, **report.to_dict()}
