"""
Core layer: in-memory state and file handling.

Roles:
- File Registry + preview store
- folder traversal
- upload ingestion
"""

from .ingest import encode_image, read_traversed, read_upload, stage_upload
from .logging import setup_logging
from .registry import FileRegistry, PreviewStore
from .traversal import (
    ZipDirectoryEntry,
    collect_entries,
    traverse_directory,
)

__all__ = [
    # registry
    "FileRegistry",
    "PreviewStore",
    # traversal
    "traverse_directory",
    "collect_entries",
    "ZipDirectoryEntry",
    # ingest
    "read_upload",
    "read_traversed",
    "stage_upload",
    "encode_image",
    # logging
    "setup_logging",
]
