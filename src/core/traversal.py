"""
Directory traversal: folder entry tree → flat (relative_path, file) pairs.

Rules:
- directory listings are paginated; a reader is drained until it returns
  an empty page (one call is not guaranteed to return everything)
- child paths are "<parent>/<name>", depth-first, sibling order as listed
- explicit worklist instead of recursion
- no cycle detection and no depth/count limits
"""

import zipfile
from collections.abc import Iterator, Sequence
from typing import Protocol

DEFAULT_PAGE_SIZE = 100


# =============================================================================
# Entry Protocols
# =============================================================================


class FileEntry(Protocol):
    name: str

    @property
    def is_directory(self) -> bool: ...

    def read(self) -> bytes: ...


class DirectoryReader(Protocol):
    def read_entries(self) -> Sequence["FileEntry | DirectoryEntry"]:
        """Next page of children. An empty page means the listing is done."""
        ...


class DirectoryEntry(Protocol):
    name: str

    @property
    def is_directory(self) -> bool: ...

    def create_reader(self) -> DirectoryReader: ...


TraversedFile = tuple[str, FileEntry]


def join_path(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


# =============================================================================
# Traversal
# =============================================================================


def traverse_directory(
    directory: DirectoryEntry,
    path: str = "",
) -> list[TraversedFile]:
    """
    Flatten a directory tree.

    Args:
        directory: Root directory entry
        path: Relative path of the root ("" for a dropped folder)

    Returns:
        [(relative_path, file_entry), ...] in depth-first order
    """
    files: list[TraversedFile] = []

    # Frame: (reader, path of the directory, remaining entries of current page)
    stack: list[tuple[DirectoryReader, str, Iterator[FileEntry | DirectoryEntry]]] = [
        (directory.create_reader(), path, iter(()))
    ]

    while stack:
        reader, dir_path, pending = stack[-1]
        entry = next(pending, None)

        if entry is None:
            page = reader.read_entries()
            if not page:
                stack.pop()
            else:
                stack[-1] = (reader, dir_path, iter(page))
            continue

        entry_path = join_path(dir_path, entry.name)
        if entry.is_directory:
            stack.append((entry.create_reader(), entry_path, iter(())))  # type: ignore[union-attr]
        else:
            files.append((entry_path, entry))  # type: ignore[arg-type]

    return files


def collect_entries(
    entries: Sequence[FileEntry | DirectoryEntry],
) -> list[TraversedFile]:
    """
    Flatten a set of dropped items.

    Dropped folders contribute paths relative to themselves; dropped files
    keep their own name.
    """
    files: list[TraversedFile] = []
    for entry in entries:
        if entry.is_directory:
            files.extend(traverse_directory(entry, ""))  # type: ignore[arg-type]
        else:
            files.append((entry.name, entry))  # type: ignore[arg-type]
    return files


# =============================================================================
# Zip Archive Entries
# =============================================================================

# macOS Finder metadata, never user content
_ZIP_SKIP_PREFIXES = ("__MACOSX/",)


class ZipFileEntry:
    is_directory = False

    def __init__(self, archive: zipfile.ZipFile, member: str):
        self.archive = archive
        self.member = member
        self.name = member.rstrip("/").rsplit("/", 1)[-1]

    def read(self) -> bytes:
        return self.archive.read(self.member)


class _ZipReader:
    def __init__(self, children: list["ZipFileEntry | ZipDirectoryEntry"], page_size: int):
        self._children = children
        self._page_size = page_size
        self._offset = 0

    def read_entries(self) -> list["ZipFileEntry | ZipDirectoryEntry"]:
        page = self._children[self._offset:self._offset + self._page_size]
        self._offset += len(page)
        return page


class ZipDirectoryEntry:
    """
    Directory inside a zip archive (prefix "" is the archive root).

    Usage:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            root = ZipDirectoryEntry(archive)
            files = collect_entries(root.children())
    """

    is_directory = True

    def __init__(
        self,
        archive: zipfile.ZipFile,
        prefix: str = "",
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.archive = archive
        self.prefix = prefix
        self.page_size = page_size
        self.name = prefix.rstrip("/").rsplit("/", 1)[-1]

    def children(self) -> list["ZipFileEntry | ZipDirectoryEntry"]:
        """Immediate children in archive order."""
        children: list[ZipFileEntry | ZipDirectoryEntry] = []
        seen: set[str] = set()

        for member in self.archive.namelist():
            if not member.startswith(self.prefix) or member == self.prefix:
                continue
            if member.startswith(_ZIP_SKIP_PREFIXES):
                continue

            remainder = member[len(self.prefix):]
            segment, sep, _ = remainder.partition("/")
            if not segment or segment in seen:
                continue
            seen.add(segment)

            if sep:
                children.append(
                    ZipDirectoryEntry(self.archive, f"{self.prefix}{segment}/", self.page_size)
                )
            else:
                children.append(ZipFileEntry(self.archive, member))

        return children

    def create_reader(self) -> _ZipReader:
        return _ZipReader(self.children(), self.page_size)
