"""
File Registry: in-memory store of uploaded files shared by every route.

Rules:
- name is the unique key; an existing entry always wins over a newcomer
- every update replaces the whole tuple (readers never see a half-applied batch)
- no operation raises
- previews are released when an entry is rejected, removed or cleared
"""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from src.domain.schemas import FileContext, UploadedFile

logger = logging.getLogger(__name__)

PREVIEW_URL_PREFIX = "/api/files/preview/"


# =============================================================================
# Preview Store
# =============================================================================


@dataclass(frozen=True)
class Preview:
    data: bytes
    mime_type: str


class PreviewStore:
    """
    Process-local image previews keyed by an opaque token.

    Usage:
        url = previews.create(image_bytes, "image/png")
        ...
        previews.release(url)
    """

    def __init__(self) -> None:
        self._previews: dict[str, Preview] = {}

    def create(self, data: bytes, mime_type: str) -> str:
        token = uuid.uuid4().hex
        self._previews[token] = Preview(data=data, mime_type=mime_type)
        return f"{PREVIEW_URL_PREFIX}{token}"

    def get(self, token: str) -> Preview | None:
        return self._previews.get(token)

    def release(self, url: str | None) -> None:
        """Drop a preview. Unknown or None URLs are ignored."""
        if not url or not url.startswith(PREVIEW_URL_PREFIX):
            return
        self._previews.pop(url[len(PREVIEW_URL_PREFIX):], None)

    def __len__(self) -> int:
        return len(self._previews)


# =============================================================================
# File Registry
# =============================================================================


class FileRegistry:
    """
    Shared registry of uploaded files.

    Passed explicitly to every consumer (held on app.state), never looked up
    through a module global.
    """

    def __init__(self, previews: PreviewStore | None = None) -> None:
        self.previews = previews if previews is not None else PreviewStore()
        self._files: tuple[UploadedFile, ...] = ()

    @property
    def files(self) -> tuple[UploadedFile, ...]:
        """Immutable snapshot in insertion order."""
        return self._files

    def add_files(self, new_files: Iterable[UploadedFile]) -> tuple[UploadedFile, ...]:
        """
        Append entries whose name is not present yet.

        Duplicates inside the batch are resolved by arrival order, so calling
        twice with the same list is a no-op the second time.

        Returns:
            The new snapshot
        """
        seen = {f.name for f in self._files}
        accepted: list[UploadedFile] = []
        rejected: list[UploadedFile] = []

        for uploaded in new_files:
            if uploaded.name in seen:
                logger.debug(f"Skipping duplicate file: {uploaded.name}")
                rejected.append(uploaded)
                continue
            seen.add(uploaded.name)
            accepted.append(uploaded)

        if accepted:
            self._files = self._files + tuple(accepted)

        # A re-added identical entry shares its preview with the kept one
        live = {f.preview for f in self._files if f.preview}
        for uploaded in rejected:
            if uploaded.preview and uploaded.preview not in live:
                self.previews.release(uploaded.preview)
        return self._files

    def remove_file(self, name: str) -> tuple[UploadedFile, ...]:
        """Remove the entry named `name`, if any."""
        for index, uploaded in enumerate(self._files):
            if uploaded.name == name:
                self._files = self._files[:index] + self._files[index + 1:]
                self.previews.release(uploaded.preview)
                break
        return self._files

    def clear_files(self) -> tuple[UploadedFile, ...]:
        old, self._files = self._files, ()
        for uploaded in old:
            self.previews.release(uploaded.preview)
        return self._files

    def get(self, name: str) -> UploadedFile | None:
        for uploaded in self._files:
            if uploaded.name == name:
                return uploaded
        return None

    def names(self) -> list[str]:
        return [f.name for f in self._files]

    def file_contexts(self) -> list[FileContext]:
        """Text-bearing entries as chat context, in registry order."""
        return [
            FileContext(name=f.name, type=f.type, content=f.content)
            for f in self._files
            if f.content is not None
        ]

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._files)
