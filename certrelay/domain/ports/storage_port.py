"""StoragePort protocol for the cloud file-storage collaborator."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from certrelay.domain.models import DriveItem


class StoragePort(Protocol):  # pragma: no cover - contract
    """Abstraction over folder creation and file upload.

    Implementations live in the infrastructure layer.
    """

    async def get_folder(self, folder_id: str) -> DriveItem: ...

    async def create_folder(self, name: str, parent_id: str) -> DriveItem: ...

    async def upload_file(
        self, path: Path, *, name: str, mime_type: str, folder_id: str
    ) -> DriveItem: ...

    async def upload_bytes(
        self,
        content: bytes,
        *,
        name: str,
        mime_type: str,
        folder_id: str,
        convert_to: str | None = None,
    ) -> DriveItem: ...
