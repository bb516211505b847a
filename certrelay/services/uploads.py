"""Temporary storage of uploaded files.

The request handler that saved a file owns it and removes it with
``remove_temp_file`` in a ``finally`` block.
"""

from __future__ import annotations

import logging
import mimetypes
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from certrelay.domain.errors import PayloadTooLargeError, ValidationError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredUpload:
    path: Path
    original_name: str
    mime_type: str
    size: int

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


def resolve_mime_type(file: UploadFile) -> str:
    """Declared content type, else a guess from the filename."""
    content_type = (file.content_type or "").split(";")[0].strip()
    if content_type and content_type != "application/octet-stream":
        return content_type
    guessed, _ = mimetypes.guess_type(file.filename or "")
    return guessed or content_type or "application/octet-stream"


def unique_temp_name(filename: str | None) -> str:
    """``<stem>-<epoch_ms>-<random>.<ext>``, stripped of any directory part."""
    base = Path(filename or "upload").name
    stem = Path(base).stem or "upload"
    suffix = Path(base).suffix
    return f"{stem}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{suffix}"


async def save_upload_to_temp(file: UploadFile, upload_dir: Path, max_size_bytes: int) -> StoredUpload:
    """Stream an upload to ``upload_dir`` under a unique name.

    Raises:
        ValidationError: The file is empty
        PayloadTooLargeError: The file exceeds ``max_size_bytes``; nothing is left on disk
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / unique_temp_name(file.filename)

    size = 0
    try:
        with open(path, "wb") as out:
            while chunk := await file.read(_CHUNK_SIZE):
                size += len(chunk)
                if size > max_size_bytes:
                    raise PayloadTooLargeError(
                        max_size_mb=max_size_bytes // (1024 * 1024),
                        actual_size_mb=size / (1024 * 1024),
                    )
                out.write(chunk)
        if size == 0:
            raise ValidationError(
                message="File is empty (0 bytes)",
                field="file",
                details={"file_size": 0},
            )
    except BaseException:
        remove_temp_file(path)
        raise

    logger.info("Upload stored: %s (%d bytes)", path.name, size)
    return StoredUpload(
        path=path,
        original_name=file.filename or path.name,
        mime_type=resolve_mime_type(file),
        size=size,
    )


def remove_temp_file(path: Path | str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Failed to cleanup temp file: %s", path)
