"""
Google Drive v3 storage adapter.

The google-api-python-client is synchronous; every request is executed in
the default thread-pool executor so the event loop is never blocked.
httplib2.Http is not thread-safe, so the service object is shared but each
executor thread sends its requests over its own authorized transport.
"""

from __future__ import annotations

import asyncio
import io
import logging
import threading
from functools import partial
from pathlib import Path
from typing import Any, Callable

import httplib2
from google.oauth2.service_account import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest, MediaFileUpload, MediaIoBaseUpload

from certrelay.core.config import ERROR_BODY_MAX_CHARS
from certrelay.domain.errors import UpstreamTransportError, ValidationError
from certrelay.domain.models import DriveItem

logger = logging.getLogger(__name__)

SERVICE_NAME = "google_drive"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"
_ITEM_FIELDS = "id, name, mimeType, webViewLink"

RequestFactory = Callable[[Any], HttpRequest]


def _to_item(data: dict[str, Any]) -> DriveItem:
    return DriveItem(
        id=data["id"],
        name=data.get("name", ""),
        web_view_link=data.get("webViewLink"),
        mime_type=data.get("mimeType"),
    )


def _error_body(error: HttpError) -> str:
    content = error.content
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    return (content or str(error))[:ERROR_BODY_MAX_CHARS]


class GoogleDriveStorage:
    """StoragePort implementation on the Drive v3 API.

    Credentials are resolved and the service is built on first use, so a
    process without Drive configuration still starts and serves the
    analysis endpoint.
    """

    def __init__(
        self,
        credentials_loader: Callable[[], Credentials] | None = None,
        *,
        service: Any = None,
    ) -> None:
        if credentials_loader is None and service is None:
            raise ValueError("Either credentials_loader or service is required")
        self._credentials_loader = credentials_loader
        self._credentials: Credentials | None = None
        self._service = service
        self._init_lock = threading.Lock()
        self._local = threading.local()

    def _get_service(self) -> Any:
        if self._service is None:
            with self._init_lock:
                if self._service is None:
                    credentials = self._credentials_loader()  # type: ignore[misc]
                    self._credentials = credentials
                    self._service = build(
                        "drive", "v3", credentials=credentials, cache_discovery=False
                    )
                    logger.info("Google Drive client initialized")
        return self._service

    def _thread_http(self) -> AuthorizedHttp | None:
        """Transport owned by the calling thread; None for an injected service."""
        if self._credentials is None:
            return None
        http = getattr(self._local, "http", None)
        if http is None:
            http = AuthorizedHttp(self._credentials, http=httplib2.Http())
            self._local.http = http
        return http

    def _send(self, make_request: RequestFactory) -> dict[str, Any]:
        request = make_request(self._get_service().files())
        return request.execute(http=self._thread_http())

    async def _run(self, make_request: RequestFactory) -> dict[str, Any]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self._send, make_request))

    async def get_folder(self, folder_id: str) -> DriveItem:
        def _get(files: Any) -> HttpRequest:
            return files.get(fileId=folder_id, fields=_ITEM_FIELDS, supportsAllDrives=True)

        try:
            data = await self._run(_get)
        except HttpError as error:
            status = error.resp.status
            if status == 404:
                message = (
                    f"Folder {folder_id} does not exist or the service account has no access to it"
                )
            elif status == 403:
                message = f"No permission for folder {folder_id}"
            else:
                message = f"Unable to check folder {folder_id}"
            raise UpstreamTransportError(SERVICE_NAME, message, status, _error_body(error)) from error

        if data.get("mimeType") != FOLDER_MIME_TYPE:
            raise ValidationError(f"ID {folder_id} is not a folder", field="folderId")

        logger.info("Folder verified: %s", data.get("name"), extra={"folder_id": folder_id})
        return _to_item(data)

    async def create_folder(self, name: str, parent_id: str) -> DriveItem:
        metadata = {"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_id]}

        def _create(files: Any) -> HttpRequest:
            return files.create(body=metadata, fields=_ITEM_FIELDS, supportsAllDrives=True)

        data = await self._execute(_create, "Folder creation failed")
        logger.info("Folder created: %s", data.get("name"), extra={"folder_id": data["id"]})
        return _to_item(data)

    async def upload_file(
        self, path: Path, *, name: str, mime_type: str, folder_id: str
    ) -> DriveItem:
        metadata = {"name": name, "parents": [folder_id]}

        def _upload(files: Any) -> HttpRequest:
            media = MediaFileUpload(str(path), mimetype=mime_type, resumable=True)
            return files.create(
                body=metadata, media_body=media, fields=_ITEM_FIELDS, supportsAllDrives=True
            )

        data = await self._execute(_upload, "File upload failed")
        logger.info(
            "File uploaded: %s", name, extra={"file_id": data["id"], "folder_id": folder_id}
        )
        return _to_item(data)

    async def upload_bytes(
        self,
        content: bytes,
        *,
        name: str,
        mime_type: str,
        folder_id: str,
        convert_to: str | None = None,
    ) -> DriveItem:
        """Upload in-memory content; ``convert_to`` asks Drive to convert it (e.g. to a Google Doc)."""
        metadata: dict[str, Any] = {"name": name, "parents": [folder_id]}
        if convert_to:
            metadata["mimeType"] = convert_to

        def _upload(files: Any) -> HttpRequest:
            media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type, resumable=True)
            return files.create(
                body=metadata, media_body=media, fields=_ITEM_FIELDS, supportsAllDrives=True
            )

        data = await self._execute(_upload, "File upload failed")
        logger.info(
            "Content uploaded: %s", name, extra={"file_id": data["id"], "folder_id": folder_id}
        )
        return _to_item(data)

    async def _execute(self, make_request: RequestFactory, message: str) -> dict[str, Any]:
        try:
            return await self._run(make_request)
        except HttpError as error:
            raise UpstreamTransportError(
                SERVICE_NAME, message, error.resp.status, _error_body(error)
            ) from error
