"""Google Drive endpoints: raw file upload and folder creation."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from certrelay.api.file_validation import require_upload
from certrelay.api.schemas import CreateFolderRequest, CreateFolderResponse, ErrorResponse, UploadResponse
from certrelay.core.config import Settings
from certrelay.core.dependencies import get_app_settings, get_storage
from certrelay.domain.errors import ConfigurationError
from certrelay.domain.ports.storage_port import StoragePort
from certrelay.services.uploads import remove_temp_file, save_upload_to_temp

router = APIRouter()
logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"description": "Validation Error", "model": ErrorResponse},
    500: {"description": "Configuration or upstream error", "model": ErrorResponse},
}


def _target_folder(requested: Optional[str], settings: Settings, field_name: str) -> str:
    folder_id = requested or settings.GDRIVE_FOLDER_ID
    if not folder_id:
        raise ConfigurationError(
            "No Google Drive folder configured. Set GDRIVE_FOLDER_ID or pass "
            f"{field_name} in the request.",
            setting="GDRIVE_FOLDER_ID",
        )
    return folder_id


@router.post("/upload", response_model=UploadResponse, tags=["drive"], responses=_ERROR_RESPONSES)
async def upload_file(
    file: Optional[UploadFile] = File(None, description="File to store in Google Drive"),
    folder_id: Optional[str] = Form(None, alias="folderId"),
    settings: Settings = Depends(get_app_settings),
    storage: StoragePort = Depends(get_storage),
):
    file = require_upload(file)
    target_folder = _target_folder(folder_id, settings, "folderId")

    stored = await save_upload_to_temp(file, settings.upload_dir, settings.max_upload_size_bytes)
    try:
        await storage.get_folder(target_folder)
        item = await storage.upload_file(
            stored.path,
            name=stored.original_name,
            mime_type=stored.mime_type,
            folder_id=target_folder,
        )
        return UploadResponse(file_id=item.id, file_name=item.name, web_view_link=item.web_view_link)
    finally:
        remove_temp_file(stored.path)


@router.post(
    "/create-folder",
    response_model=CreateFolderResponse,
    tags=["drive"],
    responses=_ERROR_RESPONSES,
)
async def create_folder(
    body: CreateFolderRequest,
    settings: Settings = Depends(get_app_settings),
    storage: StoragePort = Depends(get_storage),
):
    parent_id = _target_folder(body.parent_folder_id, settings, "parentFolderId")

    # An explicitly requested parent is verified first; the default is trusted
    if body.parent_folder_id:
        await storage.get_folder(parent_id)

    item = await storage.create_folder(body.folder_name, parent_id)
    return CreateFolderResponse(
        folder_id=item.id,
        folder_name=item.name,
        web_view_link=item.web_view_link,
        parent_folder_id=parent_id,
    )
