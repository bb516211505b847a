"""Request and response models for the HTTP API.

Wire names are camelCase (``fileId``, ``documentType``) except ``file_info``,
which existing clients already consume in snake case.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing endpoint."""

    success: bool = Field(default=False)
    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Application-specific error code")
    category: str = Field(..., description="Error category (client_error, server_error, etc.)")
    retryable: bool = Field(default=False, description="Whether the request can be retried")
    detail: Optional[str] = Field(None, description="Additional detail, e.g. upstream body excerpt")
    trace_id: Optional[str] = Field(None, description="Request correlation ID")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": "No file uploaded",
                "code": "VALIDATION_ERROR",
                "category": "client_error",
                "retryable": False,
                "trace_id": "550e8400-e29b-41d4-a716-446655440000",
            }
        }
    )


class HealthResponse(BaseModel):
    status: str = Field(..., description="Always 'ok' while the process serves requests")
    timestamp: str = Field(..., description="Current server time, ISO-8601 UTC")


class UploadResponse(_WireModel):
    success: bool = True
    file_id: str = Field(..., alias="fileId")
    file_name: str = Field(..., alias="fileName")
    web_view_link: Optional[str] = Field(None, alias="webViewLink")


class CreateFolderRequest(_WireModel):
    folder_name: str = Field(..., alias="folderName", description="Name of the folder to create")
    parent_folder_id: Optional[str] = Field(
        None, alias="parentFolderId", description="Defaults to GDRIVE_FOLDER_ID"
    )

    @field_validator("folder_name")
    @classmethod
    def _folder_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("folderName must not be empty")
        return v


class CreateFolderResponse(_WireModel):
    success: bool = True
    folder_id: str = Field(..., alias="folderId")
    folder_name: str = Field(..., alias="folderName")
    web_view_link: Optional[str] = Field(None, alias="webViewLink")
    parent_folder_id: str = Field(..., alias="parentFolderId")


class ClassificationOut(BaseModel):
    text: str
    parsed: Optional[dict[str, Any]] = None


class DetailsOut(_WireModel):
    text: str
    fields: Optional[dict[str, str]] = Field(
        None,
        description=(
            "Decoded extraction object. For birth_certificate/v1 the keys are the contract "
            "keys (e.g. \"Nazwisko\", \"Odcisk pieczęci\"), not the earlier prompt strings "
            "such as \"Naziwsko\"; /create-doc accepts both."
        ),
    )
    schema_version: Optional[str] = Field(None, alias="schemaVersion")


class FileInfo(BaseModel):
    name: str
    size: int
    type: str


class AnalyzeResponse(_WireModel):
    success: bool = True
    classification: ClassificationOut
    details: Optional[DetailsOut] = None
    document_type: str = Field(..., alias="documentType")
    file_info: FileInfo


class CreateDocRequest(_WireModel):
    folder_id: str = Field(..., alias="folderId", min_length=1)
    folder_name: Optional[str] = Field(None, alias="folderName")
    document_data: dict[str, Any] = Field(
        ..., alias="documentData", description="A previous /flowwise-analyze response"
    )


class CreateDocResponse(_WireModel):
    success: bool = True
    doc_id: str = Field(..., alias="docId")
    doc_name: str = Field(..., alias="docName")
    web_view_link: Optional[str] = Field(None, alias="webViewLink")
