"""Document analysis endpoint: classification followed by detail extraction."""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from certrelay.api.file_validation import validate_analyzable_file
from certrelay.api.mappers import build_analyze_response
from certrelay.api.schemas import AnalyzeResponse, ErrorResponse
from certrelay.core.config import Settings
from certrelay.core.dependencies import get_app_settings, get_pipeline
from certrelay.domain.pipeline.orchestrator import DocumentPipeline
from certrelay.services.uploads import remove_temp_file, save_upload_to_temp

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/flowwise-analyze",
    response_model=AnalyzeResponse,
    tags=["analysis"],
    responses={
        400: {"description": "Validation Error", "model": ErrorResponse},
        413: {"description": "File too large", "model": ErrorResponse},
        500: {"description": "Inference failure", "model": ErrorResponse},
    },
)
async def analyze_document(
    file: Optional[UploadFile] = File(None, description="PDF or image of a certificate"),
    settings: Settings = Depends(get_app_settings),
    pipeline: DocumentPipeline = Depends(get_pipeline),
):
    start_time = time.time()
    file = validate_analyzable_file(file)

    stored = await save_upload_to_temp(file, settings.upload_dir, settings.max_upload_size_bytes)
    try:
        result = await pipeline.run(stored.read_bytes(), stored.mime_type)
        response = build_analyze_response(result, stored)

        logger.info(
            "[RESPONSE] type=%s details=%s time=%.2fs",
            response.document_type,
            "yes" if response.details else "no",
            time.time() - start_time,
            extra={"document_type": response.document_type},
        )
        return response
    finally:
        remove_temp_file(stored.path)
