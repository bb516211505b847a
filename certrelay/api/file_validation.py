"""File upload validation utilities.

Checks run before anything is written to disk or sent upstream.
"""

import logging
from typing import Optional

from fastapi import UploadFile

from certrelay.core.config import ANALYZABLE_CONTENT_TYPES
from certrelay.domain.errors import ValidationError
from certrelay.services.uploads import resolve_mime_type

logger = logging.getLogger(__name__)


def require_upload(file: Optional[UploadFile]) -> UploadFile:
    """Reject requests that carry no file part (or an unnamed, empty one).

    Raises:
        ValidationError: No file was uploaded
    """
    if file is None or not file.filename:
        raise ValidationError(message="No file uploaded", field="file")
    return file


def validate_analyzable_file(file: Optional[UploadFile]) -> UploadFile:
    """Require a file whose content type the inference providers accept.

    Raises:
        ValidationError: No file, or an unsupported content type
    """
    file = require_upload(file)
    mime_type = resolve_mime_type(file)
    if mime_type not in ANALYZABLE_CONTENT_TYPES:
        raise ValidationError(
            message=f"Unsupported content type: {mime_type}",
            field="file",
            details={"allowed_types": sorted(ANALYZABLE_CONTENT_TYPES)},
        )
    logger.info("File accepted for analysis: %s (%s)", file.filename, mime_type)
    return file
