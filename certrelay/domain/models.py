"""Domain models for the classification and extraction pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class DocumentType(str, Enum):
    """Closed set of document-type labels produced by classification.

    Values are the wire strings returned to clients and the flag names the
    classifier asks the model for.
    """

    BIRTH_CERTIFICATE = "akt_urodzenia"
    MARRIAGE_CERTIFICATE = "akt_malzenstwa"
    DEATH_CERTIFICATE = "akt_zgonu"
    UNKNOWN = "unknown"


# Checked order of classification flags; the first true flag wins.
FLAG_PRECEDENCE: tuple[DocumentType, ...] = (
    DocumentType.BIRTH_CERTIFICATE,
    DocumentType.MARRIAGE_CERTIFICATE,
    DocumentType.DEATH_CERTIFICATE,
)


class Classification(BaseModel):
    """Outcome of the classification stage."""

    model_config = ConfigDict(frozen=True)

    document_type: DocumentType
    raw_text: str
    parsed: dict[str, Any] | None = None


class ExtractionResult(BaseModel):
    """Outcome of a successful extraction call.

    ``fields`` is the ExtractionPayload; it is None when the model answered
    but no JSON object could be recovered from its text.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    fields: dict[str, str] | None = None
    schema_version: str | None = None


class PipelineResult(BaseModel):
    """Aggregate output of one classify(+extract) run for one document."""

    model_config = ConfigDict(frozen=True)

    classification: Classification
    document_type: DocumentType
    details: ExtractionResult | None = None


class DriveItem(BaseModel):
    """File or folder as reported by the storage provider."""

    id: str
    name: str
    web_view_link: str | None = None
    mime_type: str | None = None
