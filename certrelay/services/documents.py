"""Translation-document use case: render a DOCX from analysis output and store it as a Google Doc."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

from certrelay.domain.models import DriveItem
from certrelay.domain.pipeline.parsing import Parsed, parse_json_block, to_payload
from certrelay.domain.ports.storage_port import StoragePort
from certrelay.infrastructure.documents.translation_docx import (
    DOCX_MIME_TYPE,
    TranslatorDetails,
    render_birth_certificate_translation,
)
from certrelay.infrastructure.storage.google_drive import GOOGLE_DOC_MIME_TYPE

logger = logging.getLogger(__name__)

DEFAULT_FOLDER_NAME = "Dokument_tłumaczenia"


def fields_from_document_data(document_data: Mapping[str, Any]) -> dict[str, str] | None:
    """Pull extracted fields out of a previous /flowwise-analyze response.

    Prefers ``details.fields``; falls back to parsing ``details.text``.
    """
    details = document_data.get("details")
    if not isinstance(details, Mapping):
        return None

    fields = details.get("fields")
    if isinstance(fields, Mapping):
        return to_payload(dict(fields))

    text = details.get("text")
    if isinstance(text, str):
        parsed = parse_json_block(text)
        if isinstance(parsed, Parsed):
            return to_payload(parsed.value)
        logger.warning("details.text holds no parseable JSON: %s", parsed.reason)
    return None


class TranslationDocumentService:
    def __init__(self, storage: StoragePort, translator: TranslatorDetails) -> None:
        self._storage = storage
        self._translator = translator

    async def create(
        self,
        folder_id: str,
        folder_name: str | None,
        document_data: Mapping[str, Any],
        *,
        today: date | None = None,
    ) -> DriveItem:
        await self._storage.get_folder(folder_id)

        fields = fields_from_document_data(document_data)
        if not fields:
            logger.warning("No extracted data found, rendering an empty template")

        content = render_birth_certificate_translation(
            fields, translator=self._translator, today=today
        )
        doc_name = f"Tłumaczenie - {folder_name or DEFAULT_FOLDER_NAME}"
        item = await self._storage.upload_bytes(
            content,
            name=doc_name,
            mime_type=DOCX_MIME_TYPE,
            folder_id=folder_id,
            convert_to=GOOGLE_DOC_MIME_TYPE,
        )
        logger.info(
            "Translation document created: %s",
            item.name,
            extra={"file_id": item.id, "folder_id": folder_id},
        )
        return item
