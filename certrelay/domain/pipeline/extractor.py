"""
Detail extraction stage.

Given a recognized document type, selects the configured extraction target
and issues a second inference call. A transport failure here degrades the
pipeline result to ``details=None``; it never aborts the request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from certrelay.domain.errors import UpstreamTransportError
from certrelay.domain.models import DocumentType, ExtractionResult
from certrelay.domain.pipeline.parsing import Parsed, parse_json_block, to_payload
from certrelay.domain.pipeline.prompts import BIRTH_CERTIFICATE_INSTRUCTION, build_free_form_instruction
from certrelay.domain.pipeline.schemas import BIRTH_CERTIFICATE_V1, SchemaContract
from certrelay.domain.ports.inference_port import InferencePort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionTarget:
    document_type: DocumentType
    instruction: str
    schema: SchemaContract | None = None


def default_targets(
    document_types: Iterable[DocumentType] | None = None,
) -> dict[DocumentType, ExtractionTarget]:
    """Build extraction targets for the given types (all known types by default)."""
    if document_types is None:
        document_types = (
            DocumentType.BIRTH_CERTIFICATE,
            DocumentType.MARRIAGE_CERTIFICATE,
            DocumentType.DEATH_CERTIFICATE,
        )
    targets: dict[DocumentType, ExtractionTarget] = {}
    for document_type in document_types:
        if document_type is DocumentType.BIRTH_CERTIFICATE:
            targets[document_type] = ExtractionTarget(
                document_type, BIRTH_CERTIFICATE_INSTRUCTION, BIRTH_CERTIFICATE_V1
            )
        elif document_type is not DocumentType.UNKNOWN:
            targets[document_type] = ExtractionTarget(
                document_type, build_free_form_instruction(document_type)
            )
    return targets


class DetailExtractor:
    def __init__(
        self,
        inference: InferencePort,
        targets: Mapping[DocumentType, ExtractionTarget],
    ) -> None:
        self._inference = inference
        self._targets = dict(targets)

    @property
    def supported_types(self) -> frozenset[DocumentType]:
        return frozenset(self._targets)

    async def extract_details(
        self, data: bytes, mime_type: str, document_type: DocumentType
    ) -> ExtractionResult | None:
        """Run the type-specific extraction call.

        Returns:
            ExtractionResult on success; None when the type is unknown, has
            no configured target, or the inference call failed.
        """
        if document_type is DocumentType.UNKNOWN:
            return None

        target = self._targets.get(document_type)
        if target is None:
            logger.warning(
                "No extraction target configured for %s, skipping extraction",
                document_type.value,
                extra={"document_type": document_type.value},
            )
            return None

        try:
            raw_text = await self._inference.extract(
                data, mime_type, target.instruction, document_type=document_type
            )
        except UpstreamTransportError as exc:
            logger.error(
                "Extraction failed for %s, returning classification only: %s",
                document_type.value,
                exc.message,
                extra={
                    "document_type": document_type.value,
                    "service": exc.service_name,
                    "upstream_status": exc.upstream_status,
                },
            )
            return None

        schema_version = target.schema.version if target.schema else None
        parsed = parse_json_block(raw_text)
        if isinstance(parsed, Parsed):
            fields = to_payload(parsed.value)
        else:
            logger.warning("Extraction response not parseable: %s", parsed.reason)
            fields = None

        logger.info(
            "Extraction completed for %s (%d fields)",
            document_type.value,
            len(fields or {}),
            extra={"document_type": document_type.value, "schema_version": schema_version},
        )
        return ExtractionResult(text=raw_text, fields=fields, schema_version=schema_version)
