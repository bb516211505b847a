"""
Document classification stage.

Issues one inference call with a fixed instruction and maps the boolean
flags of the returned JSON object to a DocumentType.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from certrelay.domain.models import FLAG_PRECEDENCE, Classification, DocumentType
from certrelay.domain.pipeline.parsing import Parsed, parse_json_block
from certrelay.domain.pipeline.prompts import CLASSIFICATION_INSTRUCTION
from certrelay.domain.ports.inference_port import InferencePort

logger = logging.getLogger(__name__)


def document_type_from_flags(flags: Mapping[str, Any]) -> DocumentType:
    """Map classification flags to a DocumentType.

    Only a JSON ``true`` counts. When several flags are true the checked
    order birth > marriage > death decides.
    """
    for document_type in FLAG_PRECEDENCE:
        if flags.get(document_type.value) is True:
            return document_type
    return DocumentType.UNKNOWN


class DocumentClassifier:
    def __init__(self, inference: InferencePort, instruction: str = CLASSIFICATION_INSTRUCTION) -> None:
        self._inference = inference
        self._instruction = instruction

    async def classify(self, data: bytes, mime_type: str) -> Classification:
        """Classify a document.

        Raises:
            UpstreamTransportError: The inference call itself failed.
        """
        raw_text = await self._inference.classify(data, mime_type, self._instruction)
        logger.debug("Classification response: %s", raw_text[:200])

        result = parse_json_block(raw_text)
        if not isinstance(result, Parsed):
            logger.warning("Classification response not parseable: %s", result.reason)
            return Classification(document_type=DocumentType.UNKNOWN, raw_text=raw_text)

        document_type = document_type_from_flags(result.value)
        true_flags = [t.value for t in FLAG_PRECEDENCE if result.value.get(t.value) is True]
        if len(true_flags) > 1:
            logger.warning(
                "Classification returned several true flags %s, keeping %s",
                true_flags,
                document_type.value,
            )

        logger.info(
            "Document classified as %s",
            document_type.value,
            extra={"document_type": document_type.value},
        )
        return Classification(document_type=document_type, raw_text=raw_text, parsed=result.value)
