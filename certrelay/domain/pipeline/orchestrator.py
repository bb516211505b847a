"""Domain pipeline orchestrator.

Sequences classification and extraction for one document. Extraction
depends on the classification output, so the stages never run in parallel.
"""

from __future__ import annotations

import logging

from certrelay.domain.models import DocumentType, PipelineResult
from certrelay.domain.pipeline.classifier import DocumentClassifier
from certrelay.domain.pipeline.extractor import DetailExtractor

logger = logging.getLogger(__name__)


class DocumentPipeline:
    def __init__(self, classifier: DocumentClassifier, extractor: DetailExtractor) -> None:
        self.classifier = classifier
        self.extractor = extractor

    async def run(self, data: bytes, mime_type: str) -> PipelineResult:
        """Classify, then extract when the type is recognized.

        Notes:
        - A classification transport error propagates and aborts the run.
        - Extraction outcome (value or None) never changes the result's success.
        - No retries; no state is kept between runs.
        """
        classification = await self.classifier.classify(data, mime_type)
        document_type = classification.document_type

        if document_type is DocumentType.UNKNOWN:
            logger.warning("Document type not recognized, skipping extraction")
            return PipelineResult(
                classification=classification, document_type=document_type, details=None
            )

        details = await self.extractor.extract_details(data, mime_type, document_type)
        return PipelineResult(
            classification=classification, document_type=document_type, details=details
        )
