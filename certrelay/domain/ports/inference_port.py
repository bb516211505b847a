"""InferencePort protocol for document-understanding providers.

One pipeline, many providers: the vision model and the prediction API both
implement this capability and the choice between them is configuration.
"""

from __future__ import annotations

from typing import Protocol

from certrelay.domain.models import DocumentType


class InferencePort(Protocol):  # pragma: no cover - contract
    """Abstraction over the inference service used by the pipeline.

    Implementations raise ``UpstreamTransportError`` on network or HTTP
    failure and otherwise return the model's raw text unchanged.
    """

    async def classify(self, data: bytes, mime_type: str, instruction: str) -> str: ...

    async def extract(
        self,
        data: bytes,
        mime_type: str,
        instruction: str,
        *,
        document_type: DocumentType,
    ) -> str: ...
