"""Vision-model inference adapter backed by the OpenAI chat completions API."""

from __future__ import annotations

import base64
import logging

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from certrelay.core.config import ERROR_BODY_MAX_CHARS
from certrelay.domain.errors import UpstreamTransportError
from certrelay.domain.models import DocumentType
from certrelay.domain.pipeline.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

SERVICE_NAME = "openai"


def _to_data_url(data: bytes, mime_type: str) -> str:
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{b64}"


def _document_part(data: bytes, mime_type: str) -> dict:
    if mime_type == "application/pdf":
        return {
            "type": "file",
            "file": {"filename": "document.pdf", "file_data": _to_data_url(data, mime_type)},
        }
    return {
        "type": "image_url",
        "image_url": {"url": _to_data_url(data, mime_type), "detail": "high"},
    }


class OpenAIVisionAdapter:
    """InferencePort implementation sending the document inline to a vision model.

    Both pipeline stages are the same call shape (system prompt, instruction
    text, document part); only the instruction differs.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str,
        max_tokens: int,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._system_prompt = system_prompt

    async def classify(self, data: bytes, mime_type: str, instruction: str) -> str:
        return await self._complete(data, mime_type, instruction)

    async def extract(
        self,
        data: bytes,
        mime_type: str,
        instruction: str,
        *,
        document_type: DocumentType,
    ) -> str:
        return await self._complete(data, mime_type, instruction)

    async def _complete(self, data: bytes, mime_type: str, instruction: str) -> str:
        messages = [
            {"role": "system", "content": self._system_prompt},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": instruction},
                    _document_part(data, mime_type),
                ],
            },
        ]
        try:
            resp = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                max_tokens=self._max_tokens,
            )
        except APIStatusError as exc:
            body = (exc.response.text or "")[:ERROR_BODY_MAX_CHARS]
            raise UpstreamTransportError(
                SERVICE_NAME, "Vision model request failed", exc.status_code, body
            ) from exc
        except APITimeoutError as exc:
            raise UpstreamTransportError(SERVICE_NAME, "Vision model request timed out") from exc
        except APIConnectionError as exc:
            raise UpstreamTransportError(SERVICE_NAME, f"Vision model unreachable: {exc}") from exc

        if not resp.choices:
            return ""
        content = resp.choices[0].message.content
        return content or ""
