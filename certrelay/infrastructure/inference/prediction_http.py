from __future__ import annotations

import json
import mimetypes
from typing import Any, Mapping

import httpx

from certrelay.core.config import ERROR_BODY_MAX_CHARS
from certrelay.domain.errors import UpstreamTransportError
from certrelay.domain.models import DocumentType

SERVICE_NAME = "prediction_api"


class PredictionApiAdapter:
    """InferencePort over a hosted prediction-flow API.

    Each stage is a separate flow, addressed as
    ``POST {base_url}/api/v1/prediction/{flow_id}`` with the document as a
    multipart ``files`` part and the instruction as the ``question`` field.
    """

    def __init__(
        self,
        base_url: str,
        classify_flow_id: str,
        extract_flow_ids: Mapping[DocumentType, str],
        *,
        api_key: str | None = None,
        timeout_seconds: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._classify_flow_id = classify_flow_id
        self._extract_flow_ids = dict(extract_flow_ids)
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else None
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout_seconds,
            headers=headers,
            transport=self._transport,
        )

    async def classify(self, data: bytes, mime_type: str, instruction: str) -> str:
        return await self._predict(self._classify_flow_id, data, mime_type, instruction)

    async def extract(
        self,
        data: bytes,
        mime_type: str,
        instruction: str,
        *,
        document_type: DocumentType,
    ) -> str:
        flow_id = self._extract_flow_ids.get(document_type)
        if not flow_id:
            raise UpstreamTransportError(
                SERVICE_NAME, f"No prediction flow configured for {document_type.value}"
            )
        return await self._predict(flow_id, data, mime_type, instruction)

    async def _predict(self, flow_id: str, data: bytes, mime_type: str, question: str) -> str:
        ext = mimetypes.guess_extension(mime_type) or ""
        files = {"files": (f"document{ext}", data, mime_type)}
        async with self._client() as client:
            try:
                resp = await client.post(
                    f"/api/v1/prediction/{flow_id}",
                    files=files,
                    data={"question": question},
                )
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                body = (exc.response.text or "")[:ERROR_BODY_MAX_CHARS]
                raise UpstreamTransportError(
                    SERVICE_NAME, "Prediction request failed", exc.response.status_code, body
                ) from exc
            except httpx.RequestError as exc:
                raise UpstreamTransportError(
                    SERVICE_NAME, f"Prediction API unreachable: {exc}"
                ) from exc
        return self._response_text(resp)

    @staticmethod
    def _response_text(resp: httpx.Response) -> str:
        try:
            data: Any = resp.json()
        except ValueError:
            return resp.text or ""
        if isinstance(data, dict):
            text = data.get("text")
            if isinstance(text, str):
                return text
            payload = data.get("json")
            if isinstance(payload, dict):
                # Structured-output flows return the object directly
                return json.dumps(payload, ensure_ascii=False)
        return resp.text or ""
