from __future__ import annotations

import base64
import json

import httpx
import pytest
from openai import AsyncOpenAI

from certrelay.domain.errors import UpstreamTransportError
from certrelay.domain.models import DocumentType
from certrelay.domain.pipeline.prompts import SYSTEM_PROMPT
from certrelay.infrastructure.inference.openai_vision import OpenAIVisionAdapter


def _completion(content: str | None) -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def _adapter(handler) -> OpenAIVisionAdapter:
    client = AsyncOpenAI(
        api_key="test-key",
        base_url="https://llm.example.com/v1",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return OpenAIVisionAdapter(client, model="gpt-4o", max_tokens=4000)


@pytest.mark.asyncio
async def test_classify_sends_image_as_data_url() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/chat/completions"
        seen.update(json.loads(request.content))
        return httpx.Response(200, json=_completion('{"akt_zgonu": true}'))

    text = await _adapter(handler).classify(b"\xff\xd8jpeg", "image/jpeg", "Określ typ")

    assert text == '{"akt_zgonu": true}'
    assert seen["model"] == "gpt-4o"
    assert seen["max_tokens"] == 4000
    system, user = seen["messages"]
    assert system == {"role": "system", "content": SYSTEM_PROMPT}
    assert user["content"][0] == {"type": "text", "text": "Określ typ"}
    image = user["content"][1]
    assert image["type"] == "image_url"
    assert image["image_url"]["detail"] == "high"
    expected = "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8jpeg").decode()
    assert image["image_url"]["url"] == expected


@pytest.mark.asyncio
async def test_extract_sends_pdf_as_file_part() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(200, json=_completion('{"Nazwisko": "Kowalenko"}'))

    text = await _adapter(handler).extract(
        b"%PDF-1.7", "application/pdf", "Wyodrębnij", document_type=DocumentType.BIRTH_CERTIFICATE
    )

    assert text == '{"Nazwisko": "Kowalenko"}'
    part = seen["messages"][1]["content"][1]
    assert part["type"] == "file"
    assert part["file"]["file_data"].startswith("data:application/pdf;base64,")


@pytest.mark.asyncio
async def test_empty_content_returns_empty_string() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion(None))

    assert await _adapter(handler).classify(b"png", "image/png", "x") == ""


@pytest.mark.asyncio
async def test_http_error_maps_to_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"message": "overloaded"}})

    with pytest.raises(UpstreamTransportError) as exc_info:
        await _adapter(handler).classify(b"png", "image/png", "x")

    err = exc_info.value
    assert err.upstream_status == 500
    assert err.error_code == "OPENAI_TRANSPORT_ERROR"
    assert "overloaded" in (err.body or "")
    assert err.http_status == 500


@pytest.mark.asyncio
async def test_connection_error_maps_to_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamTransportError) as exc_info:
        await _adapter(handler).classify(b"png", "image/png", "x")
    assert exc_info.value.upstream_status is None
