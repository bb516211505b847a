from __future__ import annotations

import pytest

from certrelay.domain.errors import UpstreamTransportError
from certrelay.domain.models import DocumentType
from certrelay.domain.pipeline.classifier import DocumentClassifier, document_type_from_flags
from certrelay.domain.pipeline.prompts import CLASSIFICATION_INSTRUCTION


class FakeInference:  # pragma: no cover
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[str] = []

    async def classify(self, data: bytes, mime_type: str, instruction: str) -> str:
        self.calls.append(instruction)
        if self.error:
            raise self.error
        return self.text

    async def extract(self, data, mime_type, instruction, *, document_type) -> str:
        raise AssertionError("classifier must not extract")


@pytest.mark.asyncio
async def test_classify_birth_certificate() -> None:
    inference = FakeInference('{"akt_urodzenia": true, "akt_malzenstwa": false, "akt_zgonu": false}')
    result = await DocumentClassifier(inference).classify(b"img", "image/jpeg")

    assert result.document_type is DocumentType.BIRTH_CERTIFICATE
    assert result.parsed == {"akt_urodzenia": True, "akt_malzenstwa": False, "akt_zgonu": False}
    assert inference.calls == [CLASSIFICATION_INSTRUCTION]


@pytest.mark.asyncio
async def test_classify_death_certificate_in_prose() -> None:
    text = 'Analiza: {"akt_urodzenia": false, "akt_malzenstwa": false, "akt_zgonu": true}.'
    result = await DocumentClassifier(FakeInference(text)).classify(b"img", "image/png")

    assert result.document_type is DocumentType.DEATH_CERTIFICATE
    assert result.raw_text == text


@pytest.mark.asyncio
async def test_several_true_flags_follow_precedence() -> None:
    inference = FakeInference('{"akt_urodzenia": false, "akt_malzenstwa": true, "akt_zgonu": true}')
    result = await DocumentClassifier(inference).classify(b"img", "image/png")
    assert result.document_type is DocumentType.MARRIAGE_CERTIFICATE


@pytest.mark.asyncio
async def test_unparseable_response_is_unknown() -> None:
    result = await DocumentClassifier(FakeInference("Nie wiem.")).classify(b"img", "image/png")

    assert result.document_type is DocumentType.UNKNOWN
    assert result.parsed is None
    assert result.raw_text == "Nie wiem."


@pytest.mark.asyncio
async def test_all_false_is_unknown() -> None:
    inference = FakeInference('{"akt_urodzenia": false, "akt_malzenstwa": false, "akt_zgonu": false}')
    result = await DocumentClassifier(inference).classify(b"img", "image/png")
    assert result.document_type is DocumentType.UNKNOWN


@pytest.mark.asyncio
async def test_transport_error_propagates() -> None:
    inference = FakeInference(error=UpstreamTransportError("openai", "boom", 503))
    with pytest.raises(UpstreamTransportError):
        await DocumentClassifier(inference).classify(b"img", "image/png")


@pytest.mark.parametrize(
    "flags",
    [
        {"akt_urodzenia": "true"},
        {"akt_urodzenia": 1},
        {"akt_zgonu": "yes"},
        {},
    ],
)
def test_only_json_true_counts(flags: dict) -> None:
    assert document_type_from_flags(flags) is DocumentType.UNKNOWN


def test_birth_wins_over_everything() -> None:
    flags = {"akt_urodzenia": True, "akt_malzenstwa": True, "akt_zgonu": True}
    assert document_type_from_flags(flags) is DocumentType.BIRTH_CERTIFICATE
