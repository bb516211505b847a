from __future__ import annotations

import json

import pytest

from certrelay.domain.errors import UpstreamTransportError
from certrelay.domain.models import DocumentType
from certrelay.domain.pipeline.classifier import DocumentClassifier
from certrelay.domain.pipeline.extractor import DetailExtractor, default_targets
from certrelay.domain.pipeline.orchestrator import DocumentPipeline
from certrelay.domain.pipeline.prompts import BIRTH_CERTIFICATE_INSTRUCTION

BIRTH_FLAGS = '{"akt_urodzenia": true, "akt_malzenstwa": false, "akt_zgonu": false}'
NO_FLAGS = '{"akt_urodzenia": false, "akt_malzenstwa": false, "akt_zgonu": false}'


class ScriptedInference:  # pragma: no cover
    def __init__(
        self,
        classify_text: str = "",
        extract_text: str = "",
        classify_error: Exception | None = None,
        extract_error: Exception | None = None,
    ) -> None:
        self.classify_text = classify_text
        self.extract_text = extract_text
        self.classify_error = classify_error
        self.extract_error = extract_error
        self.calls: list[str] = []

    async def classify(self, data, mime_type, instruction) -> str:
        self.calls.append("classify")
        if self.classify_error:
            raise self.classify_error
        return self.classify_text

    async def extract(self, data, mime_type, instruction, *, document_type) -> str:
        self.calls.append(f"extract:{document_type.value}")
        if self.extract_error:
            raise self.extract_error
        return self.extract_text


def _pipeline(inference: ScriptedInference) -> DocumentPipeline:
    return DocumentPipeline(DocumentClassifier(inference), DetailExtractor(inference, default_targets()))


@pytest.mark.asyncio
async def test_birth_certificate_happy_path() -> None:
    inference = ScriptedInference(BIRTH_FLAGS, '{"Nazwisko": "Kowalenko", "Imię": "Iwan"}')

    result = await _pipeline(inference).run(b"img", "image/jpeg")

    assert result.document_type is DocumentType.BIRTH_CERTIFICATE
    assert result.details is not None
    assert result.details.fields == {"Nazwisko": "Kowalenko", "Imię": "Iwan"}
    assert inference.calls == ["classify", "extract:akt_urodzenia"]


@pytest.mark.asyncio
async def test_unknown_document_skips_extraction() -> None:
    inference = ScriptedInference(NO_FLAGS, "{}")

    result = await _pipeline(inference).run(b"img", "image/jpeg")

    assert result.document_type is DocumentType.UNKNOWN
    assert result.details is None
    assert inference.calls == ["classify"]


@pytest.mark.asyncio
async def test_extraction_failure_keeps_classification() -> None:
    inference = ScriptedInference(
        BIRTH_FLAGS, extract_error=UpstreamTransportError("openai", "timeout")
    )

    result = await _pipeline(inference).run(b"img", "image/jpeg")

    assert result.document_type is DocumentType.BIRTH_CERTIFICATE
    assert result.classification.raw_text == BIRTH_FLAGS
    assert result.details is None


@pytest.mark.asyncio
async def test_classification_failure_aborts() -> None:
    inference = ScriptedInference(classify_error=UpstreamTransportError("openai", "down", 500))

    with pytest.raises(UpstreamTransportError):
        await _pipeline(inference).run(b"img", "image/jpeg")
    assert inference.calls == ["classify"]


@pytest.mark.asyncio
async def test_runs_are_independent() -> None:
    inference = ScriptedInference(BIRTH_FLAGS, '{"Nazwisko": "Kowalenko"}')
    pipeline = _pipeline(inference)

    first = await pipeline.run(b"img", "image/jpeg")
    second = await pipeline.run(b"img", "image/jpeg")

    assert first == second


class RecordingInference(ScriptedInference):  # pragma: no cover
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.instructions: list[str] = []

    async def extract(self, data, mime_type, instruction, *, document_type) -> str:
        self.instructions.append(instruction)
        return await super().extract(data, mime_type, instruction, document_type=document_type)


@pytest.mark.asyncio
async def test_prose_wrapped_birth_flags_use_birth_instruction() -> None:
    inference = RecordingInference(
        'Result: {"akt_urodzenia": true, "akt_malzenstwa": false, "akt_zgonu": false}', "{}"
    )

    result = await _pipeline(inference).run(b"img", "image/jpeg")

    assert result.document_type is DocumentType.BIRTH_CERTIFICATE
    assert inference.instructions == [BIRTH_CERTIFICATE_INSTRUCTION]


@pytest.mark.asyncio
async def test_text_without_json_is_unknown() -> None:
    inference = ScriptedInference("no json here", "{}")

    result = await _pipeline(inference).run(b"img", "image/jpeg")

    assert result.document_type is DocumentType.UNKNOWN
    assert result.details is None
    assert inference.calls == ["classify"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "flag",
    [DocumentType.BIRTH_CERTIFICATE, DocumentType.MARRIAGE_CERTIFICATE, DocumentType.DEATH_CERTIFICATE],
)
async def test_single_true_flag_selects_type(flag: DocumentType) -> None:
    flags = {t.value: t is flag for t in (
        DocumentType.BIRTH_CERTIFICATE,
        DocumentType.MARRIAGE_CERTIFICATE,
        DocumentType.DEATH_CERTIFICATE,
    )}
    inference = ScriptedInference(json.dumps(flags), "{}")

    result = await _pipeline(inference).run(b"img", "image/jpeg")

    assert result.document_type is flag
    assert inference.calls == ["classify", f"extract:{flag.value}"]


DEEPLY_NESTED = '{"a": ' + "[" * 200000 + "]" * 200000 + "}"


@pytest.mark.asyncio
async def test_deeply_nested_classification_is_unknown() -> None:
    inference = ScriptedInference(DEEPLY_NESTED, "{}")

    result = await _pipeline(inference).run(b"img", "image/jpeg")

    assert result.document_type is DocumentType.UNKNOWN
    assert result.classification.parsed is None
    assert inference.calls == ["classify"]


@pytest.mark.asyncio
async def test_deeply_nested_extraction_keeps_raw_text() -> None:
    inference = ScriptedInference(BIRTH_FLAGS, DEEPLY_NESTED)

    result = await _pipeline(inference).run(b"img", "image/jpeg")

    assert result.document_type is DocumentType.BIRTH_CERTIFICATE
    assert result.details is not None
    assert result.details.text == DEEPLY_NESTED
    assert result.details.fields is None
