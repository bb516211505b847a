"""Instructions sent to the inference provider."""

from __future__ import annotations

from certrelay.domain.models import DocumentType
from certrelay.domain.pipeline.schemas import BIRTH_CERTIFICATE_V1, SchemaContract

SYSTEM_PROMPT = (
    "Jesteś ekspertem w analizie dokumentów, specjalizującym się w ukraińskich aktach "
    "urodzenia, małżeństwa i zgonu. Twoim zadaniem jest dokładna analiza obrazu "
    "dokumentu i ekstrakcja informacji."
)

CLASSIFICATION_INSTRUCTION = """Przeanalizuj ten dokument i określ jego typ.
Jest to jeden z typów dokumentów: akt urodzenia, akt małżeństwa lub akt zgonu.
Zwróć JSON w następującym formacie:
{
  "akt_urodzenia": boolean,
  "akt_malzenstwa": boolean,
  "akt_zgonu": boolean
}
gdzie tylko jedno pole ma wartość true, odpowiadające typowi dokumentu."""

_DOCUMENT_NAMES = {
    DocumentType.BIRTH_CERTIFICATE: "akt urodzenia",
    DocumentType.MARRIAGE_CERTIFICATE: "akt małżeństwa",
    DocumentType.DEATH_CERTIFICATE: "akt zgonu",
}


def build_schema_instruction(document_type: DocumentType, schema: SchemaContract) -> str:
    return (
        f"Przeanalizuj szczegółowo ten {_DOCUMENT_NAMES[document_type]} "
        "i wyodrębnij wszystkie dane.\n"
        "Zwróć TYLKO JSON w następującym formacie (bez żadnego dodatkowego tekstu):\n"
        f"{schema.json_template()}\n"
        "W miejsce każdego opisu wpisz wartość odczytaną z dokumentu."
    )


def build_free_form_instruction(document_type: DocumentType) -> str:
    return (
        f"Przeanalizuj szczegółowo ten {_DOCUMENT_NAMES[document_type]} "
        "i wyodrębnij wszystkie dane. Zwróć JSON z wszystkimi danymi."
    )


BIRTH_CERTIFICATE_INSTRUCTION = build_schema_instruction(
    DocumentType.BIRTH_CERTIFICATE, BIRTH_CERTIFICATE_V1
)
