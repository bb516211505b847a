"""
Certified-translation DOCX rendering for Ukrainian birth certificates.

The layout mirrors the sworn-translation template: a centered title,
translator notes in italics, the certificate body filled from the
``birth_certificate/v1`` contract, and the translator certification.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import date
from typing import Mapping

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from certrelay.domain.pipeline.schemas import BIRTH_CERTIFICATE_V1, SchemaContract

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

TITLE = "TŁUMACZENIE UWIERZYTELNIONE Z JĘZYKA UKRAIŃSKIEGO"
TRANSLATOR_NOTES = (
    "[Uwagi tłumacza oznaczono kursywą w nawiasie kwadratowym.]",
    "[Dokument w postaci jednostronicowego druku urzędowego z godłem państwowym Ukrainy. "
    "Pisownia imion i nazwisk zgodna z ukraińską oficjalną transliteracją na litery "
    "alfabetu łacińskiego]",
)
SEPARATOR = "=" * 73

_BODY_SIZE = Pt(12)
_TITLE_SIZE = Pt(14)
_GAP = Pt(20)
_AFTER = Pt(10)


@dataclass(frozen=True)
class TranslatorDetails:
    name: str
    registry_number: str
    place: str = "Warszawa"

    def certification(self) -> str:
        return (
            f"Ja, {self.name}, tłumacz przysięgły języka ukraińskiego, wpisany na listę "
            "tłumaczy przysięgłych Ministerstwa Sprawiedliwości RP, pod numerem "
            f"{self.registry_number}, niniejszym poświadczam zgodność powyższego tłumaczenia "
            "z oryginałem dokumentu w języku ukraińskim."
        )


def _paragraph(
    doc,
    text: str,
    *,
    bold: bool = False,
    italic: bool = False,
    center: bool = False,
    size=_BODY_SIZE,
    before=None,
    after=_AFTER,
):
    paragraph = doc.add_paragraph()
    if center:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    fmt = paragraph.paragraph_format
    if before is not None:
        fmt.space_before = before
    fmt.space_after = after
    run = paragraph.add_run(text)
    run.bold = bold
    run.italic = italic
    run.font.size = size
    return paragraph


def render_birth_certificate_translation(
    fields: Mapping[str, str] | None,
    *,
    translator: TranslatorDetails,
    today: date | None = None,
    schema: SchemaContract = BIRTH_CERTIFICATE_V1,
) -> bytes:
    """Render the translation document and return the DOCX bytes.

    Values are read through ``schema`` by field name; anything missing is
    written as ``-/-``.
    """
    today = today or date.today()

    def value(name: str) -> str:
        return schema.value_of(fields, name)

    doc = Document()

    _paragraph(doc, TITLE, bold=True, center=True, size=_TITLE_SIZE, after=_GAP)
    _paragraph(doc, TRANSLATOR_NOTES[0], italic=True)
    _paragraph(doc, TRANSLATOR_NOTES[1], italic=True, after=_GAP)

    _paragraph(doc, "UKRAINA", bold=True, center=True, after=_GAP)
    _paragraph(doc, "AKT URODZENIA", bold=True, center=True, after=_GAP)

    _paragraph(doc, f"Nazwisko: {value('surname')}")
    _paragraph(doc, f"Imię: {value('given_name')}")
    _paragraph(doc, f"Imię odojcowskie: {value('patronymic')}")
    _paragraph(doc, f"Data urodzenia (słownie): {value('birth_date_words')}")
    _paragraph(doc, f"Miejsce urodzenia: {value('birth_place')}")
    _paragraph(
        doc,
        "o czym w Księdze Rejestracji Urodzeń dokonano odpowiedniego wpisu do akt: "
        f"{value('register_entry')}",
    )

    _paragraph(doc, "RODZICE", bold=True, center=True, before=_GAP, after=_GAP)
    _paragraph(doc, f"Ojciec: {value('father')}")
    _paragraph(doc, f"Obywatelstwo: {value('father_citizenship')}")
    _paragraph(doc, f"Matka: {value('mother')}")
    _paragraph(doc, f"Obywatelstwo: {value('mother_citizenship')}")

    _paragraph(
        doc,
        "Miejsce rejestracji: (nazwa i siedziba państwowego USC) "
        f"{value('registration_office')}",
    )
    _paragraph(
        doc,
        "Organ państwowy wydający akt: (nazwa i siedziba państwowego USC) "
        f"{value('issuing_authority')}",
    )
    _paragraph(doc, f"Data wydania: {value('issue_date')}")
    _paragraph(
        doc,
        "[Odcisk okrągłej pieczęci z godłem Ukrainy w środku i następującym napisem "
        f"w otoku:] {value('seal_text')}",
        italic=True,
    )
    _paragraph(
        doc,
        "Kierownik Urzędu Rejestracji Aktów Stanu Cywilnego [podpis skrócony] "
        f"{value('registrar_signature')}",
    )
    _paragraph(doc, f"[Seria i numer dokumentu:] {value('series_number')}", italic=True)

    _paragraph(doc, SEPARATOR, center=True, before=_GAP, after=_GAP)

    _paragraph(doc, translator.certification())
    _paragraph(doc, "Numer w repertorium: .")
    _paragraph(doc, f"{translator.place}, {today:%d.%m.%Y} roku.", before=_GAP)

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
