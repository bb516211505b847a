"""
Versioned field contracts shared by extraction prompts and document rendering.

The extraction instruction asks the model for exactly the ``key`` strings of
a contract, and the DOCX renderer reads values back through the same
contract by stable ``name``. Changing a key means publishing a new version.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Mapping

MISSING_VALUE = "-/-"

_WS_RE = re.compile(r"\s+")


def _normalize_key(key: str) -> str:
    return _WS_RE.sub(" ", key).strip().casefold()


@dataclass(frozen=True)
class FieldSpec:
    name: str
    key: str
    description: str = ""
    # Keys accepted on read, e.g. those emitted by the earlier prompt wording.
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class SchemaContract:
    version: str
    fields: tuple[FieldSpec, ...]

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.version} has no field named {name!r}")

    def json_template(self) -> str:
        """Target object shown to the model; each placeholder describes the expected value."""
        return json.dumps(
            {f.key: f.description or "wartość" for f in self.fields}, ensure_ascii=False, indent=2
        )

    def value_of(
        self, fields: Mapping[str, str] | None, name: str, default: str = MISSING_VALUE
    ) -> str:
        """Look up a field value by contract name.

        The key is tried before its aliases. Each candidate is matched
        exactly first, then ignoring whitespace and case, since models do
        not always reproduce keys byte for byte.
        """
        if not fields:
            return default
        spec = self.field(name)
        value = None
        for key in (spec.key, *spec.aliases):
            value = _lookup(fields, key)
            if value is not None:
                break
        if value is None or not str(value).strip():
            return default
        return str(value).strip()


def _lookup(fields: Mapping[str, str], key: str) -> str | None:
    value = fields.get(key)
    if value is not None:
        return value
    wanted = _normalize_key(key)
    for candidate, candidate_value in fields.items():
        if _normalize_key(candidate) == wanted:
            return candidate_value
    return None


BIRTH_CERTIFICATE_V1 = SchemaContract(
    version="birth_certificate/v1",
    fields=(
        FieldSpec("surname", "Nazwisko", "nazwisko dziecka", aliases=("Naziwsko",)),
        FieldSpec("given_name", "Imię", "imię dziecka", aliases=("Imie", "3. Imie")),
        FieldSpec(
            "patronymic", "Imię odojcowskie", "imię odojcowskie dziecka",
            aliases=("imie ojcowskie", "4. imie ojcowskie"),
        ),
        FieldSpec(
            "birth_date_words", "Data urodzenia (słownie)", "data urodzenia zapisana słownie",
            aliases=("roku (slownie)", "5. roku (slownie)"),
        ),
        FieldSpec("birth_place", "Miejsce urodzenia", "miejscowość, rejon i obwód"),
        FieldSpec("register_entry", "Wpis do Księgi Rejestracji Urodzeń", "data wpisu i numer aktu"),
        FieldSpec("father", "Ojciec", "imię, nazwisko i imię odojcowskie ojca"),
        FieldSpec("father_citizenship", "Obywatelstwo ojca", "obywatelstwo ojca"),
        FieldSpec("mother", "Matka", "imię, nazwisko i imię odojcowskie matki"),
        FieldSpec("mother_citizenship", "Obywatelstwo matki", "obywatelstwo matki"),
        FieldSpec("registration_office", "Miejsce rejestracji", "nazwa i siedziba organu rejestracji"),
        FieldSpec("issuing_authority", "Organ państwowy wydający akt", "nazwa i siedziba organu wydającego"),
        FieldSpec("issue_date", "Data wydania", "data wydania aktu"),
        FieldSpec(
            "seal_text", "Odcisk pieczęci", "napis w otoku okrągłej pieczęci",
            aliases=(
                "15. [Odcisk okrągłej pieczęci z godłem Ukrainy w środku i następującym napisem w otoku:]",
            ),
        ),
        FieldSpec(
            "registrar_signature", "Kierownik Urzędu Rejestracji Aktów Stanu Cywilnego", "podpis kierownika",
            aliases=("16. Kierownik Urzędu Rejestracji Aktów Stanu Cywilnego [podpis skrócony]",),
        ),
        FieldSpec(
            "series_number", "Seria i numer dokumentu", "seria i numer dokumentu",
            aliases=("17. [Seria i numer dokumentu:] [ - zapis oryginalny] nr",),
        ),
    ),
)
