"""
Recover a JSON object from free-form model output.

Models often wrap the requested JSON in prose or code fences. The policy is
greedy: take everything from the first ``{`` to the last ``}`` and try to
decode it. The outcome is a tagged union so callers branch on the variant
instead of catching exceptions.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Union

_JSON_BLOCK_RE = re.compile(r"\{.*\}", re.DOTALL)


@dataclass(frozen=True)
class Parsed:
    value: dict[str, Any]


@dataclass(frozen=True)
class Unparseable:
    reason: str


ParseResult = Union[Parsed, Unparseable]


def parse_json_block(text: str | None) -> ParseResult:
    """Parse the greedy ``{...}`` block of ``text`` into a dict.

    Args:
        text: Raw model output (may contain prose around the JSON)

    Returns:
        Parsed with the decoded object, or Unparseable with the reason when
        there is no block, the block is malformed or nested too deeply, or it
        is not an object.
    """
    if not text:
        return Unparseable("empty response")

    match = _JSON_BLOCK_RE.search(text)
    if match is None:
        return Unparseable("no JSON object found")

    try:
        value = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        return Unparseable(f"malformed JSON: {exc.msg} at position {exc.pos}")
    except RecursionError:
        return Unparseable("JSON nested too deeply")

    if not isinstance(value, dict):
        return Unparseable(f"expected a JSON object, got {type(value).__name__}")
    return Parsed(value)


def to_payload(obj: dict[str, Any]) -> dict[str, str]:
    """Normalize a decoded object into an ExtractionPayload (str -> str).

    Null values are dropped, other scalars are stringified and nested
    structures are re-encoded as JSON.
    """
    payload: dict[str, str] = {}
    for key, value in obj.items():
        if value is None:
            continue
        if isinstance(value, str):
            payload[str(key)] = value
        elif isinstance(value, (dict, list)):
            payload[str(key)] = json.dumps(value, ensure_ascii=False)
        else:
            payload[str(key)] = str(value)
    return payload
