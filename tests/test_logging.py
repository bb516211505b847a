from __future__ import annotations

import json
import logging
import sys

from certrelay.core.logging import (
    StructuredFormatter,
    TraceIdFilter,
    reset_trace_id,
    set_trace_id,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="certrelay.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Document classified as %s",
        args=("akt_zgonu",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_extras() -> None:
    record = _record(document_type="akt_zgonu", duration_ms=12.5)
    data = json.loads(StructuredFormatter().format(record))

    assert data["message"] == "Document classified as akt_zgonu"
    assert data["level"] == "INFO"
    assert data["document_type"] == "akt_zgonu"
    assert data["duration_ms"] == 12.5
    assert "http_status" not in data


def test_trace_id_filter_uses_context() -> None:
    token = set_trace_id("trace-abc")
    try:
        record = _record()
        assert TraceIdFilter().filter(record) is True
        assert record.trace_id == "trace-abc"
    finally:
        reset_trace_id(token)


def test_trace_id_filter_keeps_explicit_value() -> None:
    record = _record(trace_id="explicit")
    TraceIdFilter().filter(record)
    assert record.trace_id == "explicit"


def test_formatter_includes_exception() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()

    data = json.loads(StructuredFormatter().format(record))
    assert data["exception"]["type"] == "ValueError"
    assert data["exception"]["message"] == "boom"
