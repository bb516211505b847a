"""Structured logging configuration.

Outputs JSON lines (or a plain format for local development) and carries
the current request's trace id from a context variable, so every log line
emitted while serving a request can be correlated.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone

_trace_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id", default="-")

# Extra fields copied from logger.info(..., extra={...}) into the JSON record
_EXTRA_FIELDS = (
    "trace_id",
    "method",
    "path",
    "http_status",
    "duration_ms",
    "error_code",
    "service",
    "document_type",
    "schema_version",
    "upstream_status",
    "folder_id",
    "file_id",
)


def get_trace_id() -> str:
    return _trace_id_ctx.get()


def set_trace_id(trace_id: str) -> contextvars.Token:
    return _trace_id_ctx.set(trace_id)


def reset_trace_id(token: contextvars.Token) -> None:
    _trace_id_ctx.reset(token)


class TraceIdFilter(logging.Filter):
    """Inject trace_id from contextvars into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if not getattr(record, "trace_id", None):
            record.trace_id = get_trace_id()
        return True


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Example:
        >>> logger.info("Document classified", extra={"document_type": "akt_zgonu"})
        # {"timestamp": "...", "level": "INFO", "message": "Document classified",
        #  "document_type": "akt_zgonu", "trace_id": "..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure root logging. Safe to call repeatedly.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatter (True) or plain text (False)
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(TraceIdFilter())
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)s | %(name)s | trace_id=%(trace_id)s | %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
    root.addHandler(handler)
    root.setLevel(level.upper())

    # Suppress noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
