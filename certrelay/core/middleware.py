"""Request tracing middleware."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request

from certrelay.core.logging import reset_trace_id, set_trace_id

logger = logging.getLogger("certrelay.access")

TRACE_HEADER = "X-Trace-ID"


def ensure_trace_id(request: Request) -> str:
    """Get or generate trace ID for request."""
    trace_id = getattr(request.state, "trace_id", None)
    if not trace_id:
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid.uuid4())
        request.state.trace_id = trace_id
    return trace_id


async def trace_id_middleware(request: Request, call_next):
    """Ensure every request has a trace ID in state, log context and response headers."""
    trace_id = ensure_trace_id(request)
    token = set_trace_id(trace_id)
    start = time.perf_counter()
    try:
        response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id
        logger.info(
            "%s %s -> %d",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "method": request.method,
                "path": request.url.path,
                "http_status": response.status_code,
                "duration_ms": round((time.perf_counter() - start) * 1000, 1),
            },
        )
        return response
    finally:
        reset_trace_id(token)
