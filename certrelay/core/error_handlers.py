import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from certrelay.api.schemas import ErrorResponse
from certrelay.core.middleware import TRACE_HEADER, ensure_trace_id
from certrelay.domain.errors import BaseError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: ErrorResponse, trace_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error.model_dump(exclude_none=True),
        headers={TRACE_HEADER: trace_id},
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handler for FastAPI/Pydantic request validation errors (mapped to 400)."""
    trace_id = ensure_trace_id(request)

    first_error = exc.errors()[0] if exc.errors() else {}
    loc = first_error.get("loc", [])
    field = ".".join(str(loc_part) for loc_part in loc if loc_part != "body")
    msg = first_error.get("msg", "Validation failed")
    detail = f"{field}: {msg}" if field else msg

    logger.warning(
        "Validation error: %s",
        detail,
        extra={"trace_id": trace_id, "path": request.url.path, "error_code": "VALIDATION_ERROR"},
    )

    error = ErrorResponse(
        error="Request validation failed",
        code="VALIDATION_ERROR",
        category="client_error",
        retryable=False,
        detail=detail,
        trace_id=trace_id,
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, error, trace_id)


async def handle_app_error(request: Request, exc: BaseError):
    """Handler for application-specific BaseErrors."""
    trace_id = ensure_trace_id(request)

    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        "Application error occurred: %s",
        exc.message,
        extra={
            "trace_id": trace_id,
            "error_code": exc.error_code,
            "path": request.url.path,
            "http_status": exc.http_status,
        },
        exc_info=exc.http_status >= 500,
    )

    error = ErrorResponse(**exc.to_dict(), trace_id=trace_id)
    return _error_response(exc.http_status, error, trace_id)


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    """Handler for standard HTTP exceptions (404, 405, etc.)."""
    trace_id = ensure_trace_id(request)

    logger.warning(
        "HTTP exception",
        extra={"trace_id": trace_id, "http_status": exc.status_code, "path": request.url.path},
    )

    error = ErrorResponse(
        error=str(exc.detail),
        code=f"HTTP_{exc.status_code}",
        category="server_error" if exc.status_code >= 500 else "client_error",
        retryable=False,
        trace_id=trace_id,
    )
    return _error_response(exc.status_code, error, trace_id)


async def handle_unknown_error(request: Request, exc: Exception):
    """Handler for unexpected 500 errors."""
    trace_id = ensure_trace_id(request)

    logger.exception(
        "Unexpected error occurred",
        extra={"trace_id": trace_id, "path": request.url.path},
    )

    error = ErrorResponse(
        error="An unexpected error occurred. Please contact support with trace ID.",
        code="INTERNAL_SERVER_ERROR",
        category="server_error",
        retryable=False,
        trace_id=trace_id,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error, trace_id)
