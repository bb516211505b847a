"""Exception hierarchy for certrelay.

All application errors inherit from BaseError and carry the HTTP status,
error code and category the handler boundary needs to build a structured
JSON error response.

Parse failures of upstream model output are deliberately absent here: they
are a normal pipeline outcome (see ``domain.pipeline.parsing``), not errors.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorCategory(str, Enum):
    """Error categories for classification and monitoring."""

    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    CONFIGURATION = "configuration"
    EXTERNAL_SERVICE = "external_service"


class BaseError(Exception):
    """Base exception for all certrelay errors.

    Attributes:
        message: Human-readable error message
        error_code: Application-specific error code
        category: Error category for classification
        http_status: HTTP status code to return
        details: Additional context (dict)
        retryable: Whether the operation can be retried
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory,
        http_status: int,
        details: Optional[dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.http_status = http_status
        self.details = details or {}
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to the service's error envelope.

        Returns:
            Dict with ``success=False`` and standardized error information
        """
        return {
            "success": False,
            "error": self.message,
            "code": self.error_code,
            "category": self.category.value,
            "detail": self.details.get("detail"),
            "retryable": self.retryable,
        }


class ClientError(BaseError):
    """Base for client errors (4xx). Never retryable."""

    def __init__(self, message: str, error_code: str, **kwargs):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.CLIENT_ERROR,
            http_status=kwargs.pop("http_status", 400),
            retryable=False,
            **kwargs,
        )


class ValidationError(ClientError):
    """Request input is missing or invalid (400 Bad Request).

    Raised before any upstream call is made.

    Args:
        message: Validation error description
        field: Name of the request field that failed validation
        details: Additional validation context
    """

    def __init__(self, message: str, field: str, **kwargs):
        additional_details = kwargs.pop("details", {})
        additional_details["field"] = field
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            http_status=400,
            details=additional_details,
            **kwargs,
        )
        self.field = field


class PayloadTooLargeError(ClientError):
    """Uploaded file exceeds the configured size limit (413)."""

    def __init__(self, max_size_mb: int, actual_size_mb: float):
        super().__init__(
            message=f"File too large: {actual_size_mb:.2f}MB (max: {max_size_mb}MB)",
            error_code="PAYLOAD_TOO_LARGE",
            http_status=413,
            details={"max_size_mb": max_size_mb, "actual_size_mb": actual_size_mb},
        )


class ServerError(BaseError):
    """Base for server errors (5xx)."""

    def __init__(self, message: str, error_code: str, **kwargs):
        super().__init__(
            message=message,
            error_code=error_code,
            category=kwargs.pop("category", ErrorCategory.SERVER_ERROR),
            http_status=kwargs.pop("http_status", 500),
            retryable=kwargs.pop("retryable", False),
            **kwargs,
        )


class ConfigurationError(ServerError):
    """A required credential or setting is missing or unusable (500).

    Args:
        message: Descriptive message naming what is missing and how to fix it
        setting: Name of the offending setting, if there is a single one
    """

    def __init__(self, message: str, setting: str | None = None):
        details = {"setting": setting} if setting else {}
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            category=ErrorCategory.CONFIGURATION,
            details=details,
        )
        self.setting = setting


class UpstreamTransportError(ServerError):
    """Network or HTTP failure talking to a collaborator (500).

    Covers the storage provider and the inference provider. The message
    includes the upstream status and body excerpt when available.

    Args:
        service_name: Collaborator name (e.g. "openai", "prediction_api", "google_drive")
        message: What failed
        upstream_status: HTTP status returned by the collaborator, if any
        body: Excerpt of the collaborator's response body, if any
    """

    def __init__(
        self,
        service_name: str,
        message: str,
        upstream_status: int | None = None,
        body: str | None = None,
    ):
        full_message = message
        if upstream_status is not None:
            full_message += f" (status {upstream_status})"
        if body:
            full_message += f": {body}"

        details: dict[str, Any] = {"service": service_name, "detail": body or None}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status

        super().__init__(
            message=full_message,
            error_code=f"{service_name.upper()}_TRANSPORT_ERROR",
            category=ErrorCategory.EXTERNAL_SERVICE,
            details=details,
        )
        self.service_name = service_name
        self.upstream_status = upstream_status
        self.body = body
