from certrelay.domain.errors import (
    ConfigurationError,
    ErrorCategory,
    PayloadTooLargeError,
    UpstreamTransportError,
    ValidationError,
)


def test_validation_error() -> None:
    err = ValidationError("No file uploaded", field="file")

    assert err.http_status == 400
    assert err.field == "file"
    assert err.to_dict() == {
        "success": False,
        "error": "No file uploaded",
        "code": "VALIDATION_ERROR",
        "category": "client_error",
        "detail": None,
        "retryable": False,
    }


def test_payload_too_large() -> None:
    err = PayloadTooLargeError(max_size_mb=10, actual_size_mb=12.5)
    assert err.http_status == 413
    assert err.error_code == "PAYLOAD_TOO_LARGE"
    assert "12.50MB" in err.message


def test_configuration_error() -> None:
    err = ConfigurationError("OPENAI_API_KEY is required", setting="OPENAI_API_KEY")
    assert err.http_status == 500
    assert err.category is ErrorCategory.CONFIGURATION
    assert err.details == {"setting": "OPENAI_API_KEY"}


def test_upstream_transport_error_message_and_detail() -> None:
    err = UpstreamTransportError("prediction_api", "Prediction request failed", 502, "bad gateway")

    assert err.message == "Prediction request failed (status 502): bad gateway"
    assert err.error_code == "PREDICTION_API_TRANSPORT_ERROR"
    assert err.http_status == 500
    assert err.retryable is False
    assert err.to_dict()["detail"] == "bad gateway"
    assert err.details["upstream_status"] == 502


def test_upstream_transport_error_without_status() -> None:
    err = UpstreamTransportError("openai", "Vision model request timed out")
    assert err.message == "Vision model request timed out"
    assert err.to_dict()["detail"] is None
