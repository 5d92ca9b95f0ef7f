import pytest

from wazapin_wa.exceptions import SDKError, WhatsAppError
from wazapin_wa.types import ErrorKind


def test_api_error_carries_status_and_codes():
    error = WhatsAppError.api(
        "Invalid parameter",
        status_code=400,
        error_code=100,
        error_subcode=2494010,
        trace_id="AbCdEf",
    )

    assert error.kind == ErrorKind.API
    assert error.code == "API_ERROR_100"
    assert error.status_code == 400
    assert error.error_subcode == 2494010
    assert error.trace_id == "AbCdEf"
    assert error.is_api_error
    assert not error.is_rate_limit
    assert error.is_retryable
    assert str(error) == "Invalid parameter"


def test_rate_limit_error_is_an_api_error_with_status_429():
    error = WhatsAppError.rate_limit("slow down", retry_after_seconds=5)

    assert error.kind == ErrorKind.RATE_LIMIT
    assert error.status_code == 429
    assert error.error_code == 4
    assert error.retry_after_seconds == 5
    assert error.is_api_error
    assert error.is_rate_limit
    assert error.is_retryable


def test_validation_error_is_not_retryable():
    error = WhatsAppError.validation("text is required", field="text")

    assert error.kind == ErrorKind.VALIDATION
    assert error.code == "VALIDATION_ERROR"
    assert error.field == "text"
    assert error.is_validation_error
    assert not error.is_api_error
    assert not error.is_retryable


def test_network_error_chains_cause():
    cause = ConnectionError("reset by peer")
    error = WhatsAppError.network("network request failed", cause=cause)

    assert error.is_network_error
    assert error.code == "NETWORK_ERROR"
    assert error.cause is cause
    assert error.__cause__ is cause


def test_generic_error_defaults():
    error = WhatsAppError.generic("boom")

    assert error.kind == ErrorKind.GENERIC
    assert error.code is None
    assert not error.is_api_error
    assert not error.is_network_error
    assert error.is_retryable


def test_whatsapp_error_is_sdk_error():
    with pytest.raises(SDKError):
        raise WhatsAppError.generic("boom")


def test_to_dict_contains_kind_and_fields():
    payload = WhatsAppError.rate_limit("slow down", retry_after_seconds=2, trace_id="t1").to_dict()

    assert payload["kind"] == "rate_limit"
    assert payload["status_code"] == 429
    assert payload["retry_after_seconds"] == 2
    assert payload["trace_id"] == "t1"
    assert "rate_limit" in repr(WhatsAppError.rate_limit("x"))
