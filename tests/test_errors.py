"""Tests for signature_client.errors — exception hierarchy."""

import pickle

from signature_client.errors import (
    ArchiveIOError,
    BrokerNotAuthorizedError,
    CantQueryStatusError,
    ConfigError,
    DocumentBundleProcessingError,
    InvalidStatusQueryTokenError,
    JobCannotBeCancelledError,
    NotCancellableError,
    ProtocolError,
    SignatureClientError,
    TooEagerPollingError,
    TransportError,
    UnexpectedResponseError,
    ValidationError,
)


def test_local_errors_inherit_base():
    for cls in (ConfigError, ValidationError, ArchiveIOError, DocumentBundleProcessingError):
        assert issubclass(cls, SignatureClientError)
    assert not issubclass(ValidationError, ProtocolError)


def test_protocol_errors_inherit_protocol_error():
    for cls in (
        InvalidStatusQueryTokenError,
        CantQueryStatusError,
        TooEagerPollingError,
        NotCancellableError,
        JobCannotBeCancelledError,
        BrokerNotAuthorizedError,
        UnexpectedResponseError,
    ):
        assert issubclass(cls, ProtocolError)
        assert issubclass(cls, SignatureClientError)


def test_validation_error_field():
    e = ValidationError("Missing file name", field="file-name")
    assert e.field == "file-name"
    assert str(e) == "Missing file name"
    assert ValidationError("no field").field is None


def test_too_eager_polling_carries_header_value():
    e = TooEagerPollingError("2024-01-01T00:00:05Z")
    assert e.next_permitted_poll_time == "2024-01-01T00:00:05Z"
    assert "2024-01-01T00:00:05Z" in str(e)


def test_job_cannot_be_cancelled_message():
    e = JobCannotBeCancelledError(409, "SIGNING_JOB_NOT_CANCELLABLE", "Already signed")
    assert str(e) == "409 SIGNING_JOB_NOT_CANCELLABLE: Already signed"
    assert e.error_code == "SIGNING_JOB_NOT_CANCELLABLE"
    assert e.error_message == "Already signed"


def test_not_cancellable_takes_no_arguments():
    e = NotCancellableError()
    assert "can not be cancelled" in str(e)


def test_invalid_token_carries_url():
    e = InvalidStatusQueryTokenError("https://x/status", "bad token")
    assert e.status_url == "https://x/status"
    assert e.error_message == "bad token"


def test_unexpected_response_attributes():
    e = UnexpectedResponseError(
        "boom", status=503, content_type="text/html", body="Service Unavailable"
    )
    assert e.status == 503
    assert e.content_type == "text/html"
    assert e.body == "Service Unavailable"
    assert e.error_code is None


def test_transport_error_default_not_retryable():
    e = TransportError("config issue")
    assert e.retryable is False


def test_transport_error_pickle_roundtrip():
    """TransportError should survive pickle/unpickle with retryable flag preserved."""
    e = TransportError("timed out", retryable=True)
    restored = pickle.loads(pickle.dumps(e))
    assert isinstance(restored, TransportError)
    assert str(restored) == "timed out"
    assert restored.retryable is True


def test_catch_all_with_base():
    """All specific errors should be catchable via SignatureClientError."""
    for error in (ConfigError("x"), TransportError("x"), NotCancellableError()):
        try:
            raise error
        except SignatureClientError:  # noqa: PERF203
            pass  # expected
