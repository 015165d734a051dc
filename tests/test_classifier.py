"""Tests for signature_client.network.classifier — failed response mapping."""

import pytest

from signature_client.errors import BrokerNotAuthorizedError, UnexpectedResponseError
from signature_client.network.classifier import classify, extract_error

from .conftest import error_xml


def test_non_xml_response():
    error = classify(503, b"Service Unavailable", "text/html")
    assert isinstance(error, UnexpectedResponseError)
    assert error.status == 503
    assert error.content_type == "text/html"
    assert error.body == "Service Unavailable"
    assert "Service Unavailable" in str(error)


def test_empty_body_placeholder():
    error = classify(500, b"", None)
    assert isinstance(error, UnexpectedResponseError)
    assert error.content_type == "unknown"
    assert error.body == "<no content in response>"
    assert "<no content in response>" in str(error)


def test_xml_with_charset_parameter_is_decoded():
    error = classify(
        403, error_xml("BROKER_NOT_AUTHORIZED").encode(), "application/xml; charset=UTF-8"
    )
    assert isinstance(error, BrokerNotAuthorizedError)


def test_broker_not_authorized_any_status():
    error = classify(400, error_xml("BROKER_NOT_AUTHORIZED", "no").encode(), "application/xml")
    assert isinstance(error, BrokerNotAuthorizedError)
    assert error.error_code == "BROKER_NOT_AUTHORIZED"
    assert error.error_message == "no"


@pytest.mark.parametrize(
    ("status", "code"),
    [
        (403, "INVALID_STATUS_QUERY_TOKEN"),
        (404, "SIGNING_CEREMONY_NOT_COMPLETED"),
        (409, "SIGNING_JOB_NOT_CANCELLABLE"),
        (400, "SOME_NEW_CODE"),
    ],
)
def test_operation_specific_codes_left_unmapped(status, code):
    error = classify(status, error_xml(code, "details").encode(), "application/xml")
    assert type(error) is UnexpectedResponseError
    assert error.error_code == code
    assert error.error_message == "details"
    assert error.status == status


def test_xml_content_type_with_garbage_body():
    error = classify(500, b"not xml at all", "application/xml")
    assert type(error) is UnexpectedResponseError
    assert error.body == "not xml at all"


def test_extract_error_raises_for_non_xml():
    with pytest.raises(UnexpectedResponseError):
        extract_error(409, b"<html/>", "text/html")


def test_extract_error_decodes_payload():
    body = error_xml("SIGNING_JOB_NOT_CANCELLABLE").encode()
    payload = extract_error(409, body, "application/xml")
    assert payload.error_code == "SIGNING_JOB_NOT_CANCELLABLE"
