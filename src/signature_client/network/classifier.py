"""
Classification of failed responses.

A failed response either carries a structured XML error, whose code names
the failure, or something else entirely (an HTML page from
a proxy, an empty body). The latter becomes an
:class:`~signature_client.errors.UnexpectedResponseError` that keeps the
status, content type, and raw body for diagnosis.
"""

from __future__ import annotations

__all__ = [
    "BROKER_NOT_AUTHORIZED",
    "INVALID_STATUS_QUERY_TOKEN",
    "SIGNING_CEREMONY_NOT_COMPLETED",
    "SIGNING_JOB_NOT_CANCELLABLE",
    "classify",
    "extract_error",
]

from ..constants import MEDIA_TYPE_XML, NO_CONTENT_PLACEHOLDER
from ..errors import (
    BrokerNotAuthorizedError,
    ProtocolError,
    UnexpectedResponseError,
)
from .xml_parsers import ErrorPayload, ResponseParseError, parse_error

BROKER_NOT_AUTHORIZED = "BROKER_NOT_AUTHORIZED"
SIGNING_CEREMONY_NOT_COMPLETED = "SIGNING_CEREMONY_NOT_COMPLETED"
INVALID_STATUS_QUERY_TOKEN = "INVALID_STATUS_QUERY_TOKEN"
SIGNING_JOB_NOT_CANCELLABLE = "SIGNING_JOB_NOT_CANCELLABLE"


def _is_xml(content_type: str | None) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == MEDIA_TYPE_XML


def _body_text(body: bytes) -> str:
    text = body.decode("utf-8", errors="replace")
    return text if text.strip() else NO_CONTENT_PLACEHOLDER


def _unexpected_payload(
    status: int, body: bytes, content_type: str | None
) -> UnexpectedResponseError:
    shown_type = content_type or "unknown"
    text = _body_text(body)
    return UnexpectedResponseError(
        f"Unexpected response {status}, Content-Type {shown_type}: {text}",
        status=status,
        content_type=shown_type,
        body=text,
    )


def extract_error(status: int, body: bytes, content_type: str | None) -> ErrorPayload:
    """
    Decode the structured error of a failed response.

    Raises:
        UnexpectedResponseError: If the response is not ``application/xml``
            or its body is not a structured error.
    """
    if not _is_xml(content_type):
        raise _unexpected_payload(status, body, content_type)
    try:
        return parse_error(body)
    except ResponseParseError as e:
        raise _unexpected_payload(status, body, content_type) from e


def classify(status: int, body: bytes, content_type: str | None) -> ProtocolError:
    """
    Turn a failed response into the matching protocol error.

    Only ``BROKER_NOT_AUTHORIZED`` is mapped here, whatever the status.
    Codes that belong to a single operation, such as an invalid status
    query token, are recognised by that operation before it falls back
    to this function.

    Args:
        status: HTTP status of the response.
        body: Raw response body.
        content_type: Response Content-Type header, if any.

    Returns:
        The error to raise. This function does not raise it.
    """
    try:
        error = extract_error(status, body, content_type)
    except UnexpectedResponseError as e:
        return e

    code = error.error_code
    if code == BROKER_NOT_AUTHORIZED:
        return BrokerNotAuthorizedError(code, error.error_message)
    return UnexpectedResponseError(
        f"Unexpected response {status}: {code}: {error.error_message}",
        status=status,
        content_type=content_type,
        error_code=code,
        error_message=error.error_message,
    )
