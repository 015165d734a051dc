"""Response parsers for the signature service XML payloads."""

from __future__ import annotations

__all__ = [
    "ErrorPayload",
    "ResponseParseError",
    "parse_direct_job_response",
    "parse_direct_job_status_response",
    "parse_error",
    "parse_portal_job_response",
    "parse_portal_job_status_change",
]

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, TypeVar
from xml.etree.ElementTree import ParseError as _XMLParseError

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from .._xml import strip_namespace
from ..core.references import (
    CancellationUrl,
    ConfirmationReference,
    PAdESReference,
    StatusReference,
    XAdESReference,
)
from ..core.status import (
    DirectJobResponse,
    DirectJobStatus,
    DirectJobStatusResponse,
    DirectSignature,
    PortalJobResponse,
    PortalJobStatus,
    PortalJobStatusChanged,
    PortalSignature,
    RedirectUrl,
    SignerStatus,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from xml.etree.ElementTree import Element

_logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=Enum)
_T = TypeVar("_T")


class ResponseParseError(ValueError):
    """A payload was not the XML document it was expected to be."""


@dataclass(frozen=True)
class ErrorPayload:
    """Structured error body returned with failed requests."""

    error_code: str | None
    error_message: str | None
    error_type: str | None = None


# ── Helpers ──────────────────────────────────────────────────────────


def _parse_root(payload: bytes | str, expected: str) -> Element:
    try:
        root = ET.fromstring(payload)
    except (_XMLParseError, DefusedXmlException) as e:
        raise ResponseParseError(f"Invalid XML in <{expected}> response: {e}") from e
    tag = strip_namespace(root.tag)
    if tag != expected:
        raise ResponseParseError(f"Expected <{expected}>, got <{tag}>")
    return root


def _children(elem: Element, tag: str) -> list[Element]:
    return [child for child in elem if strip_namespace(child.tag) == tag]


def _optional_text(elem: Element, tag: str) -> str | None:
    found = _children(elem, tag)
    if not found:
        return None
    text = (found[0].text or "").strip()
    return text or None


def _required_text(elem: Element, tag: str) -> str:
    text = _optional_text(elem, tag)
    if text is None:
        raise ResponseParseError(f"Missing <{tag}> in <{strip_namespace(elem.tag)}>")
    return text


def _job_id(elem: Element) -> int:
    value = _required_text(elem, "signature-job-id")
    try:
        return int(value)
    except ValueError as e:
        raise ResponseParseError(f"Invalid signature-job-id: {value!r}") from e


def _enum(enum_type: type[_E], value: str) -> _E:
    try:
        return enum_type(value)
    except ValueError as e:
        raise ResponseParseError(f"Unknown {enum_type.__name__} value: {value!r}") from e


def _wrap(cls: Callable[[str], _T], url: str | None) -> _T | None:
    return cls(url) if url is not None else None


# ── Direct ───────────────────────────────────────────────────────────


def parse_direct_job_response(payload: bytes | str) -> DirectJobResponse:
    """Parse a ``direct-signature-job-response``.

    Raises:
        ResponseParseError: If the payload is malformed.
    """
    root = _parse_root(payload, "direct-signature-job-response")
    redirect_urls = tuple(
        RedirectUrl(signer=elem.get("signer", ""), url=(elem.text or "").strip())
        for elem in _children(root, "redirect-url")
    )
    return DirectJobResponse(
        signature_job_id=_job_id(root),
        reference=_optional_text(root, "reference"),
        redirect_urls=redirect_urls,
        status_url=_wrap(StatusReference, _optional_text(root, "status-url")),
    )


def parse_direct_job_status_response(payload: bytes | str) -> DirectJobStatusResponse:
    """Parse a ``direct-signature-job-status-response``.

    Per-signer statuses and XAdES URLs are matched by their ``signer``
    attribute.

    Raises:
        ResponseParseError: If the payload is malformed.
    """
    root = _parse_root(payload, "direct-signature-job-status-response")

    xades_by_signer: dict[str, XAdESReference] = {}
    for elem in _children(root, "xades-url"):
        url = (elem.text or "").strip()
        if url:
            xades_by_signer[elem.get("signer", "")] = XAdESReference(url)

    signatures = []
    for elem in _children(root, "status"):
        signer = elem.get("signer", "")
        signatures.append(
            DirectSignature(
                signer=signer,
                status=_enum(SignerStatus, (elem.text or "").strip()),
                since=elem.get("since"),
                xades_reference=xades_by_signer.get(signer),
            )
        )

    return DirectJobStatusResponse(
        signature_job_id=_job_id(root),
        reference=_optional_text(root, "reference"),
        status=_enum(DirectJobStatus, _required_text(root, "signature-job-status")),
        signatures=tuple(signatures),
        confirmation_reference=_wrap(
            ConfirmationReference, _optional_text(root, "confirmation-url")
        ),
        pades_reference=_wrap(PAdESReference, _optional_text(root, "pades-url")),
    )


# ── Portal ───────────────────────────────────────────────────────────


def parse_portal_job_response(payload: bytes | str) -> PortalJobResponse:
    """Parse a ``portal-signature-job-response``.

    Raises:
        ResponseParseError: If the payload is malformed.
    """
    root = _parse_root(payload, "portal-signature-job-response")
    return PortalJobResponse(
        signature_job_id=_job_id(root),
        reference=_optional_text(root, "reference"),
        cancellation_url=_wrap(CancellationUrl, _optional_text(root, "cancellation-url")),
    )


def _portal_signature(elem: Element) -> PortalSignature:
    status_elems = _children(elem, "status")
    if not status_elems:
        raise ResponseParseError("Missing <status> in <signature>")
    status_elem = status_elems[0]
    signer = (
        _optional_text(elem, "personal-identification-number")
        or _optional_text(elem, "email-address")
        or _optional_text(elem, "mobile-number")
        or ""
    )
    return PortalSignature(
        signer=signer,
        status=_enum(SignerStatus, (status_elem.text or "").strip()),
        since=status_elem.get("since"),
        xades_reference=_wrap(XAdESReference, _optional_text(elem, "xades-url")),
    )


def parse_portal_job_status_change(payload: bytes | str) -> PortalJobStatusChanged:
    """Parse a ``portal-signature-job-status-change-response``.

    Raises:
        ResponseParseError: If the payload is malformed.
    """
    root = _parse_root(payload, "portal-signature-job-status-change-response")
    signatures: list[PortalSignature] = []
    for container in _children(root, "signatures"):
        signatures.extend(_portal_signature(elem) for elem in _children(container, "signature"))

    return PortalJobStatusChanged(
        signature_job_id=_job_id(root),
        reference=_optional_text(root, "reference"),
        status=_enum(PortalJobStatus, _required_text(root, "status")),
        signatures=tuple(signatures),
        confirmation_reference=_wrap(
            ConfirmationReference, _optional_text(root, "confirmation-url")
        ),
        cancellation_url=_wrap(CancellationUrl, _optional_text(root, "cancellation-url")),
        pades_reference=_wrap(PAdESReference, _optional_text(root, "pades-url")),
    )


# ── Errors ───────────────────────────────────────────────────────────


def parse_error(payload: bytes | str) -> ErrorPayload:
    """Parse an ``error`` payload.

    Raises:
        ResponseParseError: If the payload is not a structured error.
    """
    root = _parse_root(payload, "error")
    error = ErrorPayload(
        error_code=_optional_text(root, "error-code"),
        error_message=_optional_text(root, "error-message"),
        error_type=_optional_text(root, "error-type"),
    )
    _logger.debug("Parsed error payload: code=%s, type=%s", error.error_code, error.error_type)
    return error
