"""Tests for signature_client.network.xml_parsers — response payloads."""

import pytest

from signature_client.core.references import (
    CancellationUrl,
    ConfirmationReference,
    PAdESReference,
    StatusReference,
    XAdESReference,
)
from signature_client.core.status import DirectJobStatus, PortalJobStatus, SignerStatus
from signature_client.network.xml_parsers import (
    ResponseParseError,
    parse_direct_job_response,
    parse_direct_job_status_response,
    parse_error,
    parse_portal_job_response,
    parse_portal_job_status_change,
)

NS = 'xmlns="http://signering.posten.no/schema/v1"'

DIRECT_JOB_RESPONSE = f"""<?xml version="1.0" encoding="UTF-8"?>
<direct-signature-job-response {NS}>
  <signature-job-id>1</signature-job-id>
  <reference>ref-1</reference>
  <redirect-url signer="12345678910">https://signing.example.com/redirect/abc</redirect-url>
  <status-url>https://api.example.com/api/123456789/direct/signature-jobs/1/status</status-url>
</direct-signature-job-response>
"""

DIRECT_STATUS_RESPONSE = f"""<?xml version="1.0" encoding="UTF-8"?>
<direct-signature-job-status-response {NS}>
  <signature-job-id>1</signature-job-id>
  <reference>ref-1</reference>
  <signature-job-status>COMPLETED_SUCCESSFULLY</signature-job-status>
  <status signer="12345678910" since="2024-03-01T12:00:00+01:00">SIGNED</status>
  <status signer="10987654321" since="2024-03-01T12:05:00+01:00">WAITING</status>
  <confirmation-url>https://api.example.com/api/123456789/direct/signature-jobs/1/complete</confirmation-url>
  <xades-url signer="12345678910">https://api.example.com/xades/1/1</xades-url>
  <pades-url>https://api.example.com/pades/1</pades-url>
</direct-signature-job-status-response>
"""

PORTAL_JOB_RESPONSE = f"""<?xml version="1.0" encoding="UTF-8"?>
<portal-signature-job-response {NS}>
  <signature-job-id>7</signature-job-id>
  <reference>ref-2</reference>
  <cancellation-url>https://api.example.com/api/123456789/portal/signature-jobs/7/cancel</cancellation-url>
</portal-signature-job-response>
"""

PORTAL_STATUS_CHANGE = f"""<?xml version="1.0" encoding="UTF-8"?>
<portal-signature-job-status-change-response {NS}>
  <signature-job-id>7</signature-job-id>
  <reference>ref-2</reference>
  <status>IN_PROGRESS</status>
  <confirmation-url>https://api.example.com/portal/7/confirm</confirmation-url>
  <cancellation-url>https://api.example.com/portal/7/cancel</cancellation-url>
  <signatures>
    <signature>
      <status since="2024-03-01T12:00:00Z">SIGNED</status>
      <personal-identification-number>12345678910</personal-identification-number>
      <xades-url>https://api.example.com/portal/7/xades/1</xades-url>
    </signature>
    <signature>
      <status since="2024-03-01T12:00:00Z">WAITING</status>
      <email-address>signer@example.com</email-address>
    </signature>
  </signatures>
</portal-signature-job-status-change-response>
"""


# ── Direct ───────────────────────────────────────────────────────────


def test_parse_direct_job_response():
    response = parse_direct_job_response(DIRECT_JOB_RESPONSE)
    assert response.signature_job_id == 1
    assert response.reference == "ref-1"
    assert response.single_redirect_url == "https://signing.example.com/redirect/abc"
    assert response.redirect_urls[0].signer == "12345678910"
    assert response.status_url == StatusReference(
        "https://api.example.com/api/123456789/direct/signature-jobs/1/status"
    )


def test_parse_direct_job_response_without_reference():
    payload = DIRECT_JOB_RESPONSE.replace("<reference>ref-1</reference>", "")
    assert parse_direct_job_response(payload).reference is None


def test_parse_direct_status_response():
    status = parse_direct_job_status_response(DIRECT_STATUS_RESPONSE.encode("utf-8"))
    assert status.signature_job_id == 1
    assert status.is_status(DirectJobStatus.COMPLETED_SUCCESSFULLY)
    assert status.confirmation_reference == ConfirmationReference(
        "https://api.example.com/api/123456789/direct/signature-jobs/1/complete"
    )
    assert status.is_pades_available
    assert status.pades_reference == PAdESReference("https://api.example.com/pades/1")

    signed = status.signature_from("12345678910")
    assert signed.status is SignerStatus.SIGNED
    assert signed.since == "2024-03-01T12:00:00+01:00"
    assert signed.xades_reference == XAdESReference("https://api.example.com/xades/1/1")

    waiting = status.signature_from("10987654321")
    assert waiting.status is SignerStatus.WAITING
    assert waiting.xades_reference is None

    with pytest.raises(KeyError):
        status.signature_from("00000000000")


def test_parse_direct_status_unknown_status_rejected():
    payload = DIRECT_STATUS_RESPONSE.replace("COMPLETED_SUCCESSFULLY", "HALF_DONE")
    with pytest.raises(ResponseParseError, match="HALF_DONE"):
        parse_direct_job_status_response(payload)


def test_parse_direct_status_missing_job_status():
    payload = DIRECT_STATUS_RESPONSE.replace(
        "<signature-job-status>COMPLETED_SUCCESSFULLY</signature-job-status>", ""
    )
    with pytest.raises(ResponseParseError, match="signature-job-status"):
        parse_direct_job_status_response(payload)


# ── Portal ───────────────────────────────────────────────────────────


def test_parse_portal_job_response():
    response = parse_portal_job_response(PORTAL_JOB_RESPONSE)
    assert response.signature_job_id == 7
    assert response.reference == "ref-2"
    assert response.cancellation_url == CancellationUrl(
        "https://api.example.com/api/123456789/portal/signature-jobs/7/cancel"
    )


def test_parse_portal_status_change():
    change = parse_portal_job_status_change(PORTAL_STATUS_CHANGE)
    assert change.signature_job_id == 7
    assert change.is_status(PortalJobStatus.IN_PROGRESS)
    assert change.cancellation_url == CancellationUrl("https://api.example.com/portal/7/cancel")
    assert not change.is_pades_available

    assert [s.signer for s in change.signatures] == ["12345678910", "signer@example.com"]
    first = change.signature_from("12345678910")
    assert first.status is SignerStatus.SIGNED
    assert first.since == "2024-03-01T12:00:00Z"
    assert first.xades_reference == XAdESReference("https://api.example.com/portal/7/xades/1")
    assert change.signature_from("signer@example.com").status is SignerStatus.WAITING


def test_parse_portal_status_change_without_signatures():
    payload = PORTAL_STATUS_CHANGE.split("<signatures>")[0] + (
        "</portal-signature-job-status-change-response>"
    )
    change = parse_portal_job_status_change(payload)
    assert change.signatures == ()


# ── Errors and malformed payloads ────────────────────────────────────


def test_parse_error_payload():
    error = parse_error(
        f"<error {NS}><error-code>BROKER_NOT_AUTHORIZED</error-code>"
        "<error-message>Not allowed</error-message>"
        "<error-type>CLIENT</error-type></error>"
    )
    assert error.error_code == "BROKER_NOT_AUTHORIZED"
    assert error.error_message == "Not allowed"
    assert error.error_type == "CLIENT"


def test_wrong_root_element():
    with pytest.raises(ResponseParseError, match="Expected <portal-signature-job-response>"):
        parse_portal_job_response(DIRECT_JOB_RESPONSE)


def test_invalid_xml():
    with pytest.raises(ResponseParseError, match="Invalid XML"):
        parse_direct_job_response(b"<html><body>Service Unavailable")


def test_invalid_job_id():
    payload = PORTAL_JOB_RESPONSE.replace("<signature-job-id>7", "<signature-job-id>seven")
    with pytest.raises(ResponseParseError, match="signature-job-id"):
        parse_portal_job_response(payload)


def test_entity_expansion_refused():
    payload = (
        '<?xml version="1.0"?><!DOCTYPE lolz [<!ENTITY lol "lol">]>'
        f"<error {NS}><error-code>&lol;</error-code></error>"
    )
    with pytest.raises(ResponseParseError):
        parse_error(payload)
