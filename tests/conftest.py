"""Shared test fixtures for the signature client test suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from signature_client.core.models import (
    DirectSigner,
    Document,
    ExitUrls,
    Notifications,
    Sender,
    direct_job,
    portal_job,
    portal_signer_by_pin,
)
from signature_client.network.protocol import HttpResponse

SERVICE_ROOT = "https://api.example.com/api"
FIXED_NOW = datetime(2024, 3, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)
PDF_CONTENT = b"%PDF-1.7\n" + b"\x00\x01document body\xff" * 64

XML = {"content-type": "application/xml"}


def xml_response(status: int, body: str, headers: dict[str, str] | None = None) -> HttpResponse:
    """Build an XML response the way the transport returns it."""
    return HttpResponse(status, {**XML, **(headers or {})}, body.encode("utf-8"))


def error_xml(code: str, message: str = "error message") -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<error xmlns="http://signering.posten.no/schema/v1">'
        f"<error-code>{code}</error-code>"
        f"<error-message>{message}</error-message>"
        "<error-type>CLIENT</error-type>"
        "</error>"
    )


class FakeTransport:
    """Records requests and answers from a queue of prepared responses."""

    def __init__(self, *responses: HttpResponse) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, str, bytes | None, dict[str, str]]] = []

    def _next(self) -> HttpResponse:
        if not self.responses:
            raise AssertionError("Unexpected request: no response queued")
        return self.responses.pop(0)

    def get(self, url, *, headers=None):
        self.calls.append(("GET", url, None, dict(headers or {})))
        return self._next()

    def post(self, url, body, *, headers=None):
        self.calls.append(("POST", url, body, dict(headers or {})))
        return self._next()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def sender():
    return Sender("123456789")


@pytest.fixture
def document():
    return Document(title="Employment contract", file_name="contract.pdf", content=PDF_CONTENT)


@pytest.fixture
def exit_urls():
    return ExitUrls(
        completion_url="https://sender.example.com/done",
        rejection_url="https://sender.example.com/rejected",
        error_url="https://sender.example.com/error",
    )


@pytest.fixture
def direct(document, exit_urls):
    return direct_job(document, exit_urls, DirectSigner("12345678910"), reference="ref-1")


@pytest.fixture
def portal(document):
    signer = portal_signer_by_pin(
        "12345678910", Notifications(email="signer@example.com", mobile="+4799999999")
    )
    return portal_job(document, signer, reference="ref-2", available_seconds=3600)
