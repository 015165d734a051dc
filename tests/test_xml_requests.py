"""Tests for signature_client.network.xml_requests — job request XML."""

from xml.etree.ElementTree import fromstring

import pytest

from signature_client.core.models import DirectSigner, Sender, direct_job
from signature_client.errors import ValidationError
from signature_client.network.xml_requests import (
    build_direct_job_request,
    build_portal_job_request,
)

NS = "{http://signering.posten.no/schema/v1}"


def test_direct_request_callback(direct, sender):
    root = fromstring(build_direct_job_request(direct, Sender("1", "ignored-queue")))
    assert root.tag == f"{NS}direct-signature-job-request"
    assert root.find(f"{NS}reference").text == "ref-1"
    assert root.find(f"{NS}status-retrieval-method").text == "WAIT_FOR_CALLBACK"
    assert root.find(f"{NS}polling-queue") is None


def test_direct_request_polling(document, exit_urls):
    job = direct_job(
        document, exit_urls, DirectSigner("12345678910"), status_retrieval_method="POLLING"
    )
    root = fromstring(build_direct_job_request(job, Sender("1", "hr-queue")))
    assert root.find(f"{NS}reference") is None
    assert root.find(f"{NS}status-retrieval-method").text == "POLLING"
    assert root.find(f"{NS}polling-queue").text == "hr-queue"


def test_portal_request(portal):
    root = fromstring(build_portal_job_request(portal, Sender("1", "q&a")))
    assert root.tag == f"{NS}portal-signature-job-request"
    assert root.find(f"{NS}reference").text == "ref-2"
    assert root.find(f"{NS}polling-queue").text == "q&a"


def test_portal_request_default_queue(portal, sender):
    root = fromstring(build_portal_job_request(portal, sender))
    assert root.find(f"{NS}polling-queue") is None


def test_blank_polling_queue_rejected(portal):
    with pytest.raises(ValidationError) as exc_info:
        build_portal_job_request(portal, Sender("1", " "))
    assert exc_info.value.field == "polling-queue"
