"""
Protocol engine: drives a signature job through its lifecycle over HTTP.

The engine is stateless apart from read-only configuration, so one
instance can be shared by concurrent callers. It never retries. When the
polling queue is polled too early the caller gets a
:class:`~signature_client.errors.TooEagerPollingError` with the
server-advised time and is expected to wait until then.

Responses are checked by status before any body is parsed. A 200 body that
cannot be parsed is an :class:`~signature_client.errors.UnexpectedResponseError`.
"""

from __future__ import annotations

__all__ = ["DIRECT", "PORTAL", "ProtocolEngine", "Target"]

import logging
from typing import TYPE_CHECKING, Literal, TypeVar, cast
from urllib.parse import urlencode

from ..constants import (
    ACCEPT_XML,
    MEDIA_TYPE_OCTET_STREAM,
    MEDIA_TYPE_XML,
    NEXT_PERMITTED_POLL_TIME_HEADER,
    POLLING_QUEUE_QUERY_PARAMETER,
)
from ..core.models import resolve_sender
from ..core.status import DirectJobStatusResponse, PortalJobStatusChanged
from ..errors import (
    CantQueryStatusError,
    InvalidStatusQueryTokenError,
    JobCannotBeCancelledError,
    NotCancellableError,
    ProtocolError,
    TooEagerPollingError,
    UnexpectedResponseError,
)
from .classifier import (
    INVALID_STATUS_QUERY_TOKEN,
    SIGNING_CEREMONY_NOT_COMPLETED,
    classify,
    extract_error,
)
from .multipart import BodyPart, encode_multipart
from .xml_parsers import (
    ResponseParseError,
    parse_direct_job_response,
    parse_direct_job_status_response,
    parse_portal_job_response,
    parse_portal_job_status_change,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..asice.bundle import DocumentBundle
    from ..core.models import Sender
    from ..core.references import (
        CancellationUrl,
        ConfirmationReference,
        PAdESReference,
        StatusReference,
        XAdESReference,
    )
    from ..core.status import DirectJobResponse, PortalJobResponse
    from .protocol import HttpResponse, HttpTransport

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")

Target = Literal["direct", "portal"]
DIRECT: Target = "direct"
PORTAL: Target = "portal"

_HTTP_OK = 200
_HTTP_NO_CONTENT = 204
_HTTP_FORBIDDEN = 403
_HTTP_NOT_FOUND = 404
_HTTP_CONFLICT = 409
_HTTP_TOO_MANY_REQUESTS = 429

_ACCEPT_HEADERS = {"Accept": ACCEPT_XML}
_EMPTY_POST_HEADERS = {
    "Accept": ACCEPT_XML,
    "Content-Type": MEDIA_TYPE_XML,
    "Content-Length": "0",
}


class ProtocolEngine:
    """Issues lifecycle requests and turns responses into typed results.

    Args:
        transport: Performs the HTTP requests.
        service_root: Base URL of the signature API.
        global_sender: Sender used when neither job nor call names one.
        logger: Logger to report through; the module logger by default.
    """

    def __init__(
        self,
        transport: HttpTransport,
        service_root: str,
        *,
        global_sender: Sender | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.transport = transport
        self.service_root = service_root.rstrip("/")
        self.global_sender = global_sender
        self._log = logger if logger is not None else _logger

    def _jobs_url(self, target: Target, sender: Sender) -> str:
        return f"{self.service_root}/{sender.organization_number}/{target}/signature-jobs"

    def _parse_ok(self, response: HttpResponse, parser: Callable[[bytes], _T]) -> _T:
        try:
            return parser(response.body)
        except ResponseParseError as e:
            content_type = response.content_type or "unknown"
            raise UnexpectedResponseError(
                f"Unable to read {response.status} response (Content-Type {content_type}): {e}",
                status=response.status,
                content_type=content_type,
                body=response.text(),
            ) from e

    def _logged(self, error: ProtocolError, url: str) -> ProtocolError:
        self._log.warning("Request to %s failed: %s", url, error)
        return error

    def _failure(self, response: HttpResponse, url: str) -> ProtocolError:
        return self._logged(classify(response.status, response.body, response.content_type), url)

    def _parse_or_raise(
        self, response: HttpResponse, parser: Callable[[bytes], _T], url: str
    ) -> _T:
        if response.status == _HTTP_OK:
            return self._parse_ok(response, parser)
        raise self._failure(response, url)

    # ── create ───────────────────────────────────────────────────────

    def create(
        self,
        request_xml: str,
        bundle: DocumentBundle,
        target: Target,
        sender: Sender | None = None,
    ) -> DirectJobResponse | PortalJobResponse:
        """
        Submit a job request together with its document bundle.

        Args:
            request_xml: Job request XML for ``target``.
            bundle: The container built for the same job.
            target: ``"direct"`` or ``"portal"``.
            sender: Overrides the global sender for this call.

        Raises:
            ConfigError: If no sender can be resolved.
            ProtocolError: If the service rejects the job.
            TransportError: On connection issues.
        """
        parser = parse_direct_job_response if target == DIRECT else parse_portal_job_response
        actual_sender = resolve_sender(sender, self.global_sender)
        url = self._jobs_url(target, actual_sender)
        body, content_type = encode_multipart(
            [
                BodyPart(MEDIA_TYPE_XML, request_xml.encode("utf-8")),
                BodyPart(MEDIA_TYPE_OCTET_STREAM, bundle.data),
            ]
        )
        self._log.debug(
            "Creating %s signature job at %s (bundle %d bytes)", target, url, len(bundle)
        )
        response = self.transport.post(
            url, body, headers={"Accept": ACCEPT_XML, "Content-Type": content_type}
        )
        return self._parse_or_raise(response, parser, url)

    def create_direct_job(
        self, request_xml: str, bundle: DocumentBundle, sender: Sender | None = None
    ) -> DirectJobResponse:
        """Submit a direct job. Raises as :meth:`create`."""
        return cast("DirectJobResponse", self.create(request_xml, bundle, DIRECT, sender))

    def create_portal_job(
        self, request_xml: str, bundle: DocumentBundle, sender: Sender | None = None
    ) -> PortalJobResponse:
        """Submit a portal job. Raises as :meth:`create`."""
        return cast("PortalJobResponse", self.create(request_xml, bundle, PORTAL, sender))

    # ── status ───────────────────────────────────────────────────────

    def fetch_status(self, status_reference: StatusReference) -> DirectJobStatusResponse:
        """
        Fetch the current status of a direct job.

        Raises:
            InvalidStatusQueryTokenError: 403 with an invalid token code.
            CantQueryStatusError: 404 because signing is not completed.
            ProtocolError: Any other failed response.
            TransportError: On connection issues.
        """
        url = status_reference.status_url()
        self._log.debug("Fetching job status from %s", status_reference.url)
        response = self.transport.get(url, headers=_ACCEPT_HEADERS)
        # Report the URL without the token
        status_query_error = self._status_query_error(response, status_reference.url)
        if status_query_error is not None:
            raise self._logged(status_query_error, status_reference.url)
        return self._parse_or_raise(
            response, parse_direct_job_status_response, status_reference.url
        )

    @staticmethod
    def _status_query_error(response: HttpResponse, url: str) -> ProtocolError | None:
        """The status-query specific error of a 403 or 404, if it carries one."""
        if response.status not in (_HTTP_FORBIDDEN, _HTTP_NOT_FOUND):
            return None
        try:
            error = extract_error(response.status, response.body, response.content_type)
        except UnexpectedResponseError:
            return None  # left to the general classification
        code = error.error_code
        if response.status == _HTTP_FORBIDDEN and code == INVALID_STATUS_QUERY_TOKEN:
            return InvalidStatusQueryTokenError(url, error.error_message)
        if response.status == _HTTP_NOT_FOUND and code == SIGNING_CEREMONY_NOT_COMPLETED:
            return CantQueryStatusError(response.status, error.error_message)
        return None

    def poll_status_change(
        self, target: Target, sender: Sender | None = None
    ) -> DirectJobStatusResponse | PortalJobStatusChanged:
        """
        Take the next status change for ``target`` jobs from the sender's queue.

        Returns:
            The status change, or a value with status ``NO_CHANGES`` when
            the queue is empty.

        Raises:
            TooEagerPollingError: 429, carrying the next permitted poll time.
            ProtocolError: Any other failed response.
            TransportError: On connection issues.
        """
        actual_sender = resolve_sender(sender, self.global_sender)
        url = self._jobs_url(target, actual_sender)
        if actual_sender.polling_queue is not None:
            query = urlencode({POLLING_QUEUE_QUERY_PARAMETER: actual_sender.polling_queue})
            url = f"{url}?{query}"

        self._log.debug("Polling %s status changes: %s", target, url)
        response = self.transport.get(url, headers=_ACCEPT_HEADERS)

        if response.status == _HTTP_NO_CONTENT:
            self._log.debug("No %s status changes in queue", target)
            if target == DIRECT:
                return DirectJobStatusResponse.no_changes()
            return PortalJobStatusChanged.no_changes()
        if response.status == _HTTP_TOO_MANY_REQUESTS:
            next_poll = response.header(NEXT_PERMITTED_POLL_TIME_HEADER)
            self._log.warning("Polled too eagerly; next permitted poll time %s", next_poll)
            raise TooEagerPollingError(next_poll)
        if target == DIRECT:
            return self._parse_or_raise(response, parse_direct_job_status_response, url)
        return self._parse_or_raise(response, parse_portal_job_status_change, url)

    def poll_direct_status_change(self, sender: Sender | None = None) -> DirectJobStatusResponse:
        """Direct-job form of :meth:`poll_status_change`."""
        return cast("DirectJobStatusResponse", self.poll_status_change(DIRECT, sender))

    def poll_portal_status_change(self, sender: Sender | None = None) -> PortalJobStatusChanged:
        """Portal-job form of :meth:`poll_status_change`."""
        return cast("PortalJobStatusChanged", self.poll_status_change(PORTAL, sender))

    # ── confirm / cancel ─────────────────────────────────────────────

    def confirm(self, reference: ConfirmationReference | None) -> None:
        """
        Confirm that a status has been processed.

        A missing reference means there is nothing to confirm; no request
        is sent.

        Raises:
            ProtocolError: If the service rejects the confirmation.
            TransportError: On connection issues.
        """
        if reference is None:
            self._log.info("No confirmation reference, nothing to confirm")
            return
        self._log.info("Sending confirmation to %s", reference.url)
        response = self.transport.post(reference.url, b"", headers=_EMPTY_POST_HEADERS)
        if response.status != _HTTP_OK:
            raise self._failure(response, reference.url)

    def cancel(self, cancellation_url: CancellationUrl | None) -> None:
        """
        Cancel a job.

        Raises:
            NotCancellableError: If there is no cancellation URL.
            JobCannotBeCancelledError: 409, the service refused.
            ProtocolError: Any other failed response.
            TransportError: On connection issues.
        """
        if cancellation_url is None:
            raise NotCancellableError
        url = cancellation_url.url
        self._log.info("Cancelling signature job at %s", url)
        response = self.transport.post(url, b"", headers=_EMPTY_POST_HEADERS)
        if response.status == _HTTP_OK:
            return
        if response.status != _HTTP_CONFLICT:
            raise self._failure(response, url)
        try:
            payload = extract_error(response.status, response.body, response.content_type)
        except UnexpectedResponseError as e:
            raise self._logged(e, url) from None
        raise self._logged(
            JobCannotBeCancelledError(response.status, payload.error_code, payload.error_message),
            url,
        )

    # ── signed documents ─────────────────────────────────────────────

    def get_signed_document(self, reference: XAdESReference | PAdESReference) -> bytes:
        """
        Download a signed document (XAdES or PAdES).

        Raises:
            ProtocolError: If the document cannot be retrieved.
            TransportError: On connection issues.
        """
        self._log.debug("Fetching signed document from %s", reference.url)
        response = self.transport.get(
            reference.url, headers={"Accept": f"{ACCEPT_XML}, {MEDIA_TYPE_OCTET_STREAM}"}
        )
        if response.status != _HTTP_OK:
            raise self._failure(response, reference.url)
        return response.body
