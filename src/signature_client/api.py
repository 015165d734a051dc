"""High-level clients for direct and portal signature jobs.

:class:`DirectClient` and :class:`PortalClient` wire together the
submission builder, the job request XML, and the protocol engine from a
single :class:`~signature_client.config.ClientConfiguration`. Without a
configuration they resolve one from env vars and the saved config file.

For lower-level control, use
:class:`~signature_client.asice.bundle.SubmissionBuilder` and
:class:`~signature_client.network.engine.ProtocolEngine` directly with any
:class:`~signature_client.network.protocol.HttpTransport`.
"""

from __future__ import annotations

__all__ = ["DirectClient", "PortalClient"]

import logging
from typing import TYPE_CHECKING

from .asice.bundle import SubmissionBuilder
from .config import ClientConfiguration, resolve_configuration, resolve_key_password
from .core.models import resolve_sender
from .network.engine import ProtocolEngine
from .network.transport import UrllibTransport, build_ssl_context
from .network.xml_requests import build_direct_job_request, build_portal_job_request

if TYPE_CHECKING:
    from .core.models import DirectJob, PortalJob, Sender
    from .core.references import PAdESReference, StatusReference, XAdESReference
    from .core.status import (
        DirectJobResponse,
        DirectJobStatusResponse,
        PortalJobResponse,
        PortalJobStatusChanged,
    )
    from .network.protocol import HttpTransport

_logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Private wiring helpers
# ---------------------------------------------------------------------------


def _default_transport(config: ClientConfiguration) -> UrllibTransport:
    """Create the urllib transport, with the client certificate if configured."""
    key_password = None
    if config.client_cert is not None:
        key_password = resolve_key_password(config.client_key or config.client_cert)
    context = build_ssl_context(
        config.client_cert, config.client_key, key_password, config.trust_store
    )
    return UrllibTransport(context, timeout=config.timeout, user_agent=config.user_agent)


class _Client:
    def __init__(
        self,
        config: ClientConfiguration | None = None,
        transport: HttpTransport | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config if config is not None else resolve_configuration()
        if transport is None:
            transport = _default_transport(self.config)
        self._builder = SubmissionBuilder(
            self.config.document_bundle_processors, clock=self.config.clock
        )
        self._engine = ProtocolEngine(
            transport,
            self.config.service_root,
            global_sender=self.config.global_sender,
            logger=logger,
        )

    def get_xades(self, reference: XAdESReference) -> bytes:
        """Download the XAdES signature of one signer."""
        return self._engine.get_signed_document(reference)

    def get_pades(self, reference: PAdESReference) -> bytes:
        """Download the signed PDF (PAdES) of a completed job."""
        return self._engine.get_signed_document(reference)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class DirectClient(_Client):
    """Client for direct jobs, where signers sign in the same session.

    Args:
        config: Client configuration. Resolved from env vars and the
            config file if ``None``.
        transport: HTTP transport. A :class:`UrllibTransport` using the
            configured client certificate if ``None``.
        logger: Logger for the protocol engine.
    """

    def create(self, job: DirectJob) -> DirectJobResponse:
        """Create a direct signature job.

        The sender, request XML, and document bundle are all resolved and
        validated before anything is sent.

        Returns:
            The created job, with one redirect URL per signer.

        Raises:
            ConfigError: If no sender can be resolved.
            ValidationError: If a required job field is missing.
            ArchiveIOError: If the bundle cannot be written.
            DocumentBundleProcessingError: If a processor fails.
            ProtocolError: If the service rejects the job.
            TransportError: On connection issues.
        """
        sender = resolve_sender(job.sender, self.config.global_sender)
        request_xml = build_direct_job_request(job, sender)
        bundle = self._builder.create_submission(job, sender)
        response = self._engine.create_direct_job(request_xml, bundle, sender)
        _logger.info(
            "Created direct signature job %d (reference %s)",
            response.signature_job_id,
            response.reference,
        )
        return response

    def get_status(self, status_reference: StatusReference) -> DirectJobStatusResponse:
        """Fetch the status of a job, using the token from the completion URL.

        Raises:
            InvalidStatusQueryTokenError: If the token is rejected.
            CantQueryStatusError: If the signer has not finished yet.
            ProtocolError: On other failed responses.
            TransportError: On connection issues.
        """
        return self._engine.fetch_status(status_reference)

    def get_status_change(self, sender: Sender | None = None) -> DirectJobStatusResponse:
        """Take the next status change from the polling queue.

        Only for jobs created with status retrieval method ``POLLING``.

        Raises:
            TooEagerPollingError: If polled before the permitted time.
            ProtocolError: On other failed responses.
            TransportError: On connection issues.
        """
        return self._engine.poll_direct_status_change(sender)

    def confirm(self, status: DirectJobStatusResponse) -> None:
        """Confirm that a status change has been processed."""
        self._engine.confirm(status.confirmation_reference)


class PortalClient(_Client):
    """Client for portal jobs, where signers are notified and sign later.

    Takes the same arguments as :class:`DirectClient`.
    """

    def create(self, job: PortalJob) -> PortalJobResponse:
        """Create a portal signature job.

        Raises:
            ConfigError: If no sender can be resolved.
            ValidationError: If a required job field is missing.
            ArchiveIOError: If the bundle cannot be written.
            DocumentBundleProcessingError: If a processor fails.
            ProtocolError: If the service rejects the job.
            TransportError: On connection issues.
        """
        sender = resolve_sender(job.sender, self.config.global_sender)
        request_xml = build_portal_job_request(job, sender)
        bundle = self._builder.create_submission(job, sender)
        response = self._engine.create_portal_job(request_xml, bundle, sender)
        _logger.info(
            "Created portal signature job %d (reference %s)",
            response.signature_job_id,
            response.reference,
        )
        return response

    def get_status_change(self, sender: Sender | None = None) -> PortalJobStatusChanged:
        """Take the next status change from the polling queue.

        Raises:
            TooEagerPollingError: If polled before the permitted time.
            ProtocolError: On other failed responses.
            TransportError: On connection issues.
        """
        return self._engine.poll_portal_status_change(sender)

    def cancel(self, job: PortalJobResponse | PortalJobStatusChanged) -> None:
        """Cancel a job, using the cancellation URL from an earlier response.

        Raises:
            NotCancellableError: If the response has no cancellation URL.
            JobCannotBeCancelledError: If the service refuses.
            ProtocolError: On other failed responses.
            TransportError: On connection issues.
        """
        self._engine.cancel(job.cancellation_url)

    def confirm(self, status: PortalJobStatusChanged) -> None:
        """Confirm that a status change has been processed."""
        self._engine.confirm(status.confirmation_reference)
