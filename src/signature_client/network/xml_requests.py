"""Job request XML builders, sent alongside the document bundle."""

from __future__ import annotations

__all__ = ["build_direct_job_request", "build_portal_job_request"]

from .._xml import XML_DECLARATION, element
from ..constants import SCHEMA_NAMESPACE
from ..core.models import DirectJob, PortalJob, Sender
from ..errors import ValidationError


def _polling_queue(sender: Sender) -> str | None:
    queue = sender.polling_queue
    if queue is not None and not queue.strip():
        raise ValidationError("Polling queue name must not be blank", field="polling-queue")
    return queue


def build_direct_job_request(job: DirectJob, sender: Sender) -> str:
    """
    Build the request XML for a direct job.

    The polling queue is only meaningful when status is retrieved by
    polling, so it is left out otherwise.

    Raises:
        ValidationError: If the sender's polling queue is blank.
    """
    queue = _polling_queue(sender) if job.status_retrieval_method == "POLLING" else None
    return (
        f"{XML_DECLARATION}\n"
        f'<direct-signature-job-request xmlns="{SCHEMA_NAMESPACE}">\n'
        f"{element('reference', job.reference)}"
        f"{element('status-retrieval-method', job.status_retrieval_method)}"
        f"{element('polling-queue', queue)}"
        "</direct-signature-job-request>\n"
    )


def build_portal_job_request(job: PortalJob, sender: Sender) -> str:
    """Build the request XML for a portal job."""
    return (
        f"{XML_DECLARATION}\n"
        f'<portal-signature-job-request xmlns="{SCHEMA_NAMESPACE}">\n'
        f"{element('reference', job.reference)}"
        f"{element('polling-queue', _polling_queue(sender))}"
        "</portal-signature-job-request>\n"
    )
