"""
Manifest XML for document bundles.

One function covers both job variants. Required fields are checked here,
before any XML is produced, so a missing file name or exit URL fails
locally with a :class:`~signature_client.errors.ValidationError` instead
of being rejected by the service.
"""

from __future__ import annotations

__all__ = ["create_manifest", "utc_now"]

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from .._xml import XML_DECLARATION, element, format_datetime, xml_escape
from ..constants import SCHEMA_NAMESPACE
from ..core.models import DirectJob, Document, PortalJob, PortalSigner, Sender
from ..errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..core.models import SignatureJob

_logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _require(value: str | bytes | None, field: str) -> None:
    if value is None or not (value.strip() if isinstance(value, str) else value):
        raise ValidationError(f"Missing required manifest field: {field}", field=field)


def _validate_common(document: Document, sender: Sender) -> None:
    _require(sender.organization_number, "organization-number")
    _require(document.title, "title")
    _require(document.file_name, "file-name")
    _require(document.content, "content")


def _sender_xml(sender: Sender) -> str:
    return (
        "  <sender>\n"
        f"{element('organization-number', sender.organization_number, '    ')}"
        "  </sender>\n"
    )


def _document_xml(document: Document) -> str:
    return (
        f'  <document href="{xml_escape(document.file_name)}" '
        f'mime="{xml_escape(document.file_type.mime_type)}">\n'
        f"{element('title', document.title, '    ')}"
        f"{element('description', document.message, '    ')}"
        "  </document>\n"
    )


# ── Direct ───────────────────────────────────────────────────────────


def _direct_manifest(job: DirectJob, sender: Sender) -> str:
    if not job.signers:
        raise ValidationError("Missing required manifest field: signer", field="signer")
    for signer in job.signers:
        _require(signer.personal_identification_number, "personal-identification-number")
    _require(job.exit_urls.completion_url, "completion-url")
    _require(job.exit_urls.rejection_url, "rejection-url")
    _require(job.exit_urls.error_url, "error-url")

    signers = "".join(
        "  <signer>\n"
        f"{element('personal-identification-number', s.personal_identification_number, '    ')}"
        f"{element('on-behalf-of', s.on_behalf_of, '    ')}"
        "  </signer>\n"
        for s in job.signers
    )
    exit_urls = (
        "  <exit-urls>\n"
        f"{element('completion-url', job.exit_urls.completion_url, '    ')}"
        f"{element('rejection-url', job.exit_urls.rejection_url, '    ')}"
        f"{element('error-url', job.exit_urls.error_url, '    ')}"
        "  </exit-urls>\n"
    )
    return (
        f"{XML_DECLARATION}\n"
        f'<direct-signature-job-manifest xmlns="{SCHEMA_NAMESPACE}">\n'
        f"{signers}"
        f"{_sender_xml(sender)}"
        f"{_document_xml(job.document)}"
        f"{exit_urls}"
        "</direct-signature-job-manifest>\n"
    )


# ── Portal ───────────────────────────────────────────────────────────


def _portal_notifications_xml(signer: PortalSigner) -> str:
    indent = "      "
    if signer.notifications_using_lookup is not None:
        lookup = signer.notifications_using_lookup
        channels = ""
        if lookup in ("EMAIL_ONLY", "EMAIL_AND_SMS"):
            channels += f"{indent}  <email/>\n"
        if lookup in ("SMS_ONLY", "EMAIL_AND_SMS"):
            channels += f"{indent}  <sms/>\n"
        return (
            f"{indent}<notifications-using-lookup>\n"
            f"{channels}"
            f"{indent}</notifications-using-lookup>\n"
        )

    notifications = signer.notifications
    if notifications is None or not (notifications.email or notifications.mobile):
        raise ValidationError(
            "Missing required manifest field: notifications", field="notifications"
        )
    channels = ""
    if notifications.email:
        channels += f'{indent}  <email address="{xml_escape(notifications.email)}"/>\n'
    if notifications.mobile:
        channels += f'{indent}  <sms number="{xml_escape(notifications.mobile)}"/>\n'
    return f"{indent}<notifications>\n{channels}{indent}</notifications>\n"


def _portal_signer_xml(signer: PortalSigner) -> str:
    order = f' order="{signer.order}"' if signer.order is not None else ""
    if signer.personal_identification_number is not None:
        identifier = element(
            "personal-identification-number", signer.personal_identification_number, "      "
        )
    else:
        identifier = "      <identified-by-contact-information/>\n"
    return (
        f"    <signer{order}>\n"
        f"{identifier}"
        f"{_portal_notifications_xml(signer)}"
        f"{element('on-behalf-of', signer.on_behalf_of, '      ')}"
        "    </signer>\n"
    )


def _portal_manifest(job: PortalJob, sender: Sender, clock: Callable[[], datetime]) -> str:
    if not job.signers:
        raise ValidationError("Missing required manifest field: signer", field="signer")

    signers = "".join(_portal_signer_xml(s) for s in job.signers)
    activation_time = job.activation_time if job.activation_time is not None else clock()
    available_seconds = (
        str(job.available_seconds) if job.available_seconds is not None else None
    )
    availability = (
        "  <availability>\n"
        f"{element('activation-time', format_datetime(activation_time), '    ')}"
        f"{element('available-seconds', available_seconds, '    ')}"
        "  </availability>\n"
    )
    return (
        f"{XML_DECLARATION}\n"
        f'<portal-signature-job-manifest xmlns="{SCHEMA_NAMESPACE}">\n'
        f"  <signers>\n{signers}  </signers>\n"
        f"{_sender_xml(sender)}"
        f"{_document_xml(job.document)}"
        f"{availability}"
        f"{element('identifier-in-signed-documents', job.identifier_in_signed_documents)}"
        "</portal-signature-job-manifest>\n"
    )


def create_manifest(
    job: SignatureJob,
    sender: Sender,
    *,
    clock: Callable[[], datetime] = utc_now,
) -> str:
    """
    Build the ``manifest.xml`` content for a job.

    Args:
        job: A direct or portal job.
        sender: The sender resolved for this submission.
        clock: Supplies the activation time of portal jobs that have none.

    Returns:
        Manifest XML as a string.

    Raises:
        ValidationError: If a required field is missing or blank. The
            ``field`` attribute names it.
    """
    _validate_common(job.document, sender)
    if isinstance(job, DirectJob):
        manifest = _direct_manifest(job, sender)
    elif isinstance(job, PortalJob):
        manifest = _portal_manifest(job, sender, clock)
    else:
        raise TypeError(f"Unsupported job type: {type(job).__name__}")
    _logger.debug(
        "Created %s manifest for %s", type(job).__name__, job.document.file_name
    )
    return manifest
