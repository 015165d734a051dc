"""
Value objects describing a signature job before it is submitted.

Jobs are immutable. Construct them with :func:`direct_job` and
:func:`portal_job`, which validate the parts that can be checked without
the service (at least one signer, no blank references, consistent signer
notification settings).
"""

from __future__ import annotations

__all__ = [
    "DirectJob",
    "DirectSigner",
    "Document",
    "ExitUrls",
    "FileType",
    "Notifications",
    "PortalJob",
    "PortalSigner",
    "Sender",
    "SignatureJob",
    "direct_job",
    "portal_job",
    "portal_signer_by_contact_info",
    "portal_signer_by_pin",
    "resolve_sender",
    "single_exit_url",
]

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal, Union

from ..errors import ConfigError, ValidationError

OnBehalfOf = Literal["SELF", "OTHER"]
StatusRetrievalMethod = Literal["WAIT_FOR_CALLBACK", "POLLING"]
NotificationsUsingLookup = Literal["EMAIL_ONLY", "SMS_ONLY", "EMAIL_AND_SMS"]
IdentifierInSignedDocuments = Literal[
    "PERSONAL_IDENTIFICATION_NUMBER_AND_NAME",
    "DATE_OF_BIRTH_AND_NAME",
    "NAME",
]


class FileType(Enum):
    """Document formats accepted by the signature service, valued by MIME type."""

    PDF = "application/pdf"
    TXT = "text/plain"
    DOC = "application/msword"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    XLS = "application/vnd.ms-excel"
    XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    PPT = "application/vnd.ms-powerpoint"
    PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
    ODT = "application/vnd.oasis.opendocument.text"
    ODS = "application/vnd.oasis.opendocument.spreadsheet"
    ODP = "application/vnd.oasis.opendocument.presentation"
    RTF = "application/rtf"
    JPG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"
    HTML = "text/html"
    XML = "application/xml"

    @property
    def mime_type(self) -> str:
        return self.value


@dataclass(frozen=True)
class Document:
    """A document to be signed.

    Attributes:
        title: Shown to the signer as the subject of the job.
        file_name: Name of the document entry inside the container.
        content: Raw document bytes.
        message: Optional longer description shown to the signer.
        file_type: Format of ``content``.
    """

    title: str
    file_name: str
    content: bytes = field(repr=False)
    message: str | None = None
    file_type: FileType = FileType.PDF


@dataclass(frozen=True)
class Sender:
    """The organization a job is sent on behalf of.

    ``polling_queue`` names a custom queue for status changes; ``None``
    means the sender's default queue.
    """

    organization_number: str
    polling_queue: str | None = None


@dataclass(frozen=True)
class ExitUrls:
    """Where the signer is sent after completing, rejecting, or failing."""

    completion_url: str
    rejection_url: str
    error_url: str


def single_exit_url(url: str) -> ExitUrls:
    """Use the same URL for every outcome of a direct job."""
    return ExitUrls(completion_url=url, rejection_url=url, error_url=url)


# ── Signers ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DirectSigner:
    personal_identification_number: str
    on_behalf_of: OnBehalfOf = "SELF"


@dataclass(frozen=True)
class Notifications:
    """Explicit contact channels for notifying a portal signer."""

    email: str | None = None
    mobile: str | None = None


@dataclass(frozen=True)
class PortalSigner:
    """A signer in a portal job.

    Either identified by personal identification number, in which case
    notifications may be resolved by lookup in the public contact
    register, or identified by contact information only.
    """

    personal_identification_number: str | None = None
    notifications: Notifications | None = None
    notifications_using_lookup: NotificationsUsingLookup | None = None
    order: int | None = None
    on_behalf_of: OnBehalfOf = "SELF"


def portal_signer_by_pin(
    personal_identification_number: str,
    notifications: Notifications | NotificationsUsingLookup,
    *,
    order: int | None = None,
    on_behalf_of: OnBehalfOf = "SELF",
) -> PortalSigner:
    """Create a portal signer identified by personal identification number."""
    if not personal_identification_number.strip():
        raise ValidationError(
            "Portal signer requires a personal identification number",
            field="personal-identification-number",
        )
    if isinstance(notifications, Notifications):
        _require_contact(notifications)
        return PortalSigner(
            personal_identification_number=personal_identification_number,
            notifications=notifications,
            order=order,
            on_behalf_of=on_behalf_of,
        )
    return PortalSigner(
        personal_identification_number=personal_identification_number,
        notifications_using_lookup=notifications,
        order=order,
        on_behalf_of=on_behalf_of,
    )


def portal_signer_by_contact_info(
    notifications: Notifications, *, order: int | None = None
) -> PortalSigner:
    """Create a portal signer identified only by email and/or mobile number."""
    _require_contact(notifications)
    return PortalSigner(notifications=notifications, order=order)


def _require_contact(notifications: Notifications) -> None:
    if not notifications.email and not notifications.mobile:
        raise ValidationError(
            "Notifications require an email address or a mobile number",
            field="notifications",
        )


# ── Jobs ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DirectJob:
    """A single-session job where signers are redirected to sign right away."""

    document: Document
    signers: tuple[DirectSigner, ...]
    exit_urls: ExitUrls
    reference: str | None = None
    sender: Sender | None = None
    status_retrieval_method: StatusRetrievalMethod = "WAIT_FOR_CALLBACK"


@dataclass(frozen=True)
class PortalJob:
    """A longer-lived job where signers are notified and sign in the portal."""

    document: Document
    signers: tuple[PortalSigner, ...]
    reference: str | None = None
    sender: Sender | None = None
    activation_time: datetime | None = None
    available_seconds: int | None = None
    identifier_in_signed_documents: IdentifierInSignedDocuments | None = None


SignatureJob = Union[DirectJob, PortalJob]


def _clean_reference(reference: str | None) -> str | None:
    if reference is None:
        return None
    reference = reference.strip()
    return reference or None


def direct_job(
    document: Document,
    exit_urls: ExitUrls,
    *signers: DirectSigner,
    reference: str | None = None,
    sender: Sender | None = None,
    status_retrieval_method: StatusRetrievalMethod = "WAIT_FOR_CALLBACK",
) -> DirectJob:
    """Build a :class:`DirectJob`.

    Raises:
        ValidationError: If no signer is given.
    """
    if not signers:
        raise ValidationError("A direct job requires at least one signer", field="signer")
    return DirectJob(
        document=document,
        signers=tuple(signers),
        exit_urls=exit_urls,
        reference=_clean_reference(reference),
        sender=sender,
        status_retrieval_method=status_retrieval_method,
    )


def portal_job(
    document: Document,
    *signers: PortalSigner,
    reference: str | None = None,
    sender: Sender | None = None,
    activation_time: datetime | None = None,
    available_seconds: int | None = None,
    identifier_in_signed_documents: IdentifierInSignedDocuments | None = None,
) -> PortalJob:
    """Build a :class:`PortalJob`.

    Signing order is either given for every signer or for none.

    Raises:
        ValidationError: If no signer is given, the availability is not
            positive, or signing order is only partially specified.
    """
    if not signers:
        raise ValidationError("A portal job requires at least one signer", field="signer")
    if available_seconds is not None and available_seconds <= 0:
        raise ValidationError(
            f"Availability must be positive, got {available_seconds} seconds",
            field="available-seconds",
        )
    ordered = [s.order is not None for s in signers]
    if any(ordered) and not all(ordered):
        raise ValidationError(
            "Signing order must be given for all signers or for none", field="order"
        )
    return PortalJob(
        document=document,
        signers=tuple(signers),
        reference=_clean_reference(reference),
        sender=sender,
        activation_time=activation_time,
        available_seconds=available_seconds,
        identifier_in_signed_documents=identifier_in_signed_documents,
    )


def resolve_sender(job_sender: Sender | None, global_sender: Sender | None) -> Sender:
    """
    Pick the sender for a single call.

    Priority: the sender given for the job (or the call) > the client's
    global sender.

    Raises:
        ConfigError: If neither is available.
    """
    if job_sender is not None:
        return job_sender
    if global_sender is not None:
        return global_sender
    raise ConfigError(
        "No sender available. Set a global sender in the client configuration, "
        "or give the job (or the call) its own sender."
    )
