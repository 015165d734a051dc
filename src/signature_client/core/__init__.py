"""Job value objects, reference tokens, and typed service responses."""

from __future__ import annotations

from .models import (
    DirectJob,
    DirectSigner,
    Document,
    ExitUrls,
    FileType,
    Notifications,
    PortalJob,
    PortalSigner,
    Sender,
    SignatureJob,
    direct_job,
    portal_job,
    portal_signer_by_contact_info,
    portal_signer_by_pin,
    resolve_sender,
    single_exit_url,
)
from .references import (
    CancellationUrl,
    ConfirmationReference,
    PAdESReference,
    StatusReference,
    XAdESReference,
)
from .status import (
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

__all__ = [
    "CancellationUrl",
    "ConfirmationReference",
    "DirectJob",
    "DirectJobResponse",
    "DirectJobStatus",
    "DirectJobStatusResponse",
    "DirectSignature",
    "DirectSigner",
    "Document",
    "ExitUrls",
    "FileType",
    "Notifications",
    "PAdESReference",
    "PortalJob",
    "PortalJobResponse",
    "PortalJobStatus",
    "PortalJobStatusChanged",
    "PortalSignature",
    "PortalSigner",
    "RedirectUrl",
    "Sender",
    "SignatureJob",
    "SignerStatus",
    "StatusReference",
    "XAdESReference",
    "direct_job",
    "portal_job",
    "portal_signer_by_contact_info",
    "portal_signer_by_pin",
    "resolve_sender",
    "single_exit_url",
]
