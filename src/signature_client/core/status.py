"""
Job statuses and the typed responses returned by the signature service.

The ``NO_CHANGES`` members are never sent by the service. They are what a
poll returns when the polling queue was empty.
"""

from __future__ import annotations

__all__ = [
    "DirectJobResponse",
    "DirectJobStatus",
    "DirectJobStatusResponse",
    "DirectSignature",
    "PortalJobResponse",
    "PortalJobStatus",
    "PortalJobStatusChanged",
    "PortalSignature",
    "RedirectUrl",
    "SignerStatus",
]

from dataclasses import dataclass
from enum import Enum

from .references import (
    CancellationUrl,
    ConfirmationReference,
    PAdESReference,
    StatusReference,
    XAdESReference,
)


class DirectJobStatus(Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED_SUCCESSFULLY = "COMPLETED_SUCCESSFULLY"
    FAILED = "FAILED"
    NO_CHANGES = "NO_CHANGES"


class PortalJobStatus(Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED_SUCCESSFULLY = "COMPLETED_SUCCESSFULLY"
    FAILED = "FAILED"
    NO_CHANGES = "NO_CHANGES"


class SignerStatus(Enum):
    """Per-signer state as reported by the service."""

    WAITING = "WAITING"
    SIGNED = "SIGNED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"
    RESERVED = "RESERVED"
    CONTACT_INFORMATION_MISSING = "CONTACT_INFORMATION_MISSING"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    BLOCKED = "BLOCKED"
    SIGNERS_NAME_NOT_AVAILABLE = "SIGNERS_NAME_NOT_AVAILABLE"
    FAILED = "FAILED"


# ── Direct ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RedirectUrl:
    """Where a given direct signer should be sent to sign."""

    signer: str
    url: str


@dataclass(frozen=True)
class DirectJobResponse:
    signature_job_id: int
    reference: str | None
    redirect_urls: tuple[RedirectUrl, ...]
    status_url: StatusReference | None

    @property
    def single_redirect_url(self) -> str:
        """The redirect URL of a job with exactly one signer."""
        if len(self.redirect_urls) != 1:
            raise ValueError(
                f"Job has {len(self.redirect_urls)} redirect URLs, expected exactly one"
            )
        return self.redirect_urls[0].url


@dataclass(frozen=True)
class DirectSignature:
    signer: str
    status: SignerStatus
    since: str | None = None
    xades_reference: XAdESReference | None = None


@dataclass(frozen=True)
class DirectJobStatusResponse:
    signature_job_id: int | None
    reference: str | None
    status: DirectJobStatus
    signatures: tuple[DirectSignature, ...] = ()
    confirmation_reference: ConfirmationReference | None = None
    pades_reference: PAdESReference | None = None

    @classmethod
    def no_changes(cls) -> DirectJobStatusResponse:
        return cls(signature_job_id=None, reference=None, status=DirectJobStatus.NO_CHANGES)

    def is_status(self, status: DirectJobStatus) -> bool:
        return self.status is status

    @property
    def is_pades_available(self) -> bool:
        return self.pades_reference is not None

    def signature_from(self, signer: str) -> DirectSignature:
        for signature in self.signatures:
            if signature.signer == signer:
                return signature
        raise KeyError(f"No signature from {signer!r} in job {self.signature_job_id}")


# ── Portal ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PortalJobResponse:
    signature_job_id: int
    reference: str | None
    cancellation_url: CancellationUrl | None


@dataclass(frozen=True)
class PortalSignature:
    """Status for one portal signer.

    ``signer`` is the personal identification number, or the email
    address / mobile number for signers identified by contact info.
    """

    signer: str
    status: SignerStatus
    since: str | None = None
    xades_reference: XAdESReference | None = None


@dataclass(frozen=True)
class PortalJobStatusChanged:
    signature_job_id: int | None
    reference: str | None
    status: PortalJobStatus
    signatures: tuple[PortalSignature, ...] = ()
    confirmation_reference: ConfirmationReference | None = None
    cancellation_url: CancellationUrl | None = None
    pades_reference: PAdESReference | None = None

    @classmethod
    def no_changes(cls) -> PortalJobStatusChanged:
        return cls(signature_job_id=None, reference=None, status=PortalJobStatus.NO_CHANGES)

    def is_status(self, status: PortalJobStatus) -> bool:
        return self.status is status

    @property
    def is_pades_available(self) -> bool:
        return self.pades_reference is not None

    def signature_from(self, signer: str) -> PortalSignature:
        for signature in self.signatures:
            if signature.signer == signer:
                return signature
        raise KeyError(f"No signature from {signer!r} in job {self.signature_job_id}")
