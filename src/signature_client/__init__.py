"""
signature_client — Python client for the Posten signering API.

Builds ASiC-E document bundles for direct and portal signature jobs,
submits them, and follows each job through polling, status queries,
confirmation, and cancellation. Every failed response is reported as a
typed exception.
"""

from __future__ import annotations

from .api import DirectClient, PortalClient
from .asice import DumpDocumentBundleToDisk
from .config import (
    DIFI_TEST,
    PRODUCTION,
    ClientConfiguration,
    ServiceEnvironment,
    resolve_configuration,
)
from .constants import __version__
from .core import (
    DirectJobStatus,
    DirectSigner,
    Document,
    ExitUrls,
    FileType,
    Notifications,
    PortalJobStatus,
    Sender,
    SignerStatus,
    direct_job,
    portal_job,
    portal_signer_by_contact_info,
    portal_signer_by_pin,
    single_exit_url,
)
from .errors import (
    ArchiveIOError,
    BrokerNotAuthorizedError,
    CantQueryStatusError,
    ConfigError,
    DocumentBundleProcessingError,
    InvalidStatusQueryTokenError,
    JobCannotBeCancelledError,
    NotCancellableError,
    ProtocolError,
    SignatureClientError,
    TooEagerPollingError,
    TransportError,
    UnexpectedResponseError,
    ValidationError,
)

__all__ = [
    "DIFI_TEST",
    "PRODUCTION",
    "ArchiveIOError",
    "BrokerNotAuthorizedError",
    "CantQueryStatusError",
    "ClientConfiguration",
    "ConfigError",
    "DirectClient",
    "DirectJobStatus",
    "DirectSigner",
    "Document",
    "DocumentBundleProcessingError",
    "DumpDocumentBundleToDisk",
    "ExitUrls",
    "FileType",
    "InvalidStatusQueryTokenError",
    "JobCannotBeCancelledError",
    "NotCancellableError",
    "Notifications",
    "PortalClient",
    "PortalJobStatus",
    "ProtocolError",
    "Sender",
    "ServiceEnvironment",
    "SignatureClientError",
    "SignerStatus",
    "TooEagerPollingError",
    "TransportError",
    "UnexpectedResponseError",
    "ValidationError",
    "__version__",
    "direct_job",
    "portal_job",
    "portal_signer_by_contact_info",
    "portal_signer_by_pin",
    "resolve_configuration",
    "single_exit_url",
]
