"""
Application-wide constants for the signature client.

Timeouts, media types, header names, and fixed archive entry names are
centralized here so the protocol and container code share one source.
"""

from __future__ import annotations

import importlib.metadata

try:
    __version__ = importlib.metadata.version("signature-api-client")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.4.0"

__all__ = [
    "ACCEPT_XML",
    "DEFAULT_TIMEOUT",
    "ENV_CLIENT_CERT",
    "ENV_CLIENT_KEY",
    "ENV_KEY_PASSWORD",
    "ENV_POLLING_QUEUE",
    "ENV_SENDER",
    "ENV_TIMEOUT",
    "ENV_URL",
    "MANIFEST_ENTRY_NAME",
    "MAX_RESPONSE_SIZE",
    "MAX_TIMEOUT",
    "MEDIA_TYPE_OCTET_STREAM",
    "MEDIA_TYPE_XML",
    "MIN_TIMEOUT",
    "NEXT_PERMITTED_POLL_TIME_HEADER",
    "NO_CONTENT_PLACEHOLDER",
    "POLLING_QUEUE_QUERY_PARAMETER",
    "RECV_BUFFER_SIZE",
    "SCHEMA_NAMESPACE",
    "SIGNATURES_ENTRY_NAME",
    "TIMESTAMP_PATTERN",
    "USER_AGENT",
    "__version__",
]

# ── Timeout values (seconds) ──────────────────────────────────────────

# Socket timeout for every request against the signature service
DEFAULT_TIMEOUT = 10

MIN_TIMEOUT = 1
MAX_TIMEOUT = 600


# ── Size limits (bytes) ───────────────────────────────────────────────

# Signed documents may be large; refuse anything beyond 100 MB
MAX_RESPONSE_SIZE = 100 * 1024 * 1024

RECV_BUFFER_SIZE = 8192


# ── Protocol constants ────────────────────────────────────────────────

SCHEMA_NAMESPACE = "http://signering.posten.no/schema/v1"

MEDIA_TYPE_XML = "application/xml"
MEDIA_TYPE_OCTET_STREAM = "application/octet-stream"
ACCEPT_XML = MEDIA_TYPE_XML

NEXT_PERMITTED_POLL_TIME_HEADER = "X-Next-permitted-poll-time"
POLLING_QUEUE_QUERY_PARAMETER = "polling_queue"

# Used in error messages when a failed response had an empty body
NO_CONTENT_PLACEHOLDER = "<no content in response>"

USER_AGENT = f"Posten signering Python API Client/{__version__}"


# ── Container layout ──────────────────────────────────────────────────

MANIFEST_ENTRY_NAME = "manifest.xml"
SIGNATURES_ENTRY_NAME = "META-INF/signatures.xml"

# strftime pattern for dumped container file names (milliseconds appended)
TIMESTAMP_PATTERN = "%Y%m%d%H%M%S"


# ── Environment variable names ────────────────────────────────────────

ENV_URL = "SIGNATURE_SERVICE_URL"
ENV_SENDER = "SIGNATURE_SENDER"
ENV_POLLING_QUEUE = "SIGNATURE_POLLING_QUEUE"
ENV_TIMEOUT = "SIGNATURE_TIMEOUT"
ENV_CLIENT_CERT = "SIGNATURE_CLIENT_CERT"
ENV_CLIENT_KEY = "SIGNATURE_CLIENT_KEY"
ENV_KEY_PASSWORD = "SIGNATURE_KEY_PASSWORD"
