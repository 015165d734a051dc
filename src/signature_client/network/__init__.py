"""HTTP transport, XML codec, and the protocol engine."""

from __future__ import annotations

from .classifier import classify, extract_error
from .engine import ProtocolEngine
from .protocol import HttpResponse, HttpTransport
from .transport import UrllibTransport, build_ssl_context
from .xml_requests import build_direct_job_request, build_portal_job_request

__all__ = [
    "HttpResponse",
    "HttpTransport",
    "ProtocolEngine",
    "UrllibTransport",
    "build_direct_job_request",
    "build_portal_job_request",
    "build_ssl_context",
    "classify",
    "extract_error",
]
