"""
Server-issued reference tokens.

Each token wraps a URL handed out in an earlier response and is the only
way to perform the matching follow-up call. They are created by the
response parsers; callers pass them back unchanged.
"""

from __future__ import annotations

__all__ = [
    "CancellationUrl",
    "ConfirmationReference",
    "PAdESReference",
    "StatusReference",
    "XAdESReference",
]

from dataclasses import dataclass, replace
from urllib.parse import quote

_STATUS_QUERY_TOKEN_PARAM = "status_query_token"


@dataclass(frozen=True)
class StatusReference:
    """Status URL of a direct job, plus the token from the completion redirect.

    The service appends ``status_query_token`` to the exit URL the signer is
    redirected to. The token must be attached with
    :meth:`with_status_query_token` before the status can be fetched.
    """

    url: str
    status_query_token: str | None = None

    def with_status_query_token(self, token: str) -> StatusReference:
        return replace(self, status_query_token=token)

    def status_url(self) -> str:
        if not self.status_query_token:
            return self.url
        separator = "&" if "?" in self.url else "?"
        token = quote(self.status_query_token, safe="")
        return f"{self.url}{separator}{_STATUS_QUERY_TOKEN_PARAM}={token}"


@dataclass(frozen=True)
class CancellationUrl:
    url: str


@dataclass(frozen=True)
class ConfirmationReference:
    url: str


@dataclass(frozen=True)
class XAdESReference:
    url: str


@dataclass(frozen=True)
class PAdESReference:
    url: str
