"""
Transport protocol abstraction for the signature service.

The protocol engine depends on this interface, not on a concrete HTTP
library. Implementations handle TLS (client certificate, trust store),
timeouts, and connection reuse. They return every HTTP status as an
:class:`HttpResponse` and raise only for transport-level failures.
"""

from __future__ import annotations

__all__ = ["HttpResponse", "HttpTransport"]

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class HttpResponse:
    """A fully read HTTP response.

    Header names are stored lower-cased, whatever casing the transport
    used. Use :meth:`header` for lookups.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", {k.lower(): v for k, v in self.headers.items()})

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    @property
    def content_type(self) -> str | None:
        return self.header("Content-Type")

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class HttpTransport(Protocol):
    """Performs authenticated requests against the signature service."""

    def get(self, url: str, *, headers: Mapping[str, str] | None = None) -> HttpResponse:
        """
        Send a GET request.

        Returns:
            The response, whatever its status.

        Raises:
            TransportError: On connection, TLS, or timeout failures.
        """
        ...

    def post(
        self, url: str, body: bytes, *, headers: Mapping[str, str] | None = None
    ) -> HttpResponse:
        """
        Send a POST request with the given body (possibly empty).

        Returns:
            The response, whatever its status.

        Raises:
            TransportError: On connection, TLS, or timeout failures.
        """
        ...
