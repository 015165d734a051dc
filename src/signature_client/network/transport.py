"""
HTTPS transport for the signature service, built on ``urllib.request``.

The service authenticates the client by its TLS client certificate. The
certificate and trust store go into an :class:`ssl.SSLContext` built by
:func:`build_ssl_context`.

Every HTTP status is returned as an :class:`HttpResponse`. Only
connection-level failures raise. The client does not retry: a failed
request is reported once and the caller decides what to do.
"""

from __future__ import annotations

__all__ = ["UrllibTransport", "build_ssl_context"]

import logging
import ssl
import urllib.error
import urllib.request
from typing import TYPE_CHECKING, Protocol
from urllib.parse import urlparse

from ..constants import DEFAULT_TIMEOUT, MAX_RESPONSE_SIZE, RECV_BUFFER_SIZE, USER_AGENT
from ..errors import ConfigError, TransportError
from .protocol import HttpResponse

if TYPE_CHECKING:
    import http.client
    from collections.abc import Mapping
    from pathlib import Path

_logger = logging.getLogger(__name__)


def _require_https_url(url: str) -> None:
    """Reject non-HTTPS URLs; the client certificate must not travel in plaintext.

    Raises:
        ConfigError: If the URL scheme is not https.
    """
    scheme = urlparse(url).scheme.lower()
    if scheme != "https":
        raise ConfigError(f"Only HTTPS URLs are allowed (got {scheme or 'no scheme'}://): {url}")


def build_ssl_context(
    client_cert: Path | str | None = None,
    client_key: Path | str | None = None,
    key_password: str | None = None,
    trust_store: Path | str | None = None,
) -> ssl.SSLContext:
    """
    Create the TLS context used to authenticate against the service.

    Args:
        client_cert: PEM file with the enterprise certificate (and chain).
        client_key: PEM file with the private key, if not in ``client_cert``.
        key_password: Passphrase for an encrypted private key.
        trust_store: CA bundle to trust instead of the system default.

    Raises:
        ConfigError: If the certificate or key cannot be loaded.
    """
    try:
        context = ssl.create_default_context(
            cafile=str(trust_store) if trust_store is not None else None
        )
        if client_cert is not None:
            context.load_cert_chain(
                certfile=str(client_cert),
                keyfile=str(client_key) if client_key is not None else None,
                password=key_password,
            )
    except (OSError, ssl.SSLError) as e:
        raise ConfigError(f"Unable to load TLS material: {e}") from e
    return context


class _Readable(Protocol):
    def read(self, amt: int = ...) -> bytes: ...


def _read_with_limit(response: _Readable, url: str) -> bytes:
    """Read an HTTP response body with size limit to prevent memory exhaustion."""
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = response.read(RECV_BUFFER_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > MAX_RESPONSE_SIZE:
            raise TransportError(f"Response from {url} exceeds {MAX_RESPONSE_SIZE} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


def _header_dict(headers: http.client.HTTPMessage | None) -> dict[str, str]:
    if headers is None:
        return {}
    return dict(headers.items())


class _SafeRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Redirect handler that refuses HTTPS to HTTP downgrades."""

    def redirect_request(  # type: ignore[override]  # urllib stubs use incompatible signature
        self,
        req: urllib.request.Request,
        fp: http.client.HTTPResponse,
        code: int,
        msg: str,
        headers: http.client.HTTPMessage,
        newurl: str,
    ) -> urllib.request.Request | None:
        parsed_orig = urlparse(req.full_url)
        parsed_new = urlparse(newurl)
        if parsed_orig.scheme == "https" and parsed_new.scheme == "http":
            raise TransportError(f"Refused redirect from HTTPS to HTTP: {newurl}")
        return super().redirect_request(req, fp, code, msg, headers, newurl)


class UrllibTransport:
    """Default :class:`~signature_client.network.protocol.HttpTransport`.

    Args:
        ssl_context: TLS context carrying the client certificate. The
            system default context is used when omitted.
        timeout: Socket timeout in seconds.
        user_agent: Full User-Agent header value.
    """

    def __init__(
        self,
        ssl_context: ssl.SSLContext | None = None,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._opener = urllib.request.build_opener(
            urllib.request.HTTPSHandler(context=ssl_context), _SafeRedirectHandler
        )

    def _open(self, request: urllib.request.Request) -> http.client.HTTPResponse:
        """Thin wrapper to simplify testing."""
        return self._opener.open(request, timeout=self.timeout)

    def _send(self, request: urllib.request.Request) -> HttpResponse:
        url = request.full_url
        request.add_header("User-Agent", self.user_agent)
        try:
            with self._open(request) as response:
                body = _read_with_limit(response, url)
                result = HttpResponse(response.status, _header_dict(response.headers), body)
        except urllib.error.HTTPError as exc:
            # Error statuses are responses too; the protocol engine classifies them
            with exc:
                body = _read_with_limit(exc, url)
            result = HttpResponse(exc.code, _header_dict(exc.headers), body)
        except urllib.error.URLError as exc:
            reason = str(exc.reason) if exc.reason else str(exc)
            raise TransportError(
                f"{request.get_method()} {url} failed: {reason}", retryable=True
            ) from exc
        except TimeoutError as exc:
            raise TransportError(
                f"Connection timed out after {self.timeout}s: {url}", retryable=True
            ) from exc
        except OSError as exc:
            raise TransportError(f"{request.get_method()} {url} failed: {exc}") from exc

        _logger.debug(
            "%s %s -> %d (%d bytes)", request.get_method(), url, result.status, len(result.body)
        )
        return result

    def get(self, url: str, *, headers: Mapping[str, str] | None = None) -> HttpResponse:
        _require_https_url(url)
        request = urllib.request.Request(  # noqa: S310 -- URL is validated as HTTPS above
            url, headers=dict(headers or {}), method="GET"
        )
        return self._send(request)

    def post(
        self, url: str, body: bytes, *, headers: Mapping[str, str] | None = None
    ) -> HttpResponse:
        _require_https_url(url)
        request = urllib.request.Request(  # noqa: S310 -- URL is validated as HTTPS above
            url, data=body, headers=dict(headers or {}), method="POST"
        )
        return self._send(request)
