"""Tests for signature_client.network.transport — urllib transport and TLS setup."""

import http.client
import io
import socket
import ssl
import urllib.error
import urllib.request
from unittest.mock import MagicMock, patch

import pytest

from signature_client.constants import MAX_RESPONSE_SIZE, USER_AGENT
from signature_client.errors import ConfigError, TransportError
from signature_client.network import transport
from signature_client.network.protocol import HttpResponse
from signature_client.network.transport import UrllibTransport, build_ssl_context

URL = "https://api.example.com/api/123456789/direct/signature-jobs"


def _headers(**values: str) -> http.client.HTTPMessage:
    message = http.client.HTTPMessage()
    for name, value in values.items():
        message[name.replace("_", "-")] = value
    return message


def _make_urllib_response(data: bytes, status: int = 200, **headers: str) -> MagicMock:
    """Build a mock urllib response that works with chunked read()."""
    mock = MagicMock()
    mock.read.side_effect = [data, b""]
    mock.status = status
    mock.headers = _headers(**headers)
    mock.__enter__ = MagicMock(return_value=mock)
    mock.__exit__ = MagicMock(return_value=False)
    return mock


def _http_error(code: int, body: bytes, **headers: str) -> urllib.error.HTTPError:
    return urllib.error.HTTPError(URL, code, "error", _headers(**headers), io.BytesIO(body))


# ── get / post ───────────────────────────────────────────────────────


def test_get_success():
    t = UrllibTransport()
    mock_response = _make_urllib_response(b"<ok/>", Content_Type="application/xml")
    with patch.object(t, "_open", return_value=mock_response) as mock_open:
        response = t.get(URL, headers={"Accept": "application/xml"})

    assert response.status == 200
    assert response.body == b"<ok/>"
    assert response.content_type == "application/xml"
    request = mock_open.call_args[0][0]
    assert request.get_method() == "GET"
    assert request.get_header("Accept") == "application/xml"
    assert request.get_header("User-agent") == USER_AGENT


def test_post_sends_body():
    t = UrllibTransport(user_agent="custom-agent")
    mock_response = _make_urllib_response(b"")
    with patch.object(t, "_open", return_value=mock_response) as mock_open:
        t.post(URL, b"payload", headers={"Content-Length": "7"})
    request = mock_open.call_args[0][0]
    assert request.get_method() == "POST"
    assert request.data == b"payload"
    assert request.get_header("User-agent") == "custom-agent"


def test_http_error_returned_as_response():
    t = UrllibTransport()
    error = _http_error(
        429, b"", Content_Type="application/xml", X_Next_permitted_poll_time="2024-01-01T00:00:05Z"
    )
    with patch.object(t, "_open", side_effect=error):
        response = t.get(URL)
    assert response.status == 429
    assert response.header("X-Next-permitted-poll-time") == "2024-01-01T00:00:05Z"


def test_http_error_body_read():
    t = UrllibTransport()
    with patch.object(t, "_open", side_effect=_http_error(503, b"Service Unavailable")):
        response = t.post(URL, b"")
    assert response.status == 503
    assert response.text() == "Service Unavailable"


def test_url_error_is_retryable_transport_error():
    t = UrllibTransport()
    error = urllib.error.URLError(ConnectionRefusedError("refused"))
    with (
        patch.object(t, "_open", side_effect=error),
        pytest.raises(TransportError, match="refused") as exc_info,
    ):
        t.get(URL)
    assert exc_info.value.retryable is True


def test_timeout_is_retryable():
    t = UrllibTransport(timeout=5)
    with (
        patch.object(t, "_open", side_effect=socket.timeout("timed out")),
        pytest.raises(TransportError, match="timed out after 5s") as exc_info,
    ):
        t.get(URL)
    assert exc_info.value.retryable is True


def test_other_os_error_not_retryable():
    t = UrllibTransport()
    with (
        patch.object(t, "_open", side_effect=ssl.SSLError("handshake failure")),
        pytest.raises(TransportError) as exc_info,
    ):
        t.get(URL)
    assert exc_info.value.retryable is False


def test_response_size_limit():
    t = UrllibTransport()
    mock_response = MagicMock()
    mock_response.read.side_effect = [b"x" * (MAX_RESPONSE_SIZE + 1), b""]
    mock_response.__enter__ = MagicMock(return_value=mock_response)
    mock_response.__exit__ = MagicMock(return_value=False)
    with (
        patch.object(t, "_open", return_value=mock_response),
        pytest.raises(TransportError, match="exceeds"),
    ):
        t.get(URL)


@pytest.mark.parametrize("url", ["http://api.example.com/api", "ftp://x/y", "no-scheme"])
def test_https_required(url):
    t = UrllibTransport()
    with patch.object(t, "_open") as mock_open, pytest.raises(ConfigError, match="HTTPS"):
        t.get(url)
    mock_open.assert_not_called()


# ── redirect handling ────────────────────────────────────────────────


def test_redirect_downgrade_refused():
    handler = transport._SafeRedirectHandler()
    request = urllib.request.Request(URL)
    with pytest.raises(TransportError, match="Refused redirect"):
        handler.redirect_request(request, None, 302, "Found", _headers(), "http://evil/")


# ── build_ssl_context ────────────────────────────────────────────────


def test_build_ssl_context_default():
    context = build_ssl_context()
    assert isinstance(context, ssl.SSLContext)
    assert context.verify_mode == ssl.CERT_REQUIRED


def test_build_ssl_context_missing_cert(tmp_path):
    with pytest.raises(ConfigError, match="Unable to load TLS material"):
        build_ssl_context(tmp_path / "missing.pem")


def test_build_ssl_context_loads_client_cert(tmp_path):
    context = MagicMock(spec=ssl.SSLContext)
    with patch("ssl.create_default_context", return_value=context) as create:
        result = build_ssl_context("cert.pem", "key.pem", "secret", tmp_path / "ca.pem")
    assert result is context
    create.assert_called_once_with(cafile=str(tmp_path / "ca.pem"))
    context.load_cert_chain.assert_called_once_with(
        certfile="cert.pem", keyfile="key.pem", password="secret"
    )


# ── HttpResponse ─────────────────────────────────────────────────────


def test_response_header_names_normalised():
    response = HttpResponse(
        415, {"Content-Type": "text/html", "X-Next-permitted-poll-time": "soon"}, b"oops"
    )
    assert response.headers == {"content-type": "text/html", "x-next-permitted-poll-time": "soon"}
    assert response.content_type == "text/html"
    assert response.header("x-next-PERMITTED-poll-time") == "soon"
