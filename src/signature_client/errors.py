"""Signature client error types."""

from __future__ import annotations

from typing import Any

__all__ = [
    "ArchiveIOError",
    "BrokerNotAuthorizedError",
    "CantQueryStatusError",
    "ConfigError",
    "DocumentBundleProcessingError",
    "InvalidStatusQueryTokenError",
    "JobCannotBeCancelledError",
    "NotCancellableError",
    "ProtocolError",
    "SignatureClientError",
    "TooEagerPollingError",
    "TransportError",
    "UnexpectedResponseError",
    "ValidationError",
]


class SignatureClientError(Exception):
    """Base error for signature client operations."""


class ConfigError(SignatureClientError):
    """Configuration validation error (e.g. no sender available)."""


class ValidationError(SignatureClientError):
    """A job or document is missing required content.

    Raised locally, before any request is sent.

    Args:
        message: Human-readable error description.
        field: Name of the offending field, when one can be identified.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ArchiveIOError(SignatureClientError):
    """Writing the document bundle archive failed."""


class DocumentBundleProcessingError(SignatureClientError):
    """A registered document bundle processor raised."""


class TransportError(SignatureClientError):
    """Network/connection error from the HTTP transport.

    Args:
        message: Human-readable error description.
        retryable: Whether this error is transient (timeouts, refused
            connections). The client never retries on its own; the flag
            is advice for the caller.
    """

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable

    def __reduce__(self) -> tuple[type[TransportError], tuple[str], dict[str, bool]]:
        """Preserve retryable flag across pickle/unpickle."""
        return (type(self), (str(self),), {"retryable": self.retryable})

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        if state is None:
            return
        self.retryable = state.get("retryable", False)


# ── Protocol failures ────────────────────────────────────────────────


class ProtocolError(SignatureClientError):
    """The service answered, but not with the expected success response."""


class InvalidStatusQueryTokenError(ProtocolError):
    """The status query token was rejected by the service (403)."""

    def __init__(self, status_url: str, error_message: str | None) -> None:
        super().__init__(
            f"The provided status query token is invalid for {status_url}: {error_message}"
        )
        self.status_url = status_url
        self.error_message = error_message


class CantQueryStatusError(ProtocolError):
    """Status is not available until the signing ceremony is completed (404)."""

    def __init__(self, status: int, error_message: str | None) -> None:
        super().__init__(f"Unable to query status ({status}): {error_message}")
        self.status = status
        self.error_message = error_message


class TooEagerPollingError(ProtocolError):
    """The polling queue was polled before the permitted time (429).

    Attributes:
        next_permitted_poll_time: Header value as sent by the service,
            unparsed.
    """

    def __init__(self, next_permitted_poll_time: str | None) -> None:
        super().__init__(
            "Excessive polling is not allowed. "
            f"Next permitted poll time is {next_permitted_poll_time}. "
            "Wait until then before polling again."
        )
        self.next_permitted_poll_time = next_permitted_poll_time


class NotCancellableError(ProtocolError):
    """The job has no cancellation URL, so it cannot be cancelled."""

    def __init__(self) -> None:
        super().__init__(
            "The signature job can not be cancelled. It has either been completed, "
            "or the job was not created with a cancellation URL."
        )


class JobCannotBeCancelledError(ProtocolError):
    """The service refused to cancel the job (409)."""

    def __init__(self, status: int, error_code: str | None, error_message: str | None) -> None:
        super().__init__(f"{status} {error_code}: {error_message}")
        self.status = status
        self.error_code = error_code
        self.error_message = error_message


class BrokerNotAuthorizedError(ProtocolError):
    """The broker is not authorized to act on behalf of the sender."""

    def __init__(self, error_code: str | None, error_message: str | None) -> None:
        super().__init__(f"{error_code}: {error_message}")
        self.error_code = error_code
        self.error_message = error_message


class UnexpectedResponseError(ProtocolError):
    """The response could not be mapped to a known outcome.

    Covers non-XML error bodies, undecodable payloads, unknown error
    codes, and 200 responses that fail to parse.

    Attributes:
        status: HTTP status received, if any.
        content_type: Response Content-Type, or ``"unknown"``.
        body: Raw body text, or a placeholder when empty.
        error_code: Decoded error code, when the body was a structured error.
        error_message: Decoded error message, likewise.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        content_type: str | None = None,
        body: str | None = None,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.content_type = content_type
        self.body = body
        self.error_code = error_code
        self.error_message = error_message
