"""
Client configuration.

:class:`ClientConfiguration` holds everything the clients need: service
root, sender, processors, clock, timeout, and TLS material. It can be
built directly, or resolved from the environment and the saved
~/.signature-client/config.json with :func:`resolve_configuration`.

The client key passphrase is not part of the config file; see
``credentials.py``.
"""

from __future__ import annotations

__all__ = [
    "ClientConfiguration",
    "get_active_environment",
    "resolve_configuration",
    "save_client_certificate",
    "save_environment",
    "save_sender",
]

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from ..asice.manifest import utc_now
from ..constants import (
    DEFAULT_TIMEOUT,
    ENV_CLIENT_CERT,
    ENV_CLIENT_KEY,
    ENV_POLLING_QUEUE,
    ENV_SENDER,
    ENV_TIMEOUT,
    ENV_URL,
    MAX_TIMEOUT,
    MIN_TIMEOUT,
    USER_AGENT,
)
from ..core.models import Sender
from ..errors import ConfigError
from ._storage import load_config, load_raw_config, save_config
from .environments import (
    BUILTIN_ENVIRONMENTS,
    PRODUCTION,
    ServiceEnvironment,
    make_custom_environment,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from ..asice.bundle import DocumentBundleProcessor

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfiguration:
    """Settings shared by :class:`~signature_client.api.DirectClient` and
    :class:`~signature_client.api.PortalClient`.

    Attributes:
        service_root: Base URL of the signature API (https only).
        global_sender: Sender for jobs and calls that do not name one.
        document_bundle_processors: Run in order on every bundle.
        clock: Source of the current time (activation time, dump names).
        timeout: Socket timeout in seconds.
        user_agent_suffix: Appended to the User-Agent header, e.g. to
            identify the integrating application.
        client_cert: PEM file with the enterprise certificate.
        client_key: PEM file with its private key, if separate.
        trust_store: CA bundle to trust instead of the system default.
    """

    service_root: str = PRODUCTION.url
    global_sender: Sender | None = None
    document_bundle_processors: tuple[DocumentBundleProcessor, ...] = ()
    clock: Callable[[], datetime] = field(default=utc_now, repr=False)
    timeout: int = DEFAULT_TIMEOUT
    user_agent_suffix: str | None = None
    client_cert: str | None = None
    client_key: str | None = None
    trust_store: str | None = None

    def __post_init__(self) -> None:
        if urlparse(self.service_root).scheme.lower() != "https":
            raise ConfigError(f"Service root must be an https URL: {self.service_root}")
        if not MIN_TIMEOUT <= self.timeout <= MAX_TIMEOUT:
            raise ConfigError(
                f"Timeout {self.timeout} out of range [{MIN_TIMEOUT}, {MAX_TIMEOUT}]"
            )
        # Accept any iterable but store a tuple so the order is fixed
        object.__setattr__(
            self, "document_bundle_processors", tuple(self.document_bundle_processors)
        )

    @property
    def user_agent(self) -> str:
        if self.user_agent_suffix:
            return f"{USER_AGENT} ({self.user_agent_suffix})"
        return USER_AGENT


# ── Resolution ───────────────────────────────────────────────────────


def get_active_environment() -> ServiceEnvironment:
    """
    Get the environment from saved config.

    Returns:
        The saved built-in or custom environment, or production when
        nothing is configured.
    """
    config = load_config()
    name = config.get("environment")
    if name and name in BUILTIN_ENVIRONMENTS:
        return BUILTIN_ENVIRONMENTS[name]

    url = config.get("url")
    if url:
        return make_custom_environment(url, config.get("timeout", DEFAULT_TIMEOUT))

    if name:
        _logger.warning("Unknown environment %r in config, using production", name)
    return PRODUCTION


def _env(name: str) -> str | None:
    return os.environ.get(name, "").strip() or None


def _resolve_timeout(config_timeout: int | None, environment: ServiceEnvironment) -> int:
    timeout_str = _env(ENV_TIMEOUT)
    if timeout_str is not None:
        try:
            timeout = int(timeout_str)
        except ValueError:
            _logger.warning("Invalid %s value %r, using default", ENV_TIMEOUT, timeout_str)
            return DEFAULT_TIMEOUT
        if timeout < MIN_TIMEOUT or timeout > MAX_TIMEOUT:
            _logger.warning(
                "%s=%d out of range [%d, %d], using default",
                ENV_TIMEOUT,
                timeout,
                MIN_TIMEOUT,
                MAX_TIMEOUT,
            )
            return DEFAULT_TIMEOUT
        return timeout
    if config_timeout is not None:
        return config_timeout
    return environment.timeout


def resolve_configuration(
    *,
    processors: Iterable[DocumentBundleProcessor] = (),
    clock: Callable[[], datetime] = utc_now,
    user_agent_suffix: str | None = None,
) -> ClientConfiguration:
    """
    Build a configuration from env vars and the saved config file.

    Priority: env vars > config file > production environment.

    Args:
        processors: Document bundle processors, run in this order.
        clock: Source of the current time.
        user_agent_suffix: Appended to the User-Agent header.

    Raises:
        ConfigError: If the resolved service URL is not https.
    """
    config = load_config()

    url = _env(ENV_URL)
    if url is not None:
        environment = make_custom_environment(url)
        source = "env"
    else:
        environment = get_active_environment()
        source = "config" if environment is not PRODUCTION else "default"

    organization_number = _env(ENV_SENDER) or config.get("sender")
    polling_queue = _env(ENV_POLLING_QUEUE) or config.get("polling_queue")
    sender = None
    if organization_number:
        sender = Sender(organization_number, polling_queue)
    elif polling_queue:
        _logger.warning("Polling queue %r configured without a sender, ignoring", polling_queue)

    resolved = ClientConfiguration(
        service_root=environment.url,
        global_sender=sender,
        document_bundle_processors=tuple(processors),
        clock=clock,
        timeout=_resolve_timeout(config.get("timeout"), environment),
        user_agent_suffix=user_agent_suffix,
        client_cert=_env(ENV_CLIENT_CERT) or config.get("client_cert"),
        client_key=_env(ENV_CLIENT_KEY) or config.get("client_key"),
        trust_store=config.get("trust_store"),
    )
    _logger.debug(
        "resolve_configuration: url=%s (source=%s), has_sender=%s, has_cert=%s",
        resolved.service_root,
        source,
        sender is not None,
        resolved.client_cert is not None,
    )
    return resolved


# ── Saving ───────────────────────────────────────────────────────────


def save_environment(environment: ServiceEnvironment) -> None:
    """Save the service environment to config."""
    config = load_raw_config()
    config["environment"] = environment.name
    config["url"] = environment.url
    config["timeout"] = environment.timeout
    save_config(config)


def save_sender(sender: Sender) -> None:
    """Save the default sender to config.

    Clears a previously saved polling queue when the sender has none.
    """
    config = load_raw_config()
    config["sender"] = sender.organization_number
    if sender.polling_queue:
        config["polling_queue"] = sender.polling_queue
    else:
        config.pop("polling_queue", None)
    save_config(config)


def save_client_certificate(
    client_cert: str,
    client_key: str | None = None,
    trust_store: str | None = None,
) -> None:
    """Save TLS material paths to config. Paths only, never key material."""
    config = load_raw_config()
    for key, value in (
        ("client_cert", client_cert),
        ("client_key", client_key),
        ("trust_store", trust_store),
    ):
        if value:
            config[key] = value
        else:
            config.pop(key, None)
    save_config(config)
