"""
Service environments for the signature API.

An environment bundles the service root URL and request timeout for a
specific deployment. Built-in environments are defined here; other
deployments are represented as ad-hoc instances.
"""

from __future__ import annotations

__all__ = [
    "BUILTIN_ENVIRONMENTS",
    "DIFI_TEST",
    "PRODUCTION",
    "ServiceEnvironment",
    "get_environment",
    "make_custom_environment",
]

from dataclasses import dataclass
from urllib.parse import urlparse

from ..constants import DEFAULT_TIMEOUT
from ..errors import ConfigError


@dataclass(frozen=True)
class ServiceEnvironment:
    """Describes a signature service deployment."""

    name: str
    display_name: str
    url: str
    timeout: int = DEFAULT_TIMEOUT


# ── Built-in environments ────────────────────────────────────────────

PRODUCTION = ServiceEnvironment(
    name="production",
    display_name="Posten signering (production)",
    url="https://api.signering.posten.no/api",
)

DIFI_TEST = ServiceEnvironment(
    name="difitest",
    display_name="Posten signering (DIFI test)",
    url="https://api.difitest.signering.posten.no/api",
)

BUILTIN_ENVIRONMENTS: dict[str, ServiceEnvironment] = {
    env.name: env for env in (PRODUCTION, DIFI_TEST)
}


def get_environment(name: str) -> ServiceEnvironment:
    """
    Look up a built-in environment by name.

    Args:
        name: Environment name (case-insensitive).

    Raises:
        ConfigError: If no built-in environment matches.
    """
    key = name.lower().strip()
    if key not in BUILTIN_ENVIRONMENTS:
        available = ", ".join(sorted(BUILTIN_ENVIRONMENTS))
        raise ConfigError(f"Unknown environment {name!r}. Available: {available}")
    return BUILTIN_ENVIRONMENTS[key]


def make_custom_environment(url: str, timeout: int = DEFAULT_TIMEOUT) -> ServiceEnvironment:
    """
    Create an ad-hoc environment for another deployment.

    Raises:
        ConfigError: If the URL is not https or has no hostname.
    """
    parsed = urlparse(url)
    if parsed.scheme == "http":
        raise ConfigError(
            "HTTP URLs are not supported. Use https:// to protect the client certificate."
        )
    if parsed.scheme != "https":
        raise ConfigError(f"Invalid URL scheme {parsed.scheme!r}. Use https://.")
    if not parsed.hostname:
        raise ConfigError(f"Invalid URL: no hostname found in {url!r}")

    return ServiceEnvironment(
        name="custom",
        display_name=f"Custom ({url})",
        url=url.rstrip("/"),
        timeout=timeout,
    )
