"""
Configuration, service environments, and key passphrase storage.

Unified API for all config-related functionality. Instead of importing
from individual submodules (config, credentials, environments), import
from this package directly.
"""

from __future__ import annotations

# Client configuration
from .config import (
    ClientConfiguration,
    get_active_environment,
    resolve_configuration,
    save_client_certificate,
    save_environment,
    save_sender,
)

# Key passphrase management
from .credentials import (
    clear_key_password,
    get_credential_storage_info,
    get_key_password,
    resolve_key_password,
    save_key_password,
)

# Service environments
from .environments import (
    BUILTIN_ENVIRONMENTS,
    DIFI_TEST,
    PRODUCTION,
    ServiceEnvironment,
    get_environment,
    make_custom_environment,
)

__all__ = [
    "BUILTIN_ENVIRONMENTS",
    "DIFI_TEST",
    "PRODUCTION",
    "ClientConfiguration",
    "ServiceEnvironment",
    "clear_key_password",
    "get_active_environment",
    "get_credential_storage_info",
    "get_environment",
    "get_key_password",
    "make_custom_environment",
    "resolve_configuration",
    "resolve_key_password",
    "save_client_certificate",
    "save_environment",
    "save_key_password",
    "save_sender",
]
