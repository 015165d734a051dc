"""
Client key passphrase management.

The passphrase protecting the enterprise certificate's private key is
kept in the system keychain (keyring), keyed by the key file path. The
``SIGNATURE_KEY_PASSWORD`` environment variable overrides it, which is
the usual setup on servers without a keychain.
"""

from __future__ import annotations

__all__ = [
    "clear_key_password",
    "get_credential_storage_info",
    "get_key_password",
    "resolve_key_password",
    "save_key_password",
]

import logging
import os

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ..constants import ENV_KEY_PASSWORD

# Keyring service name for passphrase storage
_KEYRING_SERVICE = "signature-client"

_logger = logging.getLogger(__name__)


def _key_id(client_key: str) -> str:
    return os.path.abspath(os.path.expanduser(client_key))


def get_credential_storage_info() -> str:
    """Return human-readable description of where passphrases are stored."""
    backend = keyring.get_keyring()
    module = type(backend).__module__ or ""
    if "macOS" in module:
        return "macOS Keychain"
    if "Windows" in module or "WinVault" in module:
        return "Windows Credential Manager"
    if "SecretService" in module:
        return "Linux Secret Service"
    if "KWallet" in module:
        return "KDE Wallet"
    return f"System keychain ({type(backend).__name__})"


def get_key_password(client_key: str) -> str | None:
    """
    Read the saved passphrase for a client key from the keychain.

    Returns:
        The passphrase, or None if none is saved or the keychain is
        not accessible.
    """
    try:
        password = keyring.get_password(_KEYRING_SERVICE, _key_id(client_key))
    except KeyringError as e:
        # Expected keyring failure (locked, access denied, no backend)
        _logger.debug("Keyring read failed: %s", e)
        return None
    except (OSError, RuntimeError) as e:
        # OS-level failures from certain keyring backends
        _logger.debug("Keyring backend error: %s", e)
        return None
    return password or None


def resolve_key_password(client_key: str | None) -> str | None:
    """Resolve the client key passphrase.

    Priority: env var > keychain.
    """
    env_password = os.environ.get(ENV_KEY_PASSWORD, "")
    if env_password:
        _logger.debug("resolve_key_password: source=env")
        return env_password
    if client_key is None:
        return None
    password = get_key_password(client_key)
    _logger.debug("resolve_key_password: source=%s", "keyring" if password else "none")
    return password


def save_key_password(client_key: str, password: str) -> bool:
    """
    Save the passphrase for a client key in the keychain.

    Returns:
        True if stored, False if the keychain refused it. The passphrase
        is never written to the config file.
    """
    try:
        keyring.set_password(_KEYRING_SERVICE, _key_id(client_key), password)
    except KeyringError as e:
        _logger.warning("Keyring save failed: %s", e)
        return False
    except (OSError, RuntimeError) as e:
        _logger.warning("Keyring backend error: %s", e)
        return False
    _logger.info("Saved client key passphrase to %s", get_credential_storage_info())
    return True


def clear_key_password(client_key: str) -> None:
    """Remove the saved passphrase for a client key (best-effort)."""
    try:
        keyring.delete_password(_KEYRING_SERVICE, _key_id(client_key))
        _logger.debug("Deleted keyring entry")
    except PasswordDeleteError:
        pass  # nothing saved
    except (KeyringError, OSError, RuntimeError) as e:
        _logger.debug("Keyring delete failed: %s", e)
