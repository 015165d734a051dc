"""
On-disk settings of the signature client.

``~/.signature-client/config.json`` holds the chosen service environment,
the default sender and polling queue, the TLS material paths, and the
request timeout. The client key passphrase is never written here; see
:mod:`signature_client.config.credentials`.
"""

from __future__ import annotations

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "StoredSettings",
    "load_config",
    "load_raw_config",
    "save_config",
]

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import TypedDict, cast

from ..constants import MAX_TIMEOUT, MIN_TIMEOUT

_logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".signature-client"
CONFIG_FILE = CONFIG_DIR / "config.json"


class StoredSettings(TypedDict, total=False):
    """Settings read back from the file, each one checked and typed."""

    environment: str
    url: str
    sender: str
    polling_queue: str
    timeout: int
    client_cert: str
    client_key: str
    trust_store: str


_TEXT_SETTINGS = (
    "environment",
    "url",
    "sender",
    "polling_queue",
    "client_cert",
    "client_key",
    "trust_store",
)


def load_raw_config() -> dict[str, object]:
    """Every key in the settings file, including ones this release does not know.

    Settings are saved by updating this dict, so keys written by a newer
    release survive. A missing, unreadable, or corrupt file reads as empty.
    """
    try:
        text = CONFIG_FILE.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        _logger.warning("Cannot read settings file %s: %s", CONFIG_FILE, e)
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        _logger.warning("Ignoring corrupt settings file %s: %s", CONFIG_FILE, e)
        return {}
    if not isinstance(data, dict):
        _logger.warning("Ignoring settings file %s: not a JSON object", CONFIG_FILE)
        return {}
    return cast("dict[str, object]", data)


def _timeout_setting(value: object) -> int | None:
    if not isinstance(value, int) or isinstance(value, bool):
        return None
    if not MIN_TIMEOUT <= value <= MAX_TIMEOUT:
        _logger.warning(
            "Ignoring saved timeout of %d s, allowed range is %d-%d s",
            value,
            MIN_TIMEOUT,
            MAX_TIMEOUT,
        )
        return None
    return value


def load_config() -> StoredSettings:
    """The known settings. Blank or mistyped values are left out."""
    raw = load_raw_config()
    settings: StoredSettings = {}
    for key in _TEXT_SETTINGS:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            settings[key] = value.strip()  # type: ignore[literal-required]
    timeout = _timeout_setting(raw.get("timeout"))
    if timeout is not None:
        settings["timeout"] = timeout
    return settings


def _ensure_private_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True, mode=0o700)
    if os.name == "nt":
        return
    # mkdir's mode is not applied to a directory that already exists
    try:
        path.chmod(0o700)
    except OSError:
        _logger.warning("Cannot restrict permissions of %s", path)


def save_config(config: dict[str, object]) -> None:
    """Replace the settings file with ``config``.

    The JSON is staged in a temp file next to the target, which
    :func:`tempfile.mkstemp` creates readable by the owner only, synced,
    and renamed over the old file. Readers see the old settings or the
    new ones, never a partial write.
    """
    _ensure_private_dir(CONFIG_DIR)
    payload = (json.dumps(config, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
    fd, staged_name = tempfile.mkstemp(prefix="config-", suffix=".tmp", dir=CONFIG_DIR)
    staged = Path(staged_name)
    try:
        with os.fdopen(fd, "wb") as staged_file:
            staged_file.write(payload)
            staged_file.flush()
            os.fsync(staged_file.fileno())
        staged.replace(CONFIG_FILE)
    except BaseException:
        staged.unlink(missing_ok=True)
        raise
    _logger.debug("Saved settings to %s", CONFIG_FILE)
