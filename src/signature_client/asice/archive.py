"""
In-memory zip writer for document bundles.

Output is deterministic: entries are written in the order given, with a
fixed timestamp and each entry's size declared up front, so the same
entries always give the same bytes.
"""

from __future__ import annotations

__all__ = ["build_archive"]

import io
import logging
import zipfile
from typing import TYPE_CHECKING

from ..errors import ArchiveIOError

if TYPE_CHECKING:
    from collections.abc import Sequence

_logger = logging.getLogger(__name__)

# Earliest timestamp representable in a zip entry
_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def _zip_info(name: str, size: int) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=_FIXED_DATE_TIME)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = 0o644 << 16
    info.file_size = size
    return info


def build_archive(entries: Sequence[tuple[str, bytes]]) -> bytes:
    """
    Write entries into a zip archive held in memory.

    Args:
        entries: (name, content) pairs, written in this order.

    Returns:
        The complete archive bytes.

    Raises:
        ArchiveIOError: If an entry cannot be written. No bytes are
            returned in that case.
    """
    seen: set[str] = set()
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, mode="w") as archive:
            for name, content in entries:
                if name in seen:
                    raise ArchiveIOError(f"Duplicate archive entry: {name}")
                seen.add(name)
                with archive.open(_zip_info(name, len(content)), mode="w") as dest:
                    dest.write(content)
    except (OSError, ValueError, zipfile.LargeZipFile) as e:
        raise ArchiveIOError(f"Unable to write archive: {e}") from e

    data = buffer.getvalue()
    _logger.debug("Built archive: %d entries, %d bytes", len(entries), len(data))
    return data
