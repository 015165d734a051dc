"""multipart/mixed encoding for job submissions."""

from __future__ import annotations

__all__ = ["BodyPart", "encode_multipart"]

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

_CRLF = b"\r\n"


@dataclass(frozen=True)
class BodyPart:
    media_type: str
    content: bytes = field(repr=False)


def encode_multipart(
    parts: Sequence[BodyPart], boundary: str | None = None
) -> tuple[bytes, str]:
    """
    Encode parts as a ``multipart/mixed`` body.

    Args:
        parts: Body parts, in order.
        boundary: Boundary string. A random one is generated when omitted.

    Returns:
        (body, content_type) where content_type carries the boundary.
    """
    if boundary is None:
        boundary = f"Boundary_{uuid.uuid4().hex}"
    delimiter = f"--{boundary}".encode("ascii")

    chunks: list[bytes] = []
    for part in parts:
        chunks.append(delimiter)
        chunks.append(_CRLF)
        chunks.append(f"Content-Type: {part.media_type}".encode("ascii"))
        chunks.append(_CRLF)
        chunks.append(_CRLF)
        chunks.append(part.content)
        chunks.append(_CRLF)
    chunks.append(delimiter + b"--")
    chunks.append(_CRLF)
    return b"".join(chunks), f"multipart/mixed; boundary={boundary}"
