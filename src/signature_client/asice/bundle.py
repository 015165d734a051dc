"""
Document bundle (ASiC-E container) creation.

A bundle holds exactly three entries, in this order: the document under
its own file name, ``manifest.xml``, and ``META-INF/signatures.xml``. The
last entry is a placeholder. The service computes the actual signature.

After the archive bytes exist, registered processors are handed the
bytes, one at a time, before anything is sent.
"""

from __future__ import annotations

__all__ = [
    "DocumentBundle",
    "DocumentBundleProcessor",
    "DumpDocumentBundleToDisk",
    "SubmissionBuilder",
    "dump_file_name",
]

import io
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Protocol

from .._xml import XML_DECLARATION
from ..constants import MANIFEST_ENTRY_NAME, SIGNATURES_ENTRY_NAME, TIMESTAMP_PATTERN
from ..errors import ArchiveIOError, DocumentBundleProcessingError, SignatureClientError
from .archive import build_archive
from .manifest import create_manifest, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from datetime import datetime

    from ..core.models import SignatureJob, Sender

_logger = logging.getLogger(__name__)

SIGNATURES_PLACEHOLDER = (
    f"{XML_DECLARATION}\n"
    '<asic:XAdESSignatures xmlns:asic="http://uri.etsi.org/02918/v1.2.1#" '
    'xmlns:ds="http://www.w3.org/2000/09/xmldsig#"/>\n'
)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass(frozen=True)
class DocumentBundle:
    """The finished container for one submission."""

    data: bytes = field(repr=False)

    def __len__(self) -> int:
        return len(self.data)

    def open(self) -> io.BytesIO:
        """Return a fresh, independent readable view of the bytes."""
        return io.BytesIO(self.data)


class DocumentBundleProcessor(Protocol):
    """Receives every bundle before it is sent.

    The stream is owned by the caller and closed after the call returns.
    Processors must not keep a reference to it.
    """

    def process(self, job: SignatureJob, bundle_stream: BinaryIO) -> None: ...


class SubmissionBuilder:
    """Creates document bundles and runs the registered processors.

    Args:
        processors: Invoked in this order for every bundle.
        clock: Used for defaults that depend on the current time.
    """

    def __init__(
        self,
        processors: Iterable[DocumentBundleProcessor] = (),
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.processors = tuple(processors)
        self.clock = clock

    def create_submission(self, job: SignatureJob, sender: Sender) -> DocumentBundle:
        """
        Create the document bundle for a job.

        Raises:
            ValidationError: If the manifest cannot be built. No archive is
                attempted.
            ArchiveIOError: If the archive cannot be written.
            DocumentBundleProcessingError: If a processor fails.
        """
        manifest = create_manifest(job, sender, clock=self.clock)
        data = build_archive(
            [
                (job.document.file_name, job.document.content),
                (MANIFEST_ENTRY_NAME, manifest.encode("utf-8")),
                (SIGNATURES_ENTRY_NAME, SIGNATURES_PLACEHOLDER.encode("utf-8")),
            ]
        )
        bundle = DocumentBundle(data)
        self._run_processors(job, bundle)
        return bundle

    def _run_processors(self, job: SignatureJob, bundle: DocumentBundle) -> None:
        for processor in self.processors:
            name = type(processor).__name__
            _logger.debug("Running document bundle processor %s", name)
            with bundle.open() as stream:
                try:
                    processor.process(job, stream)
                except SignatureClientError:
                    raise
                except Exception as e:
                    raise DocumentBundleProcessingError(
                        f"Document bundle processor {name} failed: {e}"
                    ) from e


# ── Disk dump ────────────────────────────────────────────────────────


def _timestamp(moment: datetime) -> str:
    return f"{moment.strftime(TIMESTAMP_PATTERN)}{moment.microsecond // 1000:03d}"


def _reference_part(reference: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", reference)


def dump_file_name(moment: datetime, reference: str | None) -> str:
    """File name for a dumped bundle: ``<timestamp>[-<reference>]-asice.zip``."""
    parts = [_timestamp(moment)]
    if reference:
        parts.append(_reference_part(reference))
    parts.append("asice.zip")
    return "-".join(parts)


class DumpDocumentBundleToDisk:
    """Write every bundle verbatim to a directory, for auditing or debugging.

    The directory must already exist.
    """

    def __init__(self, directory: Path | str, clock: Callable[[], datetime] = utc_now) -> None:
        self.directory = Path(directory)
        self.clock = clock

    def process(self, job: SignatureJob, bundle_stream: BinaryIO) -> None:
        target = self.directory / dump_file_name(self.clock(), job.reference)
        _logger.info("Writing document bundle to %s", target)
        try:
            with target.open("xb") as out:
                for chunk in _iter_chunks(bundle_stream):
                    out.write(chunk)
        except OSError as e:
            raise ArchiveIOError(f"Unable to write document bundle to {target}: {e}") from e


def _iter_chunks(stream: BinaryIO, size: int = 64 * 1024) -> Iterator[bytes]:
    while True:
        chunk = stream.read(size)
        if not chunk:
            break
        yield chunk
