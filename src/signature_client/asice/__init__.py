"""Document bundle (ASiC-E) creation: archive, manifest, and processors."""

from __future__ import annotations

from .archive import build_archive
from .bundle import (
    DocumentBundle,
    DocumentBundleProcessor,
    DumpDocumentBundleToDisk,
    SubmissionBuilder,
    dump_file_name,
)
from .manifest import create_manifest

__all__ = [
    "DocumentBundle",
    "DocumentBundleProcessor",
    "DumpDocumentBundleToDisk",
    "SubmissionBuilder",
    "build_archive",
    "create_manifest",
    "dump_file_name",
]
