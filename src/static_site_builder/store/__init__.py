"""Artifact stores for rendered pages."""

from static_site_builder.store.io import AtomicWriter, WrittenFile, content_digest
from static_site_builder.store.store import (
    ArtifactStore,
    DirectoryArtifactStore,
    MemoryArtifactStore,
)


__all__ = [
    "ArtifactStore",
    "AtomicWriter",
    "DirectoryArtifactStore",
    "MemoryArtifactStore",
    "WrittenFile",
    "content_digest",
]
