"""Artifact stores that receive rendered pages."""

from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from static_site_builder.store.io import AtomicWriter


logger = structlog.get_logger()


@runtime_checkable
class ArtifactStore(Protocol):
    """Protocol for the build's output set.

    The renderer only checks existence and adds entries; it never
    deletes or enumerates artifacts.
    """

    def has(self, name: str) -> bool:
        """Check whether an artifact with this name exists.

        Args:
            name: Artifact name (e.g. "about/index.html").

        Returns:
            True if the artifact exists.
        """
        ...

    def set(self, name: str, content: str) -> None:
        """Add an artifact.

        Args:
            name: Artifact name.
            content: Raw HTML.
        """
        ...


class MemoryArtifactStore:
    """Dict-backed artifact store.

    Refuses to overwrite an existing entry.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize the store.

        Args:
            initial: Optional pre-existing artifacts.
        """
        self._artifacts: dict[str, str] = dict(initial or {})

    def has(self, name: str) -> bool:
        """Check whether an artifact with this name exists."""
        return name in self._artifacts

    def set(self, name: str, content: str) -> None:
        """Add an artifact.

        Raises:
            FileExistsError: If the name is already taken.
        """
        if name in self._artifacts:
            msg = f"Artifact already exists: {name}"
            raise FileExistsError(msg)
        self._artifacts[name] = content

    def get(self, name: str) -> str | None:
        """Get an artifact's content, or None if absent."""
        return self._artifacts.get(name)

    def names(self) -> list[str]:
        """Get artifact names in insertion order."""
        return list(self._artifacts)

    def as_dict(self) -> dict[str, str]:
        """Get a copy of all artifacts."""
        return dict(self._artifacts)

    def __len__(self) -> int:
        return len(self._artifacts)


class DirectoryArtifactStore:
    """Artifact store that writes pages under an output directory.

    Files that already exist on disk count as existing artifacts, so
    pages emitted by other build steps are never overwritten.
    """

    def __init__(self, output_dir: Path, run_id: str | None = None) -> None:
        """Initialize the store.

        Args:
            output_dir: Directory to write artifacts to.
            run_id: Optional run ID for logging context.
        """
        self._output_dir = Path(output_dir).resolve()
        self._writer = AtomicWriter(self._output_dir, run_id)
        self._written: set[str] = set()
        self._log = logger.bind(component="artifact_store")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    @property
    def output_dir(self) -> Path:
        """Get the output directory."""
        return self._output_dir

    def _target(self, name: str) -> Path:
        """Map an artifact name to a file path inside the output directory.

        Raises:
            ValueError: If the name escapes the output directory.
        """
        target = (self._output_dir / name).resolve()
        if not target.is_relative_to(self._output_dir):
            msg = f"Artifact name escapes output directory: {name}"
            raise ValueError(msg)
        return target

    def has(self, name: str) -> bool:
        """Check whether the artifact was written or exists on disk."""
        if name in self._written:
            return True
        try:
            return self._target(name).exists()
        except ValueError:
            return False

    def set(self, name: str, content: str) -> None:
        """Write an artifact to disk.

        Raises:
            FileExistsError: If the file already exists.
            ValueError: If the name escapes the output directory.
        """
        target = self._target(name)
        if name in self._written or target.exists():
            msg = f"Artifact already exists: {name}"
            raise FileExistsError(msg)

        self._writer.write(target, content)
        self._written.add(name)

    def names(self) -> list[str]:
        """Get names written by this store, sorted."""
        return sorted(self._written)
