"""Disk writes for the directory artifact store.

Pages are written next to their target under a temporary name and renamed
into place, so a page on disk is either absent or complete.
"""

import hashlib
from dataclasses import dataclass
from pathlib import Path

import structlog


logger = structlog.get_logger()

TEMP_SUFFIX = ".tmp"


@dataclass(frozen=True)
class WrittenFile:
    """A page that landed on disk.

    Attributes:
        path: POSIX path relative to the writer's root.
        absolute_path: Full path of the file.
        bytes_written: UTF-8 size of the content.
        sha256: Hex SHA-256 of the content.
    """

    path: str
    absolute_path: str
    bytes_written: int
    sha256: str


def content_digest(content: str) -> tuple[int, str]:
    """Get the UTF-8 size and SHA-256 checksum of content.

    Args:
        content: Text content.

    Returns:
        Tuple of (byte count, hex digest).
    """
    content_bytes = content.encode("utf-8")
    return len(content_bytes), hashlib.sha256(content_bytes).hexdigest()


class AtomicWriter:
    """Writes UTF-8 text files through a temp-file-then-rename step."""

    def __init__(self, root: Path, run_id: str | None = None) -> None:
        """Initialize the writer.

        Args:
            root: Directory reported paths are made relative to.
            run_id: Build identifier for logging.
        """
        self._root = root
        self._log = logger.bind(component="atomic_writer", run_id=run_id)

    def _relative(self, path: Path) -> str:
        """Get path relative to the root, or the full path outside it."""
        if path.is_relative_to(self._root):
            return path.relative_to(self._root).as_posix()
        return str(path)

    def write(self, path: Path, content: str) -> WrittenFile:
        """Write content to path, creating missing parent directories.

        Args:
            path: Absolute target path.
            content: Text to write as UTF-8.

        Returns:
            WrittenFile describing the result.
        """
        bytes_written, sha256 = content_digest(content)

        path.parent.mkdir(parents=True, exist_ok=True)
        staging = path.with_name(path.name + TEMP_SUFFIX)
        staging.write_text(content, encoding="utf-8")
        staging.replace(path)

        written = WrittenFile(
            path=self._relative(path),
            absolute_path=str(path),
            bytes_written=bytes_written,
            sha256=sha256,
        )
        self._log.debug(
            "file_written",
            path=written.path,
            bytes=bytes_written,
            sha256=sha256[:12],
        )
        return written
