"""Build metrics collection."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock


# Module-level singleton state
_metrics_instance: "BuildMetrics | None" = None
_metrics_lock: Lock = Lock()


@dataclass
class BuildMetrics:
    """Metrics for the static site build.

    Collects pages rendered, artifacts written/skipped, render failures,
    crawl link counts and bytes written. Use get_instance() for singleton
    access.
    """

    pages_rendered: int = 0
    artifacts_written: int = 0
    artifacts_skipped: int = 0
    bytes_written: int = 0
    links_discovered: int = 0
    links_dropped: int = 0
    build_duration_ms: float = 0.0
    failures_by_class: Counter[str] = field(default_factory=Counter)

    @classmethod
    def get_instance(cls) -> "BuildMetrics":
        """Get the singleton instance.

        Returns:
            The shared BuildMetrics instance.
        """
        global _metrics_instance  # noqa: PLW0603
        if _metrics_instance is None:
            with _metrics_lock:
                if _metrics_instance is None:
                    _metrics_instance = cls()
        return _metrics_instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance for testing."""
        global _metrics_instance  # noqa: PLW0603
        with _metrics_lock:
            _metrics_instance = None

    def record_page_rendered(self) -> None:
        """Record a renderer invocation that returned."""
        self.pages_rendered += 1

    def record_artifact_written(self, bytes_written: int) -> None:
        """Record an artifact written to the store.

        Args:
            bytes_written: Size of the artifact in bytes.
        """
        self.artifacts_written += 1
        self.bytes_written += bytes_written

    def record_artifact_skipped(self) -> None:
        """Record an output skipped because its artifact already existed."""
        self.artifacts_skipped += 1

    def record_failure(self, error_class: str) -> None:
        """Record a build failure.

        Args:
            error_class: BuildErrorClass value of the failure.
        """
        self.failures_by_class[error_class] += 1

    def record_links(self, discovered: int, dropped: int = 0) -> None:
        """Record crawl link counts for one page.

        Args:
            discovered: Paths extracted from the page.
            dropped: Paths not queued (already claimed or over the page limit).
        """
        self.links_discovered += discovered
        self.links_dropped += dropped

    def record_build_duration(self, duration_ms: float) -> None:
        """Record total build duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.build_duration_ms = duration_ms

    @property
    def failures_total(self) -> int:
        """Get total failures across classes."""
        return sum(self.failures_by_class.values())

    def get_summary(self) -> dict[str, object]:
        """Get metrics summary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "pages_rendered": self.pages_rendered,
            "artifacts_written": self.artifacts_written,
            "artifacts_skipped": self.artifacts_skipped,
            "bytes_written": self.bytes_written,
            "links_discovered": self.links_discovered,
            "links_dropped": self.links_dropped,
            "failures_total": self.failures_total,
            "failures_by_class": dict(self.failures_by_class),
            "build_duration_ms": self.build_duration_ms,
        }
