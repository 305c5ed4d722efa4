"""Data models for the static site renderer."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from static_site_builder.renderer.errors import BuildErrorRecord


# Keys of the renderer argument that user locals cannot override
RESERVED_LOCALS = frozenset({"path", "assets", "build_stats"})

# Renderer return value after normalization: output key -> HTML
RenderOutput = dict[str, str]


@dataclass(frozen=True)
class RenderRequest:
    """A single path to render.

    Attributes:
        path: Logical output path ("/", "/about", "docs/page.html", ...).
        depth: 0 for configured paths, parent depth + 1 for crawled ones.
        parent: Path of the page that linked here, if discovered by crawl.
    """

    path: str
    depth: int = 0
    parent: str | None = None

    def child(self, path: str) -> "RenderRequest":
        """Create a request for a path discovered on this page."""
        return RenderRequest(path=path, depth=self.depth + 1, parent=self.path)


@dataclass(frozen=True)
class RenderContext:
    """Read-only data passed to the renderer for one path.

    Attributes:
        path: The path being rendered.
        assets: Chunk name to output filename mapping, shared per build.
        build_stats: Opaque host build statistics, shared per build.
        locals: User-supplied values merged into the renderer argument.
    """

    path: str
    assets: Mapping[str, str] = field(default_factory=dict)
    build_stats: Any = None
    locals: Mapping[str, Any] = field(default_factory=dict)

    def as_locals(self) -> dict[str, Any]:
        """Build the single argument the renderer is called with.

        User locals with falsy values are skipped, and reserved keys
        always come from the context itself.

        Returns:
            Dictionary with path, assets, build_stats and user locals.
        """
        merged: dict[str, Any] = {
            key: value
            for key, value in self.locals.items()
            if value and key not in RESERVED_LOCALS
        }
        merged["path"] = self.path
        merged["assets"] = MappingProxyType(dict(self.assets))
        merged["build_stats"] = self.build_stats
        return merged


def normalize_output(path: str, output: object) -> RenderOutput:
    """Normalize a renderer return value to an output map.

    Args:
        path: Path the output was rendered for.
        output: Raw renderer return value.

    Returns:
        The mapping with string keys and values, or {path: str(output)}
        for anything else.
    """
    if isinstance(output, Mapping):
        return {str(key): str(value) for key, value in output.items()}
    return {path: str(output)}


@dataclass(frozen=True)
class GeneratedArtifact:
    """Information about an artifact written to the store.

    Attributes:
        name: Artifact name (e.g. "about/index.html").
        source_path: Request path that produced it.
        output_key: Key of the renderer output map entry.
        bytes_written: UTF-8 size of the content.
        sha256: SHA-256 checksum of the content.
    """

    name: str
    source_path: str
    output_key: str
    bytes_written: int
    sha256: str


@dataclass
class BuildResult:
    """Result of rendering a set of paths.

    Attributes:
        run_id: Build identifier.
        artifacts: Artifacts written, in completion order.
        skipped: Artifact names that already existed when claimed.
        errors: Errors collected during the build.
        pages_rendered: Number of renderer invocations that returned.
        duration_ms: Total duration in milliseconds.
    """

    run_id: str
    artifacts: list[GeneratedArtifact] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[BuildErrorRecord] = field(default_factory=list)
    pages_rendered: int = 0
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        """Check if the build finished without errors."""
        return not self.errors

    @property
    def artifact_names(self) -> list[str]:
        """Get the names of all written artifacts."""
        return [artifact.name for artifact in self.artifacts]

    @property
    def total_bytes(self) -> int:
        """Get total bytes written."""
        return sum(artifact.bytes_written for artifact in self.artifacts)
