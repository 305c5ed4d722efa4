"""Static site builder: render pages from a renderer callable and crawl their links."""

from static_site_builder.builder import StaticSiteBuilder, build_site
from static_site_builder.crawl import path_to_artifact_name, resolve_href
from static_site_builder.renderer import BuildResult
from static_site_builder.store import DirectoryArtifactStore, MemoryArtifactStore


__version__ = "0.1.0"

__all__ = [
    "BuildResult",
    "DirectoryArtifactStore",
    "MemoryArtifactStore",
    "StaticSiteBuilder",
    "__version__",
    "build_site",
    "path_to_artifact_name",
    "resolve_href",
]
