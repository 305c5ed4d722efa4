"""Crawl link discovery and path normalization."""

from static_site_builder.crawl.links import (
    ExtractedLinks,
    LinkExtractor,
    relative_paths_from_html,
)
from static_site_builder.crawl.paths import (
    HrefKind,
    classify_href,
    path_to_artifact_name,
    resolve_href,
)


__all__ = [
    "ExtractedLinks",
    "HrefKind",
    "LinkExtractor",
    "classify_href",
    "path_to_artifact_name",
    "relative_paths_from_html",
    "resolve_href",
]
