"""Path normalization utilities for artifact naming and crawl links."""

import posixpath
import re
from enum import Enum
from urllib.parse import urljoin, urlsplit


# Exactly one leading separator is stripped (webpack-dev-server style paths)
LEADING_SEPARATOR_PATTERN = re.compile(r"^(/|\\)")

# Output paths that already name an HTML file
HTML_FILENAME_PATTERN = re.compile(r"\.html?$", re.IGNORECASE)

INDEX_FILENAME = "index.html"


class HrefKind(str, Enum):
    """Classification of an href found in rendered HTML.

    - PROTOCOL_RELATIVE: Starts with // (cross-origin)
    - INVALID: Not parseable as a URL (e.g. an unclosed IPv6 host)
    - EXTERNAL: Has a scheme (mailto:, https:, javascript:, ...)
    - PATHLESS: Fragment or query only, or empty
    - SITE_ABSOLUTE: Path starting with /
    - RELATIVE: Path resolved against the page it was found on
    """

    PROTOCOL_RELATIVE = "PROTOCOL_RELATIVE"
    INVALID = "INVALID"
    EXTERNAL = "EXTERNAL"
    PATHLESS = "PATHLESS"
    SITE_ABSOLUTE = "SITE_ABSOLUTE"
    RELATIVE = "RELATIVE"

    @property
    def crawlable(self) -> bool:
        """Whether hrefs of this kind become new render paths."""
        return self in (HrefKind.SITE_ABSOLUTE, HrefKind.RELATIVE)


def path_to_artifact_name(output_path: str) -> str:
    """Convert an output path into the artifact name it is stored under.

    Examples:
        "/" -> "index.html"
        "/about" -> "about/index.html"
        "/about.html" -> "about.html"
        "docs/" -> "docs/index.html"
        "/a/../b.html" -> "b.html"

    Args:
        output_path: Logical output path, with or without a leading slash.

    Returns:
        Artifact name ending in .htm/.html, without a leading separator.
    """
    name = LEADING_SEPARATOR_PATTERN.sub("", output_path, count=1)

    if not HTML_FILENAME_PATTERN.search(name):
        name = posixpath.join(name, INDEX_FILENAME)

    return posixpath.normpath(name)


def classify_href(href: str) -> HrefKind:
    """Classify a raw href string.

    Checks run in order: protocol-relative, unparseable, scheme-qualified,
    path-less.

    Args:
        href: Raw href or src attribute value.

    Returns:
        The HrefKind of the value.
    """
    href = href.strip()

    if href.startswith("//"):
        return HrefKind.PROTOCOL_RELATIVE

    try:
        parts = urlsplit(href)
    except ValueError:
        return HrefKind.INVALID

    if parts.scheme:
        return HrefKind.EXTERNAL

    if not parts.path:
        return HrefKind.PATHLESS

    if parts.path.startswith("/"):
        return HrefKind.SITE_ABSOLUTE

    return HrefKind.RELATIVE


def resolve_href(href: str, base_path: str) -> str | None:
    """Resolve an href into a crawlable path.

    Site-absolute paths are returned verbatim, relative paths are resolved
    against base_path. Query and fragment are always dropped.

    Args:
        href: Raw href or src attribute value.
        base_path: Path of the page the href was found on.

    Returns:
        The resolved path, or None if the href is not crawlable.
    """
    kind = classify_href(href)
    if not kind.crawlable:
        return None

    path = urlsplit(href.strip()).path

    if kind is HrefKind.SITE_ABSOLUTE:
        return path

    return urljoin(base_path, path)
