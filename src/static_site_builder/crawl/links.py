"""Link extraction from rendered HTML for crawling."""

from dataclasses import dataclass, field

import structlog
from bs4 import BeautifulSoup

from static_site_builder.crawl.paths import classify_href, resolve_href


logger = structlog.get_logger()

# HTML parser used by BeautifulSoup
HTML_PARSER = "lxml"

# Elements whose src attribute points at another page
FRAME_TAGS = ["frame", "iframe"]


@dataclass(frozen=True)
class ExtractedLinks:
    """Raw, unresolved link values found in an HTML document.

    Attributes:
        anchors: href values of <a> elements, in document order.
        frames: src values of <frame>/<iframe> elements, in document order.
    """

    anchors: list[str] = field(default_factory=list)
    frames: list[str] = field(default_factory=list)

    def all(self) -> list[str]:
        """Get anchors followed by frames."""
        return [*self.anchors, *self.frames]


class LinkExtractor:
    """Extracts candidate hrefs from HTML using BeautifulSoup."""

    def __init__(self, parser: str = HTML_PARSER) -> None:
        """Initialize the extractor.

        Args:
            parser: BeautifulSoup tree builder name.
        """
        self._parser = parser

    def extract(self, html: str) -> ExtractedLinks:
        """Extract anchor hrefs and frame srcs.

        Args:
            html: Rendered HTML source.

        Returns:
            ExtractedLinks with raw attribute values.
        """
        soup = BeautifulSoup(html, self._parser)

        anchors = [str(a["href"]) for a in soup.find_all("a", href=True)]
        frames = [str(f["src"]) for f in soup.find_all(FRAME_TAGS, src=True)]

        return ExtractedLinks(anchors=anchors, frames=frames)


def relative_paths_from_html(
    source: str,
    base_path: str,
    extractor: LinkExtractor | None = None,
) -> list[str]:
    """Get the crawlable paths linked from an HTML document.

    Order is preserved and duplicates are kept; de-duplication happens
    against the artifact store.

    Args:
        source: Rendered HTML source.
        base_path: Path the HTML was rendered for, used for relative links.
        extractor: Optional extractor (a default one is created if omitted).

    Returns:
        Resolved paths in anchor-then-frame document order.
    """
    links = (extractor or LinkExtractor()).extract(source)

    paths: list[str] = []
    rejected: dict[str, int] = {}

    for href in links.all():
        resolved = resolve_href(href, base_path)
        if resolved is None:
            kind = classify_href(href).value
            rejected[kind] = rejected.get(kind, 0) + 1
            continue
        paths.append(resolved)

    logger.debug(
        "links_extracted",
        component="crawl",
        base_path=base_path,
        anchors=len(links.anchors),
        frames=len(links.frames),
        accepted=len(paths),
        rejected=rejected,
    )

    return paths
