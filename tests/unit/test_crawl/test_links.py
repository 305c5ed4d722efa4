"""Tests for link extraction from rendered HTML."""

import pytest

from static_site_builder.crawl.links import (
    ExtractedLinks,
    LinkExtractor,
    relative_paths_from_html,
)


SAMPLE_HTML = """
<!DOCTYPE html>
<html>
<head><title>Home</title></head>
<body>
  <nav>
    <a href="/about">About</a>
    <a href="contact">Contact</a>
    <a href="https://example.com/">External</a>
    <a href="//cdn.example.com/x">CDN</a>
    <a href="mailto:team@example.com">Mail</a>
    <a href="#main">Skip</a>
    <a name="anchor-only">No href</a>
  </nav>
  <iframe src="/embed/widget"></iframe>
  <iframe>No src</iframe>
</body>
</html>
"""


class TestLinkExtractor:
    """Tests for LinkExtractor."""

    @pytest.mark.unit
    def test_extracts_anchors_in_document_order(self) -> None:
        """All anchor hrefs are returned in order."""
        links = LinkExtractor().extract(SAMPLE_HTML)
        assert links.anchors == [
            "/about",
            "contact",
            "https://example.com/",
            "//cdn.example.com/x",
            "mailto:team@example.com",
            "#main",
        ]

    @pytest.mark.unit
    def test_extracts_frame_sources(self) -> None:
        """Frames with a src attribute are returned."""
        links = LinkExtractor().extract(SAMPLE_HTML)
        assert links.frames == ["/embed/widget"]

    @pytest.mark.unit
    def test_frameset_frames(self) -> None:
        """Classic <frame> elements are extracted too."""
        html = (
            "<html><frameset><frame src='/left'><frame src='right'>"
            "</frameset></html>"
        )
        links = LinkExtractor().extract(html)
        assert links.frames == ["/left", "right"]

    @pytest.mark.unit
    def test_empty_document(self) -> None:
        """A document without links yields nothing."""
        links = LinkExtractor().extract("<p>No links here</p>")
        assert links == ExtractedLinks()

    @pytest.mark.unit
    def test_all_puts_anchors_first(self) -> None:
        """all() lists anchors before frames."""
        links = ExtractedLinks(anchors=["/a"], frames=["/f"])
        assert links.all() == ["/a", "/f"]

    @pytest.mark.unit
    def test_malformed_html(self) -> None:
        """Unclosed tags do not stop extraction."""
        links = LinkExtractor().extract("<div><a href='/one'>one<a href='/two'>two")
        assert links.anchors == ["/one", "/two"]


class TestRelativePathsFromHtml:
    """Tests for relative_paths_from_html."""

    @pytest.mark.unit
    def test_keeps_only_same_site_paths(self) -> None:
        """External, protocol-relative and path-less hrefs are dropped."""
        paths = relative_paths_from_html(SAMPLE_HTML, "/")
        assert paths == ["/about", "/contact", "/embed/widget"]

    @pytest.mark.unit
    def test_relative_to_nested_page(self) -> None:
        """Relative hrefs resolve against the rendering page."""
        html = '<a href="next">Next</a><a href="../index">Up</a>'
        paths = relative_paths_from_html(html, "/docs/guide/intro")
        assert paths == ["/docs/guide/next", "/docs/index"]

    @pytest.mark.unit
    def test_duplicates_are_kept(self) -> None:
        """De-duplication is left to the store."""
        html = '<a href="/a">1</a><a href="/a">2</a>'
        assert relative_paths_from_html(html, "/") == ["/a", "/a"]

    @pytest.mark.unit
    def test_query_and_fragment_dropped(self) -> None:
        """Query and fragment never become part of a path."""
        html = '<a href="/search?q=x">s</a><a href="/faq#q1">f</a>'
        assert relative_paths_from_html(html, "/") == ["/search", "/faq"]

    @pytest.mark.unit
    def test_custom_extractor(self) -> None:
        """A supplied extractor is used."""
        html = '<a href="/x">x</a>'
        paths = relative_paths_from_html(html, "/", LinkExtractor("html.parser"))
        assert paths == ["/x"]

    @pytest.mark.unit
    def test_unparseable_href_skipped(self) -> None:
        """An href urllib cannot parse is dropped without losing its siblings."""
        html = "<a href='/good'>g</a><a href='http://[oops'>x</a><a href='next'>n</a>"
        assert relative_paths_from_html(html, "/") == ["/good", "/next"]
