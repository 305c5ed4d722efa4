"""Integration tests for building a site to disk."""

from pathlib import Path

import pytest

from static_site_builder import StaticSiteBuilder, build_site
from static_site_builder.config.loader import ConfigLoader


SITE_RENDERER = '''
PAGES = {
    "/": """
        <nav>
          <a href="/about">About</a>
          <a href="blog/">Blog</a>
          <a href="https://github.com/example">GitHub</a>
          <a href="#content">Skip</a>
        </nav>
    """,
    "/about": '<a href="/">Home</a><a href="team.html">Team</a>',
    "/blog/": '<a href="first-post">First</a><a href="/about/">About</a>',
    "/blog/first-post": '<a href="../">Back</a>',
    "/team.html": '<p>Team</p>',
}


def render(locals_):
    body = PAGES.get(locals_["path"])
    if body is None:
        raise LookupError(f"no page for {locals_['path']}")
    script = locals_["assets"].get("main", "")
    return (
        f"<html><head><title>{locals_['title']}</title>"
        f"<script src=\\"{script}\\"></script></head>"
        f"<body>{body}</body></html>"
    )
'''


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create a site directory with a renderer module."""
    (tmp_path / "site.py").write_text(SITE_RENDERER, encoding="utf-8")
    return tmp_path


class TestCrawlBuild:
    """End-to-end crawl builds."""

    @pytest.mark.integration
    def test_crawl_writes_every_reachable_page(self, site_dir: Path) -> None:
        """Every page reachable from '/' is written exactly once."""
        out_dir = site_dir / "public"

        result = build_site(
            str(site_dir / "site.py"),
            output_dir=out_dir,
            crawl=True,
            locals={"title": "Example"},
            assets_by_chunk_name={"main": "main.123.js"},
            public_path="/assets/",
        )

        assert result.success, result.errors
        written = sorted(
            p.relative_to(out_dir).as_posix() for p in out_dir.rglob("*.html")
        )
        assert written == [
            "about/index.html",
            "blog/first-post/index.html",
            "blog/index.html",
            "index.html",
            "team.html",
        ]
        assert sorted(result.artifact_names) == written
        assert result.pages_rendered == 5

        home = (out_dir / "index.html").read_text(encoding="utf-8")
        assert "<title>Example</title>" in home
        assert 'src="/assets/main.123.js"' in home

    @pytest.mark.integration
    def test_existing_files_preserved(self, site_dir: Path) -> None:
        """Files from other build steps are never overwritten."""
        out_dir = site_dir / "public"
        (out_dir / "about").mkdir(parents=True)
        (out_dir / "about" / "index.html").write_text("hand-written", encoding="utf-8")

        result = build_site(
            str(site_dir / "site.py"),
            output_dir=out_dir,
            crawl=True,
            locals={"title": "Example"},
        )

        assert result.success
        assert (out_dir / "about" / "index.html").read_text(
            encoding="utf-8"
        ) == "hand-written"
        assert "about/index.html" not in result.artifact_names
        # /team.html is only linked from /about, which was never rendered
        assert not (out_dir / "team.html").exists()

    @pytest.mark.integration
    def test_broken_link_reported(self, site_dir: Path) -> None:
        """A link to an unknown page is a render error for that path only."""
        out_dir = site_dir / "public"

        result = build_site(
            str(site_dir / "site.py"),
            ["/", "/missing"],
            output_dir=out_dir,
            locals={"title": "Example"},
        )

        assert [error.path for error in result.errors] == ["/missing"]
        assert (out_dir / "index.html").exists()
        assert not (out_dir / "missing").exists()


class TestConfigBuild:
    """Builds driven by a YAML configuration file."""

    @pytest.mark.integration
    def test_config_to_disk(self, site_dir: Path) -> None:
        """A loaded config builds into its output directory."""
        config_path = site_dir / "site.yaml"
        config_path.write_text(
            "renderer: site.py:render\n"
            "output_dir: build\n"
            "crawl: true\n"
            "max_pages: 2\n"
            "locals:\n  title: Limited\n",
            encoding="utf-8",
        )

        config = ConfigLoader(run_id="int").load(config_path)
        builder = StaticSiteBuilder.from_config(config, run_id="int")
        result = builder.build()

        assert result.success
        assert result.pages_rendered == 2
        assert (site_dir / "build" / "index.html").exists()
        assert (site_dir / "build" / "about" / "index.html").exists()
