"""Tests for renderer data models."""

from types import MappingProxyType

import pytest

from static_site_builder.renderer.errors import BuildErrorClass, BuildErrorRecord
from static_site_builder.renderer.models import (
    BuildResult,
    GeneratedArtifact,
    RenderContext,
    RenderRequest,
    normalize_output,
)


class TestRenderRequest:
    """Tests for RenderRequest."""

    @pytest.mark.unit
    def test_defaults(self) -> None:
        """Configured paths start at depth 0 without a parent."""
        request = RenderRequest(path="/")
        assert request.depth == 0
        assert request.parent is None

    @pytest.mark.unit
    def test_child(self) -> None:
        """Children record their parent and one more level of depth."""
        child = RenderRequest(path="/", depth=2).child("/about")
        assert child == RenderRequest(path="/about", depth=3, parent="/")


class TestRenderContext:
    """Tests for RenderContext.as_locals."""

    @pytest.mark.unit
    def test_reserved_keys_present(self) -> None:
        """path, assets and build_stats are always present."""
        stats = object()
        context = RenderContext(
            path="/about", assets={"main": "main.js"}, build_stats=stats
        )
        locals_ = context.as_locals()
        assert locals_["path"] == "/about"
        assert locals_["assets"] == {"main": "main.js"}
        assert locals_["build_stats"] is stats

    @pytest.mark.unit
    def test_user_locals_merged(self) -> None:
        """User locals become top-level keys."""
        context = RenderContext(path="/", locals={"title": "Home", "n": 3})
        locals_ = context.as_locals()
        assert locals_["title"] == "Home"
        assert locals_["n"] == 3

    @pytest.mark.unit
    def test_user_locals_cannot_override_reserved(self) -> None:
        """Reserved keys come from the context, not user locals."""
        context = RenderContext(
            path="/real",
            assets={"main": "main.js"},
            locals={"path": "/fake", "assets": {}, "build_stats": "x"},
        )
        locals_ = context.as_locals()
        assert locals_["path"] == "/real"
        assert locals_["assets"] == {"main": "main.js"}
        assert locals_["build_stats"] is None

    @pytest.mark.unit
    def test_falsy_user_locals_skipped(self) -> None:
        """User locals with falsy values are not passed."""
        context = RenderContext(
            path="/", locals={"empty": "", "zero": 0, "none": None, "ok": "yes"}
        )
        locals_ = context.as_locals()
        assert "empty" not in locals_
        assert "zero" not in locals_
        assert "none" not in locals_
        assert locals_["ok"] == "yes"

    @pytest.mark.unit
    def test_assets_read_only(self) -> None:
        """The renderer cannot mutate the shared asset map."""
        context = RenderContext(path="/", assets={"main": "main.js"})
        assets = context.as_locals()["assets"]
        assert isinstance(assets, MappingProxyType)
        with pytest.raises(TypeError):
            assets["main"] = "other.js"  # type: ignore[index]

    @pytest.mark.unit
    def test_fresh_dict_per_call(self) -> None:
        """Mutating one call's argument does not leak into the next."""
        context = RenderContext(path="/", locals={"title": "Home"})
        first = context.as_locals()
        first["title"] = "Changed"
        assert context.as_locals()["title"] == "Home"


class TestNormalizeOutput:
    """Tests for normalize_output."""

    @pytest.mark.unit
    def test_string_keyed_by_path(self) -> None:
        """A string becomes a single entry keyed by the path."""
        assert normalize_output("/about", "<p>x</p>") == {"/about": "<p>x</p>"}

    @pytest.mark.unit
    def test_mapping_kept(self) -> None:
        """A mapping is kept with stringified values."""
        output = normalize_output("/", {"/a": "<p>a</p>", "/b": 42})
        assert output == {"/a": "<p>a</p>", "/b": "42"}

    @pytest.mark.unit
    def test_non_string_coerced(self) -> None:
        """Other values are converted with str()."""
        assert normalize_output("/", 7) == {"/": "7"}
        assert normalize_output("/", None) == {"/": "None"}


class TestBuildResult:
    """Tests for BuildResult."""

    @pytest.mark.unit
    def test_empty_result_succeeds(self) -> None:
        """A result without errors is successful."""
        result = BuildResult(run_id="r1")
        assert result.success
        assert result.artifact_names == []
        assert result.total_bytes == 0

    @pytest.mark.unit
    def test_totals(self) -> None:
        """Artifact names and byte totals are summed from artifacts."""
        result = BuildResult(
            run_id="r1",
            artifacts=[
                GeneratedArtifact("index.html", "/", "/", 10, "a" * 64),
                GeneratedArtifact("about/index.html", "/about", "/about", 5, "b" * 64),
            ],
        )
        assert result.artifact_names == ["index.html", "about/index.html"]
        assert result.total_bytes == 15

    @pytest.mark.unit
    def test_errors_fail_result(self) -> None:
        """Any error makes the result unsuccessful."""
        result = BuildResult(
            run_id="r1",
            errors=[
                BuildErrorRecord(error_class=BuildErrorClass.RENDER, message="boom")
            ],
        )
        assert not result.success
