"""Tests for build error types."""

import pytest

from static_site_builder.renderer.errors import (
    ArtifactWriteError,
    BuildError,
    BuildErrorClass,
    BuildErrorRecord,
    InvalidRendererError,
    LinkExtractionError,
    MissingSourceError,
    RenderError,
)


class TestBuildErrors:
    """Tests for BuildError subclasses."""

    @pytest.mark.unit
    def test_invalid_renderer_message(self) -> None:
        """The message names the renderer and the reason."""
        error = InvalidRendererError("site.py", "export is int, expected a callable")
        assert error.error_class == BuildErrorClass.LOADER
        assert error.message == (
            'Export from "site.py" must be a function that returns an HTML '
            "string: export is int, expected a callable"
        )
        assert error.details == {"renderer": "site.py"}

    @pytest.mark.unit
    def test_missing_source_message(self) -> None:
        """The message names the missing source."""
        error = MissingSourceError("missing.py")
        assert error.error_class == BuildErrorClass.LOADER
        assert str(error) == 'Source file not found: "missing.py"'

    @pytest.mark.unit
    def test_render_error_chains_cause(self) -> None:
        """The renderer exception is kept as __cause__."""
        cause = ValueError("bad template")
        error = RenderError("/broken", cause)
        assert error.error_class == BuildErrorClass.RENDER
        assert error.path == "/broken"
        assert error.__cause__ is cause
        assert "ValueError: bad template" in error.message
        assert error.details["exception_type"] == "ValueError"

    @pytest.mark.unit
    def test_write_error(self) -> None:
        """Write errors carry the artifact name."""
        error = ArtifactWriteError("/a", "a/index.html", PermissionError("denied"))
        assert error.error_class == BuildErrorClass.WRITE
        assert error.artifact_name == "a/index.html"
        assert error.details["artifact_name"] == "a/index.html"
        assert isinstance(error.__cause__, PermissionError)

    @pytest.mark.unit
    def test_link_extraction_error(self) -> None:
        """Extraction failures are attributed to the scanned page."""
        cause = RuntimeError("parser crashed")
        error = LinkExtractionError("/docs", cause)
        assert error.error_class == BuildErrorClass.CRAWL
        assert error.path == "/docs"
        assert error.__cause__ is cause
        assert error.message == (
            'Extracting links from "/docs" failed: RuntimeError: parser crashed'
        )

    @pytest.mark.unit
    def test_to_dict(self) -> None:
        """to_dict exposes all structured fields."""
        error = BuildError(BuildErrorClass.RENDER, "boom", path="/", details={"n": 1})
        assert error.to_dict() == {
            "error_class": "RENDER",
            "message": "boom",
            "path": "/",
            "details": {"n": 1},
        }


class TestBuildErrorRecord:
    """Tests for BuildErrorRecord."""

    @pytest.mark.unit
    def test_from_exception(self) -> None:
        """Records copy the exception's fields."""
        record = BuildErrorRecord.from_exception(RenderError("/x", KeyError("k")))
        assert record.error_class == BuildErrorClass.RENDER
        assert record.path == "/x"
        assert record.details["exception_type"] == "KeyError"

    @pytest.mark.unit
    def test_frozen(self) -> None:
        """Records are immutable."""
        record = BuildErrorRecord(error_class=BuildErrorClass.WRITE, message="m")
        with pytest.raises(ValueError):
            record.message = "changed"  # type: ignore[misc]

    @pytest.mark.unit
    def test_message_required(self) -> None:
        """Empty messages are rejected."""
        with pytest.raises(ValueError):
            BuildErrorRecord(error_class=BuildErrorClass.WRITE, message="")
