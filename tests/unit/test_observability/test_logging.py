"""Tests for structured logging setup."""

import io
import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from static_site_builder.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Start from empty context and restore structlog defaults afterwards."""
    structlog.contextvars.clear_contextvars()
    yield
    clear_run_context()
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.unit
    def test_json_lines(self) -> None:
        """JSON output carries the event, level and bound run ID."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output, json_format=True)
        bind_run_context("run-42")

        get_logger().info("artifact_written", artifact_name="index.html")

        record = json.loads(output.getvalue().strip().splitlines()[-1])
        assert record["event"] == "artifact_written"
        assert record["artifact_name"] == "index.html"
        assert record["level"] == "info"
        assert record["run_id"] == "run-42"
        assert "timestamp" in record

    @pytest.mark.unit
    def test_level_filter(self) -> None:
        """Events below the configured level are dropped."""
        output = io.StringIO()
        configure_logging(level=logging.WARNING, output=output, json_format=True)

        get_logger().info("links_extracted")

        assert output.getvalue() == ""

    @pytest.mark.unit
    def test_console_format(self) -> None:
        """Console output is plain text."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output, json_format=False)

        get_logger().info("build_complete", artifact_count=3)

        text = output.getvalue()
        assert "build_complete" in text
        assert "artifact_count" in text

    @pytest.mark.unit
    def test_extra_run_context(self) -> None:
        """Extra keys are bound and cleared with the run ID."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output, json_format=True)
        bind_run_context("run-7", command="build")

        get_logger().info("build_started")
        clear_run_context("command")
        get_logger().info("build_complete")

        first, second = (json.loads(line) for line in output.getvalue().splitlines())
        assert first["command"] == "build"
        assert first["run_id"] == "run-7"
        assert "command" not in second
        assert "run_id" not in second

    @pytest.mark.unit
    def test_clear_run_context(self) -> None:
        """Cleared context no longer appears in events."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output, json_format=True)
        bind_run_context("run-1")
        clear_run_context()

        get_logger().info("build_started")

        record = json.loads(output.getvalue().strip())
        assert "run_id" not in record
