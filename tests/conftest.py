"""Shared fixtures for static site builder tests."""

from collections.abc import Iterator

import pytest

from static_site_builder.renderer.metrics import BuildMetrics


@pytest.fixture(autouse=True)
def reset_metrics() -> Iterator[None]:
    """Give every test a fresh metrics singleton."""
    BuildMetrics.reset()
    yield
    BuildMetrics.reset()
