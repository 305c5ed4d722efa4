"""Tests for environment settings."""

import logging

import pytest

from static_site_builder.config.settings import BuilderSettings, get_settings


class TestBuilderSettings:
    """Tests for BuilderSettings."""

    @pytest.mark.unit
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults apply without environment variables."""
        for name in ("SSB_LOG_LEVEL", "SSB_JSON_LOGS", "SSB_MAX_CONCURRENCY"):
            monkeypatch.delenv(name, raising=False)
        settings = BuilderSettings(_env_file=None)  # type: ignore[call-arg]
        assert settings.log_level == "INFO"
        assert settings.json_logs is True
        assert settings.max_concurrency == 8

    @pytest.mark.unit
    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """SSB_* variables override defaults."""
        monkeypatch.setenv("SSB_LOG_LEVEL", "debug")
        monkeypatch.setenv("SSB_JSON_LOGS", "false")
        monkeypatch.setenv("SSB_MAX_CONCURRENCY", "2")
        settings = get_settings()
        assert settings.log_level_number == logging.DEBUG
        assert settings.json_logs is False
        assert settings.max_concurrency == 2

    @pytest.mark.unit
    def test_unknown_level(self) -> None:
        """Unknown level names fall back to INFO."""
        settings = BuilderSettings(log_level="chatty")
        assert settings.log_level_number == logging.INFO
