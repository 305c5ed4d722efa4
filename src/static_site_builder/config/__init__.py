"""Build configuration loading and validation."""

from static_site_builder.config.error_hints import format_validation_error
from static_site_builder.config.loader import (
    ConfigLoader,
    ConfigValidationError,
    flatten_validation_errors,
    resolve_relative_paths,
)
from static_site_builder.config.schemas import BuildConfig
from static_site_builder.config.settings import BuilderSettings, get_settings
from static_site_builder.config.state_machine import ConfigState


__all__ = [
    "BuildConfig",
    "BuilderSettings",
    "ConfigLoader",
    "ConfigState",
    "ConfigValidationError",
    "flatten_validation_errors",
    "format_validation_error",
    "get_settings",
    "resolve_relative_paths",
]
