"""Remediation hints shown next to build configuration errors."""

from typing import Final


# Hints keyed by pydantic error type (plus the loader's own error types)
ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "Add this key; the build cannot run without it.",
    "extra_forbidden": "Not a build option. Check for a typo in the key name.",
    "int_type": "Use a whole number.",
    "int_parsing": "Use a whole number.",
    "string_type": "Use a quoted or plain YAML string.",
    "bool_type": "Use true or false.",
    "bool_parsing": "Use true or false.",
    "list_type": "Use a YAML list.",
    "dict_type": "Use a YAML mapping of keys to values.",
    "greater_than_equal": "Raise the value to at least the allowed minimum.",
    "less_than_equal": "Lower the value to at most the allowed maximum.",
    "string_too_short": "Use a non-empty value.",
    "value_error": "The value was rejected; see the message for details.",
    "file_not_found": "Pass the path of an existing YAML file.",
    "yaml_parse_error": "Fix the YAML syntax (indentation, quotes, brackets).",
}

# Hints keyed by top-level BuildConfig field, preferred over ERROR_HINTS
FIELD_HINTS: Final[dict[str, str]] = {
    "renderer": "Use 'package.module[:function]' or 'path/to/renderer.py[:function]'.",
    "output_dir": "Directory for rendered pages, relative to the config file.",
    "paths": "A path or list of paths to render (e.g. '/' or ['/', '/about']).",
    "crawl": "Set to true to follow links found in rendered pages.",
    "max_concurrency": "Must be between 1 and 256.",
    "max_pages": "Must be 1 or more, or omitted for no limit.",
}

DEFAULT_HINT: Final[str] = "See the BuildConfig field list for accepted values."


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Pick the hint for one validation error.

    Args:
        error_type: Pydantic or loader error type ('missing', 'int_type', ...).
        field_name: Dotted error location; 'paths.0' matches 'paths'.

    Returns:
        The field hint if the location names a known field, else the
        error type hint, else DEFAULT_HINT.
    """
    for part in (field_name or "").split("."):
        if part in FIELD_HINTS:
            return FIELD_HINTS[part]

    return ERROR_HINTS.get(error_type, DEFAULT_HINT)


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Render one validation error as a single line for the CLI."""
    line = f"{location}: {message}"
    if not include_hint:
        return line
    return f"{line} (hint: {get_error_hint(error_type, location)})"
