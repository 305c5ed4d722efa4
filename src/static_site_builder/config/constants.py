"""Constants for the configuration module."""

# Paths rendered when none are configured
DEFAULT_PATHS = ("/",)

# Render worker pool bounds
DEFAULT_MAX_CONCURRENCY = 8
MAX_CONCURRENCY_LIMIT = 256

# Environment variable prefix for settings
ENV_PREFIX = "SSB_"

# Log component names
COMPONENT_CONFIG = "config"
COMPONENT_CLI = "cli"
COMPONENT_BUILDER = "builder"
