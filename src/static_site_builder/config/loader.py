"""Build configuration loader with validation and state machine."""

import hashlib
import time
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from static_site_builder.config.constants import COMPONENT_CONFIG
from static_site_builder.config.schemas import BuildConfig
from static_site_builder.config.state_machine import ConfigState, ConfigStateMachine
from static_site_builder.renderer.loader import is_file_reference, split_reference


logger = structlog.get_logger()


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"{file_path}: {len(errors)} configuration error(s)")


def flatten_validation_errors(error: ValidationError) -> list[dict[str, str]]:
    """Flatten a pydantic ValidationError into loc/msg/type dicts.

    Locations are dotted ("paths.0"), matching error_hints lookups.
    """
    return [
        {
            "loc": ".".join(str(part) for part in detail["loc"]),
            "msg": detail["msg"],
            "type": detail["type"],
        }
        for detail in error.errors()
    ]


class ConfigLoader:
    """Loads and validates a build configuration file.

    Implements a state machine for configuration loading:
    UNLOADED -> READING -> PARSED -> VALIDATED -> READY

    Relative output_dir and renderer file paths resolve against the
    directory containing the configuration file.
    """

    def __init__(self, run_id: str) -> None:
        """Initialize the loader.

        Args:
            run_id: Unique identifier for the current build.
        """
        self._run_id = run_id
        self._state_machine = ConfigStateMachine(run_id)
        self._checksum: str | None = None
        self._validation_errors: list[dict[str, str]] = []
        self._validation_duration_ms: float = 0

    @property
    def state(self) -> ConfigState:
        """Get the current loader state."""
        return self._state_machine.state

    @property
    def checksum(self) -> str | None:
        """Get SHA-256 checksum of the loaded file."""
        return self._checksum

    @property
    def validation_errors(self) -> list[dict[str, str]]:
        """Get validation errors if any."""
        return self._validation_errors.copy()

    @property
    def validation_duration_ms(self) -> float:
        """Get validation duration in milliseconds."""
        return self._validation_duration_ms

    def load(self, config_path: Path) -> BuildConfig:
        """Load and validate a YAML configuration file.

        Args:
            config_path: Path to the YAML file.

        Returns:
            Validated BuildConfig with absolute paths.

        Raises:
            ConfigValidationError: If the file is missing, not valid YAML,
                or does not match the schema.
        """
        start_time = time.perf_counter()
        self._state_machine.transition(ConfigState.READING)

        log = logger.bind(
            run_id=self._run_id,
            component=COMPONENT_CONFIG,
            file_path=str(config_path),
        )
        log.info("loading_config_file")

        try:
            content_bytes = config_path.read_bytes()
        except FileNotFoundError as e:
            self._fail(
                log,
                "config_file_not_found",
                loc="file",
                msg=str(e),
                error_type="file_not_found",
            )
            raise ConfigValidationError(self.validation_errors, str(config_path)) from e

        self._checksum = hashlib.sha256(content_bytes).hexdigest()

        try:
            data = yaml.safe_load(content_bytes.decode("utf-8")) or {}
        except yaml.YAMLError as e:
            self._fail(
                log,
                "config_yaml_parse_error",
                loc="yaml",
                msg=str(e),
                error_type="yaml_parse_error",
            )
            raise ConfigValidationError(self.validation_errors, str(config_path)) from e

        if not isinstance(data, dict):
            self._fail(
                log,
                "config_yaml_not_mapping",
                loc="yaml",
                msg=f"Top level must be a mapping, got {type(data).__name__}",
                error_type="dict_type",
            )
            raise ConfigValidationError(self.validation_errors, str(config_path))

        self._state_machine.transition(ConfigState.PARSED)

        try:
            config = BuildConfig.model_validate(data)
        except ValidationError as e:
            self._validation_errors.extend(flatten_validation_errors(e))
            self._state_machine.transition(ConfigState.FAILED)
            log.error(
                "config_validation_failed",
                validation_error_count=len(self._validation_errors),
                errors=self._validation_errors,
            )
            raise ConfigValidationError(self.validation_errors, str(config_path)) from e

        self._state_machine.transition(ConfigState.VALIDATED)

        config = resolve_relative_paths(config, config_path.resolve().parent)
        self._state_machine.transition(ConfigState.READY)

        self._validation_duration_ms = (time.perf_counter() - start_time) * 1000
        log.info(
            "config_ready",
            file_sha256=self._checksum,
            path_count=len(config.paths),
            crawl=config.crawl,
            validation_duration_ms=round(self._validation_duration_ms, 2),
        )
        return config

    def _fail(
        self,
        log: structlog.stdlib.BoundLogger,
        event: str,
        *,
        loc: str,
        msg: str,
        error_type: str,
    ) -> None:
        """Record a single non-schema error and move to FAILED."""
        self._validation_errors.append({"loc": loc, "msg": msg, "type": error_type})
        self._state_machine.transition(ConfigState.FAILED)
        log.error(event, error=msg)


def resolve_relative_paths(config: BuildConfig, base_dir: Path) -> BuildConfig:
    """Make output_dir and a renderer file reference absolute.

    Args:
        config: Validated configuration.
        base_dir: Directory relative paths resolve against.

    Returns:
        Configuration with absolute paths.
    """
    updates: dict[str, object] = {}

    if not config.output_dir.is_absolute():
        updates["output_dir"] = base_dir / config.output_dir

    target, attribute = split_reference(config.renderer)
    if is_file_reference(target) and not Path(target).is_absolute():
        renderer = str(base_dir / target)
        updates["renderer"] = f"{renderer}:{attribute}" if attribute else renderer

    return config.model_copy(update=updates) if updates else config
