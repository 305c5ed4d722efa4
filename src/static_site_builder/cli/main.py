"""CLI commands for the static site builder."""

import logging
import sys
import uuid
from pathlib import Path
from typing import Any

import click
import structlog
import yaml
from pydantic import ValidationError

from static_site_builder import __version__
from static_site_builder.builder import StaticSiteBuilder
from static_site_builder.config.constants import COMPONENT_CLI
from static_site_builder.config.error_hints import format_validation_error
from static_site_builder.config.loader import (
    ConfigLoader,
    ConfigValidationError,
    flatten_validation_errors,
    resolve_relative_paths,
)
from static_site_builder.config.schemas import BuildConfig
from static_site_builder.config.settings import get_settings
from static_site_builder.observability.logging import (
    bind_run_context,
    configure_logging,
)
from static_site_builder.renderer.metrics import BuildMetrics
from static_site_builder.renderer.models import BuildResult


logger = structlog.get_logger()


def parse_locals(values: tuple[str, ...]) -> dict[str, Any]:
    """Parse KEY=VALUE pairs; values are read as YAML scalars.

    Args:
        values: Raw --local option values.

    Returns:
        Mapping of key to parsed value.

    Raises:
        click.BadParameter: If a value has no '=' or an empty key.
    """
    parsed: dict[str, Any] = {}
    for item in values:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            msg = f"Expected KEY=VALUE, got {item!r}"
            raise click.BadParameter(msg, param_hint="--local")
        try:
            parsed[key.strip()] = yaml.safe_load(raw) if raw else raw
        except yaml.YAMLError:
            parsed[key.strip()] = raw
    return parsed


def _echo_config_errors(errors: list[dict[str, str]]) -> None:
    """Print validation errors with hints."""
    click.echo("Invalid build configuration:", err=True)
    for error in errors:
        formatted = format_validation_error(
            location=error["loc"],
            message=error["msg"],
            error_type=error.get("type", "unknown"),
            include_hint=True,
        )
        click.echo(f"  - {formatted}", err=True)


def _echo_result(result: BuildResult) -> None:
    """Print a build summary and every collected error."""
    click.echo(
        f"Rendered {result.pages_rendered} page(s): "
        f"wrote {len(result.artifacts)} artifact(s) "
        f"({result.total_bytes} bytes), skipped {len(result.skipped)}"
    )
    for artifact in result.artifacts:
        click.echo(f"  {artifact.name}")

    if result.errors:
        click.echo(f"{len(result.errors)} error(s):", err=True)
        for error in result.errors:
            location = f" {error.path}" if error.path else ""
            click.echo(
                f"  - [{error.error_class.value}]{location}: {error.message}",
                err=True,
            )


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Static site builder CLI."""


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML build configuration file.",
)
@click.option(
    "--renderer",
    type=str,
    help="Renderer reference: 'package.module[:func]' or 'file.py[:func]'.",
)
@click.option(
    "--out",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory for rendered pages.",
)
@click.option(
    "--path",
    "paths",
    multiple=True,
    help="Path to render (repeatable, default: /).",
)
@click.option(
    "--crawl/--no-crawl",
    default=None,
    help="Follow links found in rendered pages.",
)
@click.option(
    "--local",
    "local_values",
    multiple=True,
    help="Renderer local as KEY=VALUE (repeatable).",
)
@click.option(
    "--public-path",
    type=str,
    default=None,
    help="Prefix for asset filenames.",
)
@click.option(
    "--concurrency",
    "max_concurrency",
    type=int,
    default=None,
    help="Number of concurrent render workers.",
)
@click.option(
    "--max-pages",
    type=int,
    default=None,
    help="Stop scheduling crawled paths after this many pages.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: SSB_JSON_LOGS or true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def build(  # noqa: PLR0913
    config_path: Path | None,
    renderer: str | None,
    output_dir: Path | None,
    paths: tuple[str, ...],
    crawl: bool | None,
    local_values: tuple[str, ...],
    public_path: str | None,
    max_concurrency: int | None,
    max_pages: int | None,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Render pages and write them to the output directory."""
    settings = get_settings()
    run_id = uuid.uuid4().hex[:12]

    log_level = logging.DEBUG if verbose else settings.log_level_number
    configure_logging(
        level=log_level,
        json_format=settings.json_logs if json_logs is None else json_logs,
    )
    bind_run_context(run_id, command="build")
    log = logger.bind(component=COMPONENT_CLI)

    overrides: dict[str, Any] = {
        key: value
        for key, value in {
            "renderer": renderer,
            "output_dir": output_dir,
            "paths": list(paths) or None,
            "crawl": crawl,
            "public_path": public_path,
            "max_concurrency": max_concurrency,
            "max_pages": max_pages,
        }.items()
        if value is not None
    }

    base: dict[str, Any] = {"max_concurrency": settings.max_concurrency}
    base_dir = Path.cwd()
    if config_path is not None:
        loader = ConfigLoader(run_id=run_id)
        try:
            loaded = loader.load(config_path)
        except ConfigValidationError as e:
            log.warning("config_load_failed", error=str(e))
            _echo_config_errors(e.errors)
            sys.exit(1)
        base = loaded.model_dump()
        base_dir = config_path.resolve().parent

    locals_ = {**base.get("locals", {}), **parse_locals(local_values)}

    try:
        config = BuildConfig.model_validate({**base, **overrides, "locals": locals_})
    except ValidationError as e:
        log.warning("config_invalid", error_count=e.error_count())
        _echo_config_errors(flatten_validation_errors(e))
        sys.exit(1)

    config = resolve_relative_paths(config, base_dir)
    log.info(
        "build_command_started",
        renderer=config.renderer,
        output_dir=str(config.output_dir),
        paths=config.paths,
        crawl=config.crawl,
    )

    result = StaticSiteBuilder.from_config(config, run_id=run_id).build()

    log.info("build_metrics", **BuildMetrics.get_instance().get_summary())
    _echo_result(result)

    if not result.success:
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML build configuration file.",
)
def validate(config_path: Path) -> None:
    """Validate a build configuration file."""
    configure_logging(level=logging.WARNING, json_format=False)
    loader = ConfigLoader(run_id=uuid.uuid4().hex[:12])

    try:
        config = loader.load(config_path)
    except ConfigValidationError as e:
        _echo_config_errors(e.errors)
        sys.exit(1)

    click.echo(f"Configuration valid: {config_path}")
    click.echo(f"  renderer: {config.renderer}")
    click.echo(f"  output_dir: {config.output_dir}")
    click.echo(f"  paths: {', '.join(config.paths)}")
    click.echo(f"  crawl: {str(config.crawl).lower()}")
    click.echo(f"  sha256: {loader.checksum}")


def main() -> None:
    """Entry point for the static-site-builder script."""
    cli()
