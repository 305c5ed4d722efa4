"""structlog setup for builds run from the command line."""

import logging
import sys
from typing import Any, TextIO

import structlog


# Processors shared by the JSON and console outputs, in order
SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]

RUN_CONTEXT_KEY = "run_id"


def configure_logging(
    level: int = logging.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> None:
    """Route build logs to a stream.

    JSON lines by default (for CI logs), colored console output otherwise.
    Standard library logging from renderer code goes to the same stream.

    Args:
        level: Minimum level emitted.
        output: Target stream (stderr when omitted).
        json_format: JSON lines instead of console output.
    """
    stream = output if output is not None else sys.stderr
    final_processor: structlog.types.Processor = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if json_format
        else structlog.dev.ConsoleRenderer(colors=stream.isatty())
    )

    structlog.configure(
        processors=[*SHARED_PROCESSORS, final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=stream, level=level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger; a name is added as the first positional argument."""
    args = (name,) if name is not None else ()
    bound: structlog.stdlib.BoundLogger = structlog.get_logger(*args)
    return bound


def bind_run_context(run_id: str, **context: Any) -> None:
    """Attach the build's run ID, plus any extra keys, to every later event.

    Args:
        run_id: Build identifier.
        **context: Additional keys (e.g. renderer reference).
    """
    structlog.contextvars.bind_contextvars(**{RUN_CONTEXT_KEY: run_id, **context})


def clear_run_context(*extra_keys: str) -> None:
    """Detach the run ID and the given extra keys."""
    structlog.contextvars.unbind_contextvars(RUN_CONTEXT_KEY, *extra_keys)
