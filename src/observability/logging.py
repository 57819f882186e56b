"""Structured logging configuration for the kitchen display services."""

import logging
import sys
from typing import TextIO

import structlog

from src.settings import AppSettings


def configure_logging(
    level: int = logging.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> None:
    """Configure structlog for the prioritizer and kitchen services.

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: stderr, keeping stdout for results).
        json_format: Emit JSON lines instead of colored console output.
    """
    output = output or sys.stderr
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=output.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=output, level=level)


def configure_from_settings(settings: AppSettings, output: TextIO | None = None) -> None:
    """Configure logging from application settings.

    Args:
        settings: Loaded settings (``log_level``, ``log_json``).
        output: Output stream.
    """
    configure_logging(
        level=settings.logging_level(),
        output=output,
        json_format=settings.log_json,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a bound logger instance.

    Args:
        name: Optional logger name.

    Returns:
        Bound logger instance.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def bind_run_context(run_id: str) -> None:
    """Attach a run id to every subsequent log line in this context."""
    structlog.contextvars.bind_contextvars(run_id=run_id)


def clear_run_context() -> None:
    """Remove the run id from the logging context."""
    structlog.contextvars.unbind_contextvars("run_id")
