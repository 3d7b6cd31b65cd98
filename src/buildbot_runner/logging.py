"""Structured logging for BuildBot.

Logs go to stderr so that ``buildbot list`` and build summaries on stdout
stay clean for scripting. Two output formats:

- console: aligned key=value lines, coloured when stderr is a terminal
- json: one JSON object per line, for CI log collectors

Usage:
    from buildbot_runner.logging import configure_logging, get_logger

    configure_logging(json_format=True, level=logging.DEBUG)

    logger = get_logger(__name__)
    logger.info("task_started", task_id="01H...", task_name="Compile")

Run-scoped context:
    bind_context(project_directory="/src/app")
    ...                                  # every event carries project_directory
    clear_context()
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from buildbot_runner.tasks.interface import BuildTask

_configured = False


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Looked up per call so a replaced sys.stderr is honoured
    return structlog.PrintLogger(sys.stderr)


def _renderer(json_format: bool) -> Processor:
    if json_format:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    json_format: bool = False,
    level: int = logging.INFO,
    logger_factory: Any = None,
) -> None:
    """Configure structlog for the process.

    Safe to call more than once; the CLI calls it after parsing arguments,
    replacing the defaults installed by the first get_logger().

    Args:
        json_format: Emit JSON lines instead of console output
        level: Minimum level, events below it are dropped before rendering
        logger_factory: Replacement output logger factory, used by tests
    """
    global _configured

    # stdlib logging used inside build scripts shares the stream and level
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _renderer(json_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory or _stderr_logger,
        cache_logger_on_first_use=False,
    )
    _configured = True


def get_logger(name: str) -> Any:
    """Return a structlog logger, installing default configuration on first use."""
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key-value pairs to every event logged until unbound or cleared."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    """Remove only the given keys, leaving context bound by callers in place."""
    structlog.contextvars.unbind_contextvars(*keys)


def task_logger(task: BuildTask) -> Any:
    """Logger with ``task_id`` and ``task_name`` bound for one task."""
    return get_logger("buildbot_runner.task").bind(
        task_id=task.id,
        task_name=task.friendly_name,
    )
