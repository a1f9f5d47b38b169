"""Logging for the simpledoc CLI.

Library modules log through stdlib ``logging``; this module routes those
records through structlog so ``--log-json`` turns them into JSON lines on
stderr. Fields passed as ``extra=`` (git arguments, planning phase) land
as top-level keys, and every line carries the running subcommand.

Default level is WARNING. ``--verbose`` opens DEBUG for ``simpledoc.*``,
which includes the git command trace and one line per finished planning
phase when no progress bar is shown.
"""

from __future__ import annotations

import logging
import sys

import structlog

PROGRESS_LOGGER = "simpledoc.progress"

_progress_logger = logging.getLogger(PROGRESS_LOGGER)


def log_progress(phase: str, current: int, total: int) -> None:
    """Planner progress callback that logs each phase once it completes."""
    if current >= total:
        _progress_logger.debug("Finished %s (%d)", phase, total, extra={"phase": phase, "total": total})


def _shared_processors(log_json: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
    ]
    if log_json:
        # Console lines are read live; only machine logs need a clock.
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    processors.append(structlog.processors.StackInfoRenderer())
    return processors


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    command: str | None = None,
) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        verbose: DEBUG for ``simpledoc.*`` instead of WARNING.
        log_json: JSON lines instead of the console renderer. Tracebacks
            are rendered into an ``exception`` string field.
        command: Subcommand name bound into every log line.
    """
    structlog.contextvars.clear_contextvars()
    if command:
        structlog.contextvars.bind_contextvars(command=command)

    shared = _shared_processors(log_json)
    if log_json:
        renderers: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("simpledoc").setLevel(logging.DEBUG if verbose else logging.WARNING)
