"""Structured logging configuration using structlog.

Provides a single ``configure_logging`` entry-point that sets up structlog
processors and two stdlib sinks:

* the root logger, writing to the configured log file (the main log);
* the ``webhook`` logger, writing command results to stdout when the
  config routes execution output there (``execToStd``).

Both render plain-text lines by default, or JSON when ``json_logs`` is set.
The stdlib handlers serialise concurrent writes with their own locks.
"""

from __future__ import annotations

import logging
import sys

import structlog

EXEC_LOGGER_NAME = "webhook"


def _build_formatter(
    json_logs: bool,
    foreign_pre_chain: list[structlog.types.Processor],
) -> structlog.stdlib.ProcessorFormatter:
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return structlog.stdlib.ProcessorFormatter(
        # uvicorn and other stdlib loggers get the same timestamp and level.
        foreign_pre_chain=foreign_pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    *,
    logfile: str | None = None,
    json_logs: bool = False,
    log_level: str = "INFO",
) -> None:
    """Configure structlog, the main log and the command stdout logger.

    Args:
        logfile: Path of the main log, opened in append mode and created if
            missing. ``None`` sends the main log to stdout.
        json_logs: Render JSON instead of plain-text lines.
        log_level: Root log level name (e.g. ``"INFO"``, ``"DEBUG"``).

    Raises:
        OSError: if *logfile* cannot be opened.
    """
    main_handler: logging.Handler = (
        logging.FileHandler(logfile, mode="a", encoding="utf-8")
        if logfile
        else logging.StreamHandler(sys.stdout)
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = _build_formatter(json_logs, shared_processors)
    main_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(main_handler)
    root_logger.setLevel(log_level.upper())

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)

    exec_logger = logging.getLogger(EXEC_LOGGER_NAME)
    exec_logger.handlers.clear()
    exec_logger.addHandler(stdout_handler)
    exec_logger.propagate = False
