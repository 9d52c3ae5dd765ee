"""Logging setup for the CLI: structlog events rendered through stdlib logging."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "i18nscope"


def _renderer(log_format: str, stream: TextIO) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def setup_logging(level: str | None = None) -> None:
    """Send ``i18nscope.*`` events to stderr.

    *level* wins over ``I18NSCOPE_LOG_LEVEL`` (default INFO).
    ``I18NSCOPE_LOG_FORMAT`` selects ``console`` or ``json``; json lines
    carry an ISO timestamp and rendered tracebacks.
    """
    log_level = (level or os.environ.get("I18NSCOPE_LOG_LEVEL", "INFO")).upper()
    log_format = os.environ.get("I18NSCOPE_LOG_FORMAT", "console").lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if log_format == "json":
        pre_chain = [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            *pre_chain,
            structlog.processors.format_exc_info,
        ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format, sys.stderr),
            ],
        )
    )

    # Only our own logger is touched; repeated calls replace the handler.
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers[:] = [handler]
    logger.setLevel(log_level)
    logger.propagate = False
