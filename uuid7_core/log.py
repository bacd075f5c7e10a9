"""
uuid7_core/log.py - Structured logging

structlog configuration for applications embedding the generator.  The
library only calls get_logger(); configure_logging() is for the embedding
application (and the CLI) to call once at startup.
"""

import logging
import sys

import structlog
from structlog.types import Processor


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog output.

    Args:
        log_level:   Logging level name (DEBUG, INFO, WARNING, ERROR).
        json_output: JSON lines when True, colored console output otherwise.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "uuid7_core") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
