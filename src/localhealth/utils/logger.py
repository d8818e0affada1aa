"""
Logging Configuration

structlog over the standard library logger. Entry points (API startup, CLI
scripts) call setup_logging() once; modules only call get_logger().
"""
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, List

import structlog
from structlog.types import EventDict, Processor

from config.settings import settings

SERVICE_NAME = "localhealth"

# Every provider request would otherwise be logged twice (httpx and ours)
NOISY_LOGGERS = ("httpx", "httpcore")


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp each entry with the service name and deployment environment."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def _build_processors(log_format: str) -> List[Processor]:
    """
    Processor chain ending in the renderer selected by log_format.

    Args:
        log_format: "json" for machine-readable output, anything else for console

    Returns:
        Ordered structlog processors
    """
    chain: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_context,
    ]

    if log_format == "json":
        return chain + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return chain + [
        structlog.processors.ExceptionRenderer(),
        structlog.dev.ConsoleRenderer(),
    ]


def setup_logging() -> structlog.BoundLogger:
    """
    Configure structured logging from settings.log_level and settings.log_format.

    Returns:
        Root structlog logger
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=_build_processors(settings.log_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger(SERVICE_NAME)


def get_logger(name: str = None) -> structlog.BoundLogger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return structlog.get_logger(name) if name else structlog.get_logger()


@contextmanager
def pipeline_context(**context: Any) -> Iterator[None]:
    """
    Bind context (area code, address) to log entries emitted inside the block.

    Previous values are restored on exit, so a caller that reuses one task
    for several lookups never sees stale context.
    """
    with structlog.contextvars.bound_contextvars(**context):
        yield
