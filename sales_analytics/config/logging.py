"""
Logging Configuration for the Sales Analytics Engine

Routes structlog events through the stdlib root logger, rendered as
JSON lines or plain console text per LOG_FORMAT.
"""

import logging
import sys
from typing import Optional

import structlog

from sales_analytics.config.settings import get_settings


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structured logging.

    Args:
        log_level: Override for LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)
    """
    monitoring = get_settings().monitoring
    level = getattr(logging, (log_level or monitoring.log_level).upper(), logging.INFO)

    pre_chain = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if monitoring.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)


def get_logger(name: str):
    """Get a logger instance with the given name."""
    return structlog.get_logger(name)
