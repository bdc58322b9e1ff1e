"""Structlog configuration shared by every entry point.

Call ``configure_logging()`` once from the host application. Repeated
calls only adjust the level.
"""

import logging

import structlog

from integrity.config.settings import get_settings


def configure_logging(level: str | None = None) -> None:
    """Route structlog through stdlib logging with JSON output."""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(format="%(message)s", level=level_name)
    logging.getLogger().setLevel(level_name)

    if structlog.is_configured():
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
