"""
Structured logging setup.
"""
import logging
from typing import Optional

import structlog

from ..config import Settings, get_settings


def developer_assertions(enabled: bool):
    """Build a processor that turns critical events into assertion failures."""

    def processor(logger, method_name, event_dict):
        if enabled and method_name == "critical":
            raise AssertionError(event_dict.get("event", "critical log event"))
        return event_dict

    return processor


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structured logging."""
    settings = settings or get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=None,
        level=getattr(logging, settings.log_level),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            developer_assertions(settings.assertions_enabled),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
