"""Process-wide structlog setup. Library modules only call structlog.get_logger()."""
from __future__ import annotations

import logging

import structlog

_configured = False


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog once; later calls are ignored."""
    global _configured
    if _configured:
        return

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=True,
    )
    _configured = True
