"""
Logging setup — structlog configuration for applications embedding rop.

The library never configures logging on import. Applications call
``configure_structlog`` (or ``configure_from_settings``) once at startup:

  - console: colored, human-readable output for development
  - json: one JSON object per line for log shippers
"""

from __future__ import annotations

import logging

import structlog

from rop.config import RopSettings, get_settings


def configure_structlog(log_level: str = "INFO", log_format: str = "console") -> None:
    """
    Configure structlog processors and the minimum level.

    Unknown level names fall back to INFO.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_from_settings(settings: RopSettings | None = None) -> None:
    """Apply RopSettings (environment-loaded by default) to structlog."""
    settings = settings or get_settings()
    configure_structlog(settings.log_level, settings.log_format)
