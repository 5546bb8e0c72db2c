"""
Structured logger built on structlog.
Every event carries the log level and an ISO-8601 UTC timestamp; components
bind their own name so fallback and cache events can be filtered per stage.
"""

from __future__ import annotations

import logging

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Call once at application startup to wire structured logging."""
    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO),
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a bound logger, optionally pre-bound to a pipeline component."""
    log = structlog.get_logger()
    if component:
        log = log.bind(component=component)
    return log
