"""Structured logging with structlog."""

import logging
import sys

import structlog

from crypto_recommender.infrastructure.config.settings import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog on top of the standard logging root handler."""
    settings = settings or get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
        pre_chain = [structlog.processors.format_exc_info]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        pre_chain = []

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *pre_chain,
            renderer,
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)
