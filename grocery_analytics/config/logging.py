"""
Logging setup for the analytics service.

structlog events and plain stdlib records (uvicorn, SQLAlchemy) are rendered
by the same ProcessorFormatter, so a recompute cycle can be followed through
one stream of key/value events.
"""

import logging
import sys
from typing import IO, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level

from grocery_analytics.config.settings import get_settings

# Routed through our handler instead of their own
BRIDGED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Only warnings and above
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")

_handler: Optional[logging.Handler] = None


def service_context(app_name: str, environment: str):
    """Processor stamping every event with the service name and environment."""

    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", app_name)
        event_dict.setdefault("environment", environment)
        return event_dict

    return processor


def configure_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """
    Install the structured logging handler on the root logger.

    Calling it again replaces the handler it installed before; handlers added
    by anything else are left alone.

    Args:
        log_level: Overrides LOG_LEVEL
        log_format: "json" or "text"; overrides LOG_FORMAT
        stream: Output stream, stdout by default

    Returns:
        The installed handler
    """
    global _handler

    settings = get_settings()
    level_name = (log_level or settings.logging.level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    output_format = (log_format or settings.logging.format).lower()

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        service_context(settings.app_name, settings.app_env),
        TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=settings.is_production,
    )

    if output_format == "json":
        renderer = JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None and sys.stdout.isatty())

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors))

    root_logger = logging.getLogger()
    if _handler is not None:
        root_logger.removeHandler(_handler)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    _handler = handler

    for name in BRIDGED_LOGGERS:
        bridged = logging.getLogger(name)
        bridged.handlers = []
        bridged.propagate = True
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.get_logger(__name__).info(
        "logging_configured",
        level=level_name,
        format=output_format,
    )
    return handler
