"""Structured logging configuration with structlog."""

import logging

import structlog

from skillbuilder.config import Settings

SERVICE_NAME = "skillbuilder"


def service_context(settings: Settings) -> structlog.types.Processor:
    """Stamp every event with the service, its environment and version."""
    fields = {"service": SERVICE_NAME, "environment": settings.environment, "version": settings.app_version}

    def _add(_logger: object, _method: str, event_dict: structlog.types.EventDict) -> structlog.types.EventDict:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return _add


def setup_logging(settings: Settings) -> None:
    """Configure structlog for JSON or console output."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    # Service fields only in machine-readable output.
    if settings.log_format == "json":
        processors.append(service_context(settings))
    processors += [
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)
    # Statement echo only in debug.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.debug else logging.WARNING)
    # aiosqlite logs every cursor call at DEBUG.
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
