"""
Logging Configuration

structlog setup shared by the API, the scripts and the tests. Events are
snake_case names with key/value context, rendered as JSON or for the console.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from config.settings import settings

SERVICE_NAME = "estatesite-api"

# Third-party loggers and the level they are held at
LIBRARY_LEVELS = {
    "uvicorn.access": logging.WARNING,
    "passlib": logging.ERROR,
    "cloudinary": logging.WARNING,
}

_configured = False


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp every entry with the service name and environment."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def _renderer_processors() -> list:
    if settings.log_format == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.processors.ExceptionRenderer(), structlog.dev.ConsoleRenderer()]


def setup_logging(force: bool = False) -> structlog.BoundLogger:
    """
    Configure stdlib logging and structlog.

    Safe to call more than once; later calls are no-ops unless force is set.

    Returns:
        Root structlog logger
    """
    global _configured
    if _configured and not force:
        return structlog.get_logger()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=force)

    for name, library_level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(max(level, library_level))
    # SQL echo is handled by the engine itself
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.database_echo else logging.WARNING)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_context,
        *_renderer_processors(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True
    return structlog.get_logger()


def bind_request_context(request_id: str, method: str, path: str, admin_id: Optional[int] = None) -> None:
    """Attach request identifiers to every event logged while the request is handled."""
    structlog.contextvars.clear_contextvars()
    context = {"request_id": request_id, "method": method, "path": path}
    if admin_id is not None:
        context["admin_id"] = admin_id
    structlog.contextvars.bind_contextvars(**context)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str = None) -> structlog.BoundLogger:
    """
    Get a logger for a module.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name) if name else structlog.get_logger()
