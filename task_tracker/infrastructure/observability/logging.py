"""structlog setup for Task Tracker.

Production renders one JSON object per line, for example::

    {"event": "task_status_updated", "level": "info",
     "timestamp": "2026-01-01T00:00:00.000000Z", "app": "task-tracker",
     "service": "TaskStatusService", "correlation_id": "...", ...}

Any other environment renders colored console output. ``LOG_LEVEL``
(DEBUG, INFO, WARNING, ERROR) sets the threshold; unknown names mean INFO.
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from task_tracker import __version__
from task_tracker.infrastructure.observability.correlation import (
    correlation_id_processor,
)

LOG_LEVEL_ENV = "LOG_LEVEL"
APP_NAME = "task-tracker"


def _app_metadata_processor(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("app", APP_NAME)
    event_dict.setdefault("app_version", __version__)
    return event_dict


def resolve_log_level(level_name: str | None = None) -> int:
    """Map a level name, or LOG_LEVEL when None, to a logging constant."""
    name = (level_name or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def build_processors(environment: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, correlation_id_processor),
        cast(Processor, _app_metadata_processor),
        structlog.processors.StackInfoRenderer(),
    ]
    if environment == "production":
        # JSON needs tracebacks as strings; the console renderer formats them itself
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_structlog(
    environment: str = "production", log_level: str | None = None
) -> None:
    """Configure structlog once at application startup.

    Args:
        environment: "production" for JSON output, anything else for console.
        log_level: Threshold name. Falls back to LOG_LEVEL, then INFO.
    """
    structlog.configure(
        processors=build_processors(environment),
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
