"""Structured logging and request correlation ids."""

from task_tracker.infrastructure.observability.correlation import (
    accept_correlation_id,
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from task_tracker.infrastructure.observability.logging import (
    configure_structlog,
    resolve_log_level,
)

__all__: list[str] = [
    "accept_correlation_id",
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "resolve_log_level",
    "set_correlation_id",
]
