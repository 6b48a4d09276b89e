"""Per-request correlation ids.

The id lives in a contextvar, so it follows one request through every
await without being passed around. LoggingMiddleware sets it from the
X-Correlation-ID header; correlation_id_processor stamps it on each
structlog event.
"""

import re
from contextvars import ContextVar
from uuid import uuid4

from structlog.typing import EventDict, WrappedLogger

MAX_CORRELATION_ID_LENGTH = 128

_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._:\-]+")

_correlation_id: ContextVar[str] = ContextVar("task_tracker_correlation_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def accept_correlation_id(candidate: str | None) -> str:
    """Return a client-supplied id if it is usable, otherwise a fresh one.

    Client ids are kept only when they are at most 128 characters of
    letters, digits and ``._:-``.
    """
    if (
        candidate
        and len(candidate) <= MAX_CORRELATION_ID_LENGTH
        and _CLIENT_ID_PATTERN.fullmatch(candidate)
    ):
        return candidate
    return generate_correlation_id()


def get_correlation_id() -> str:
    """Current correlation id, or "" outside a request."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def correlation_id_processor(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the context correlation id unless the event already has one."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
