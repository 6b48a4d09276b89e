"""Request logging and correlation id middleware."""

import time
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from task_tracker.infrastructure.observability.correlation import (
    accept_correlation_id,
    set_correlation_id,
)

CORRELATION_HEADER = "X-Correlation-ID"

logger = structlog.get_logger()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with a correlation id and logs how it ended.

    The id comes from the X-Correlation-ID header when acceptable and is
    generated otherwise. Services read it through get_correlation_id()
    and the response echoes it back. Server errors are logged at warning,
    everything else at info.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = accept_correlation_id(request.headers.get(CORRELATION_HEADER))
        set_correlation_id(correlation_id)

        log = logger.bind(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception(
                "request_failed",
                duration_ms=_elapsed_ms(started),
                error_type=type(exc).__name__,
            )
            raise

        emit = log.warning if response.status_code >= 500 else log.info
        emit(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
