"""Outcome and exception mapping to RFC 7807 HTTP responses.

Failure outcomes map by the kind of their first error:

    Validation -> 400 (messages grouped by field)
    NotFound   -> 404
    Forbidden  -> 403
    Conflict   -> 409
    Unexpected -> 500

Exceptions are the outer boundary for infrastructure faults. They become
Unexpected errors: retryable storage failures (unavailable backend,
concurrent modification) answer 503 with Retry-After and code
Infra.Unavailable, everything else answers 500 with code Server.Error.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from task_tracker.domain.errors.concurrent_modification import (
    ConcurrentModificationError,
)
from task_tracker.domain.errors.repository import RepositoryUnavailableError
from task_tracker.domain.exceptions import TaskTrackerError
from task_tracker.domain.models.outcome import (
    ErrorKind,
    Outcome,
    ResultError,
    TaskErrors,
)

logger = structlog.get_logger()

PROBLEM_CONTENT_TYPE = "application/problem+json"
INFRA_UNAVAILABLE_CODE = "Infra.Unavailable"

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNEXPECTED: 500,
}

_TYPE_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.VALIDATION: "urn:task-tracker:request:validation",
    ErrorKind.NOT_FOUND: "urn:task-tracker:task:not-found",
    ErrorKind.FORBIDDEN: "urn:task-tracker:task:forbidden",
    ErrorKind.CONFLICT: "urn:task-tracker:task:conflict",
    ErrorKind.UNEXPECTED: "urn:task-tracker:server:unexpected",
}

_PYDANTIC_VALUE_ERROR_PREFIX = "Value error, "


def _problem_response(
    status_code: int,
    body: dict[str, Any],
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers=headers,
        media_type=PROBLEM_CONTENT_TYPE,
    )


def group_validation_errors(errors: list[ResultError]) -> dict[str, list[str]]:
    """Group validation messages by field ("Request" when no field)."""
    grouped: dict[str, list[str]] = defaultdict(list)
    for error in errors:
        if error.kind is ErrorKind.VALIDATION:
            grouped[error.field or "Request"].append(error.message)
    return dict(grouped)


def validation_problem(errors: list[ResultError], instance: str) -> JSONResponse:
    return _problem_response(
        400,
        {
            "type": _TYPE_BY_KIND[ErrorKind.VALIDATION],
            "title": "One or more validation errors occurred.",
            "status": 400,
            "instance": instance,
            "errors": group_validation_errors(errors),
        },
    )


def failure_to_response(outcome: Outcome[Any], request: Request) -> JSONResponse:
    """Map a failed outcome to a problem response.

    Args:
        outcome: A failed Outcome.
        request: The current request (for the problem instance).

    Returns:
        JSONResponse with the status matching the first error's kind.
    """
    primary = outcome.first_error
    instance = request.url.path

    if primary.kind is ErrorKind.VALIDATION:
        return validation_problem(list(outcome.errors), instance)

    status_code = STATUS_BY_KIND[primary.kind]
    return _problem_response(
        status_code,
        {
            "type": _TYPE_BY_KIND[primary.kind],
            "title": primary.code,
            "status": status_code,
            "detail": primary.message,
            "code": primary.code,
            "instance": instance,
        },
    )


def _field_from_location(loc: tuple[Any, ...]) -> str:
    if len(loc) > 1 and loc[0] in ("body", "query", "path", "header"):
        return str(loc[1])
    return "Request"


def request_validation_errors(exc: RequestValidationError) -> list[ResultError]:
    """Convert FastAPI/pydantic validation errors to ResultErrors."""
    result: list[ResultError] = []
    for error in exc.errors():
        message = str(error.get("msg", "Invalid value."))
        if message.startswith(_PYDANTIC_VALUE_ERROR_PREFIX):
            message = message[len(_PYDANTIC_VALUE_ERROR_PREFIX) :]
        result.append(
            TaskErrors.validation(_field_from_location(tuple(error.get("loc", ()))), message)
        )
    return result


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return validation_problem(request_validation_errors(exc), request.url.path)


def classify_exception(exc: Exception) -> tuple[ResultError, int, dict[str, str]]:
    """Map an infrastructure exception to an Unexpected error.

    Returns:
        Tuple of (error, HTTP status, extra headers).
    """
    if isinstance(exc, (ConcurrentModificationError, RepositoryUnavailableError)):
        error = ResultError(
            INFRA_UNAVAILABLE_CODE,
            "The service is temporarily unavailable. Please try again later.",
            ErrorKind.UNEXPECTED,
        )
        return error, 503, {"Retry-After": str(exc.retry_after_seconds)}
    return TaskErrors.unexpected(), 500, {}


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Outer boundary: convert any escaped exception to a problem response."""
    error, status_code, headers = classify_exception(exc)

    log = logger.bind(
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        code=error.code,
        status_code=status_code,
    )
    if status_code == 503:
        log.warning("request_failed_retryable", error=str(exc))
    else:
        log.error("request_failed_unexpected", exc_info=exc)

    return _problem_response(
        status_code,
        {
            "type": _TYPE_BY_KIND[error.kind],
            "title": error.code,
            "status": status_code,
            "detail": error.message,
            "code": error.code,
            "instance": request.url.path,
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the validation and infrastructure exception handlers."""
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(TaskTrackerError, handle_unexpected_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
