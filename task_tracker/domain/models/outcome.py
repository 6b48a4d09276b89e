"""Outcome type returned by every task operation.

An Outcome is either a success carrying a value or a failure carrying a
non-empty ordered tuple of ResultError. Domain rule violations are
expressed as failures, never raised. The transport layer maps the kind of
the first error to a protocol-level response.

Usage:
    outcome = await service.update_status(task_id, "InProgress")
    if outcome.is_success:
        task = outcome.value
    else:
        error = outcome.first_error
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from task_tracker.domain.models.task import TaskStatus

T = TypeVar("T")


class ErrorKind(Enum):
    """Classification of a failure.

    Kinds:
        VALIDATION: Malformed input, rejected upstream
        NOT_FOUND: Referenced task(s) absent
        FORBIDDEN: Task is in the terminal, immutable state
        CONFLICT: Transition not permitted, or batch statuses differ
        UNEXPECTED: Infrastructure failure
    """

    VALIDATION = "Validation"
    NOT_FOUND = "NotFound"
    FORBIDDEN = "Forbidden"
    CONFLICT = "Conflict"
    UNEXPECTED = "Unexpected"


@dataclass(frozen=True)
class ResultError:
    """A single classified failure.

    Attributes:
        code: Machine-readable identifier (e.g. "Task.NotFound").
        message: Human-readable description.
        kind: Failure classification.
        field: Offending input field, for validation errors.
    """

    code: str
    message: str
    kind: ErrorKind
    field: str | None = None


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Success or failure of an operation.

    Construct with Outcome.ok() or Outcome.fail(); the constructor is not
    meant to be called directly.
    """

    _value: T | None
    errors: tuple[ResultError, ...]

    def __post_init__(self) -> None:
        if self.errors and self._value is not None:
            raise ValueError("A failed outcome cannot carry a value")

    @classmethod
    def ok(cls, value: T) -> Outcome[T]:
        """Build a successful outcome carrying ``value``."""
        return cls(_value=value, errors=())

    @classmethod
    def fail(cls, errors: Iterable[ResultError]) -> Outcome[T]:
        """Build a failed outcome.

        Args:
            errors: Ordered, non-empty collection of errors.

        Raises:
            ValueError: If ``errors`` is empty.
        """
        collected = tuple(errors)
        if not collected:
            raise ValueError("A failed outcome requires at least one error")
        return cls(_value=None, errors=collected)

    @property
    def is_success(self) -> bool:
        return not self.errors

    @property
    def is_failure(self) -> bool:
        return bool(self.errors)

    @property
    def value(self) -> T:
        """The success payload.

        Raises:
            ValueError: If the outcome is a failure.
        """
        if self.errors:
            raise ValueError(
                f"Cannot read value of a failed outcome ({self.errors[0].code})"
            )
        return self._value  # type: ignore[return-value]

    @property
    def first_error(self) -> ResultError:
        """The primary error of a failed outcome.

        Raises:
            ValueError: If the outcome is a success.
        """
        if not self.errors:
            raise ValueError("A successful outcome has no errors")
        return self.errors[0]


class TaskErrors:
    """Factories for the standard task error codes."""

    NOT_FOUND = "Task.NotFound"
    LOCKED = "Task.Locked"
    INVALID_TRANSITION = "Task.InvalidTransition"
    BULK_STATUS_MISMATCH = "Task.BulkStatusMismatch"
    SERVER_ERROR = "Server.Error"

    @staticmethod
    def not_found(bulk: bool = False) -> ResultError:
        message = (
            "One or more tasks were not found." if bulk else "Task not found."
        )
        return ResultError(TaskErrors.NOT_FOUND, message, ErrorKind.NOT_FOUND)

    @staticmethod
    def locked() -> ResultError:
        return ResultError(
            TaskErrors.LOCKED,
            "Finished tasks cannot be updated.",
            ErrorKind.FORBIDDEN,
        )

    @staticmethod
    def invalid_transition(current: TaskStatus, requested: TaskStatus) -> ResultError:
        return ResultError(
            TaskErrors.INVALID_TRANSITION,
            f"Status cannot transition from {current.value} to {requested.value}.",
            ErrorKind.CONFLICT,
        )

    @staticmethod
    def bulk_status_mismatch() -> ResultError:
        return ResultError(
            TaskErrors.BULK_STATUS_MISMATCH,
            "All selected tasks must have the same current status.",
            ErrorKind.CONFLICT,
        )

    @staticmethod
    def validation(field: str, message: str, code: str = "Request.Invalid") -> ResultError:
        return ResultError(code, message, ErrorKind.VALIDATION, field=field)

    @staticmethod
    def unexpected(message: str = "An unexpected error occurred.") -> ResultError:
        return ResultError(TaskErrors.SERVER_ERROR, message, ErrorKind.UNEXPECTED)
