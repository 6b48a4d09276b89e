"""Domain models for Task Tracker."""

from task_tracker.domain.models.outcome import (
    ErrorKind,
    Outcome,
    ResultError,
    TaskErrors,
)
from task_tracker.domain.models.pagination import PagedResult, PageRequest
from task_tracker.domain.models.task import (
    STATUS_TRANSITION_MATRIX,
    TERMINAL_STATUSES,
    Task,
    TaskStatus,
    can_transition,
    is_valid_status_name,
    parse_status,
)

__all__: list[str] = [
    "ErrorKind",
    "Outcome",
    "PageRequest",
    "PagedResult",
    "ResultError",
    "STATUS_TRANSITION_MATRIX",
    "TERMINAL_STATUSES",
    "Task",
    "TaskErrors",
    "TaskStatus",
    "can_transition",
    "is_valid_status_name",
    "parse_status",
]
