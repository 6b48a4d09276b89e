"""Infrastructure error types for Task Tracker.

Domain rule violations are values (see ``task_tracker.domain.models.outcome``);
the errors exported here are raised only by infrastructure collaborators.
"""

from task_tracker.domain.errors.concurrent_modification import (
    ConcurrentModificationError,
)
from task_tracker.domain.errors.repository import (
    RepositoryError,
    RepositoryUnavailableError,
)
from task_tracker.domain.exceptions import TaskTrackerError

__all__: list[str] = [
    "ConcurrentModificationError",
    "RepositoryError",
    "RepositoryUnavailableError",
    "TaskTrackerError",
]
